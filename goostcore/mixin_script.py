"""Scripts composed of several partial scripts ("mixins") sharing one host object."""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable
from enum import IntEnum
from typing import Any

from goostcore.variant_resource import PropertyInfo, VariantType


class InvalidMethodError(AttributeError):
    """Raised when a method is called that no script instance provides."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Invalid method: {method!r}.")
        self.method = method


class RPCMode(IntEnum):
    """How a method or property may be called or set over the network."""

    DISABLED = 0
    REMOTE = 1
    MASTER = 2
    PUPPET = 3
    REMOTESYNC = 4
    MASTERSYNC = 5
    PUPPETSYNC = 6


def _entry_name(entry: Any) -> Any:
    return getattr(entry, "name", entry)


class ScriptInstance:
    """The state of a script attached to one object.

    The base class provides no properties and no methods; concrete
    instances override what they support.
    """

    def set(self, name: str, value: Any) -> bool:
        """Assign a property; returns whether this instance owns it."""
        return False

    def get(self, name: str) -> Any:
        """Return a property value, or raise KeyError if it is unknown."""
        raise KeyError(name)

    def property_list(self) -> list[PropertyInfo]:
        """Describe the properties of this instance."""
        return []

    def method_list(self) -> list[Any]:
        """Describe the methods of this instance."""
        return []

    def has_method(self, method: str) -> bool:
        """Whether this instance implements ``method``."""
        return False

    def call(self, method: str, *args: Any) -> Any:
        """Call ``method``; raises InvalidMethodError if it does not exist."""
        raise InvalidMethodError(method)

    def call_multilevel(self, method: str, *args: Any) -> None:
        """Call ``method`` if it exists, ignoring the result."""

    def notification(self, what: int) -> None:
        """Receive an object notification."""

    def property_type(self, name: str) -> VariantType | None:
        """Return the type of a property, or None if it is unknown."""
        return None

    def rpc_mode(self, method: str) -> RPCMode:
        """The network call mode of ``method``."""
        return RPCMode.DISABLED

    def rset_mode(self, variable: str) -> RPCMode:
        """The network set mode of ``variable``."""
        return RPCMode.DISABLED


class Script:
    """A script that can be instantiated on objects.

    The base class describes an empty script whose instances expose nothing.
    """

    def can_instance(self) -> bool:
        """Whether instances of this script can be created."""
        return True

    def instance_create(self, owner: Any) -> ScriptInstance:
        """Create the script's state for ``owner``."""
        return ScriptInstance()

    def is_tool(self) -> bool:
        """Whether the script runs inside the editor."""
        return False

    def is_valid(self) -> bool:
        """Whether the script compiled successfully."""
        return True

    def has_method(self, method: str) -> bool:
        """Whether the script defines ``method``."""
        return False

    def method_info(self, method: str) -> Any:
        """Describe ``method``, or None if it is not defined."""
        return None

    def has_script_signal(self, signal: str) -> bool:
        """Whether the script declares ``signal``."""
        return False

    def script_signal_list(self) -> list[Any]:
        """Describe the signals the script declares."""
        return []

    def property_default_value(self, name: str) -> Any:
        """Return the default value of a property, or raise KeyError."""
        raise KeyError(name)

    def script_method_list(self) -> list[Any]:
        """Describe the methods the script defines."""
        return []

    def script_property_list(self) -> list[PropertyInfo]:
        """Describe the properties the script defines."""
        return []

    def update_exports(self) -> None:
        """Refresh exported property information."""

    def reload(self, keep_state: bool = False) -> None:
        """Reload the script from its source."""


class Mixin:
    """Stands in for the host object inside a mixin's script instance.

    Calls are forwarded to the host object the mixin is attached to.
    """

    def __init__(self) -> None:
        self._owner: Any = None

    @property
    def owner(self) -> Any:
        """The host object, or None while unattached."""
        return self._owner

    def call(self, method: str, *args: Any) -> Any:
        """Call ``method`` on the host object (on the mixin itself if unattached)."""
        target = self._owner if self._owner is not None else self
        function = getattr(target, method, None)
        if not callable(function):
            raise InvalidMethodError(method)
        return function(*args)

    def call_multilevel(self, method: str, *args: Any) -> None:
        """Call ``method`` on the host object if it has it."""
        if self._owner is None:
            return
        function = getattr(self._owner, method, None)
        if callable(function):
            function(*args)


class MixinScriptInstance(ScriptInstance):
    """Dispatches to the instances of every mixin in order."""

    def __init__(self, script: MixinScript, owner: Any) -> None:
        self._script = script
        self.object = owner
        self._instances: list[ScriptInstance | None] = []

    def _live(self) -> Iterable[ScriptInstance]:
        return (instance for instance in self._instances if instance is not None)

    @property
    def script(self) -> MixinScript:
        """The mixin script this instance belongs to."""
        return self._script

    @property
    def instances(self) -> list[ScriptInstance | None]:
        """The instances of each mixin, None where a mixin cannot be instantiated."""
        return list(self._instances)

    def release(self) -> None:
        """Detach this instance from its script."""
        self._script.remove_instance(self.object)

    def set(self, name: str, value: Any) -> bool:
        return any(instance.set(name, value) for instance in self._live())

    def get(self, name: str) -> Any:
        for instance in self._live():
            try:
                return instance.get(name)
            except KeyError:
                continue
        raise KeyError(name)

    def property_list(self) -> list[PropertyInfo]:
        seen: set[str] = set()
        result: list[PropertyInfo] = []
        for instance in self._live():
            for info in instance.property_list():
                if info.name in seen:
                    continue
                seen.add(info.name)
                result.append(info)
        return result

    def method_list(self) -> list[Any]:
        seen: set[Any] = set()
        result: list[Any] = []
        for instance in self._live():
            for info in instance.method_list():
                name = _entry_name(info)
                if name in seen:
                    continue
                seen.add(name)
                result.append(info)
        return result

    def has_method(self, method: str) -> bool:
        return any(instance.has_method(method) for instance in self._live())

    def call(self, method: str, *args: Any) -> Any:
        for instance in self._live():
            try:
                return instance.call(method, *args)
            except InvalidMethodError:
                continue
        raise InvalidMethodError(method)

    def call_multilevel(self, method: str, *args: Any) -> None:
        for instance in self._live():
            instance.call_multilevel(method, *args)

    def notification(self, what: int) -> None:
        for instance in self._live():
            instance.notification(what)

    def property_type(self, name: str) -> VariantType | None:
        for instance in self._live():
            found = instance.property_type(name)
            if found is not None:
                return found
        return None

    def rpc_mode(self, method: str) -> RPCMode:
        for instance in self._live():
            if instance.has_method(method):
                return instance.rpc_mode(method)
        return RPCMode.DISABLED

    def rset_mode(self, variable: str) -> RPCMode:
        for instance in self._live():
            if any(info.name == variable for info in instance.property_list()):
                return instance.rset_mode(variable)
        return RPCMode.DISABLED


class MixinScript(Script):
    """A script made of an ordered list of other scripts."""

    def __init__(self, base_class_name: str = "") -> None:
        self.base_class_name = base_class_name
        self._mixins: list[Script] = []
        self._mixin_owners: list[Mixin] = []
        self._instances: dict[int, MixinScriptInstance] = {}
        self._listeners: list[Callable[[], None]] = []

    def connect_changed(self, callback: Callable[[], None]) -> None:
        """Register a callback run whenever the list of mixins changes."""
        self._listeners.append(callback)

    def _emit_changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    def _check_script(self, script: Script | None) -> Script:
        if script is None:
            raise ValueError("A script is required.")
        return script

    def _check_index(self, index: int, limit: int) -> None:
        if not 0 <= index < limit:
            raise IndexError(f"Mixin index {index} out of range.")

    # Editing the list of mixins.

    def add_mixin(self, script: Script) -> None:
        """Append a script to the mixins."""
        self._check_script(script)
        if script is self:
            raise ValueError("Cannot add MixinScript to itself.")
        self.insert_mixin(len(self._mixins), script)

    def insert_mixin(self, position: int, script: Script) -> None:
        """Insert a script at ``position``."""
        self._check_script(script)
        self._check_index(position, len(self._mixins) + 1)
        script_owner = Mixin()
        self._mixin_owners.insert(position, script_owner)
        self._mixins.insert(position, script)
        for msi in self._instances.values():
            if script.can_instance():
                script_owner._owner = msi.object
                msi._instances.insert(position, script.instance_create(script_owner))
            else:
                msi._instances.insert(position, None)
        self._emit_changed()

    def remove_mixin(self, index: int) -> None:
        """Remove the script at ``index``."""
        self._check_index(index, len(self._mixins))
        del self._mixins[index]
        self._mixin_owners.pop(index)._owner = None
        for msi in self._instances.values():
            del msi._instances[index]
        self._emit_changed()

    def set_mixin(self, index: int, script: Script) -> None:
        """Replace the script at ``index``."""
        self._check_index(index, len(self._mixins))
        self._check_script(script)
        self._mixins[index] = script
        for msi in self._instances.values():
            if script.can_instance():
                msi._instances[index] = script.instance_create(self._mixin_owners[index])
            else:
                msi._instances[index] = None
        self._emit_changed()

    def move_mixin(self, position: int, script: Script) -> None:
        """Move a script already among the mixins to ``position``."""
        to_pos = position
        if to_pos == len(self._mixins):
            to_pos -= 1
        from_pos = next((i for i, s in enumerate(self._mixins) if s is script), -1)
        if from_pos == -1:
            raise ValueError("Cannot move script: not part of MixinScript.")
        if from_pos == to_pos:
            return
        self.remove_mixin(from_pos)
        self.insert_mixin(to_pos, script)

    def get_mixin(self, index: int) -> Script:
        """Return the script at ``index``."""
        self._check_index(index, len(self._mixins))
        return self._mixins[index]

    def mixin_count(self) -> int:
        """The number of mixins."""
        return len(self._mixins)

    def clear_mixins(self) -> None:
        """Remove every mixin."""
        while self._mixins:
            self.remove_mixin(0)

    @property
    def mixins(self) -> list[Script]:
        """The scripts in order; assigning replaces them all."""
        return list(self._mixins)

    @mixins.setter
    def mixins(self, scripts: Iterable[Script | None]) -> None:
        self.clear_mixins()
        for script in scripts:
            if not isinstance(script, Script):
                warnings.warn("Not a script.", stacklevel=2)
                continue
            self.add_mixin(script)

    # Instances.

    def remove_instance(self, owner: Any) -> None:
        """Forget the instance created for ``owner``."""
        self._instances.pop(id(owner), None)

    def instance_base_type(self) -> str:
        """The name of the class that hosts instances of this script."""
        return self.base_class_name

    def instance_create(self, owner: Any) -> MixinScriptInstance:
        msi = MixinScriptInstance(self, owner)
        for script, script_owner in zip(self._mixins, self._mixin_owners):
            if script.can_instance():
                script_owner._owner = owner
                msi._instances.append(script.instance_create(script_owner))
            else:
                msi._instances.append(None)
        self._instances[id(owner)] = msi
        return msi

    def instance_has(self, owner: Any) -> bool:
        """Whether an instance exists for ``owner``."""
        return id(owner) in self._instances

    def inherits_script(self, script: Script) -> bool:
        """Mixin scripts have no inheritance: only the script itself matches."""
        return script is self

    # Script interface, delegated to the mixins.

    def can_instance(self) -> bool:
        return True

    def is_tool(self) -> bool:
        return any(script.is_tool() for script in self._mixins)

    def is_valid(self) -> bool:
        return any(script.is_valid() for script in self._mixins)

    def has_method(self, method: str) -> bool:
        return any(script.has_method(method) for script in self._mixins)

    def method_info(self, method: str) -> Any:
        for script in self._mixins:
            if script.has_method(method):
                return script.method_info(method)
        return None

    def has_script_signal(self, signal: str) -> bool:
        return any(script.has_script_signal(signal) for script in self._mixins)

    def script_signal_list(self) -> list[Any]:
        return [signal for script in self._mixins for signal in script.script_signal_list()]

    def property_default_value(self, name: str) -> Any:
        for script in self._mixins:
            try:
                return script.property_default_value(name)
            except KeyError:
                continue
        raise KeyError(name)

    def script_method_list(self) -> list[Any]:
        return [method for script in self._mixins for method in script.script_method_list()]

    def script_property_list(self) -> list[PropertyInfo]:
        return [info for script in self._mixins for info in script.script_property_list()]

    def update_exports(self) -> None:
        for script in self._mixins:
            script.update_exports()

    def reload(self, keep_state: bool = False) -> None:
        for script in self._mixins:
            script.reload(keep_state)

    def __repr__(self) -> str:
        return f"MixinScript(base={self.base_class_name!r}, mixins={len(self._mixins)})"


class MixinScriptLanguage:
    """The language under which mixin scripts are registered."""

    _singleton: MixinScriptLanguage | None = None

    def __init__(self) -> None:
        if MixinScriptLanguage._singleton is not None:
            raise RuntimeError("Singleton already exists")
        MixinScriptLanguage._singleton = self

    @classmethod
    def get_singleton(cls) -> MixinScriptLanguage:
        """Return the language, creating it on first use."""
        if MixinScriptLanguage._singleton is None:
            cls()
        return MixinScriptLanguage._singleton

    @property
    def name(self) -> str:
        """The language name."""
        return "MixinScript"

    @property
    def type(self) -> str:
        """The script type this language creates."""
        return "MixinScript"

    @property
    def extension(self) -> str:
        """The file extension of mixin scripts."""
        return "ms"

    def get_template(self, class_name: str, base_class_name: str) -> MixinScript:
        """Create a new empty mixin script hosted by ``base_class_name``."""
        return MixinScript(base_class_name)

    def create_script(self) -> MixinScript:
        """Create a new empty mixin script."""
        return MixinScript()

    def recognized_extensions(self) -> list[str]:
        """File extensions this language loads."""
        return ["ms"]