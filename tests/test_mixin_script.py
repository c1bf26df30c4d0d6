import pytest

from goostcore.mixin_script import (
    InvalidMethodError,
    Mixin,
    MixinScript,
    MixinScriptInstance,
    MixinScriptLanguage,
    RPCMode,
    Script,
    ScriptInstance,
)
from goostcore.variant_resource import PropertyInfo, VariantType


class FakeInstance(ScriptInstance):
    def __init__(self, script, owner):
        self.script = script
        self.owner = owner
        self.props = dict(script.properties)
        self.notifications = []

    def set(self, name, value):
        if name in self.props:
            self.props[name] = value
            return True
        return False

    def get(self, name):
        return self.props[name]

    def property_list(self):
        return [PropertyInfo(type=VariantType.INT, name=n) for n in self.props]

    def method_list(self):
        return list(self.script.methods)

    def has_method(self, method):
        return method in self.script.methods

    def call(self, method, *args):
        if method not in self.script.methods:
            raise InvalidMethodError(method)
        return self.script.methods[method](self, *args)

    def notification(self, what):
        self.notifications.append(what)

    def property_type(self, name):
        return VariantType.INT if name in self.props else None

    def rpc_mode(self, method):
        return self.script.rpc


class FakeScript(Script):
    def __init__(self, methods=None, properties=None, instantiable=True, tool=False,
                 defaults=None, rpc=RPCMode.REMOTE):
        self.methods = methods or {}
        self.properties = properties or {}
        self.instantiable = instantiable
        self.tool = tool
        self.defaults = defaults or {}
        self.rpc = rpc
        self.reloads = 0

    def can_instance(self):
        return self.instantiable

    def instance_create(self, owner):
        return FakeInstance(self, owner)

    def is_tool(self):
        return self.tool

    def has_method(self, method):
        return method in self.methods

    def property_default_value(self, name):
        return self.defaults[name]

    def script_method_list(self):
        return list(self.methods)

    def reload(self, keep_state=False):
        self.reloads += 1


class Host:
    def greet(self, who):
        return "hello " + who


def test_call_dispatches_to_first_mixin_with_method():
    a = FakeScript(methods={"f": lambda inst: "a"})
    b = FakeScript(methods={"f": lambda inst: "b", "g": lambda inst, x: x * 2})
    ms = MixinScript("Node")
    ms.add_mixin(a)
    ms.add_mixin(b)
    inst = ms.instance_create(Host())
    assert inst.call("f") == "a"
    assert inst.call("g", 21) == 42
    with pytest.raises(InvalidMethodError):
        inst.call("missing")


def test_non_instantiable_mixin_gets_no_instance():
    ms = MixinScript()
    ms.add_mixin(FakeScript(instantiable=False))
    ms.add_mixin(FakeScript(methods={"f": lambda inst: 1}))
    inst = ms.instance_create(Host())
    assert inst.instances[0] is None
    assert inst.call("f") == 1


def test_set_and_get_follow_mixin_order():
    ms = MixinScript()
    ms.add_mixin(FakeScript(properties={"x": 1}))
    ms.add_mixin(FakeScript(properties={"x": 2, "y": 3}))
    inst = ms.instance_create(Host())
    assert inst.get("x") == 1
    assert inst.get("y") == 3
    assert inst.set("y", 5) is True
    assert inst.get("y") == 5
    assert inst.set("z", 0) is False
    with pytest.raises(KeyError):
        inst.get("z")


def test_property_and_method_lists_are_deduplicated():
    ms = MixinScript()
    ms.add_mixin(FakeScript(methods={"f": None}, properties={"x": 1}))
    ms.add_mixin(FakeScript(methods={"f": None, "g": None}, properties={"x": 2, "y": 3}))
    inst = ms.instance_create(Host())
    assert [p.name for p in inst.property_list()] == ["x", "y"]
    assert inst.method_list() == ["f", "g"]
    assert inst.has_method("g")
    assert not inst.has_method("h")


def test_property_type_and_modes():
    ms = MixinScript()
    ms.add_mixin(FakeScript(methods={"f": None}, properties={"x": 1}, rpc=RPCMode.MASTER))
    inst = ms.instance_create(Host())
    assert inst.property_type("x") is VariantType.INT
    assert inst.property_type("nope") is None
    assert inst.rpc_mode("f") is RPCMode.MASTER
    assert inst.rpc_mode("nope") is RPCMode.DISABLED
    assert inst.rset_mode("nope") is RPCMode.DISABLED


def test_notification_reaches_every_instance():
    ms = MixinScript()
    ms.add_mixin(FakeScript())
    ms.add_mixin(FakeScript())
    inst = ms.instance_create(Host())
    inst.notification(7)
    assert [i.notifications for i in inst.instances] == [[7], [7]]


def test_mixins_added_after_instance_creation_reach_instances():
    ms = MixinScript()
    host = Host()
    inst = ms.instance_create(host)
    assert inst.instances == []
    ms.add_mixin(FakeScript(methods={"f": lambda i: "late"}))
    assert inst.call("f") == "late"
    ms.remove_mixin(0)
    with pytest.raises(InvalidMethodError):
        inst.call("f")


def test_mixin_forwards_calls_to_host():
    ms = MixinScript()
    ms.add_mixin(FakeScript())
    host = Host()
    inst = ms.instance_create(host)
    mixin = inst.instances[0].owner
    assert isinstance(mixin, Mixin)
    assert mixin.owner is host
    assert mixin.call("greet", "you") == "hello you"
    with pytest.raises(InvalidMethodError):
        mixin.call("nothing")


def test_unattached_mixin_calls_itself():
    mixin = Mixin()
    assert mixin.owner is None
    with pytest.raises(InvalidMethodError):
        mixin.call("greet", "x")


def test_insert_move_and_get():
    a, b, c = FakeScript(), FakeScript(), FakeScript()
    ms = MixinScript()
    ms.add_mixin(a)
    ms.add_mixin(c)
    ms.insert_mixin(1, b)
    assert ms.mixins == [a, b, c]
    ms.move_mixin(0, c)
    assert ms.mixins == [c, a, b]
    ms.move_mixin(3, c)
    assert ms.mixins == [a, b, c]
    assert ms.get_mixin(1) is b
    assert ms.mixin_count() == 3


def test_move_unknown_script_raises():
    ms = MixinScript()
    ms.add_mixin(FakeScript())
    with pytest.raises(ValueError):
        ms.move_mixin(0, FakeScript())


def test_index_errors():
    ms = MixinScript()
    ms.add_mixin(FakeScript())
    with pytest.raises(IndexError):
        ms.get_mixin(1)
    with pytest.raises(IndexError):
        ms.get_mixin(-1)
    with pytest.raises(IndexError):
        ms.remove_mixin(5)
    with pytest.raises(IndexError):
        ms.insert_mixin(3, FakeScript())
    with pytest.raises(IndexError):
        ms.set_mixin(1, FakeScript())


def test_add_self_or_none_raises():
    ms = MixinScript()
    with pytest.raises(ValueError):
        ms.add_mixin(ms)
    with pytest.raises(ValueError):
        ms.add_mixin(None)
    assert ms.mixin_count() == 0


def test_set_mixin_replaces_instances():
    ms = MixinScript()
    ms.add_mixin(FakeScript(methods={"f": lambda i: "old"}))
    inst = ms.instance_create(Host())
    replacement = FakeScript(methods={"f": lambda i: "new"})
    ms.set_mixin(0, replacement)
    assert ms.get_mixin(0) is replacement
    assert inst.call("f") == "new"


def test_mixins_property_replaces_and_skips_non_scripts():
    a, b = FakeScript(), FakeScript()
    ms = MixinScript()
    ms.add_mixin(FakeScript())
    with pytest.warns(UserWarning):
        ms.mixins = [a, None, b]
    assert ms.mixins == [a, b]
    ms.clear_mixins()
    assert ms.mixins == []


def test_changed_is_emitted():
    ms = MixinScript()
    events = []
    ms.connect_changed(lambda: events.append(ms.mixin_count()))
    ms.add_mixin(FakeScript())
    ms.add_mixin(FakeScript())
    ms.remove_mixin(0)
    assert events == [1, 2, 1]


def test_instance_tracking_and_release():
    ms = MixinScript("Sprite")
    host = Host()
    inst = ms.instance_create(host)
    assert isinstance(inst, MixinScriptInstance)
    assert inst.script is ms
    assert ms.instance_has(host)
    inst.release()
    assert not ms.instance_has(host)
    assert ms.instance_base_type() == "Sprite"


def test_script_queries_delegate_to_mixins():
    a = FakeScript(methods={"f": None}, defaults={"x": 4})
    b = FakeScript(methods={"g": None}, tool=True)
    ms = MixinScript()
    assert not ms.is_valid()
    ms.add_mixin(a)
    ms.add_mixin(b)
    assert ms.is_tool()
    assert ms.is_valid()
    assert ms.has_method("g")
    assert not ms.has_method("h")
    assert ms.script_method_list() == ["f", "g"]
    assert ms.property_default_value("x") == 4
    with pytest.raises(KeyError):
        ms.property_default_value("y")
    assert ms.inherits_script(ms)
    assert not ms.inherits_script(a)


def test_reload_reaches_every_mixin():
    a, b = FakeScript(), FakeScript()
    ms = MixinScript()
    ms.add_mixin(a)
    ms.add_mixin(b)
    ms.reload()
    assert (a.reloads, b.reloads) == (1, 1)


def test_language():
    language = MixinScriptLanguage.get_singleton()
    assert MixinScriptLanguage.get_singleton() is language
    with pytest.raises(RuntimeError):
        MixinScriptLanguage()
    assert language.name == "MixinScript"
    assert language.extension == "ms"
    assert language.recognized_extensions() == ["ms"]
    template = language.get_template("Thing", "Node2D")
    assert template.instance_base_type() == "Node2D"
    assert language.create_script().mixin_count() == 0