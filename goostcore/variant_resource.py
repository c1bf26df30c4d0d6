"""A resource holding a single dynamically typed value with property metadata."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import IntEnum
from numbers import Real
from typing import Any

PROPERTY_USAGE_STORAGE = 1
PROPERTY_USAGE_EDITOR = 2
PROPERTY_USAGE_NETWORK = 4
PROPERTY_USAGE_DEFAULT = PROPERTY_USAGE_STORAGE | PROPERTY_USAGE_EDITOR | PROPERTY_USAGE_NETWORK


class VariantType(IntEnum):
    """The kinds of value a variant can hold."""

    NIL = 0
    BOOL = 1
    INT = 2
    REAL = 3
    STRING = 4
    VECTOR2 = 5
    RECT2 = 6
    VECTOR3 = 7
    TRANSFORM2D = 8
    PLANE = 9
    QUAT = 10
    AABB = 11
    BASIS = 12
    TRANSFORM = 13
    COLOR = 14
    NODE_PATH = 15
    RID = 16
    OBJECT = 17
    DICTIONARY = 18
    ARRAY = 19
    POOL_BYTE_ARRAY = 20
    POOL_INT_ARRAY = 21
    POOL_REAL_ARRAY = 22
    POOL_STRING_ARRAY = 23
    POOL_VECTOR2_ARRAY = 24
    POOL_VECTOR3_ARRAY = 25
    POOL_COLOR_ARRAY = 26

    @property
    def type_name(self) -> str:
        """The display name of the type."""
        return _TYPE_NAMES[self]


_TYPE_NAMES = {
    VariantType.NIL: "Nil",
    VariantType.BOOL: "bool",
    VariantType.INT: "int",
    VariantType.REAL: "float",
    VariantType.STRING: "String",
    VariantType.VECTOR2: "Vector2",
    VariantType.RECT2: "Rect2",
    VariantType.VECTOR3: "Vector3",
    VariantType.TRANSFORM2D: "Transform2D",
    VariantType.PLANE: "Plane",
    VariantType.QUAT: "Quat",
    VariantType.AABB: "AABB",
    VariantType.BASIS: "Basis",
    VariantType.TRANSFORM: "Transform",
    VariantType.COLOR: "Color",
    VariantType.NODE_PATH: "NodePath",
    VariantType.RID: "RID",
    VariantType.OBJECT: "Object",
    VariantType.DICTIONARY: "Dictionary",
    VariantType.ARRAY: "Array",
    VariantType.POOL_BYTE_ARRAY: "PoolByteArray",
    VariantType.POOL_INT_ARRAY: "PoolIntArray",
    VariantType.POOL_REAL_ARRAY: "PoolRealArray",
    VariantType.POOL_STRING_ARRAY: "PoolStringArray",
    VariantType.POOL_VECTOR2_ARRAY: "PoolVector2Array",
    VariantType.POOL_VECTOR3_ARRAY: "PoolVector3Array",
    VariantType.POOL_COLOR_ARRAY: "PoolColorArray",
}


class PropertyHint(IntEnum):
    """Editor hints describing how a property is meant to be edited."""

    NONE = 0
    RANGE = 1
    EXP_RANGE = 2
    ENUM = 3
    EXP_EASING = 4
    LENGTH = 5
    SPRITE_FRAME = 6
    KEY_ACCEL = 7
    FLAGS = 8
    LAYERS_2D_RENDER = 9
    LAYERS_2D_PHYSICS = 10
    LAYERS_3D_RENDER = 11
    LAYERS_3D_PHYSICS = 12
    FILE = 13
    DIR = 14
    GLOBAL_FILE = 15
    GLOBAL_DIR = 16
    RESOURCE_TYPE = 17
    MULTILINE_TEXT = 18
    PLACEHOLDER_TEXT = 19
    COLOR_NO_ALPHA = 20
    IMAGE_COMPRESS_LOSSY = 21
    IMAGE_COMPRESS_LOSSLESS = 22
    OBJECT_ID = 23
    TYPE_STRING = 24
    NODE_PATH_TO_EDITED_NODE = 25
    METHOD_OF_VARIANT_TYPE = 26
    METHOD_OF_BASE_TYPE = 27
    METHOD_OF_INSTANCE = 28
    METHOD_OF_SCRIPT = 29
    PROPERTY_OF_VARIANT_TYPE = 30
    PROPERTY_OF_BASE_TYPE = 31
    PROPERTY_OF_INSTANCE = 32
    PROPERTY_OF_SCRIPT = 33
    OBJECT_TOO_BIG = 34
    NODE_PATH_VALID_TYPES = 35
    SAVE_FILE = 36


_HINT_NAMES = {
    PropertyHint.NONE: "None",
    PropertyHint.RANGE: "Range",
    PropertyHint.EXP_RANGE: "Exponential Range",
    PropertyHint.ENUM: "Enum",
    PropertyHint.EXP_EASING: "Exponential Easing",
    PropertyHint.LENGTH: "Length",
    PropertyHint.SPRITE_FRAME: "SpriteFrame",
    PropertyHint.KEY_ACCEL: "Key Accel",
    PropertyHint.FLAGS: "Flags",
    PropertyHint.LAYERS_2D_RENDER: "Layers 2D Render",
    PropertyHint.LAYERS_2D_PHYSICS: "Layers 2D Physics",
    PropertyHint.LAYERS_3D_RENDER: "Layers 3D Render",
    PropertyHint.LAYERS_3D_PHYSICS: "Layers 3D Physics",
    PropertyHint.FILE: "File",
    PropertyHint.DIR: "Directory",
    PropertyHint.GLOBAL_FILE: "Global File",
    PropertyHint.GLOBAL_DIR: "Global Directory",
    PropertyHint.RESOURCE_TYPE: "Resource Type",
    PropertyHint.MULTILINE_TEXT: "Multiline Text",
    PropertyHint.PLACEHOLDER_TEXT: "Placeholder Text",
    PropertyHint.COLOR_NO_ALPHA: "Color No Alpha",
    PropertyHint.IMAGE_COMPRESS_LOSSY: "Image Compress Lossy",
    PropertyHint.IMAGE_COMPRESS_LOSSLESS: "Image Compress Lossless",
    PropertyHint.OBJECT_ID: "ObjectID",
    PropertyHint.TYPE_STRING: "String",
    PropertyHint.NODE_PATH_TO_EDITED_NODE: "NodePath To Edited Node",
    PropertyHint.METHOD_OF_VARIANT_TYPE: "Method Of Variant Type",
    PropertyHint.METHOD_OF_BASE_TYPE: "Method Of Base Type",
    PropertyHint.METHOD_OF_INSTANCE: "Method Of Instance",
    PropertyHint.METHOD_OF_SCRIPT: "Method Of Script",
    PropertyHint.PROPERTY_OF_VARIANT_TYPE: "Property Of Variant Type",
    PropertyHint.PROPERTY_OF_BASE_TYPE: "Property Of Base Type",
    PropertyHint.PROPERTY_OF_INSTANCE: "Property Of Instance",
    PropertyHint.PROPERTY_OF_SCRIPT: "Property Of Script",
    PropertyHint.OBJECT_TOO_BIG: "Object Too Big",
    PropertyHint.NODE_PATH_VALID_TYPES: "NodePath Valid Types",
    PropertyHint.SAVE_FILE: "Save File",
}


@dataclass
class PropertyInfo:
    """Describes a property: its type, name and editor hints."""

    type: VariantType = VariantType.NIL
    name: str = ""
    hint: PropertyHint = PropertyHint.NONE
    hint_string: str = ""
    usage: int = PROPERTY_USAGE_DEFAULT


_IDENTITY_2D = ((1.0, 0.0), (0.0, 1.0), (0.0, 0.0))
_IDENTITY_BASIS = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

_DEFAULTS: dict[VariantType, Callable[[], Any]] = {
    VariantType.NIL: lambda: None,
    VariantType.BOOL: bool,
    VariantType.INT: int,
    VariantType.REAL: float,
    VariantType.STRING: str,
    VariantType.VECTOR2: lambda: (0.0, 0.0),
    VariantType.RECT2: lambda: (0.0, 0.0, 0.0, 0.0),
    VariantType.VECTOR3: lambda: (0.0, 0.0, 0.0),
    VariantType.TRANSFORM2D: lambda: _IDENTITY_2D,
    VariantType.PLANE: lambda: (0.0, 0.0, 0.0, 0.0),
    VariantType.QUAT: lambda: (0.0, 0.0, 0.0, 1.0),
    VariantType.AABB: lambda: (0.0,) * 6,
    VariantType.BASIS: lambda: _IDENTITY_BASIS,
    VariantType.TRANSFORM: lambda: (_IDENTITY_BASIS, (0.0, 0.0, 0.0)),
    VariantType.COLOR: lambda: (0.0, 0.0, 0.0, 1.0),
    VariantType.NODE_PATH: str,
    VariantType.RID: int,
    VariantType.OBJECT: lambda: None,
    VariantType.DICTIONARY: dict,
    VariantType.ARRAY: list,
    VariantType.POOL_BYTE_ARRAY: bytes,
    VariantType.POOL_INT_ARRAY: list,
    VariantType.POOL_REAL_ARRAY: list,
    VariantType.POOL_STRING_ARRAY: list,
    VariantType.POOL_VECTOR2_ARRAY: list,
    VariantType.POOL_VECTOR3_ARRAY: list,
    VariantType.POOL_COLOR_ARRAY: list,
}

_VECTOR_LENGTHS: dict[VariantType, tuple[int, ...]] = {
    VariantType.VECTOR2: (2,),
    VariantType.RECT2: (4,),
    VariantType.VECTOR3: (3,),
    VariantType.PLANE: (4,),
    VariantType.QUAT: (4,),
    VariantType.AABB: (6,),
    VariantType.COLOR: (4, 3),
}

_INT_PREFIX = re.compile(r"\s*[-+]?\d+")
_FLOAT_PREFIX = re.compile(r"\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _to_string(value: Any) -> str:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "True" if value else "False"
    return str(value)


def _vector(value: Any, lengths: tuple[int, ...]) -> tuple[float, ...] | None:
    if not isinstance(value, (list, tuple)) or len(value) not in lengths:
        return None
    if not all(_is_number(item) for item in value):
        return None
    result = tuple(float(item) for item in value)
    if len(result) == 3 and 4 in lengths:
        result += (1.0,)
    return result


def _sequence(value: Any) -> list[Any] | None:
    if isinstance(value, (list, tuple, bytes, bytearray)):
        return list(value)
    return None


def type_of(value: Any) -> VariantType:
    """Return the variant type that describes a Python value.

    Tuples of two or three numbers count as vectors; other tuples and lists
    count as arrays, bytes as a byte array, and other objects as objects.
    """
    if value is None:
        return VariantType.NIL
    if isinstance(value, bool):
        return VariantType.BOOL
    if isinstance(value, int):
        return VariantType.INT
    if isinstance(value, float):
        return VariantType.REAL
    if isinstance(value, str):
        return VariantType.STRING
    if isinstance(value, (bytes, bytearray)):
        return VariantType.POOL_BYTE_ARRAY
    if isinstance(value, Mapping):
        return VariantType.DICTIONARY
    if isinstance(value, tuple) and all(_is_number(item) for item in value):
        if len(value) == 2:
            return VariantType.VECTOR2
        if len(value) == 3:
            return VariantType.VECTOR3
    if isinstance(value, (list, tuple)):
        return VariantType.ARRAY
    return VariantType.OBJECT


def create_value(type: VariantType | int) -> Any:
    """Return the default value of a variant type."""
    return _DEFAULTS[VariantType(type)]()


def convert_value(value: Any, to_type: VariantType | int) -> Any:
    """Convert ``value`` to ``to_type`` leniently; None when it cannot be done."""
    target = VariantType(to_type)
    if target is VariantType.NIL:
        return None
    if value is None:
        return create_value(target)
    if type_of(value) is target:
        return value

    if target is VariantType.BOOL:
        return bool(value)
    if target in (VariantType.INT, VariantType.RID):
        if isinstance(value, (bool, Real)):
            return int(value)
        if isinstance(value, str) and target is VariantType.INT:
            match = _INT_PREFIX.match(value)
            return int(match.group()) if match else 0
        return None
    if target is VariantType.REAL:
        if isinstance(value, (bool, Real)):
            return float(value)
        if isinstance(value, str):
            match = _FLOAT_PREFIX.match(value)
            return float(match.group()) if match else 0.0
        return None
    if target in (VariantType.STRING, VariantType.NODE_PATH):
        return _to_string(value)
    if target in _VECTOR_LENGTHS:
        return _vector(value, _VECTOR_LENGTHS[target])
    if target is VariantType.OBJECT:
        if isinstance(value, (bool, int, float, str, bytes, bytearray, list, tuple, Mapping)):
            return None
        return value
    if target is VariantType.DICTIONARY:
        return dict(value) if isinstance(value, Mapping) else None
    if target is VariantType.ARRAY:
        return _sequence(value)
    items = _sequence(value)
    if items is None:
        return None
    try:
        if target is VariantType.POOL_BYTE_ARRAY:
            return bytes(int(item) & 0xFF for item in items)
        if target is VariantType.POOL_INT_ARRAY:
            return [int(item) for item in items]
        if target is VariantType.POOL_REAL_ARRAY:
            return [float(item) for item in items]
        if target is VariantType.POOL_STRING_ARRAY:
            return [_to_string(item) for item in items]
    except (TypeError, ValueError):
        return None
    element = {
        VariantType.POOL_VECTOR2_ARRAY: VariantType.VECTOR2,
        VariantType.POOL_VECTOR3_ARRAY: VariantType.VECTOR3,
        VariantType.POOL_COLOR_ARRAY: VariantType.COLOR,
    }.get(target)
    if element is not None:
        converted = [_vector(item, _VECTOR_LENGTHS[element]) for item in items]
        return None if any(item is None for item in converted) else converted
    return None


def type_hints() -> str:
    """Return all variant type names, comma separated, in type order."""
    return ",".join(t.type_name for t in VariantType)


def property_hint_name(hint: PropertyHint | int) -> str:
    """Return the display name of a property hint."""
    try:
        return _HINT_NAMES[PropertyHint(hint)]
    except ValueError:
        raise ValueError("Invalid property hint type.") from None


def property_hint_types() -> str:
    """Return all property hint names, comma separated, in hint order."""
    return ",".join(property_hint_name(hint) for hint in PropertyHint)


class VariantResource:
    """Holds one value of a selectable type under a configurable property name."""

    def __init__(self) -> None:
        self._value: Any = None
        self._type = VariantType.NIL
        self._info = PropertyInfo(name="value")
        self._listeners: list[Callable[[], None]] = []

    def connect_changed(self, callback: Callable[[], None]) -> None:
        """Register a callback run whenever the type or value changes."""
        self._listeners.append(callback)

    def _emit_changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    @property
    def type(self) -> VariantType:
        """The current type; setting it converts the stored value."""
        return self._type

    @type.setter
    def type(self, new_type: VariantType | int) -> None:
        target = VariantType(new_type)
        previous = self._type
        self._type = target
        if previous is not VariantType.NIL:
            self._value = convert_value(self._value, target)
        else:
            self._value = create_value(target)
        self._emit_changed()

    @property
    def value(self) -> Any:
        """The stored value; setting it also updates the type."""
        return self.get(self._info.name)

    @value.setter
    def value(self, new_value: Any) -> None:
        self.set(self._info.name, new_value)

    @property
    def property_name(self) -> str:
        """The name under which the value is exposed."""
        return self._info.name

    @property_name.setter
    def property_name(self, name: str) -> None:
        self._info.name = name

    @property
    def property_hint(self) -> PropertyHint:
        """The editor hint of the exposed property."""
        return self._info.hint

    @property_hint.setter
    def property_hint(self, hint: PropertyHint | int) -> None:
        self._info.hint = PropertyHint(hint)

    @property
    def property_hint_string(self) -> str:
        """The hint string of the exposed property."""
        return self._info.hint_string

    @property_hint_string.setter
    def property_hint_string(self, hint_string: str) -> None:
        self._info.hint_string = hint_string

    @property
    def property_usage(self) -> int:
        """The usage flags of the exposed property."""
        return self._info.usage

    @property_usage.setter
    def property_usage(self, usage: int) -> None:
        self._info.usage = int(usage)

    def set(self, name: str, value: Any) -> bool:
        """Set the value if ``name`` is the property name; returns whether it was."""
        if name != self._info.name:
            return False
        self._value = value
        self._type = type_of(value)
        self._emit_changed()
        return True

    def get(self, name: str) -> Any:
        """Return the value if ``name`` is the property name, else raise KeyError."""
        if name != self._info.name:
            raise KeyError(name)
        return self._value

    def property_list(self) -> list[PropertyInfo]:
        """Describe the dynamically exposed property."""
        info = self._info
        return [PropertyInfo(self._type, info.name, info.hint, info.hint_string, info.usage)]

    def __str__(self) -> str:
        return _to_string(self._value)

    def __repr__(self) -> str:
        return f"VariantResource({self._info.name}={self._value!r})"