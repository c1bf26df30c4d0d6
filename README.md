# goostcore

Small building blocks for dynamic, script-driven applications:

- **`goostcore.variant_map`**: `VariantMap` is a fixed-size 2D grid of arbitrary values.
  A map can be resized, filled and iterated. `to_dict` and `VariantMap.from_dict` store
  it as a plain dictionary and read it back.
- **`goostcore.variant_resource`**: `VariantResource` holds a single named value with a
  declared type (`VariantType`). When the type changes, the stored value is converted to
  the new type. The module also provides:
  - `create_value` and `convert_value`
  - `type_of`
  - `type_hints`, `property_hint_name` and `property_hint_types`
  - `PropertyHint` and `PropertyInfo`
- **`goostcore.mixin_script`**: `MixinScript` combines several `Script` objects so that
  they act on one owner object. Property access, method calls and notifications go to
  each mixin in order.

## Installation

```
pip install goostcore
```

The package has no runtime dependencies. It supports Python 3.10 and later.

## Variant map

```python
from goostcore.variant_map import VariantMap

grid = VariantMap(3, 2)
grid.fill(0)
grid.set_cell((1, 1), "x")
print(grid.get_cell_or_null((5, 5)))   # None
restored = VariantMap.from_dict(grid.to_dict())
print(restored)
# [0, 0, 0]
# [0, x, 0]
```

Errors are reported as follows:

- `get_element` and `set_element` raise `IndexError` when the coordinates fall outside
  the grid.
- `resize` raises `ValueError` for a width or height that is not positive.
- `create_from_data` raises `ValueError` when the data is empty or has the wrong number
  of values.

## Variant resource

```python
from goostcore.variant_resource import VariantResource, VariantType

res = VariantResource()
res.type = VariantType.INT     # value becomes 0
res.value = 42
res.type = VariantType.STRING
print(res.value)               # "42"
```

The value is exposed under `property_name`, which defaults to `"value"`. A call to `get`
with any other name raises `KeyError`. A call to `set` with any other name returns
`False`. To be told whenever the type or the value changes, register a callback with
`connect_changed`.

## Mixin scripts

To supply the behaviour of a mixin, subclass `Script` and `ScriptInstance`. Then combine
the scripts with `MixinScript.add_mixin`. The instance returned by
`MixinScript.instance_create(owner)` routes `call`, `get`, `set` and `notification` to
each mixin in turn. A call to a method that none of the mixins define raises
`InvalidMethodError`.

```python
from goostcore.mixin_script import MixinScript, Script, ScriptInstance

class Greeter(ScriptInstance):
    def has_method(self, method):
        return method == "greet"

    def call(self, method, *args):
        if method == "greet":
            return f"hello {args[0]}"
        return super().call(method, *args)

class GreeterScript(Script):
    def instance_create(self, owner):
        return Greeter()

script = MixinScript("Node")
script.add_mixin(GreeterScript())
instance = script.instance_create(object())
print(instance.call("greet", "world"))   # hello world
```

Mixins can be managed with the following methods:

- `insert_mixin`
- `set_mixin`
- `move_mixin`
- `remove_mixin`
- `clear_mixins`

Assigning to `mixins` replaces the whole list. Any entry that is not a `Script` is skipped
with a warning. `MixinScriptLanguage.get_singleton()` gives the language object, which
creates new empty scripts and reports the `ms` extension.

The package works only with objects in memory. It does not load or save scripts or
resources as files.

## Running the tests

```
pip install goostcore[test]
pytest
```