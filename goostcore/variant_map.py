"""A fixed-size two-dimensional grid of arbitrary values."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any


class VariantMap:
    """A ``width`` by ``height`` grid of values stored row by row."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._data: list[Any] = []
        self._width = 0
        self._height = 0
        if width or height:
            self.create(width, height)

    def create(self, width: int, height: int) -> None:
        """Discard the contents and allocate an empty grid of the given size."""
        self.clear()
        self.resize(width, height)

    def create_from_data(self, width: int, height: int, data: Sequence[Any]) -> None:
        """Build a grid from ``width * height`` values given row by row."""
        values = list(data)
        if not values:
            raise ValueError("Array is empty.")
        if len(values) != width * height:
            raise ValueError("Element count mismatch in the Array to create a VariantMap.")
        self.create(width, height)
        self._data[:] = values

    def resize(self, new_width: int, new_height: int) -> None:
        """Change the dimensions, keeping stored values in their flat order."""
        if new_width <= 0:
            raise ValueError("Width must be positive.")
        if new_height <= 0:
            raise ValueError("Height must be positive.")
        if new_width == self._width and new_height == self._height:
            return
        count = new_width * new_height
        if count < len(self._data):
            del self._data[count:]
        else:
            self._data.extend([None] * (count - len(self._data)))
        self._width = new_width
        self._height = new_height

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Cell ({x}, {y}) is outside a {self._width}x{self._height} map.")
        return y * self._width + x

    def set_element(self, x: int, y: int, value: Any) -> None:
        """Store ``value`` at column ``x`` and row ``y``."""
        self._data[self._offset(x, y)] = value

    def get_element(self, x: int, y: int) -> Any:
        """Return the value at column ``x`` and row ``y``."""
        return self._data[self._offset(x, y)]

    def set_cell(self, position: Sequence[float], value: Any) -> None:
        """Store ``value`` at an ``(x, y)`` position."""
        self.set_element(int(position[0]), int(position[1]), value)

    def get_cell(self, position: Sequence[float]) -> Any:
        """Return the value at an ``(x, y)`` position."""
        return self.get_element(int(position[0]), int(position[1]))

    def get_cell_or_null(self, position: Sequence[float]) -> Any:
        """Return the value at ``(x, y)``, or None if the position is outside."""
        if not self.has_cell(position):
            return None
        return self.get_cell(position)

    def has_cell(self, position: Sequence[float]) -> bool:
        """Whether ``(x, y)`` lies inside the grid."""
        x, y = position[0], position[1]
        return x >= 0 and y >= 0 and x < self._width and y < self._height

    def fill(self, value: Any) -> None:
        """Set every cell to ``value``."""
        self._data[:] = [value] * (self._width * self._height)

    @property
    def width(self) -> int:
        """The number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """The number of rows."""
        return self._height

    @property
    def size(self) -> tuple[int, int]:
        """The ``(width, height)`` pair."""
        return (self._width, self._height)

    def is_empty(self) -> bool:
        """Whether the grid has no dimensions."""
        return self._width == 0 and self._height == 0

    def clear(self) -> None:
        """Drop all values and reset the dimensions to zero."""
        self._data.clear()
        self._width = 0
        self._height = 0

    def to_dict(self) -> dict[str, Any]:
        """Return a storable mapping with ``width``, ``height`` and ``data``."""
        return {"width": self._width, "height": self._height, "data": list(self._data)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VariantMap:
        """Build a map from a mapping produced by :meth:`to_dict`."""
        for key in ("width", "height", "data"):
            if key not in data:
                raise KeyError(key)
        result = cls()
        result.create_from_data(int(data["width"]), int(data["height"]), data["data"])
        return result

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._data))

    def __str__(self) -> str:
        if self.is_empty():
            return "[]"
        rows = []
        for y in range(self._height):
            row = self._data[y * self._width:(y + 1) * self._width]
            rows.append("[" + ", ".join(str(value) for value in row) + "]\n")
        return "".join(rows)

    def __repr__(self) -> str:
        return f"VariantMap(width={self._width}, height={self._height})"