"""RGBA colors handed to the layer compositor."""

from typing import NamedTuple


class Color(NamedTuple):
    """RGBA color; channels 0-255, alpha 0-1."""
    r: int
    g: int
    b: int
    a: float = 1.0

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> "Color":
        value = value.lstrip("#")
        if len(value) == 3:
            value = "".join(ch * 2 for ch in value)
        if len(value) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), alpha)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_css(self) -> str:
        return f"rgba({self.r},{self.g},{self.b},{self.a:g})"

    def with_alpha(self, alpha: float) -> "Color":
        return self._replace(a=alpha)
