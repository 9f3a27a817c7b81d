"""Error taxonomy for map geometry and refresh."""


class WarMapError(Exception):
    """Base class for all py-warmap errors."""


class UnknownHex(WarMapError, KeyError):
    """A hex identifier is not part of the static topology."""

    def __init__(self, hex_id: str):
        super().__init__(hex_id)
        self.hex_id = hex_id

    def __str__(self) -> str:
        return f"Unknown hex: {self.hex_id!r}"


class InvalidGeometry(WarMapError, ValueError):
    """Non-finite or degenerate coordinates reached a geometry operation."""


class FetchFailure(WarMapError):
    """The data-fetch collaborator could not deliver a complete batch."""

    def __init__(self, message: str, hex_id: str = None):
        super().__init__(message)
        self.hex_id = hex_id
