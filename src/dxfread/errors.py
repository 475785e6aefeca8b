from __future__ import annotations


class DxfError(ValueError):
    pass


class StructuralError(DxfError):
    """The tag stream does not have the shape a section or entity requires."""


class SetFieldError(DxfError):
    pass


class ConversionError(SetFieldError):
    def __init__(self, field: str, value: object, target: type) -> None:
        self.field = field
        self.value = value
        self.target = target
        super().__init__(
            f"cannot convert {value!r} to {target.__name__} for field {field!r}"
        )


class ConfigurationError(DxfError):
    """A spec table is inconsistent or a spec key is unknown."""
