"""Draft editing: path bindings and collection resizing."""

from intake.draft.binding import (
    FieldPath,
    FieldPathError,
    InactiveFieldError,
    ReadOnlyFieldError,
    set_field,
)
from intake.draft.resizer import add_member, remove_member, resize_families

__all__ = [
    "FieldPath",
    "FieldPathError",
    "InactiveFieldError",
    "ReadOnlyFieldError",
    "add_member",
    "remove_member",
    "resize_families",
    "set_field",
]
