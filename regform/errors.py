"""Structured error types for the registration form.

Validation failures are data, not exceptions: each one is a FieldError that
names the failing path, a specific error code and a human-readable message
suitable for inline display next to the input.

Error paths use dot notation. Scalar fields use their record key ("email"),
an array field uses its own key for list-level errors ("skills") and
"<key>.<index>.value" for a single entry ("skills.0.value").
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from regform.types import FieldErrorCode


def entry_path(field_name: str, index: int, item_name: str = "value") -> str:
    """Return the error path for entry ``index`` of array field ``field_name``."""
    return f"{field_name}.{index}.{item_name}"


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        path: Dot-notation field path (e.g., "email", "skills.0.value")
        code: Specific validation error code
        message: Human-readable error description
        expected: Optional - what was expected (pattern, enum values, etc.)
        received: Optional - what was actually received

    Examples:
        >>> err = FieldError(
        ...     path="email",
        ...     code=FieldErrorCode.INVALID_FORMAT,
        ...     message="Invalid email address",
        ...     received="not-an-email"
        ... )
        >>> err.path
        'email'
    """
    path: str
    code: FieldErrorCode
    message: str
    expected: Optional[Any] = None
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }
        if self.expected is not None:
            result["expected"] = self.expected
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(
            path=data["path"],
            code=code,
            message=data["message"],
            expected=data.get("expected"),
            received=data.get("received"),
        )


class UnknownFieldError(KeyError):
    """Raised when a caller addresses a field the form schema does not define.

    Attributes:
        field_name: The name that was not found
    """

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(field_name)

    def __str__(self) -> str:
        return f"Unknown form field: '{self.field_name}'"


__all__ = [
    "FieldError",
    "UnknownFieldError",
    "entry_path",
]
