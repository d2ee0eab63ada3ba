"""Core type definitions for the registration form.

This module defines the fundamental types used throughout regform:
- FormPhase: Lifecycle phases of the form orchestrator
- Role: The fixed set of selectable roles
- FieldErrorCode: Validation error codes for individual fields
- EventType: Notification event types emitted on every form mutation
- CandidateRecord: The record shape handed to the validator

These types form the contract between a UI layer and the form runtime.
"""

from enum import Enum
from typing import List, Tuple

from typing_extensions import NotRequired, TypedDict


class FormPhase(str, Enum):
    """Form lifecycle phases.

    EDITING is both the initial phase and the phase the form returns to after
    every submit attempt, successful or not.
    """
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTED = "submitted"


class Role(str, Enum):
    """Roles offered by the role select."""
    STUDENT = "student"
    DEVELOPER = "developer"
    DESIGNER = "designer"


# (value, label) pairs in display order; "" is the unselected placeholder
ROLE_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("", "Select Role"),
    (Role.STUDENT.value, "Student"),
    (Role.DEVELOPER.value, "Developer"),
    (Role.DESIGNER.value, "Designer"),
)


class FieldErrorCode(str, Enum):
    """Validation error codes for individual field failures."""
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    CUSTOM = "custom"


class EventType(str, Enum):
    """Notification event types.

    Every mutation of the form state emits one of these so a view layer can
    redraw explicitly.
    """
    FIELD_UPDATED = "field.updated"
    SKILL_APPENDED = "skill.appended"
    SKILL_REMOVED = "skill.removed"
    SKILL_UPDATED = "skill.updated"
    SUBMIT_REQUESTED = "submit.requested"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    FORM_SUBMITTED = "form.submitted"
    FORM_RESET = "form.reset"


class SkillValue(TypedDict):
    value: str


class CandidateRecord(TypedDict):
    """Record shape accepted by the validator and produced by the form."""
    firstName: str
    lastName: str
    email: str
    contact: str
    role: str
    skills: List[SkillValue]
    message: NotRequired[str]


__all__ = [
    "FormPhase",
    "Role",
    "ROLE_OPTIONS",
    "FieldErrorCode",
    "EventType",
    "SkillValue",
    "CandidateRecord",
]
