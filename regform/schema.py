"""Declarative field definitions for the registration form.

A FormSchema is an ordered set of FieldDefinitions. Each definition pairs a
record key with a JSON Schema (Draft 7) fragment for its value, the messages
to show when a given JSON Schema keyword fails, and an optional refinement
predicate that runs once the fragment passes.

The validation engine walks the definitions in order, so the order here is
the order errors are reported in.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from jsonschema import Draft7Validator

from regform.types import FieldErrorCode, Role


@dataclass(frozen=True)
class FieldDefinition:
    """Constraints for a single form field.

    Attributes:
        name: Record key, unique within a schema
        label: Human label used in fallback messages
        schema: JSON Schema fragment the value must satisfy
        messages: JSON Schema keyword -> message shown when it fails;
            the extra key "required" is used when the value is absent
        refine: Optional predicate checked after the fragment passes
        refine_message: Message shown when ``refine`` returns False
        refine_code: Error code reported when ``refine`` returns False
        required: Whether an absent (missing or None) value is an error
        item: For array fields, the definition applied to each entry's value

    Examples:
        >>> nickname = FieldDefinition(
        ...     name="nickname",
        ...     label="Nickname",
        ...     schema={"type": "string", "maxLength": 20},
        ...     required=False,
        ... )
        >>> nickname.required_message
        'Nickname is required'
    """
    name: str
    label: str
    schema: Dict[str, Any]
    messages: Dict[str, str] = field(default_factory=dict)
    refine: Optional[Callable[[Any], bool]] = None
    refine_message: Optional[str] = None
    refine_code: FieldErrorCode = FieldErrorCode.CUSTOM
    required: bool = True
    item: Optional["FieldDefinition"] = None

    @property
    def is_array(self) -> bool:
        return self.item is not None

    @property
    def required_message(self) -> str:
        return self.messages.get("required", f"{self.label} is required")

    def message_for(self, keyword: str) -> Optional[str]:
        """Return the configured message for a failing JSON Schema keyword."""
        return self.messages.get(keyword)


class FormSchema:
    """Ordered, name-unique collection of field definitions.

    Every fragment (and every array item fragment) is checked against the
    Draft 7 meta-schema on construction.

    Raises:
        ValueError: If two definitions share a name
        jsonschema.SchemaError: If a fragment is not a valid JSON Schema

    Examples:
        >>> schema = FormSchema([
        ...     FieldDefinition(name="a", label="A", schema={"type": "string"}),
        ... ])
        >>> schema.names
        ['a']
    """

    def __init__(self, fields: Sequence[FieldDefinition]) -> None:
        seen = set()
        for definition in fields:
            if definition.name in seen:
                raise ValueError(f"Duplicate field name in form schema: '{definition.name}'")
            seen.add(definition.name)
            Draft7Validator.check_schema(definition.schema)
            if definition.item is not None:
                Draft7Validator.check_schema(definition.item.schema)
        self._fields = tuple(fields)

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fields)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self._fields]

    @property
    def scalar_names(self) -> List[str]:
        """Names of the fields that hold a single value (not a list)."""
        return [f.name for f in self._fields if not f.is_array]

    @property
    def array_names(self) -> List[str]:
        return [f.name for f in self._fields if f.is_array]

    def get(self, name: str) -> Optional[FieldDefinition]:
        for definition in self._fields:
            if definition.name == name:
                return definition
        return None


# Characters removed by ECMAScript String.prototype.trim: WhiteSpace and
# LineTerminator. Differs from str.isspace, e.g. U+FEFF is included and
# U+001C..U+001F, U+0085 are not.
TRIM_CHARACTERS = (
    "\t\n\x0b\x0c\r \xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def not_blank(value: Any) -> bool:
    """True unless ``value`` is a string made only of trimmable whitespace."""
    return not isinstance(value, str) or value.strip(TRIM_CHARACTERS) != ""


# Exactly ten ASCII digits. "$" also matches before a trailing newline, so the
# field fragment pairs this with maxLength 10.
CONTACT_PATTERN = r"^[0-9]{10}$"

EMAIL_PATTERN = (
    r"^(?!.*\s)(?!\.)(?!.*\.\.)[A-Za-z0-9_'+\-.]*[A-Za-z0-9_+-]"
    r"@(?:[A-Za-z0-9][A-Za-z0-9\-]*\.)+[A-Za-z]{2,}$"
)

ROLE_VALUES = [role.value for role in Role]


def _name_field(name: str, label: str) -> FieldDefinition:
    return FieldDefinition(
        name=name,
        label=label,
        schema={"type": "string", "minLength": 1},
        messages={
            "required": f"{label} is required",
            "minLength": f"{label} is required",
        },
        refine=not_blank,
        refine_message=f"{label} cannot be empty spaces",
        refine_code=FieldErrorCode.REQUIRED,
    )


SKILL_ENTRY = FieldDefinition(
    name="value",
    label="Skill",
    schema={"type": "string", "minLength": 1},
    messages={
        "required": "Skill is required",
        "minLength": "Skill is required",
    },
    refine=not_blank,
    refine_message="Skill cannot be empty spaces",
    refine_code=FieldErrorCode.REQUIRED,
)


REGISTRATION_SCHEMA = FormSchema([
    _name_field("firstName", "First Name"),
    _name_field("lastName", "Last Name"),
    FieldDefinition(
        name="email",
        label="Email",
        schema={"type": "string", "minLength": 1, "pattern": EMAIL_PATTERN},
        messages={
            "required": "Email is required",
            "minLength": "Email is required",
            "pattern": "Invalid email address",
        },
    ),
    FieldDefinition(
        name="contact",
        label="Contact number",
        schema={
            "type": "string",
            "minLength": 1,
            "maxLength": 10,
            "pattern": CONTACT_PATTERN,
        },
        messages={
            "required": "Contact number is required",
            "minLength": "Contact number is required",
            "maxLength": "Contact must be 10 digits",
            "pattern": "Contact must be 10 digits",
        },
    ),
    FieldDefinition(
        name="role",
        label="Role",
        schema={"type": "string", "minLength": 1, "enum": ROLE_VALUES},
        messages={
            "required": "Role is required",
            "minLength": "Role is required",
            "enum": f"Role must be one of: {', '.join(ROLE_VALUES)}",
        },
    ),
    FieldDefinition(
        name="skills",
        label="Skills",
        schema={"type": "array", "minItems": 1},
        messages={
            "required": "At least one skill is required",
            "minItems": "At least one skill is required",
        },
        item=SKILL_ENTRY,
    ),
    FieldDefinition(
        name="message",
        label="Message",
        schema={"type": "string"},
        required=False,
    ),
])


__all__ = [
    "FieldDefinition",
    "FormSchema",
    "REGISTRATION_SCHEMA",
    "SKILL_ENTRY",
    "CONTACT_PATTERN",
    "EMAIL_PATTERN",
    "ROLE_VALUES",
    "not_blank",
    "TRIM_CHARACTERS",
]
