"""Validation engine for registration form records.

This module provides a ValidationEngine that checks a candidate record
against a FormSchema and produces a structured ValidationResult.

Fields are evaluated imperatively, one FieldDefinition at a time in schema
order. Each field's JSON Schema fragment is checked with jsonschema; the
highest priority failing keyword is translated into a FieldError carrying the
field's configured message. A field whose fragment passes then has its
refinement predicate applied. Array fields report list-level failures on the
field's own path and entry-level failures on "<field>.<index>.value"; the two
are independent slots and can both be present.

Validation is a pure function of the record: nothing is mutated and running
it twice on the same input gives equal results.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator

from regform.errors import FieldError, entry_path
from regform.schema import REGISTRATION_SCHEMA, FieldDefinition, FormSchema
from regform.types import FieldErrorCode


# When one value fails several keywords, the first keyword in this tuple wins.
KEYWORD_PRIORITY = (
    "type",
    "minLength",
    "minItems",
    "pattern",
    "format",
    "enum",
    "const",
    "maxLength",
    "maxItems",
)


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a candidate record.

    Absence of a path in ``errors`` means that field is valid. A result is
    produced fresh by every validation pass; results are never merged.

    Attributes:
        is_valid: Whether the record passed all checks
        errors: Field-level validation errors in schema order (empty if valid)
        missing_fields: Paths whose error code is REQUIRED
        invalid_fields: Paths that failed for any other reason

    Examples:
        >>> engine = ValidationEngine()
        >>> result = engine.validate({"firstName": "Ann"})
        >>> result.is_valid
        False
        >>> result.error_for("firstName") is None
        True
        >>> result.error_for("lastName")
        'Last Name is required'
    """
    is_valid: bool
    errors: List[FieldError]
    missing_fields: List[str] = field(default_factory=list)
    invalid_fields: List[str] = field(default_factory=list)

    @property
    def messages(self) -> Dict[str, str]:
        """Mapping from error path to its message, in schema order."""
        return {error.path: error.message for error in self.errors}

    def error_for(self, path: str) -> Optional[str]:
        """Return the message for ``path``, or None if that path is valid."""
        for error in self.errors:
            if error.path == path:
                return error.message
        return None

    def entry_errors(self, field_name: str = "skills") -> Dict[int, str]:
        """Return entry-level messages of an array field keyed by position."""
        prefix = f"{field_name}."
        result: Dict[int, str] = {}
        for error in self.errors:
            if not error.path.startswith(prefix):
                continue
            index = error.path[len(prefix):].split(".", 1)[0]
            if index.isdigit():
                result[int(index)] = error.message
        return result

    @property
    def skill_errors(self) -> Dict[int, str]:
        return self.entry_errors("skills")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "missingFields": list(self.missing_fields),
            "invalidFields": list(self.invalid_fields),
        }


class ValidationEngine:
    """Field-by-field validation engine for registration records.

    Wraps jsonschema and translates its errors into FieldErrors with the
    messages configured on each FieldDefinition.

    Attributes:
        schema: The FormSchema to validate against

    Examples:
        >>> engine = ValidationEngine()
        >>> result = engine.validate({
        ...     "firstName": "Ann", "lastName": "Lee", "email": "ann@x.com",
        ...     "contact": "1234567890", "role": "developer",
        ...     "skills": [{"value": "Go"}], "message": "",
        ... })
        >>> result.is_valid
        True
    """

    def __init__(self, schema: FormSchema = REGISTRATION_SCHEMA) -> None:
        self.schema = schema
        self._validators: Dict[str, Draft7Validator] = {}
        self._item_validators: Dict[str, Draft7Validator] = {}
        for definition in schema:
            self._validators[definition.name] = Draft7Validator(definition.schema)
            if definition.item is not None:
                self._item_validators[definition.name] = Draft7Validator(definition.item.schema)

    def validate(self, record: Any) -> ValidationResult:
        """Validate a candidate record.

        Args:
            record: Mapping of field name to value. Anything that is not a
                mapping is treated as an empty record.

        Returns:
            ValidationResult with is_valid flag and ordered errors
        """
        if not isinstance(record, Mapping):
            record = {}

        field_errors: List[FieldError] = []
        for definition in self.schema:
            value = record.get(definition.name)
            if definition.is_array:
                field_errors.extend(self._check_array(definition, value))
            else:
                error = self._check_value(
                    definition,
                    definition.name,
                    value,
                    self._validators[definition.name],
                )
                if error is not None:
                    field_errors.append(error)

        missing_fields = [e.path for e in field_errors if e.code == FieldErrorCode.REQUIRED]
        invalid_fields = [e.path for e in field_errors if e.code != FieldErrorCode.REQUIRED]

        return ValidationResult(
            is_valid=not field_errors,
            errors=field_errors,
            missing_fields=missing_fields,
            invalid_fields=invalid_fields,
        )

    def _check_value(
        self,
        definition: FieldDefinition,
        path: str,
        value: Any,
        validator: Draft7Validator,
    ) -> Optional[FieldError]:
        """Check one value against its definition; at most one error per path."""
        if value is None:
            if not definition.required:
                return None
            return FieldError(
                path=path,
                code=FieldErrorCode.REQUIRED,
                message=definition.required_message,
                expected="required field",
            )

        errors = list(validator.iter_errors(value))
        if errors:
            return self._translate_error(definition, path, _first_error(errors))

        if definition.refine is not None and not definition.refine(value):
            return FieldError(
                path=path,
                code=definition.refine_code,
                message=definition.refine_message or f"Field '{path}' is invalid",
                received=value,
            )
        return None

    def _check_array(self, definition: FieldDefinition, value: Any) -> List[FieldError]:
        """Check an array field: the list itself, then every entry."""
        if value is None:
            if not definition.required:
                return []
            return [
                FieldError(
                    path=definition.name,
                    code=FieldErrorCode.REQUIRED,
                    message=definition.required_message,
                    expected="required field",
                )
            ]

        results: List[FieldError] = []
        errors = list(self._validators[definition.name].iter_errors(value))
        if errors:
            first = _first_error(errors)
            results.append(self._translate_error(definition, definition.name, first))
            if first.validator == "type":
                return results

        item = definition.item
        item_validator = self._item_validators[definition.name]
        for index, entry in enumerate(value):
            error = self._check_value(
                item,
                entry_path(definition.name, index, item.name),
                _entry_value(entry, item.name),
                item_validator,
            )
            if error is not None:
                results.append(error)
        return results

    def _translate_error(
        self,
        definition: FieldDefinition,
        path: str,
        error: jsonschema.ValidationError,
    ) -> FieldError:
        """Translate a jsonschema ValidationError into a FieldError.

        The message configured on the definition for the failing keyword wins;
        otherwise a generic message is built from the error.

        Error mapping:
            - 'type' errors -> INVALID_TYPE
            - 'minLength' on an empty string -> REQUIRED, otherwise TOO_SHORT
            - 'minItems' errors -> TOO_SHORT
            - 'maxLength' / 'maxItems' errors -> TOO_LONG
            - 'pattern' / 'format' errors -> INVALID_FORMAT
            - 'enum' / 'const' errors -> INVALID_VALUE
            - Other constraint errors -> CUSTOM
        """
        configured = definition.message_for(error.validator)

        if error.validator == "type":
            expected_type = error.validator_value
            received_type = type(error.instance).__name__
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_TYPE,
                message=configured or (
                    f"Field '{path}' has invalid type. Expected {expected_type}, got {received_type}"
                ),
                expected=expected_type,
                received=received_type,
            )

        if error.validator == "minLength":
            min_length = error.validator_value
            actual_length = len(error.instance)
            if actual_length == 0:
                return FieldError(
                    path=path,
                    code=FieldErrorCode.REQUIRED,
                    message=configured or definition.required_message,
                    expected="required field",
                )
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_SHORT,
                message=configured or (
                    f"Field '{path}' is too short. Minimum length: {min_length}, got: {actual_length}"
                ),
                expected=f"minimum {min_length} characters",
                received=f"{actual_length} characters",
            )

        if error.validator == "minItems":
            min_items = error.validator_value
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_SHORT,
                message=configured or (
                    f"Field '{path}' needs at least {min_items} entries, got: {len(error.instance)}"
                ),
                expected=f"minimum {min_items} entries",
                received=f"{len(error.instance)} entries",
            )

        if error.validator in ("maxLength", "maxItems"):
            max_size = error.validator_value
            unit = "characters" if error.validator == "maxLength" else "entries"
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_LONG,
                message=configured or (
                    f"Field '{path}' is too long. Maximum length: {max_size}, got: {len(error.instance)}"
                ),
                expected=f"maximum {max_size} {unit}",
                received=f"{len(error.instance)} {unit}",
            )

        if error.validator in ("pattern", "format"):
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_FORMAT,
                message=configured or (
                    f"Field '{path}' has invalid format. Expected {error.validator}: {error.validator_value}"
                ),
                expected=f"{error.validator}: {error.validator_value}",
                received=error.instance,
            )

        if error.validator in ("enum", "const"):
            expected_values = error.validator_value
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=configured or (
                    f"Field '{path}' has invalid value. Must be one of: {expected_values}"
                ),
                expected=expected_values,
                received=error.instance,
            )

        return FieldError(
            path=path,
            code=FieldErrorCode.CUSTOM,
            message=configured or f"Field '{path}' validation failed: {error.message}",
            expected=error.validator_value,
            received=error.instance,
        )


def _first_error(errors: List[jsonschema.ValidationError]) -> jsonschema.ValidationError:
    def rank(error: jsonschema.ValidationError) -> int:
        try:
            return KEYWORD_PRIORITY.index(error.validator)
        except ValueError:
            return len(KEYWORD_PRIORITY)

    return min(errors, key=rank)


def _entry_value(entry: Any, key: str) -> Any:
    """Pull the value out of one array entry.

    Entries may be mappings ({"value": "Go"}), objects exposing the key as an
    attribute (SkillEntry) or bare values.
    """
    if isinstance(entry, Mapping):
        return entry.get(key)
    if hasattr(entry, key):
        return getattr(entry, key)
    return entry


__all__ = [
    "ValidationEngine",
    "ValidationResult",
    "KEYWORD_PRIORITY",
]
