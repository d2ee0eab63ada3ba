"""RegistrationForm orchestrator.

This module provides the RegistrationForm class that owns the form state
(scalar field values and the skills list), binds it to the validation engine
and drives the submission lifecycle through the phase state machine.

All operations are synchronous. Each mutation emits a FormEvent so a view
layer can redraw; a submit attempt either accepts the whole record or none of
it.

Usage:
    >>> form = RegistrationForm()
    >>> form.set_field("firstName", "Ann")
    >>> result = form.submit()
    >>> result.is_valid
    False
    >>> form.error_for("lastName")
    'Last Name is required'
    >>> form.get_field("firstName")
    'Ann'
"""

import json
import logging
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Tuple

from regform.errors import UnknownFieldError
from regform.events import EventEmitter, FormEvent
from regform.schema import REGISTRATION_SCHEMA, FormSchema
from regform.skills import SkillEntry, SkillList
from regform.state_machine import FormStateMachine
from regform.types import CandidateRecord, EventType, FormPhase
from regform.validation import ValidationEngine, ValidationResult

logger = logging.getLogger(__name__)


SKILLS_FIELD = "skills"

DEFAULT_MAX_EVENTS = 500


@dataclass(frozen=True)
class SubmittedRecord:
    """Immutable snapshot of a successfully validated record.

    Attributes:
        first_name: First name as entered
        last_name: Last name as entered
        email: Email address
        contact: Ten-digit contact number
        role: Selected role value
        skills: Skill values in display order
        message: Optional free-text message

    Examples:
        >>> record = SubmittedRecord.from_dict({
        ...     "firstName": "Ann", "lastName": "Lee", "email": "ann@x.com",
        ...     "contact": "1234567890", "role": "developer",
        ...     "skills": [{"value": "Go"}], "message": "",
        ... })
        >>> record.skills
        ('Go',)
    """
    first_name: str
    last_name: str
    email: str
    contact: str
    role: str
    skills: Tuple[str, ...]
    message: Optional[str] = None

    def to_dict(self) -> CandidateRecord:
        """Convert to the camelCase record shape."""
        result: CandidateRecord = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "contact": self.contact,
            "role": self.role,
            "skills": [{"value": value} for value in self.skills],
        }
        if self.message is not None:
            result["message"] = self.message
        return result

    def to_json(self, indent: int = 2) -> str:
        """Pretty JSON as shown in the success panel."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubmittedRecord":
        """Create SubmittedRecord from the camelCase record shape."""
        skills = []
        for entry in data.get("skills", []):
            skills.append(entry["value"] if isinstance(entry, dict) else entry)
        return cls(
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=data["email"],
            contact=data["contact"],
            role=data["role"],
            skills=tuple(skills),
            message=data.get("message"),
        )


class RegistrationForm:
    """Orchestrator for the registration form lifecycle.

    Owns the form state exclusively. Callers mutate it through set_field and
    the skill operations, then call submit.

    Attributes:
        form_id: Unique identifier for this form instance
        schema: FormSchema the form validates against
        emitter: EventEmitter notified of every mutation and phase change

    Examples:
        >>> form = RegistrationForm(form_id="form_demo")
        >>> form.phase
        <FormPhase.EDITING: 'editing'>
        >>> len(form.skills)
        1
    """

    def __init__(
        self,
        schema: FormSchema = REGISTRATION_SCHEMA,
        emitter: Optional[EventEmitter] = None,
        form_id: Optional[str] = None,
        max_events: int = DEFAULT_MAX_EVENTS,
    ):
        """Initialize the form.

        Args:
            schema: Field definitions; must define the registration fields
            emitter: Event emitter to notify; a private one is created if None
            form_id: Identifier used on emitted events; generated if None
            max_events: How many recent events get_events keeps
        """
        self.form_id = form_id or f"form_{uuid.uuid4().hex[:16]}"
        self.schema = schema
        self.emitter = emitter if emitter is not None else EventEmitter()
        self._engine = ValidationEngine(schema)
        self._state_machine = FormStateMachine(form_id=self.form_id, record_events=False)
        self._values: Dict[str, Any] = {}
        self._lists: Dict[str, SkillList] = {}
        self._errors: Optional[ValidationResult] = None
        self._submitted: Optional[SubmittedRecord] = None
        self._events: Deque[FormEvent] = deque(maxlen=max_events)
        self._clear_state()

    @property
    def phase(self) -> FormPhase:
        return self._state_machine.state

    @property
    def errors(self) -> Optional[ValidationResult]:
        """Result of the latest failed submit, or None."""
        return self._errors

    @property
    def submitted(self) -> Optional[SubmittedRecord]:
        """Snapshot from the latest successful submit, or None."""
        return self._submitted

    @property
    def skills(self) -> SkillList:
        return self.entries(SKILLS_FIELD)

    def entries(self, name: str) -> SkillList:
        """Entry list backing the array field ``name``.

        Raises:
            UnknownFieldError: If ``name`` is not an array field of the schema
        """
        if name not in self._lists:
            raise UnknownFieldError(name)
        return self._lists[name]

    def error_for(self, path: str) -> Optional[str]:
        """Inline message to display for ``path``, if any."""
        if self._errors is None:
            return None
        return self._errors.error_for(path)

    def get_field(self, name: str) -> Any:
        if name not in self._values:
            raise UnknownFieldError(name)
        return self._values[name]

    def set_field(self, name: str, value: Any) -> None:
        """Set the value of a scalar field.

        Raises:
            UnknownFieldError: If ``name`` is not a scalar field of the schema
        """
        if name not in self._values:
            raise UnknownFieldError(name)
        self._values[name] = value
        self._emit(EventType.FIELD_UPDATED, {"field": name})

    def append_skill(self, value: str = "") -> SkillEntry:
        entry = self.skills.append(value)
        self._emit(
            EventType.SKILL_APPENDED,
            {"index": len(self.skills) - 1, "entryId": entry.id},
        )
        return entry

    def remove_skill(self, index: int) -> bool:
        """Remove the skill at ``index``; a no-op returning False on the last one."""
        entry = self.skills[index]
        removed = self.skills.remove(index)
        if removed:
            self._emit(EventType.SKILL_REMOVED, {"index": index, "entryId": entry.id})
        return removed

    def update_skill(self, index: int, value: str) -> SkillEntry:
        entry = self.skills.update(index, value)
        self._emit(EventType.SKILL_UPDATED, {"index": index, "entryId": entry.id})
        return entry

    def candidate(self) -> Dict[str, Any]:
        """Current values in the record shape, in schema order."""
        record: Dict[str, Any] = {}
        for definition in self.schema:
            if definition.is_array:
                record[definition.name] = self._lists[definition.name].to_list()
            else:
                record[definition.name] = self._values[definition.name]
        return record

    def validate(self) -> ValidationResult:
        """Check the current values without touching the displayed errors."""
        return self._engine.validate(self.candidate())

    def submit(self) -> ValidationResult:
        """Validate the current values and, if they pass, accept them.

        On success the snapshot is stored in ``submitted``, the form state goes
        back to its initial values and ``errors`` is cleared. On failure the
        values are kept and ``errors`` holds the fresh result. Either way the
        form ends in the EDITING phase.

        Returns:
            The ValidationResult of this attempt
        """
        self._transition(FormPhase.VALIDATING)
        record = self.candidate()
        result = self._engine.validate(record)

        if not result.is_valid:
            self._errors = result
            self._transition(FormPhase.EDITING, {"errors": result.messages})
            logger.debug(
                "Form %s failed validation on: %s",
                self.form_id,
                ", ".join(e.path for e in result.errors),
            )
            return result

        self._submitted = SubmittedRecord.from_dict(record)
        self._transition(FormPhase.SUBMITTED)
        self._emit(EventType.FORM_SUBMITTED, {"record": self._submitted.to_dict()})
        logger.info("Form %s submitted", self.form_id)

        self._clear_state()
        self._transition(FormPhase.EDITING)
        return result

    def reset(self) -> None:
        """Restore the initial values and clear errors. ``submitted`` is kept."""
        self._clear_state()
        self._emit(EventType.FORM_RESET)

    def get_events(self) -> List[FormEvent]:
        """Most recent events emitted by this form, oldest first."""
        return list(self._events)

    def _clear_state(self) -> None:
        self._values = {name: "" for name in self.schema.scalar_names}
        for name in self.schema.array_names:
            if name in self._lists:
                self._lists[name].reset()
            else:
                self._lists[name] = SkillList()
        self._errors = None

    def _transition(self, target: FormPhase, payload: Optional[Dict[str, Any]] = None) -> None:
        event = self._state_machine.transition_to(target, payload)
        self._dispatch(event)

    def _emit(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> None:
        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            form_id=self.form_id,
            ts=datetime.now(timezone.utc),
            phase=self.phase,
            payload=payload,
        )
        self._dispatch(event)

    def _dispatch(self, event: FormEvent) -> None:
        self._events.append(event)
        self.emitter.emit(event)


__all__ = [
    "RegistrationForm",
    "SubmittedRecord",
    "SKILLS_FIELD",
]
