"""Form phase state machine.

The orchestrator moves through three phases:

    EDITING --submit--> VALIDATING --pass--> SUBMITTED --reset--> EDITING
                                   --fail--> EDITING

The state machine enforces those transitions and records one FormEvent per
transition.

Usage:
    >>> sm = FormStateMachine(form_id="form_123")
    >>> sm.state
    <FormPhase.EDITING: 'editing'>
    >>> _ = sm.transition_to(FormPhase.VALIDATING)
    >>> sm.state
    <FormPhase.VALIDATING: 'validating'>
    >>> len(sm.get_events())
    1
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple
import uuid

from regform.events import FormEvent
from regform.types import EventType, FormPhase


class InvalidStateTransitionError(Exception):
    """Raised when attempting a phase change the state machine does not allow.

    Attributes:
        current_state: The phase before the attempted transition
        target_state: The phase that was attempted
    """

    def __init__(self, current_state: FormPhase, target_state: FormPhase, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


VALID_TRANSITIONS: Dict[FormPhase, Set[FormPhase]] = {
    FormPhase.EDITING: {FormPhase.VALIDATING},
    FormPhase.VALIDATING: {FormPhase.EDITING, FormPhase.SUBMITTED},
    FormPhase.SUBMITTED: {FormPhase.EDITING},
}


TRANSITION_EVENT_TYPES: Dict[Tuple[FormPhase, FormPhase], EventType] = {
    (FormPhase.EDITING, FormPhase.VALIDATING): EventType.SUBMIT_REQUESTED,
    (FormPhase.VALIDATING, FormPhase.EDITING): EventType.VALIDATION_FAILED,
    (FormPhase.VALIDATING, FormPhase.SUBMITTED): EventType.VALIDATION_PASSED,
    (FormPhase.SUBMITTED, FormPhase.EDITING): EventType.FORM_RESET,
}


@dataclass
class FormStateMachine:
    """Phase tracker for one form instance.

    Attributes:
        form_id: Identifier of the form this machine belongs to
        state: Current phase
        record_events: Whether transition events are kept for get_events;
            an owner that keeps its own event log turns this off

    Examples:
        >>> sm = FormStateMachine(form_id="form_1")
        >>> sm.can_transition_to(FormPhase.SUBMITTED)
        False
    """

    form_id: str
    state: FormPhase = FormPhase.EDITING
    record_events: bool = True
    _events: List[FormEvent] = field(default_factory=list, init=False, repr=False)

    def can_transition_to(self, target_state: FormPhase) -> bool:
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(
        self,
        target_state: FormPhase,
        payload: Optional[Dict[str, Any]] = None,
    ) -> FormEvent:
        """Move to ``target_state`` and record the transition event.

        Args:
            target_state: The phase to move to
            payload: Extra data merged into the event payload

        Returns:
            The event recorded for this transition

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.state]))}"
                ),
            )

        old_state = self.state
        self.state = target_state
        return self._record_event(old_state, target_state, payload)

    def _record_event(
        self,
        old_state: FormPhase,
        new_state: FormPhase,
        payload: Optional[Dict[str, Any]],
    ) -> FormEvent:
        event_payload: Dict[str, Any] = {
            "from_state": old_state.value,
            "to_state": new_state.value,
        }
        if payload:
            event_payload.update(payload)

        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=TRANSITION_EVENT_TYPES[(old_state, new_state)],
            form_id=self.form_id,
            ts=datetime.now(timezone.utc),
            phase=new_state,
            payload=event_payload,
        )
        if self.record_events:
            self._events.append(event)
        return event

    def get_events(self) -> List[FormEvent]:
        """Return the transition events in chronological order."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the state machine to a dictionary.

        Examples:
            >>> FormStateMachine(form_id="form_1").to_dict()
            {'formId': 'form_1', 'state': 'editing'}
        """
        return {
            "formId": self.form_id,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormStateMachine":
        return cls(form_id=data["formId"], state=FormPhase(data["state"]))


__all__ = [
    "FormStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
    "TRANSITION_EVENT_TYPES",
]
