"""Plain-text view of a RegistrationForm.

Draws the same controls the form exposes, top to bottom: each input with its
current value and inline error, the role select options, the numbered skill
inputs with their remove control, the optional message and, once a record has
been accepted, the success panel with the record as pretty JSON.

A UI layer subscribes to ``form.emitter`` and calls ``render_form`` again on
every event.
"""

from typing import Any, List

from regform.form import RegistrationForm, SubmittedRecord
from regform.errors import entry_path
from regform.types import ROLE_OPTIONS

TITLE = "User Registration Form"
SUCCESS_HEADING = "Form submitted successfully!"

PLACEHOLDERS = {
    "firstName": "First Name",
    "lastName": "Last Name",
    "email": "Email",
    "contact": "Contact Number",
    "role": "Role",
    "message": "Message (optional)",
}


def _display(value: Any) -> str:
    return "" if value is None else str(value)


def render_success(record: SubmittedRecord) -> str:
    """Success panel for an accepted record."""
    return f"{SUCCESS_HEADING}\n{record.to_json()}"


def render_form(form: RegistrationForm) -> str:
    """Render the whole form, including the success panel when present."""
    lines: List[str] = [TITLE, "=" * len(TITLE)]

    for definition in form.schema:
        name = definition.name
        if definition.is_array:
            lines.append(f"{definition.label}:")
            entries = form.entries(name)
            item_label = definition.item.label
            disabled = "" if entries.can_remove else " (disabled)"
            for index, entry in enumerate(entries):
                lines.append(
                    f"  [{entry.id}] {item_label} {index + 1}: {entry.value} [X{disabled}]"
                )
                message = form.error_for(entry_path(name, index, definition.item.name))
                if message:
                    lines.append(f"    ! {message}")
            lines.append(f"  [Add {item_label}]")
            message = form.error_for(name)
            if message:
                lines.append(f"  ! {message}")
            continue

        label = PLACEHOLDERS.get(name, definition.label)
        value = _display(form.get_field(name))
        if name == "role":
            options = ", ".join(
                f"*{text}" if option == value else text for option, text in ROLE_OPTIONS
            )
            lines.append(f"{label}: {value} ({options})")
        else:
            lines.append(f"{label}: {value}")
        message = form.error_for(name)
        if message:
            lines.append(f"  ! {message}")

    lines.append("[Submit]")

    if form.submitted is not None:
        lines.append("")
        lines.append(render_success(form.submitted))

    return "\n".join(lines)


__all__ = [
    "render_form",
    "render_success",
    "SUCCESS_HEADING",
]
