"""regform: schema-driven registration form runtime.

regform provides:
- A declarative form schema built on JSON Schema fragments
- A validation engine producing per-field, inline-ready error messages
- A dynamic skills list with stable entry identities and a minimum size of one
- A submission state machine (editing -> validating -> submitted -> editing)
- An event stream a view layer subscribes to for explicit redraws

Basic usage:
    >>> from regform import RegistrationForm
    >>> form = RegistrationForm()
    >>> for name, value in {
    ...     "firstName": "Ann", "lastName": "Lee", "email": "ann@x.com",
    ...     "contact": "1234567890", "role": "developer",
    ... }.items():
    ...     form.set_field(name, value)
    >>> _ = form.update_skill(0, "Go")
    >>> form.submit().is_valid
    True
    >>> form.submitted.skills
    ('Go',)
"""

__version__ = "0.1.0"

VERSION = (0, 1, 0)

from regform.form import RegistrationForm, SubmittedRecord
from regform.validation import ValidationEngine, ValidationResult

__all__ = [
    "__version__",
    "VERSION",
    "RegistrationForm",
    "SubmittedRecord",
    "ValidationEngine",
    "ValidationResult",
]
