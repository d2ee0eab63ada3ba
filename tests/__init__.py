"""Test suite for regform.

This package contains tests for:
- Validation engine (required fields, whitespace, email, contact, role, skills)
- Skills list controller (append, remove, update, identities)
- Phase state machine (valid and invalid transitions)
- Event system (emission, serialization)
- Form lifecycle integration and the text view
"""
