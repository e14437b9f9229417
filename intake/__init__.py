"""Incident intake core for barangay-level disaster reporting.

Headless state, validation and submission for the multi-step incident
report form: an incident draft with nested families and members, a
two-step wizard, and a single authenticated write to the backend API.
"""

__version__ = "1.0.0"
