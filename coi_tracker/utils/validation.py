# COMPONENT: FORM VALIDATION HELPERS
# REQUIREMENTS SATISFIED: email shape check for record forms
"""
coi_tracker/utils/validation.py

Small form helpers used by the HTTP layer. The store itself never
validates free-text fields.
"""
import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))
