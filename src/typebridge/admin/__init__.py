"""API key administration surface."""

from typebridge.admin.forms import ApiKeysForm, FieldError, FieldSpec, Outcome, Severity
from typebridge.admin.keys import KeyAdministration, KeyRow, format_expires_at, split_list

__all__ = [
    "ApiKeysForm",
    "FieldError",
    "FieldSpec",
    "KeyAdministration",
    "KeyRow",
    "Outcome",
    "Severity",
    "format_expires_at",
    "split_list",
]
