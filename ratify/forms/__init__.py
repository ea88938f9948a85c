"""Recommendation editor core: form state, bound fields, song rows, controller."""
from ratify.forms.controller import (
    FormStatus,
    RecommendationFormController,
    SubmitOutcome,
    UpsertResult,
)
from ratify.forms.fields import SelectField, TextField, is_safe_number_value
from ratify.forms.notifications import NotificationChannel, Toast
from ratify.forms.rows import SuggestionRows
from ratify.forms.state import FormControl, FormState

__all__ = [
    "FormControl",
    "FormState",
    "FormStatus",
    "NotificationChannel",
    "RecommendationFormController",
    "SelectField",
    "SubmitOutcome",
    "SuggestionRows",
    "TextField",
    "Toast",
    "UpsertResult",
    "is_safe_number_value",
]
