"""Errors raised by the form layer."""


class FormError(Exception):
    """Base class for editor/form errors."""


class MissingControlError(FormError, TypeError):
    """A bound field was created without the form's control capability."""


class UnknownFieldError(FormError, KeyError):
    """No field is bound at the requested path."""
