"""Bound inputs: a text field and a single-choice selector over a shared form state.

Both render to plain dicts the client turns into controls. While loading they
render a placeholder and neither register with nor write to the form.
"""
import logging
import re
from typing import Any, Callable, List, Optional, Sequence

from ratify.forms.errors import MissingControlError
from ratify.forms.state import FormControl
from ratify.models.playlist import GenreOption

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 2000
MAX_SAFE_INTEGER = 2**53 - 1
PLACEHOLDER = {"kind": "placeholder", "width": 50}

# Sign, digits, at most one decimal point; partial input like "-", "1." and "" is allowed
_SAFE_NUMBER = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)?$")

_UNSET = object()


def is_safe_number_value(text: Any) -> bool:
    """True if `text` is a number (or number still being typed) within safe integer range."""
    if text is None:
        return False
    text = str(text)
    if not _SAFE_NUMBER.match(text):
        return False
    digits = text.lstrip("+-")
    if digits in ("", "."):
        return True
    return abs(float(digits)) <= MAX_SAFE_INTEGER


class BoundField:
    """Common wiring for inputs bound to a path in the form state."""

    kind = "field"

    def __init__(
        self,
        name: str,
        control: FormControl,
        *,
        id: Optional[str] = None,
        label: Optional[str] = None,
        rules: Optional[dict] = None,
        value: Any = _UNSET,
        disabled: bool = False,
        is_loading: bool = False,
        on_change: Optional[Callable[[Any], None]] = None,
        on_blur: Optional[Callable[[Any], None]] = None,
        on_parent_change: Optional[Callable[[str, Any], None]] = None,
        on_parent_blur: Optional[Callable[[str, Any], None]] = None,
        is_invalid: Optional[Callable[[Optional[str]], bool]] = None,
        custom_error_message: str = "",
    ) -> None:
        if control is None:
            raise MissingControlError(f"Field {name or id!r} needs the form's control")
        self.name = name or f"{id}_field"
        self.id = id or self.name
        self.control = control
        self.label = label
        self.rules = rules
        self.disabled = disabled
        self.on_change = on_change
        self.on_blur = on_blur
        self.on_parent_change = on_parent_change
        self.on_parent_blur = on_parent_blur
        self.is_invalid = is_invalid or (lambda error: False)
        self.custom_error_message = custom_error_message
        self._pending = value
        self._is_loading = is_loading
        self._settle()

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @is_loading.setter
    def is_loading(self, loading: bool) -> None:
        self._is_loading = loading
        self._settle()

    @property
    def ready(self) -> bool:
        return not self._is_loading

    @property
    def required(self) -> bool:
        # rules["required"] may be a message string; any truthy value means required
        return bool(self.rules and self.rules.get("required"))

    def _settle(self) -> None:
        """Register once ready, then push a pending external value into the form."""
        if not self.ready:
            return
        if not self.control.is_registered(self.name):
            default = "" if self._pending is _UNSET or self._pending is None else self._pending
            self.control.register(self.name, self.rules, default=default)
        if self._pending is not _UNSET:
            value, self._pending = self._pending, _UNSET
            self.control.set_value(self.name, value)

    def sync(self, value: Any) -> None:
        """Externally-managed value changed; mirror it into the form state."""
        self._pending = value
        self._settle()

    @property
    def value(self) -> Any:
        value = self.control.get_value(self.name)
        return "" if value is None else value

    @property
    def error(self) -> Optional[str]:
        return self.control.error_for(self.name)

    def accepts(self, value: Any) -> bool:
        return True

    def change(self, value: Any) -> bool:
        """Apply a user edit. Returns False when the edit was rejected."""
        if not self.ready or self.disabled:
            return False
        if not self.accepts(value):
            logger.debug("Rejected %r for %s", value, self.name)
            return False
        self.control.set_value(self.name, value)
        if self.on_change:
            self.on_change(value)
        if self.on_parent_change:
            self.on_parent_change(self.id, value)
        return True

    def blur(self) -> None:
        if not self.ready:
            return
        self.control.mark_touched(self.name)
        value = self.value
        if self.on_blur:
            self.on_blur(value)
        # autosave hook only fires for valid input
        if self.error is None and self.on_parent_blur:
            self.on_parent_blur(self.id, value)

    def messages(self) -> List[str]:
        error = self.error
        out = []
        if error:
            out.append(error)
        if self.is_invalid(error):
            out.append(self.custom_error_message)
        return out

    def render(self) -> dict:
        if not self.ready:
            return dict(PLACEHOLDER)
        error = self.error
        return {
            "kind": self.kind,
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "required": self.required,
            "value": self.value,
            "error": error is not None or bool(self.is_invalid(error)),
            "messages": self.messages(),
            "disabled": self.disabled,
        }


class TextField(BoundField):
    """Single text input. With ``is_number_only`` only safe partial numbers get through."""

    kind = "text"

    def __init__(
        self,
        name: str,
        control: FormControl,
        *,
        is_number_only: bool = False,
        max_width: int = 75,
        full_width: bool = False,
        multiline: bool = False,
        text_align: str = "left",
        **kwargs,
    ) -> None:
        self.is_number_only = is_number_only
        self.max_width = max_width
        self.full_width = full_width
        self.multiline = multiline
        self.text_align = text_align
        super().__init__(name, control, **kwargs)

    def accepts(self, value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        if self.is_number_only:
            return is_safe_number_value(value) or value == "."
        return len(value) <= MAX_TEXT_LENGTH

    def render(self) -> dict:
        out = super().render()
        if out["kind"] == "placeholder":
            return out
        # Number inputs stay narrow; text may grow past max_width
        style = {"maxWidth": self.max_width} if self.is_number_only else {"minWidth": self.max_width}
        style["textAlign"] = self.text_align
        out.update(
            {
                "input_mode": "numeric" if self.is_number_only else "text",
                "max_length": None if self.is_number_only else MAX_TEXT_LENGTH,
                "style": style,
                "full_width": self.full_width,
                "multiline": self.multiline,
            }
        )
        return out


class SelectField(BoundField):
    """Single choice from an externally supplied option list."""

    kind = "select"

    def __init__(
        self,
        name: str,
        control: FormControl,
        *,
        options: Optional[Sequence[GenreOption]] = None,
        options_loading: bool = False,
        show_label: bool = True,
        **kwargs,
    ) -> None:
        self.options: List[GenreOption] = list(options or [])
        self._options_loading = options_loading
        self.show_label = show_label
        super().__init__(name, control, **kwargs)

    @property
    def ready(self) -> bool:
        return not self._is_loading and not self._options_loading

    @property
    def options_loading(self) -> bool:
        return self._options_loading

    def set_options(self, options: Optional[Sequence[GenreOption]], loading: bool = False) -> None:
        self.options = list(options or [])
        self._options_loading = loading
        self._settle()

    def accepts(self, value: Any) -> bool:
        return value in ("", None) or any(o.value == value for o in self.options)

    def render(self) -> dict:
        out = super().render()
        if out["kind"] == "placeholder":
            return out
        out["label"] = self.label if self.show_label else None
        out["options"] = [{"value": o.value, "label": o.label} for o in self.options]
        return out
