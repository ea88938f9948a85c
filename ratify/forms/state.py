"""Form state tree: values, baseline, validation rules, dirty/touched tracking.

One ``FormState`` exists per editor session and is owned by its controller.
Bound fields never see the ``FormState`` itself; they are handed its
``control`` and go through that for every read and write.
"""
import copy
from typing import Any, Dict, Optional, Set

from ratify.forms.paths import MISSING, delete_in, format_path, get_in, parse_path, set_in


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None or value == [] or value == {}


def validate_value(value: Any, rules: Optional[dict]) -> Optional[str]:
    """Return the first failing rule's message, or None.

    ``required`` may be a message string or just truthy. ``max_length`` caps
    string length.
    """
    if not rules:
        return None
    required = rules.get("required")
    if required and _is_empty(value):
        return required if isinstance(required, str) else "This field is required."
    max_length = rules.get("max_length")
    if max_length is not None and isinstance(value, str) and len(value) > max_length:
        return f"Must be at most {max_length} characters."
    return None


class FormState:
    def __init__(self, values: Optional[dict] = None) -> None:
        self._values: dict = copy.deepcopy(values) if values else {}
        self._baseline: dict = copy.deepcopy(self._values)
        self._rules: Dict[str, dict] = {}
        self._defaults: Dict[str, Any] = {}
        self._errors: Dict[str, str] = {}
        self._touched: Set[str] = set()
        self.control = FormControl(self)

    # --- registration -------------------------------------------------------

    def register(self, path: str, rules: Optional[dict] = None, default: Any = "") -> None:
        """Declare a field. An absent path gets `default` in both values and baseline."""
        key = format_path(parse_path(path))
        if rules:
            self._rules[key] = dict(rules)
        self._defaults[key] = default
        self._apply_default(key, default)

    def unregister(self, prefix: str) -> None:
        """Forget rules, errors and touched state for `prefix` and everything under it."""
        prefix = format_path(parse_path(prefix))

        def under(key: str) -> bool:
            return key == prefix or key.startswith(prefix + ".") or key.startswith(prefix + "[")

        for table in (self._rules, self._defaults, self._errors):
            for key in [k for k in table if under(k)]:
                del table[key]
        self._touched = {k for k in self._touched if not under(k)}

    def is_registered(self, path: str) -> bool:
        return format_path(parse_path(path)) in self._defaults

    def is_required(self, path: str) -> bool:
        rules = self._rules.get(format_path(parse_path(path))) or {}
        return bool(rules.get("required"))

    def _apply_default(self, key: str, default: Any) -> None:
        parts = parse_path(key)
        # Defaults fill keys inside existing rows; they never create list rows
        if any(isinstance(p, int) for p in parts) and not isinstance(get_in(self._values, parts[:-1]), dict):
            return
        if get_in(self._values, key) is MISSING and get_in(self._baseline, key) is MISSING:
            set_in(self._values, key, copy.deepcopy(default))
            set_in(self._baseline, key, copy.deepcopy(default))

    # --- values -------------------------------------------------------------

    def get_value(self, path: str, default: Any = None) -> Any:
        value = get_in(self._values, path)
        return default if value is MISSING else value

    def set_value(self, path: str, value: Any, should_validate: bool = True) -> None:
        set_in(self._values, path, value)
        if should_validate:
            self.trigger(path)

    def append(self, list_path: str, item: Any) -> int:
        """Append to the list at `list_path` (created if absent). Returns the new index."""
        items = get_in(self._values, list_path)
        if not isinstance(items, list):
            items = []
            set_in(self._values, list_path, items)
        items.append(copy.deepcopy(item))
        return len(items) - 1

    def remove(self, list_path: str, index: int) -> Any:
        """Pop element `index` of the list at `list_path` from the values."""
        items = get_in(self._values, list_path)
        if not isinstance(items, list) or not 0 <= index < len(items):
            raise IndexError(f"{list_path}[{index}] does not exist")
        removed = items[index]
        delete_in(self._values, f"{list_path}[{index}]")
        return removed

    def get_values(self) -> dict:
        """Deep copy of the current tree; this is what gets submitted."""
        return copy.deepcopy(self._values)

    def reset(self, values: Optional[dict] = None) -> None:
        """Replace values and baseline wholesale; clears errors and touched state."""
        self._values = copy.deepcopy(values) if values else {}
        self._baseline = copy.deepcopy(self._values)
        self._errors.clear()
        self._touched.clear()
        for key, default in self._defaults.items():
            self._apply_default(key, default)

    # --- status -------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self._values != self._baseline

    def is_field_dirty(self, path: str) -> bool:
        return get_in(self._values, path) != get_in(self._baseline, path)

    @property
    def is_valid(self) -> bool:
        for key, rules in self._rules.items():
            if validate_value(self.get_value(key), rules) is not None:
                return False
        return True

    def trigger(self, path: Optional[str] = None) -> bool:
        """Validate one path (or every ruled path) and record its errors."""
        keys = [format_path(parse_path(path))] if path else list(self._rules)
        ok = True
        for key in keys:
            message = validate_value(self.get_value(key), self._rules.get(key))
            if message is None:
                self._errors.pop(key, None)
            else:
                self._errors[key] = message
                ok = False
        return ok

    def error_for(self, path: str) -> Optional[str]:
        return self._errors.get(format_path(parse_path(path)))

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    def mark_touched(self, path: str) -> None:
        self._touched.add(format_path(parse_path(path)))

    def is_touched(self, path: str) -> bool:
        return format_path(parse_path(path)) in self._touched


class FormControl:
    """The capability bound fields use to reach a ``FormState``."""

    def __init__(self, state: FormState) -> None:
        self._state = state

    def register(self, path: str, rules: Optional[dict] = None, default: Any = "") -> None:
        self._state.register(path, rules, default)

    def is_registered(self, path: str) -> bool:
        return self._state.is_registered(path)

    def is_required(self, path: str) -> bool:
        return self._state.is_required(path)

    def get_value(self, path: str, default: Any = None) -> Any:
        return self._state.get_value(path, default)

    def set_value(self, path: str, value: Any) -> None:
        self._state.set_value(path, value)

    def append(self, list_path: str, item: Any) -> int:
        return self._state.append(list_path, item)

    def remove(self, list_path: str, index: int) -> Any:
        return self._state.remove(list_path, index)

    def unregister(self, prefix: str) -> None:
        self._state.unregister(prefix)

    def error_for(self, path: str) -> Optional[str]:
        return self._state.error_for(path)

    def mark_touched(self, path: str) -> None:
        self._state.mark_touched(path)
