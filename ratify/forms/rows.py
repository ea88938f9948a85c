"""Song suggestion rows: an ordered, resizable list of (title, artist) editors."""
import itertools
import logging
from typing import List, Optional

from ratify.forms.fields import TextField
from ratify.forms.state import FormControl
from ratify.models.recommendation import Suggestion

logger = logging.getLogger(__name__)

EMPTY_ROW = {"title": "", "artist": ""}


class SuggestionRows:
    """Rows live in the form state as a list at ``path``; each row also gets a stable key.

    Removing a row pops its values out of the form state in the same step, so a
    removed row never reappears in the submitted payload.
    """

    def __init__(self, control: FormControl, path: str = "suggestions") -> None:
        self.control = control
        self.path = path
        self._keys: List[int] = []
        self._next_key = itertools.count()

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> List[int]:
        return list(self._keys)

    def _items(self) -> list:
        items = self.control.get_value(self.path)
        return items if isinstance(items, list) else []

    def seed(self) -> None:
        """Rebuild row keys from whatever list the form state currently holds."""
        self.control.unregister(self.path)
        self._keys = [next(self._next_key) for _ in self._items()]

    def add(self) -> int:
        """Append an empty row; returns its index."""
        index = self.control.append(self.path, EMPTY_ROW)
        self._keys.append(next(self._next_key))
        return index

    def remove(self, index: Optional[int] = None) -> bool:
        """Remove the row at `index` (last row by default). False if there are no rows."""
        if not self._keys:
            return False
        if index is None:
            index = len(self._keys) - 1
        if not 0 <= index < len(self._keys):
            raise IndexError(f"No suggestion row {index}")
        self.control.remove(self.path, index)
        key = self._keys.pop(index)
        logger.debug("Removed suggestion row %d (key %d)", index, key)
        # Indices after `index` shifted; bound paths re-register on next render
        self.control.unregister(self.path)
        return True

    def values(self) -> List[Suggestion]:
        return [Suggestion.from_dict(item) for item in self._items()]

    def fields(self, index: int, is_loading: bool = False, disabled: bool = False) -> tuple:
        base = f"{self.path}[{index}]"
        title = TextField(
            f"{base}.title",
            self.control,
            id=f"{base}.title",
            full_width=True,
            is_loading=is_loading,
            disabled=disabled,
        )
        artist = TextField(
            f"{base}.artist",
            self.control,
            id=f"{base}.artist",
            full_width=True,
            is_loading=is_loading,
            disabled=disabled,
        )
        return title, artist

    def render(self, is_loading: bool = False, disabled: bool = False) -> List[dict]:
        rows = []
        for index, key in enumerate(self._keys):
            title, artist = self.fields(index, is_loading, disabled)
            rows.append({"key": key, "index": index, "title": title.render(), "artist": artist.render()})
        return rows
