"""Field paths such as ``name`` or ``suggestions[2].artist`` over nested dict/list trees."""
import re
from typing import Any, Tuple, Union

Part = Union[str, int]

_TOKEN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")

MISSING = object()


def parse_path(path: str) -> Tuple[Part, ...]:
    """Split a path into keys (str) and list indices (int).

    >>> parse_path("suggestions[2].artist")
    ('suggestions', 2, 'artist')
    """
    if not path:
        raise ValueError("Empty field path")
    parts: list = []
    pos = 0
    while pos < len(path):
        if path[pos] == "." and parts and pos + 1 < len(path) and path[pos + 1] != "[":
            pos += 1
        m = _TOKEN.match(path, pos)
        if m is None:
            raise ValueError(f"Malformed field path: {path!r}")
        key, index = m.groups()
        parts.append(int(index) if index is not None else key)
        pos = m.end()
    return tuple(parts)


def format_path(parts) -> str:
    out = ""
    for part in parts:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else part
    return out


def _as_parts(path) -> Tuple[Part, ...]:
    return parse_path(path) if isinstance(path, str) else tuple(path)


def get_in(tree: Any, path, default: Any = MISSING) -> Any:
    """Value at path, or `default` when any step is missing."""
    current = tree
    for part in _as_parts(path):
        if isinstance(part, int):
            if not isinstance(current, list) or part >= len(current):
                return default
        elif not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_in(tree: dict, path, value: Any) -> None:
    """Write value at path, creating dicts/lists on the way. Lists are padded with {}."""
    parts = _as_parts(path)
    current = tree
    for part, nxt in zip(parts, parts[1:]):
        empty = [] if isinstance(nxt, int) else {}
        if isinstance(part, int):
            while len(current) <= part:
                current.append({})
            if not isinstance(current[part], (dict, list)):
                current[part] = empty
        elif not isinstance(current.get(part), (dict, list)):
            current[part] = empty
        current = current[part]
    last = parts[-1]
    if isinstance(last, int):
        while len(current) <= last:
            current.append({})
    current[last] = value


def delete_in(tree: dict, path) -> bool:
    """Remove the key / pop the list element at path. Returns False if absent."""
    parts = _as_parts(path)
    parent = get_in(tree, parts[:-1]) if len(parts) > 1 else tree
    last = parts[-1]
    if isinstance(last, int):
        if not isinstance(parent, list) or last >= len(parent):
            return False
        parent.pop(last)
        return True
    if not isinstance(parent, dict) or last not in parent:
        return False
    del parent[last]
    return True
