from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .parsing import is_missing

_MISSING = object()


def resolve_path(source: Any, path: str) -> Any:
    """Walk a dotted path through nested mappings; ``None`` on any dead end."""
    node = source
    for part in path.split("."):
        if is_missing(node):
            return None
        if isinstance(node, Mapping):
            node = node.get(part, _MISSING)
        elif isinstance(node, (list, tuple)) and part.isdigit():
            position = int(part)
            node = node[position] if position < len(node) else _MISSING
        else:
            return None
        if node is _MISSING:
            return None
    return None if is_missing(node) else node


def pick_path(source: Optional[Mapping[str, Any]], paths: Sequence[str]) -> Any:
    if not isinstance(source, Mapping):
        return None
    for path in paths:
        value = resolve_path(source, path)
        if value is not None:
            return value
    return None
