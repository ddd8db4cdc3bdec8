"""Property tree resolution against job spec defaults."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping

from ..core.errors import MissingPropertyError
from ..core.models import JobSpec

logger = logging.getLogger(__name__)

_MISSING = object()


def lookup(tree: Mapping[str, Any], path: str) -> Any:
    """Walk a nested mapping along a dotted path.

    Args:
        tree: Nested property mapping
        path: Dotted path (e.g., "api.tls.cn")

    Returns:
        The value at ``path``, or a sentinel when any segment is absent or null.
    """
    node: Any = tree
    for segment in path.split("."):
        if not isinstance(node, Mapping) or segment not in node:
            return _MISSING
        node = node[segment]
    if node is None:
        return _MISSING
    return node


def is_missing(value: Any) -> bool:
    return value is _MISSING


def _assign(tree: dict[str, Any], path: str, value: Any) -> None:
    segments = path.split(".")
    node = tree
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def resolve_properties(spec: JobSpec, supplied: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge supplied properties over the defaults declared in a job spec.

    Only declared properties survive; everything else in ``supplied`` is
    dropped. Values are deep-copied so templates never see caller objects.

    Args:
        spec: Job spec declaring the properties
        supplied: Nested property tree given to the render call

    Returns:
        Nested property tree holding every declared property that has a value
    """
    supplied = supplied or {}
    tree: dict[str, Any] = {}

    for name, definition in spec.properties.items():
        value = lookup(supplied, name)
        if value is _MISSING:
            if definition.default is None:
                continue
            value = definition.default
        _assign(tree, name, copy.deepcopy(value))

    logger.debug(f"Resolved {len(spec.properties)} declared property(ies) for job {spec.name}")
    return tree


class PropertyTree:
    """Read-only accessor exposing ``p`` and ``has_p`` to templates."""

    def __init__(self, tree: Mapping[str, Any], owner: str | None = None) -> None:
        self._tree = tree
        self._owner = owner

    def p(self, paths: str | Iterable[str], default: Any = _MISSING) -> Any:
        """Return the first path that resolves, else ``default``.

        Raises MissingPropertyError when nothing resolves and no default is given.
        """
        candidates = [paths] if isinstance(paths, str) else list(paths)
        for path in candidates:
            value = lookup(self._tree, path)
            if value is not _MISSING:
                return value
        if default is not _MISSING:
            return default
        raise MissingPropertyError(", ".join(candidates), self._owner)

    def has_p(self, *paths: str) -> bool:
        return all(lookup(self._tree, path) is not _MISSING for path in paths)
