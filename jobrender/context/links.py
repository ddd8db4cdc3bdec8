"""Consumed link validation and template access."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..core.errors import JobRenderError, UnknownLinkError, UnsatisfiedLinkError
from ..core.models import JobSpec, Link, LinkInstance
from .properties import PropertyTree

logger = logging.getLogger(__name__)


class LinkView:
    """Template-facing wrapper around a supplied link."""

    def __init__(self, link: Link) -> None:
        self.name = link.name
        self.instances: list[LinkInstance] = list(link.instances)
        self._address = link.address
        self._properties = PropertyTree(link.properties, owner=f"link {link.name}")

    @property
    def address(self) -> str | None:
        if self._address:
            return self._address
        if self.instances:
            return self.instances[0].address
        return None

    def p(self, paths: str | Iterable[str], *default: Any) -> Any:
        return self._properties.p(paths, *default)

    def has_p(self, *paths: str) -> bool:
        return self._properties.has_p(*paths)


def resolve_links(spec: JobSpec, links: Iterable[Link] | None) -> dict[str, Link]:
    """Match supplied links to the job's declared consumptions.

    Args:
        spec: Job spec declaring ``consumes``
        links: Links supplied to the render call

    Returns:
        Mapping of consumption name to link
    """
    resolved: dict[str, Link] = {}
    for link in links or []:
        if spec.consumed(link.name) is None:
            raise UnknownLinkError(link.name, spec.name)
        if link.name in resolved:
            raise JobRenderError(f"Link '{link.name}' supplied more than once")
        resolved[link.name] = link

    for definition in spec.consumes:
        if definition.name not in resolved and not definition.optional:
            raise UnsatisfiedLinkError(definition.name, spec.name)

    logger.debug(f"Resolved link(s) {sorted(resolved)} for job {spec.name}")
    return resolved


class LinkSet:
    """Exposes ``link`` and ``has_link`` to templates."""

    def __init__(self, links: dict[str, Link], owner: str | None = None) -> None:
        self._views = {name: LinkView(link) for name, link in links.items()}
        self._owner = owner

    def link(self, name: str) -> LinkView:
        try:
            return self._views[name]
        except KeyError:
            raise UnsatisfiedLinkError(name, self._owner) from None

    def has_link(self, name: str) -> bool:
        return name in self._views
