"""Cache key construction.

Keys are built deterministically from a fixed prefix and the discriminating
parameters of a query, so distinct logical queries never collide and
identical queries always do.
"""

from collections.abc import Mapping
from enum import StrEnum
import hashlib


class KeyPrefix(StrEnum):
    """Prefixes organizing cached data per entity and query shape."""

    LANDSCAPE_LIST = "landscape:list"
    LANDSCAPE_BY_ID = "landscape:id"
    LANDSCAPE_BY_NAME = "landscape:name"
    LANDSCAPE_BY_PROJECT = "landscape:project"
    LANDSCAPE_SEARCH = "landscape:search"

    COMPONENT_LIST = "component:list"
    COMPONENT_BY_ID = "component:id"
    COMPONENT_BY_NAME = "component:name"
    COMPONENT_HEALTH = "component:health"
    COMPONENTS_BY_PROJECT = "components:project"
    PROJECT_TITLE = "project:title"

    TEAM_BY_ID = "team:id"
    TEAM_BY_NAME = "team:name"
    TEAMS_BY_ORG = "teams:org"
    TEAMS_ALL = "teams:all"

    PLUGIN_BY_ID = "plugin:id"
    PLUGIN_LIST = "plugin:list"

    USER_BY_ID = "user:id"


# Landscape family root, used to drop every landscape entry at once
LANDSCAPE_NAMESPACE = "landscape:"


def build_key(prefix: KeyPrefix | str, *parts: object) -> str:
    """Join ``prefix`` and ``parts`` with ``:``."""
    return ":".join([str(prefix), *(str(part) for part in parts)])


class CacheKeyBuilder:
    """Fluent builder for composite keys.

    Example:
        >>> CacheKeyBuilder("github").add("prs").add_params({"state": "open"}).build()
        'github:prs:state=open'
    """

    def __init__(self, namespace: str = "") -> None:
        self._namespace = namespace
        self._parts: list[str] = []

    def add(self, part: object) -> "CacheKeyBuilder":
        self._parts.append(str(part))
        return self

    def add_params(self, params: Mapping[str, object]) -> "CacheKeyBuilder":
        """Append query parameters, sorted so ordering never changes the key."""
        if params:
            self._parts.append("&".join(f"{k}={params[k]}" for k in sorted(params)))
        return self

    def build(self) -> str:
        joined = ":".join(self._parts)
        if not self._namespace:
            return joined
        return f"{self._namespace}:{joined}" if joined else self._namespace

    def hash(self) -> str:
        """Fixed-length key for long or sensitive parameter sets."""
        digest = hashlib.sha256(self.build().encode("utf-8")).hexdigest()
        return f"{self._namespace}:hash:{digest}"
