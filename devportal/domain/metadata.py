"""Metadata bag helpers.

Every entity carries a free-form JSON object column. These helpers merge
partial updates into it and read well-known keys leniently. Missing or
wrong-typed keys read as absent, never as errors.

List-valued keys (``favorites``, ``subscribed``) have been persisted both as
string arrays and as mixed arrays; readers normalize either shape to an ordered
list of unique strings immediately.
"""

from collections.abc import Iterable, Mapping
import json
from typing import Any
from uuid import UUID

from devportal.domain.errors import MalformedMetadataError

type RawMetadata = str | bytes | Mapping[str, Any] | None

FAVORITES_KEY = "favorites"
SUBSCRIBED_KEY = "subscribed"
PORTAL_ADMIN_KEY = "portal_admin"
QUICK_LINKS_KEY = "quick_links"


def _is_blank(raw: RawMetadata) -> bool:
    if raw is None:
        return True
    if isinstance(raw, str | bytes):
        return not raw.strip()
    return False


def _decode(raw: RawMetadata) -> Any:
    if isinstance(raw, Mapping):
        return dict(raw)
    return json.loads(raw)


def dump_metadata(meta: Mapping[str, Any]) -> str:
    """Serialize a metadata bag in compact form."""
    return json.dumps(meta, separators=(",", ":"), ensure_ascii=False)


def parse_metadata(raw: RawMetadata, *, label: str = "metadata") -> dict[str, Any]:
    """Parse a metadata bag strictly; blank input is an empty bag.

    Raises:
        MalformedMetadataError: input is present but not a JSON object
    """
    if _is_blank(raw):
        return {}
    try:
        value = _decode(raw)
    except (TypeError, ValueError) as e:
        raise MalformedMetadataError(f"failed to parse {label}: {e}") from e
    if not isinstance(value, dict):
        raise MalformedMetadataError(f"failed to parse {label}: expected a JSON object")
    return value


def load_metadata(raw: RawMetadata) -> dict[str, Any]:
    """Parse a metadata bag leniently; anything unreadable is an empty bag."""
    try:
        return parse_metadata(raw)
    except MalformedMetadataError:
        return {}


def normalize_metadata(raw: RawMetadata) -> str | None:
    """Validate request metadata and return it as stored text (``None`` when blank)."""
    if _is_blank(raw):
        return None
    return dump_metadata(parse_metadata(raw))


def merge_metadata(existing: RawMetadata, new: RawMetadata) -> str:
    """Shallow-merge ``new`` into ``existing``.

    Top-level keys from ``new`` overwrite, nested objects are replaced
    wholesale, and keys absent from ``new`` are preserved.

    Raises:
        MalformedMetadataError: either side is present but not a JSON object,
            or ``new`` is missing or blank
    """
    base = parse_metadata(existing, label="existing metadata")
    if _is_blank(new):
        raise MalformedMetadataError("failed to parse new metadata: no metadata supplied")
    patch = parse_metadata(new, label="new metadata")
    return dump_metadata({**base, **patch})


# -------------------------------------------------------------------------
# LIST-VALUED KEYS
# -------------------------------------------------------------------------


def read_string_list(meta: Mapping[str, Any], key: str) -> list[str]:
    """Read ``meta[key]`` as an ordered list of unique strings.

    Non-string items of a mixed list are dropped; a non-list value reads as empty.
    """
    value = meta.get(key)
    if not isinstance(value, list):
        return []
    seen: list[str] = []
    for item in value:
        if isinstance(item, str) and item and item not in seen:
            seen.append(item)
    return seen


def add_to_list(raw: RawMetadata, key: str, value: Any) -> str:
    """Append ``str(value)`` to the list at ``key`` unless already present.

    Unreadable existing metadata is replaced by a fresh bag.
    """
    meta = load_metadata(raw)
    items = read_string_list(meta, key)
    item = str(value)
    if item not in items:
        items.append(item)
    meta[key] = items
    return dump_metadata(meta)


def remove_from_list(raw: RawMetadata, key: str, value: Any) -> str:
    """Remove ``str(value)`` from the list at ``key``.

    Idempotent: removing an absent value leaves the list unchanged, and a
    missing key or bag ends up as an empty list rather than an absent key.
    """
    meta = load_metadata(raw)
    item = str(value)
    meta[key] = [existing for existing in read_string_list(meta, key) if existing != item]
    return dump_metadata(meta)


def parse_uuid_list(values: Iterable[str]) -> list[UUID]:
    """Parse identifiers, skipping entries that are not valid UUIDs."""
    parsed: list[UUID] = []
    for value in values:
        try:
            candidate = UUID(value.strip())
        except (AttributeError, ValueError):
            continue
        if candidate not in parsed:
            parsed.append(candidate)
    return parsed


# -------------------------------------------------------------------------
# ACCESSORS
# -------------------------------------------------------------------------


def get_str(meta: Mapping[str, Any], key: str) -> str | None:
    """Non-empty string at ``key``, else ``None``."""
    value = meta.get(key)
    return value if isinstance(value, str) and value else None


def get_bool(meta: Mapping[str, Any], key: str) -> bool | None:
    """Boolean at ``key``, else ``None``."""
    value = meta.get(key)
    return value if isinstance(value, bool) else None


def get_nested_str(meta: Mapping[str, Any], *path: str) -> str | None:
    """Non-empty string found by walking nested objects along ``path``."""
    current: Any = meta
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current if isinstance(current, str) and current else None


def is_truthy(value: Any) -> bool:
    """Interpret loosely typed flags such as ``portal_admin``."""
    match value:
        case bool():
            return value
        case int() | float():
            return value != 0
        case str():
            return value.strip().lower() in {"true", "1", "yes", "y", "on"}
        case _:
            return False
