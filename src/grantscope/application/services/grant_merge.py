"""Grant merge engine - collapses duplicate grant rows into one record per entity.

The engine is a pure reducer over a keyed mapping: it never mutates its
inputs and never raises. A permission flag that is true on an existing
merged record stays true whatever is merged into it afterwards.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace

from grantscope.domain.entities import Grant, MergedGrant

DEFAULT_STRIP_TOKENS: tuple[str, ...] = ("SA_Audit__", "__c")

_FLAGS = ("can_read", "can_create", "can_edit", "can_delete")


def clean_field_name(field_name: str) -> str:
    """Reduce a dotted field path to its trailing segment."""
    return field_name.rsplit(".", 1)[-1]


def clean_object_name(
    object_name: str, strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS
) -> str:
    """Strip internal namespace prefixes and suffix tokens from an object name."""
    cleaned = object_name
    for token in strip_tokens:
        cleaned = cleaned.replace(token, "")
    return cleaned or object_name


def grant_key(object_name: str, field_name: str | None = None) -> str:
    """Entity key: ``Object`` for object grants, ``Object.Field`` for field grants."""
    object_name = object_name.strip()
    if field_name is None:
        return object_name
    return f"{object_name}.{clean_field_name(field_name.strip())}"


def _flag(value: object) -> bool:
    # Anything but a real boolean True counts as "not granted".
    return value is True


def merge(
    existing: MergedGrant | None,
    incoming: Grant,
    strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS,
) -> MergedGrant:
    """Merge one raw grant into the merged record for its entity."""
    if existing is None:
        field_name = incoming.field_name
        return MergedGrant(
            key=grant_key(incoming.object_name, field_name),
            object_name=incoming.object_name.strip(),
            object_label=clean_object_name(incoming.object_name.strip(), strip_tokens),
            field_name=clean_field_name(field_name.strip()) if field_name is not None else None,
            source_type=incoming.source_type,
            source_name=incoming.source_name,
            assigned_by=incoming.assigned_by,
            assignment_method=incoming.assignment_method,
            sources=(incoming.source_name,),
            **{name: _flag(getattr(incoming, name, False)) for name in _FLAGS},
        )

    flags = {
        name: getattr(existing, name) or _flag(getattr(incoming, name, False))
        for name in _FLAGS
    }
    sources = existing.sources
    if incoming.source_name not in sources:
        sources = (*sources, incoming.source_name)
    return replace(existing, sources=sources, **flags)


def merge_all(
    grants: Iterable[Grant],
    into: Mapping[str, MergedGrant] | None = None,
    strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS,
) -> dict[str, MergedGrant]:
    """Fold grants into a keyed mapping, keeping first-seen key order."""
    strip_tokens = tuple(strip_tokens)
    merged: dict[str, MergedGrant] = dict(into or {})
    for grant in grants:
        key = grant_key(grant.object_name, grant.field_name)
        merged[key] = merge(merged.get(key), grant, strip_tokens)
    return merged
