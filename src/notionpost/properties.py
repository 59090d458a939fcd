"""Heuristic resolution of database row properties.

Notion databases are schema-flexible: the title column may be called
``Title``, ``Name`` or ``名前``, tags may be a multi-select or a select,
and "published" may be a checkbox, a status or a select.  Rather than
demanding exact configuration, :func:`resolve_property` tries a list of
preferred names first and then falls back to the first property of an
acceptable type, in the order Notion returned them.

The extractors turn a resolved property into a plain Python value;
:func:`resolve_publish_property` and :func:`resolve_tags` apply the
heuristic to whole rows without letting an unrelated column decide.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from enum import Enum
from typing import Any

from notionpost.config import DEFAULT_PUBLISHED_KEYWORDS, NotionPostConfig

Property = dict[str, Any]


class PropertyType(str, Enum):
    """Property ``type`` tags understood by the resolver."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    CHECKBOX = "checkbox"
    STATUS = "status"


TEXT_TYPES = (PropertyType.TITLE, PropertyType.RICH_TEXT)
TAG_TYPES = (PropertyType.MULTI_SELECT, PropertyType.SELECT)
PUBLISH_TYPES = (PropertyType.STATUS, PropertyType.CHECKBOX)


def _type_of(prop: Any) -> str | None:
    if isinstance(prop, Mapping):
        return prop.get("type")
    return None


def resolve_property(
    bag: Mapping[str, Any] | None,
    acceptable_types: Iterable[PropertyType | str],
    preferred_names: Iterable[str] = (),
) -> tuple[str, Property] | None:
    """Pick the property of *bag* that best matches the request.

    Parameters
    ----------
    bag:
        The ``properties`` object of a database row.
    acceptable_types:
        Property types that may be returned.
    preferred_names:
        Names tried in order before the type-based fallback scan.

    Returns
    -------
    tuple[str, dict] | None
        ``(name, property)`` of the first preferred name whose type is
        acceptable, else of the first property in *bag* with an
        acceptable type, else ``None``.
    """
    if not bag:
        return None
    accepted = {str(t.value if isinstance(t, PropertyType) else t) for t in acceptable_types}

    for name in preferred_names:
        prop = bag.get(name)
        if _type_of(prop) in accepted:
            return name, prop

    for name, prop in bag.items():
        if _type_of(prop) in accepted:
            return name, prop

    return None


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def plain_text(rich_text: list[dict[str, Any]] | None) -> str:
    """Concatenate the plain text of a rich_text array and trim it."""
    parts: list[str] = []
    for seg in rich_text or []:
        if not isinstance(seg, Mapping):
            continue
        text = seg.get("plain_text") or (seg.get("text") or {}).get("content") or ""
        parts.append(text)
    return "".join(parts).strip()


def extract_text(prop: Property | None) -> str:
    """Text of a ``title`` or ``rich_text`` property."""
    if not prop:
        return ""
    kind = prop.get("type")
    if kind in (PropertyType.TITLE.value, PropertyType.RICH_TEXT.value):
        return plain_text(prop.get(kind))
    return ""


def extract_select(prop: Property | None) -> str:
    """Selected option name of a ``select`` (or ``status``) property."""
    if not prop:
        return ""
    option = prop.get(prop.get("type", "")) or {}
    if not isinstance(option, Mapping):
        return ""
    return option.get("name") or ""


def extract_multi_select(prop: Property | None) -> list[str]:
    """Option names of a ``multi_select`` property, empty ones dropped."""
    if not prop or prop.get("type") != PropertyType.MULTI_SELECT.value:
        return []
    return [
        option["name"]
        for option in prop.get("multi_select") or []
        if isinstance(option, Mapping) and option.get("name")
    ]


def extract_tags(prop: Property | None) -> list[str]:
    """Tags from a ``multi_select`` or single ``select`` property."""
    if not prop:
        return []
    if prop.get("type") == PropertyType.SELECT.value:
        name = extract_select(prop)
        return [name] if name else []
    return extract_multi_select(prop)


def extract_checkbox(prop: Property | None) -> bool:
    if not prop:
        return False
    return bool(prop.get("checkbox", False))


def extract_status(
    prop: Property | None,
    keywords: Collection[str] = DEFAULT_PUBLISHED_KEYWORDS,
) -> bool:
    """``True`` when a ``status``/``select`` name is a published keyword."""
    name = extract_select(prop).strip().lower()
    return bool(name) and name in keywords


# ---------------------------------------------------------------------------
# Row-level resolution
# ---------------------------------------------------------------------------

def _named(bag: Mapping[str, Any] | None, names: Iterable[str]) -> dict[str, Any]:
    """Sub-bag holding only *names*, in the order given."""
    if not bag:
        return {}
    return {n: bag[n] for n in names if n in bag}


def resolve_publish_property(
    bag: Mapping[str, Any] | None,
    config: NotionPostConfig,
) -> tuple[str, Property] | None:
    """Find the property that decides publish eligibility.

    A status, checkbox or select under one of ``config.publish_names``
    wins.  Otherwise the first status or checkbox of the row is used; a
    select under any other name (``Category``) never counts.
    """
    resolved = resolve_property(
        _named(bag, config.publish_names),
        PUBLISH_TYPES + (PropertyType.SELECT,),
        config.publish_names,
    )
    if resolved is None:
        resolved = resolve_property(bag, PUBLISH_TYPES)
    return resolved


def resolve_tags(bag: Mapping[str, Any] | None, config: NotionPostConfig) -> list[str]:
    """Tags of a row.

    A multi-select or select under one of ``config.tag_names`` wins.
    Otherwise the first multi-select of the row is taken.  A lone select
    elsewhere is never read as tags, so a publish select such as
    ``公開`` cannot turn into a tag.
    """
    resolved = resolve_property(_named(bag, config.tag_names), TAG_TYPES, config.tag_names)
    if resolved is None:
        resolved = resolve_property(bag, (PropertyType.MULTI_SELECT,))
    return extract_tags(resolved[1]) if resolved else []


def is_published(bag: Mapping[str, Any] | None, config: NotionPostConfig) -> bool:
    """Decide publish eligibility of a row.

    A row without a publish property (see
    :func:`resolve_publish_property`) is eligible.  A checkbox decides by
    its value; a status or select decides by a keyword match.  A publish
    property that is present but does not match makes the row ineligible.
    """
    resolved = resolve_publish_property(bag, config)
    if resolved is None:
        return True
    _, prop = resolved
    if prop.get("type") == PropertyType.CHECKBOX.value:
        return extract_checkbox(prop)
    return extract_status(prop, config.published_keywords)
