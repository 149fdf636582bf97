"""
Display rules for the updates page.

Turns parsed changelog entries into view models: version labels, Spanish
category labels in a fixed display order, formatted dates, and change lines
split on " | " into a headline and detail lines.
"""

from typing import Iterable, Optional

from vetify_changelog.models.models import (
    CategoryKey,
    ChangelogEntryView,
    ChangelogItem,
    ChangelogSection,
)
from vetify_changelog.services.changelog_parser import UNRELEASED_SENTINELS, ChangelogEntry
from vetify_changelog.services.date_formatter import format_date_spanish

CATEGORY_DISPLAY_ORDER = (
    CategoryKey.ADDED,
    CategoryKey.FIXED,
    CategoryKey.CHANGED,
    CategoryKey.SECURITY,
)

CATEGORY_LABELS = {
    CategoryKey.ADDED: "Agregado",
    CategoryKey.FIXED: "Corregido",
    CategoryKey.CHANGED: "Modificado",
    CategoryKey.SECURITY: "Seguridad",
}

UNRELEASED_LABEL = "En desarrollo"
SUB_ITEM_SEPARATOR = " | "


def version_label(version: str) -> str:
    """Return "En desarrollo" for unreleased changes, "v<version>" otherwise."""
    if version in UNRELEASED_SENTINELS:
        return UNRELEASED_LABEL
    return f"v{version}"


def split_item(item: str) -> ChangelogItem:
    """Split a change line into its headline and " | " separated detail lines."""
    if SUB_ITEM_SEPARATOR not in item:
        return ChangelogItem(text=item, headline=item)
    headline, *sub_items = item.split(SUB_ITEM_SEPARATOR)
    return ChangelogItem(text=item, headline=headline, sub_items=sub_items)


def present_entry(entry: ChangelogEntry, is_latest: bool = False) -> Optional[ChangelogEntryView]:
    """Build the view of one entry, or None when it has nothing to show."""
    sections = []
    for key in CATEGORY_DISPLAY_ORDER:
        items = entry.categories.get(key.value)
        if not items:
            continue
        sections.append(
            ChangelogSection(
                key=key,
                label=CATEGORY_LABELS[key],
                items=[split_item(item) for item in items],
            )
        )

    if not sections:
        return None

    return ChangelogEntryView(
        version=entry.version,
        version_label=version_label(entry.version),
        date=entry.date,
        formatted_date=format_date_spanish(entry.date),
        is_latest=is_latest,
        categories={k: list(v) for k, v in entry.categories.items()},
        sections=sections,
    )


def present_entries(entries: Iterable[ChangelogEntry]) -> list[ChangelogEntryView]:
    """Build views for all entries in order; the first shown entry is the latest."""
    views: list[ChangelogEntryView] = []
    for entry in entries:
        view = present_entry(entry, is_latest=not views)
        if view is not None:
            views.append(view)
    return views
