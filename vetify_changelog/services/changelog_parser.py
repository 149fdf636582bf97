"""
Changelog Parser for the Vetify CHANGELOG.md.

Parses "Keep a Changelog" markdown (English or Spanish headings) into
ordered version entries for the updates page, and exports them as a JSON
index for the sync CLI.
"""

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from vetify_changelog.config.logging_config import get_logger
from vetify_changelog.models.models import CategoryKey
from vetify_changelog.services.changelog_content import get_changelog_content

logger = get_logger(__name__)

UNRELEASED_SENTINELS = ("Unreleased", "Sin Publicar")


@dataclass
class ChangelogEntry:
    """A released (or unreleased) version with its categorized changes."""
    version: str                # "1.2.0", "Unreleased" or "Sin Publicar"
    date: str = ""              # "2024-01-15", empty when the heading has none
    categories: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_unreleased(self) -> bool:
        return self.version in UNRELEASED_SENTINELS

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class ChangelogParser:
    """Parser for changelog markdown into version entries."""

    # Regex patterns
    VERSION_PATTERN = re.compile(r'^##\s+\[([^\]]+)\](?:\s*[-–—]\s*(\S+))?')
    HEADER_PATTERN = re.compile(r'^(#{1,6})\s+(.+?)\s*#*\s*$')
    LIST_ITEM_PATTERN = re.compile(r'^\s*[-*+]\s+(\S.*?)\s*$')

    # Lowercased third-level heading -> category
    CATEGORY_HEADINGS = {
        "added": CategoryKey.ADDED,
        "agregado": CategoryKey.ADDED,
        "changed": CategoryKey.CHANGED,
        "modificado": CategoryKey.CHANGED,
        "fixed": CategoryKey.FIXED,
        "corregido": CategoryKey.FIXED,
        "security": CategoryKey.SECURITY,
        "seguridad": CategoryKey.SECURITY,
    }

    def __init__(self):
        self.entries: list[ChangelogEntry] = []

    def parse(self, content: Optional[str]) -> list[ChangelogEntry]:
        """
        Parse changelog markdown into entries, in source order.

        Malformed input never raises: version blocks without a recognized
        category holding at least one item are dropped, and text without
        version headings yields an empty list.
        """
        self.entries = []
        if not isinstance(content, str) or not content:
            return self.entries

        current: Optional[ChangelogEntry] = None
        category: Optional[CategoryKey] = None

        for line in content.splitlines():
            version_match = self.VERSION_PATTERN.match(line)
            if version_match:
                self._save_entry(current)
                current = ChangelogEntry(
                    version=version_match.group(1),
                    date=version_match.group(2) or "",
                )
                category = None
                continue

            header_match = self.HEADER_PATTERN.match(line)
            if header_match:
                # Any heading closes the open category span
                category = None
                if current is not None and len(header_match.group(1)) == 3:
                    category = self._match_category(header_match.group(2))
                continue

            if current is None or category is None:
                continue

            # Indented sub-items are kept as flat items of the same category
            item_match = self.LIST_ITEM_PATTERN.match(line)
            if item_match:
                current.categories.setdefault(category.value, []).append(item_match.group(1))

        self._save_entry(current)

        logger.debug("Changelog parsed", total_entries=len(self.entries))
        return self.entries

    def _match_category(self, heading: str) -> Optional[CategoryKey]:
        """Look up a third-level heading in the bilingual category table."""
        return self.CATEGORY_HEADINGS.get(heading.strip().lower())

    def _save_entry(self, entry: Optional[ChangelogEntry]):
        """Keep a finished version block if it collected any items."""
        if entry is None:
            return
        if not entry.categories:
            logger.debug("Skipping version without categories", version=entry.version)
            return
        self.entries.append(entry)

    def to_index(self, source_path: str) -> dict:
        """Convert parsed entries to index format for JSON export."""
        return {
            "metadata": {
                "source": source_path,
                "parsed_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                "total_entries": len(self.entries),
                "latest_version": self.entries[0].version if self.entries else None,
            },
            "entries": [e.to_dict() for e in self.entries],
        }

    def save_index(self, output_path: str, source_path: str) -> dict:
        """Save the parsed entries to a JSON index file."""
        index = self.to_index(source_path)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(index, f, indent=2, ensure_ascii=False)

        logger.info("Changelog index saved", output=str(path), total_entries=len(self.entries))
        return index["metadata"]


def parse_changelog(content: Optional[str]) -> list[ChangelogEntry]:
    """
    Parse changelog markdown into an ordered list of entries.

    A fresh parser is used on every call, so no state is shared between callers.

    Args:
        content: Raw changelog markdown.

    Returns:
        Entries in the order their version headings appear.
    """
    return ChangelogParser().parse(content)


def export_changelog(source_path: str, output_path: str) -> dict:
    """
    Parse a changelog file and save the JSON index.

    Args:
        source_path: Path to the changelog markdown file
        output_path: Path to save the JSON index

    Returns:
        Metadata about the exported changelog
    """
    parser = ChangelogParser()
    parser.parse(get_changelog_content(source_path))
    return parser.save_index(output_path, source_path)
