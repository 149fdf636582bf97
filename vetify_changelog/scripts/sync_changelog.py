#!/usr/bin/env python3
"""
CLI script to parse CHANGELOG.md and generate changelog_index.json.

Usage:
    python -m vetify_changelog.scripts.sync_changelog
    vetify-sync-changelog --source CHANGELOG.md --output public/changelog.json
"""

import argparse
import sys
from pathlib import Path

from vetify_changelog.config.config import get_settings
from vetify_changelog.services.changelog_content import ChangelogNotFoundError, resolve_changelog_path
from vetify_changelog.services.changelog_parser import export_changelog


def main(argv: list[str] | None = None) -> int:
    """Parse the changelog and write the JSON index."""
    settings = get_settings()

    arg_parser = argparse.ArgumentParser(description="Sync CHANGELOG.md into a JSON index")
    arg_parser.add_argument("--source", default=settings.changelog_path, help="Changelog markdown file (default: bundled CHANGELOG.md)")
    arg_parser.add_argument("--output", default=settings.changelog_index_path, help="JSON index to write")
    args = arg_parser.parse_args(argv)

    source_path = resolve_changelog_path(args.source)
    output_path = Path(args.output).expanduser()

    print(f"📄 Parsing: {source_path}")
    print(f"📁 Output:  {output_path}")
    print()

    try:
        metadata = export_changelog(str(source_path), str(output_path))
    except ChangelogNotFoundError as e:
        print(f"❌ Error: {e}")
        return 1
    except OSError as e:
        print(f"❌ Error writing index: {e}")
        return 1

    print("✅ Sync complete!")
    print()
    print("📊 Statistics:")
    print(f"   Total entries:   {metadata['total_entries']}")
    print(f"   Latest version:  {metadata['latest_version'] or '-'}")
    print(f"   Parsed at:       {metadata['parsed_at']}")
    print()
    print(f"💾 Index saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
