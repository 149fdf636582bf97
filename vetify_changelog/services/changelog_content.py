"""
Access to the raw changelog markdown.

The CHANGELOG.md shipped inside the package is served unless CHANGELOG_PATH
points somewhere else.
"""

from importlib.resources import files
from pathlib import Path
from typing import Optional, Union

from vetify_changelog.config.config import get_settings
from vetify_changelog.config.logging_config import get_logger

logger = get_logger(__name__)

BUNDLED_CHANGELOG_PATH = Path(str(files("vetify_changelog") / "data" / "CHANGELOG.md"))


class ChangelogNotFoundError(FileNotFoundError):
    """Raised when the changelog markdown file does not exist."""


def resolve_changelog_path(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the changelog location.

    None falls back to the configured CHANGELOG_PATH; an empty path means
    the bundled changelog. Relative paths are taken from the working directory.
    """
    if path is None:
        path = get_settings().changelog_path
    if not path:
        return BUNDLED_CHANGELOG_PATH
    return Path(path).expanduser()


def get_changelog_content(path: Optional[Union[str, Path]] = None) -> str:
    """
    Read the full changelog markdown.

    Args:
        path: Changelog file; defaults to the configured CHANGELOG_PATH.

    Returns:
        Raw changelog text.

    Raises:
        ChangelogNotFoundError: If the file does not exist.
    """
    changelog_path = resolve_changelog_path(path)
    if not changelog_path.is_file():
        logger.warning("Changelog not found", path=str(changelog_path))
        raise ChangelogNotFoundError(f"Changelog not found: {changelog_path}")

    content = changelog_path.read_text(encoding="utf-8")
    logger.debug("Changelog read", path=str(changelog_path), chars=len(content))
    return content
