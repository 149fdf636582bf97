"""
Vetify Changelog Service

Parses the Vetify CHANGELOG.md into structured release entries and serves
them to the public updates page (/actualizaciones).
"""

__version__ = "1.2.0"
