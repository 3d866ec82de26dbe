"""
Error taxonomy.

Usage errors are raised as ``click.UsageError`` by the CLI layer.
Everything below ``InstallError`` aborts a single product only; the
orchestrator turns it into a failed ``ProductResult``.
"""

from __future__ import annotations


class OcgetError(Exception):
    """Base class for all ocget errors."""


class ConfigError(OcgetError):
    """Raised when the settings file is invalid or unreadable."""


class InstallError(OcgetError):
    """A failure that aborts one product's install task."""


class DownloadError(InstallError):
    """A remote file or metadata document could not be fetched."""


class ExtractError(InstallError):
    """A downloaded archive could not be unpacked, or lacks the binary."""


class VersionResolutionError(InstallError):
    """The ``latest`` tag could not be turned into a concrete version."""


class VersionParseError(VersionResolutionError):
    """Metadata or command output did not contain a version string."""


class ArtifactMissingError(InstallError):
    """``--set`` was asked to point at an artifact that is not on disk."""
