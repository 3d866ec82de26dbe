"""
Version resolution — turn ``latest`` into a concrete version string.

Each ``VersionSource`` has its own parser. Parsers either return a
non-empty version or raise ``VersionParseError``; they never hand back
a half-sliced string.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path

from ocget.core.errors import VersionParseError, VersionResolutionError
from ocget.core.models.product import LATEST, ProductSpec, VersionSource
from ocget.core.services import mirror
from ocget.core.services.fetch import fetch_and_extract
from ocget.core.services.subprocess_runner import run_command

logger = logging.getLogger(__name__)

_RELEASE_NAME_RE = re.compile(r"^Name:[ \t]*(\S+)[ \t]*$", re.MULTILINE)
_RELEASE_VERSION_RE = re.compile(r"^[ \t]+Version:[ \t]*(\S+)[ \t]*$", re.MULTILINE)
_CRC_VERSION_RE = re.compile(r'"crcVersion"\s*:\s*"([^"]+)"')
_ODO_VERSION_RE = re.compile(r"\bodo\s+v?(\d+\.\d+\.\d+[^\s(]*)")


@dataclass(frozen=True)
class ResolvedVersion:
    """A concrete version, plus the binary if resolving required fetching it."""

    version: str
    binary: Path | None = None


# ── Parsers ─────────────────────────────────────────────────────


def parse_release_txt(text: str) -> str:
    """Extract the release version from an OCP ``release.txt``.

    The top-level ``Name:`` field is authoritative; the indented
    ``Version:`` line under ``Release Metadata`` is the fallback.
    """
    for pattern in (_RELEASE_NAME_RE, _RELEASE_VERSION_RE):
        match = pattern.search(text)
        if match:
            return match.group(1)
    raise VersionParseError("release.txt has no 'Name:' or 'Version:' field")


def parse_release_info(text: str) -> str:
    """Extract ``crcVersion`` from crc's ``release-info.json``."""
    match = _CRC_VERSION_RE.search(text)
    if not match or not match.group(1).strip():
        raise VersionParseError("release-info.json has no 'crcVersion' field")
    return match.group(1).strip()


def parse_odo_version(output: str) -> str:
    """Extract the version from ``odo version`` output, e.g. ``odo v3.15.0 (10b5e8a8f)``."""
    match = _ODO_VERSION_RE.search(output)
    if not match:
        first = output.strip().splitlines()[0] if output.strip() else "<empty>"
        raise VersionParseError(f"Unrecognised odo version output: {first!r}")
    return match.group(1)


_METADATA_PARSERS = {
    VersionSource.RELEASE_TXT: parse_release_txt,
    VersionSource.RELEASE_INFO_JSON: parse_release_info,
}


# ── Resolution ──────────────────────────────────────────────────


def resolve_version(
    spec: ProductSpec,
    requested: str,
    workdir: Path,
    *,
    timeout: int = 120,
    cancel: threading.Event | None = None,
) -> ResolvedVersion:
    """Resolve ``requested`` for ``spec``.

    Explicit versions are returned without asking the mirror, minus any
    tag prefix the product's directories add themselves (odo's ``v``).

    Args:
        spec: Product layout.
        requested: ``"latest"`` or an explicit version.
        workdir: Product scratch directory (used by binary-sourced products).
        timeout: Network timeout in seconds.
        cancel: Passed on to the archive download of binary-sourced products.

    Raises:
        DownloadError: If metadata or the archive cannot be fetched.
        ExtractError: If a binary-sourced product's archive is broken.
        VersionResolutionError: If no version can be determined.
    """
    if requested != LATEST:
        return ResolvedVersion(spec.normalize_version(requested))

    if spec.version_source is VersionSource.BINARY:
        return _resolve_from_binary(spec, workdir, timeout=timeout, cancel=cancel)

    text = mirror.fetch_text(spec.metadata_url(), timeout=timeout)
    version = _METADATA_PARSERS[spec.version_source](text)
    logger.info("%s: latest is %s", spec.product.value, version)
    return ResolvedVersion(version)


def _resolve_from_binary(
    spec: ProductSpec,
    workdir: Path,
    *,
    timeout: int,
    cancel: threading.Event | None,
) -> ResolvedVersion:
    """Fetch the ``latest`` archive and ask the binary for its version."""
    binary = fetch_and_extract(spec, LATEST, workdir, latest=True, timeout=timeout, cancel=cancel)
    binary.chmod(0o755)

    result = run_command([str(binary), *spec.version_args], timeout=60)
    if not result["ok"]:
        detail = result.get("stderr") or result["error"]
        raise VersionResolutionError(f"'{spec.binary_name} {' '.join(spec.version_args)}' failed: {detail}")

    version = parse_odo_version(result["stdout"])
    logger.info("%s: latest is %s", spec.product.value, version)
    return ResolvedVersion(version, binary=binary)
