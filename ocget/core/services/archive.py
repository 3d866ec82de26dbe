"""
Archive extraction for release tarballs (``.tar.gz`` and ``.tar.xz``).
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from ocget.core.errors import ExtractError

logger = logging.getLogger(__name__)


def extract_archive(archive: Path, dest: Path) -> Path:
    """Unpack ``archive`` into ``dest``.

    Compression is detected from the file contents, not the name.
    Members are extracted with the ``data`` filter, so absolute paths
    and ``..`` components are rejected.

    Raises:
        ExtractError: If the file is not a readable tarball.
    """
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:*") as tf:
            tf.extractall(dest, filter="data")
    except (tarfile.TarError, OSError) as exc:
        raise ExtractError(f"Extract failed for {archive.name}: {exc}") from exc

    logger.debug("Extracted %s into %s", archive.name, dest)
    return dest


def find_member(extract_dir: Path, member: str) -> Path:
    """Locate the extracted binary at its in-archive path.

    Raises:
        ExtractError: If the binary is not where the layout table says.
    """
    found = extract_dir / member
    if found.is_file():
        return found

    available = sorted(
        str(p.relative_to(extract_dir)) for p in extract_dir.rglob("*") if p.is_file()
    )
    raise ExtractError(
        f"Binary '{member}' not found in release archive"
        + (f" (found: {', '.join(available[:10])})" if available else " (archive is empty)")
    )
