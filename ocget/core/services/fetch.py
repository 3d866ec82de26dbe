"""
Fetch-and-extract — download one release archive and unpack it.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ocget.core.models.product import ProductSpec
from ocget.core.services import archive, mirror

logger = logging.getLogger(__name__)


def fetch_and_extract(
    spec: ProductSpec,
    version: str,
    workdir: Path,
    *,
    latest: bool = False,
    timeout: int = 120,
    cancel: threading.Event | None = None,
) -> Path:
    """Download the archive for ``spec``/``version`` into ``workdir`` and unpack it.

    Args:
        spec: Product layout.
        version: Concrete version (ignored for the URL when ``latest``).
        workdir: Per-product scratch directory; archive and contents land here.
        latest: Fetch from the mirror's ``latest`` directory.
        timeout: Network timeout in seconds.
        cancel: Set to abandon the download between chunks.

    Returns:
        Path of the extracted binary.

    Raises:
        DownloadError: If the archive cannot be fetched.
        ExtractError: If it cannot be unpacked or lacks the binary.
    """
    url = spec.archive_url(version, latest=latest)
    archive_path = workdir / url.rsplit("/", 1)[-1]
    mirror.download_file(url, archive_path, timeout=timeout, cancel=cancel)

    extract_dir = workdir / "extracted"
    archive.extract_archive(archive_path, extract_dir)
    return archive.find_member(extract_dir, spec.member_path(version))
