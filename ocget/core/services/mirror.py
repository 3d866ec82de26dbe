"""
Mirror access — the only place that talks HTTP.

Two operations: fetch a small text document (release metadata) and
stream a release archive to disk. Each is attempted exactly once;
any failure surfaces as ``DownloadError``.
"""

from __future__ import annotations

import logging
import threading
import urllib.error
import urllib.request
from pathlib import Path

from ocget import __version__
from ocget.core.errors import DownloadError

logger = logging.getLogger(__name__)

USER_AGENT = f"ocget/{__version__}"

_CHUNK = 64 * 1024


class _Cancelled(Exception):
    pass


def _request(url: str) -> urllib.request.Request:
    return urllib.request.Request(url, headers={"User-Agent": USER_AGENT})


def fetch_text(url: str, *, timeout: int = 120) -> str:
    """Fetch a small text resource and return it decoded as UTF-8.

    Raises:
        DownloadError: On any HTTP or network failure.
    """
    logger.debug("GET %s", url)
    try:
        with urllib.request.urlopen(_request(url), timeout=timeout) as resp:
            return resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        raise DownloadError(f"{url}: HTTP {exc.code} {exc.reason}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise DownloadError(f"{url}: {exc}") from exc


def download_file(
    url: str,
    dest: Path,
    *,
    timeout: int = 120,
    cancel: threading.Event | None = None,
) -> Path:
    """Stream ``url`` into ``dest``.

    A partially written file is removed before the error is raised.
    ``cancel`` is checked between chunks; once set, the transfer stops.

    Returns:
        ``dest``.

    Raises:
        DownloadError: On any HTTP or network failure, or when cancelled.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading %s", url)

    try:
        with urllib.request.urlopen(_request(url), timeout=timeout) as resp:
            total = int(resp.headers.get("Content-Length", 0) or 0)
            downloaded = 0
            last_progress = -1
            with open(dest, "wb") as f:
                while True:
                    if cancel is not None and cancel.is_set():
                        raise _Cancelled
                    chunk = resp.read(_CHUNK)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Progress tracking (log every 25%)
                    if total > 0:
                        pct = int(downloaded * 100 / total)
                        if pct >= last_progress + 25:
                            last_progress = pct
                            logger.debug("%s: %d%% (%d / %d bytes)", dest.name, pct, downloaded, total)
    except _Cancelled:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"{url}: cancelled") from None
    except urllib.error.HTTPError as exc:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"{url}: HTTP {exc.code} {exc.reason}") from exc
    except (urllib.error.URLError, OSError) as exc:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"{url}: {exc}") from exc

    logger.info("Downloaded %s (%d bytes)", dest.name, downloaded)
    return dest
