"""
Installed artifacts — version-suffixed files and their symlinks.

Layout inside the install directory::

    openshift-client-linux-4.14.3      (artifact, executable)
    oc -> openshift-client-linux-4.14.3

Symlinks are relative and replaced atomically, and are only ever
pointed at an artifact that exists.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ocget.core.errors import ArtifactMissingError, InstallError

logger = logging.getLogger(__name__)


def remove_artifact(path: Path) -> bool:
    """Delete an existing artifact (``--force``). Returns True if one was removed."""
    if path.is_symlink() or path.exists():
        path.unlink()
        logger.info("Removed existing %s", path)
        return True
    return False


def artifact_exists(path: Path) -> bool:
    return path.is_file()


def place_binary(source: Path, target: Path) -> Path:
    """Move an extracted binary to its version-suffixed name and make it executable."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(target))
    os.chmod(target, 0o755)
    logger.debug("Placed %s", target)
    return target


def update_symlink(link: Path, target: Path) -> Path:
    """(Re)point ``link`` at ``target``.

    The new link is created beside the old one and renamed over it,
    so readers never see a missing or dangling ``link``.

    Raises:
        ArtifactMissingError: If ``target`` does not exist.
        InstallError: If ``link`` is a regular file.
    """
    if not artifact_exists(target):
        raise ArtifactMissingError(f"{target} does not exist, not linking {link.name}")

    if link.exists() and not link.is_symlink():
        raise InstallError(f"{link} exists and is not a symlink, refusing to replace it")

    relative = os.path.relpath(target, link.parent)
    tmp_link = link.with_name(f".{link.name}.ocget-tmp")
    tmp_link.unlink(missing_ok=True)
    os.symlink(relative, tmp_link)
    os.replace(tmp_link, link)
    logger.debug("Linked %s -> %s", link, relative)
    return link
