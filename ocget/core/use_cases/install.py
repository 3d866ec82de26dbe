"""
Install use case — the per-product install contract and the run orchestrator.

Flow per product:
    resolve version → force cleanup → existence check
        → fetch + extract → place artifact → symlink

``--set`` skips straight from the existence check to the symlink.
Products run concurrently, one worker each, and share nothing but
the read-only ``RunConfig``.
"""

from __future__ import annotations

import concurrent.futures
import logging
import shutil
import tempfile
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ocget.core.errors import ArtifactMissingError, ConfigError, InstallError
from ocget.core.models.product import Product
from ocget.core.models.result import InstallReport, ProductResult
from ocget.core.models.run_config import RunConfig
from ocget.core.observability.logging_config import product_logger
from ocget.core.services import artifacts
from ocget.core.services.fetch import fetch_and_extract
from ocget.core.services.version_resolver import resolve_version

logger = logging.getLogger(__name__)

TMP_PREFIX = ".ocget-"

# Seconds to wait for cancelled workers before the working directory goes.
CANCEL_GRACE = 2.0


@dataclass(frozen=True)
class PlannedProduct:
    """One line of the pre-run summary."""

    product: Product
    binary_name: str
    version: str
    source: str
    link: Path

    def describe(self) -> str:
        return f"{self.product.value} ({self.binary_name}) {self.version} from {self.source}"


def plan_summary(config: RunConfig) -> list[PlannedProduct]:
    """Describe what the run is about to do, one entry per selected product."""
    planned: list[PlannedProduct] = []
    for product in config.products:
        spec = config.spec_for(product)
        version = spec.normalize_version(config.version)
        if config.set_only:
            source = str(config.install_dir / spec.artifact_name(version))
        elif config.wants_latest:
            source = spec.base_url
        else:
            source = spec.archive_url(version)
        planned.append(
            PlannedProduct(
                product=product,
                binary_name=spec.binary_name,
                version=version,
                source=source,
                link=config.install_dir / spec.binary_name,
            )
        )
    return planned


def install_product(
    config: RunConfig,
    product: Product,
    tmp_root: Path,
    cancel: threading.Event | None = None,
) -> ProductResult:
    """Install (or re-point) one product.

    Never raises ``InstallError``: failures come back as a failed result.
    Setting ``cancel`` abandons an in-flight download.
    """
    spec = config.spec_for(product)
    log = product_logger(__name__, product.value)
    workdir = tmp_root / product.value
    start = time.monotonic()
    version = "" if config.wants_latest else spec.normalize_version(config.version)

    try:
        if config.set_only:
            resolved_binary = None
        else:
            workdir.mkdir(parents=True, exist_ok=True)
            resolved = resolve_version(
                spec, config.version, workdir, timeout=config.timeout, cancel=cancel,
            )
            version = resolved.version
            resolved_binary = resolved.binary

        target = config.install_dir / spec.artifact_name(version)
        link = config.install_dir / spec.binary_name

        if config.force and artifacts.remove_artifact(target):
            log.info("--force: deleted %s", target.name)

        exists = artifacts.artifact_exists(target)
        if config.set_only:
            if not exists:
                raise ArtifactMissingError(
                    f"{target.name} not found in {config.install_dir}, symlink left unchanged"
                )
        else:
            if exists:
                log.info("%s already present, refreshing it", target.name)
            binary = resolved_binary or fetch_and_extract(
                spec, version, workdir, timeout=config.timeout, cancel=cancel,
            )
            artifacts.place_binary(binary, target)

        artifacts.update_symlink(link, target)

    except (InstallError, OSError) as exc:
        log.error("%s", exc)
        result = ProductResult.failure(product, str(exc), version=version)
    else:
        log.info("%s -> %s", link.name, target.name)
        result = ProductResult.success(product, version, str(target), str(link))

    result.duration_ms = int((time.monotonic() - start) * 1000)
    return result


def run_install(
    config: RunConfig,
    *,
    announce: Callable[[list[PlannedProduct]], None] | None = None,
) -> InstallReport:
    """Install every selected product concurrently.

    Args:
        config: Immutable run configuration.
        announce: Optional callback receiving the plan summary, called
            once the working directory exists and before any download.

    Returns:
        InstallReport with one result per selected product, in
        selection order.

    Raises:
        ConfigError: If the configuration is invalid or the install
            directory cannot be created.
        KeyboardInterrupt: Re-raised after outstanding downloads are
            cancelled and the working directory is removed.
    """
    errors = config.validate_run()
    if errors:
        raise ConfigError("; ".join(errors))

    try:
        config.install_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create install directory {config.install_dir}: {e}") from e

    tmp_root = Path(tempfile.mkdtemp(prefix=TMP_PREFIX, dir=config.install_dir))
    logger.debug("Working directory %s", tmp_root)

    report = InstallReport(
        install_dir=str(config.install_dir),
        requested_version=config.version,
    )

    try:
        if announce:
            announce(plan_summary(config))

        results: dict[Product, ProductResult] = {}
        cancel = threading.Event()
        pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=len(config.products),
            thread_name_prefix="ocget",
        )
        futures: dict[concurrent.futures.Future[ProductResult], Product] = {}
        try:
            for product in config.products:
                futures[pool.submit(install_product, config, product, tmp_root, cancel)] = product
            for future in concurrent.futures.as_completed(futures):
                product = futures[future]
                try:
                    results[product] = future.result()
                except Exception as exc:
                    logger.exception("[%s] unexpected failure", product.value)
                    results[product] = ProductResult.failure(product, f"Unexpected error: {exc}")
        except KeyboardInterrupt:
            logger.warning("Interrupted, cancelling outstanding downloads")
            cancel.set()
            pool.shutdown(wait=False, cancel_futures=True)
            # Workers stop at their next chunk boundary.
            concurrent.futures.wait(futures, timeout=CANCEL_GRACE)
            raise
        pool.shutdown(wait=True)

        report.results = [results[p] for p in config.products]
    finally:
        if config.keep_tmp:
            logger.warning("Keeping working directory %s", tmp_root)
        else:
            shutil.rmtree(tmp_root, ignore_errors=True)

    logger.info(
        "Run finished: %d/%d product(s) installed", report.succeeded, report.total,
    )
    return report
