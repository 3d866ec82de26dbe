"""
Result models — per-product outcomes and the aggregated run report.

Product tasks never raise past the orchestrator: every failure is
captured in a ``ProductResult`` so one broken download never hides
the outcome of the others.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ocget.core.models.product import Product


@dataclass
class ProductResult:
    """Outcome of installing (or re-pointing) one product."""

    product: Product
    status: Literal["ok", "failed"] = "ok"
    version: str = ""
    artifact: str = ""
    link: str = ""
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, product: Product, version: str, artifact: str, link: str) -> ProductResult:
        return cls(product=product, version=version, artifact=artifact, link=link)

    @classmethod
    def failure(cls, product: Product, error: str, version: str = "") -> ProductResult:
        return cls(product=product, status="failed", version=version, error=error)

    def to_dict(self) -> dict:
        result: dict = {
            "product": self.product.value,
            "status": self.status,
            "version": self.version,
            "duration_ms": self.duration_ms,
        }
        if self.ok:
            result["artifact"] = self.artifact
            result["link"] = self.link
        else:
            result["error"] = self.error
        return result


@dataclass
class InstallReport:
    """All product results of one run, in selection order."""

    results: list[ProductResult] = field(default_factory=list)
    install_dir: str = ""
    requested_version: str = ""

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded == 0:
            return "failed"
        return "partial"

    def get(self, product: Product) -> ProductResult | None:
        for result in self.results:
            if result.product == product:
                return result
        return None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "install_dir": self.install_dir,
            "requested_version": self.requested_version,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "products": [r.to_dict() for r in self.results],
        }
