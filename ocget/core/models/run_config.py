"""
Run configuration — everything a single invocation needs, built once.

Constructed by the CLI from flags (and the optional settings file),
then handed read-only to every product task.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ocget.core.models.product import LATEST, Product, ProductSpec, get_spec

DEFAULT_TIMEOUT = 120


def default_install_dir() -> Path:
    """``$HOME/bin``."""
    return Path.home() / "bin"


class RunConfig(BaseModel):
    """Immutable configuration of one run."""

    model_config = ConfigDict(frozen=True)

    products: tuple[Product, ...]
    install_dir: Path = Field(default_factory=default_install_dir)
    version: str = LATEST
    force: bool = False
    set_only: bool = False
    keep_tmp: bool = False
    timeout: int = DEFAULT_TIMEOUT
    mirrors: dict[str, str] = Field(default_factory=dict)

    @property
    def wants_latest(self) -> bool:
        return self.version == LATEST

    def spec_for(self, product: Product) -> ProductSpec:
        """Product spec with this run's mirror overrides applied."""
        return get_spec(product, self.mirrors)

    def validate_run(self) -> list[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors: list[str] = []
        if not self.products:
            errors.append("No product selected. Use --all or pick at least one product.")
        if self.set_only and self.wants_latest:
            errors.append("--set requires an explicit --version.")
        if not self.version:
            errors.append("--version must not be empty.")
        return errors
