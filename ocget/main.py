"""
ocget — CLI entrypoint.

Usage:
    ocget --all
    ocget --client --installer --version 4.14.3
    ocget --crc --set --version 2.30.0
    python -m ocget.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from ocget import __version__
from ocget.core.errors import ConfigError
from ocget.core.models.product import ALL_PRODUCTS, LATEST, Product
from ocget.core.models.run_config import DEFAULT_TIMEOUT, RunConfig, default_install_dir
from ocget.core.observability.logging_config import setup_logging

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--all", "-a", "select_all", is_flag=True, help="Select every product.")
@click.option("--client", "--oc", "client", is_flag=True, help="Select the OpenShift client (oc).")
@click.option("--install", "--installer", "installer", is_flag=True, help="Select openshift-install.")
@click.option("--crc", is_flag=True, help="Select CodeReady Containers (crc).")
@click.option("--odo", is_flag=True, help="Select the odo developer CLI.")
@click.option("--force", "-f", is_flag=True, help="Delete an existing artifact before installing.")
@click.option(
    "--installdir",
    "install_dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="OCGET_INSTALL_DIR",
    default=None,
    help="Install directory (default: $HOME/bin).",
)
@click.option("--set", "set_only", is_flag=True, help="Only re-point symlinks to an existing --version.")
@click.option("--version", "version", default=None, metavar="VER", help="Version to install (default: latest).")
@click.option("--keep-tmp", is_flag=True, help="Keep the temporary working directory.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="OCGET_CONFIG",
    default=None,
    help="Settings file (default: ~/.config/ocget/config.yml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    select_all: bool,
    client: bool,
    installer: bool,
    crc: bool,
    odo: bool,
    force: bool,
    install_dir: Path | None,
    set_only: bool,
    version: str | None,
    keep_tmp: bool,
    as_json: bool,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """ocget — download and symlink OpenShift client tools.

    Fetches oc, openshift-install, crc and odo release archives from
    the OpenShift mirror into INSTALLDIR as <product>-linux-<version>,
    and points a symlink named after the binary at it.

    Examples:

        ocget --all

        ocget --oc --version 4.14.3

        ocget --crc --set --version 2.30.0
    """
    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("OCGET_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("OCGET_LOG_FILE"),
        log_file_level=os.environ.get("OCGET_LOG_FILE_LEVEL"),
    )

    # ── Usage validation ────────────────────────────────────────
    if set_only and (version is None or version in ("", LATEST)):
        raise click.UsageError("--set requires --version.", ctx=ctx)

    flags = {
        Product.CLIENT: client,
        Product.INSTALLER: installer,
        Product.CRC: crc,
        Product.ODO: odo,
    }
    products = ALL_PRODUCTS if select_all else tuple(p for p in ALL_PRODUCTS if flags[p])
    if not products:
        raise click.UsageError(
            "No product selected. Use --all, --client, --installer, --crc or --odo.", ctx=ctx,
        )

    # ── Run configuration ───────────────────────────────────────
    from ocget.core.config.loader import load_settings

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    config = RunConfig(
        products=products,
        install_dir=(install_dir or settings.install_dir or default_install_dir()).expanduser(),
        version=version or LATEST,
        force=force,
        set_only=set_only,
        keep_tmp=keep_tmp,
        mirrors=settings.mirrors,
        timeout=settings.timeout or DEFAULT_TIMEOUT,
    )

    from ocget.core.use_cases.install import run_install

    announce = None if (as_json or quiet) else _print_plan(config)

    try:
        report = run_install(config, announce=announce)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        if report.failed > 0:
            sys.exit(1)
        return

    for result in report.results:
        if result.ok:
            click.secho(f"   ✓ {result.product.value}", fg="green", nl=False)
            click.echo(f"  {Path(result.link).name} → {Path(result.artifact).name}")
        else:
            click.secho(f"   ✗ {result.product.value}", fg="red", nl=False)
            click.echo(f"  {result.error}")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    click.secho(
        f"   Result: {report.succeeded}/{report.total} succeeded",
        fg=status_color,
        bold=True,
    )

    if report.failed > 0:
        click.echo()
        sys.exit(1)

    click.echo()


def _print_plan(config: RunConfig):
    """Build the summary callback handed to ``run_install``."""

    def announce(planned) -> None:
        mode = "[set] " if config.set_only else "[force] " if config.force else ""
        click.secho(f"\n⚡ {mode}ocget {__version__} → {config.install_dir}", fg="cyan", bold=True)
        for item in planned:
            click.echo(f"   • {item.describe()}")
        click.echo()

    return announce


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
