"""
Tests for the CLI — flag parsing, usage errors, and end-to-end runs.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ocget.main import cli
from tests.fakes import make_tarball


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "OpenShift" in result.output
        assert "--installdir" in result.output

    def test_short_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "Usage:" in result.output


class TestUsageErrors:
    def test_no_product(self, install_dir: Path):
        result = CliRunner().invoke(cli, ["--installdir", str(install_dir)])
        assert result.exit_code == 2
        assert "Usage:" in result.output
        assert "No product selected" in result.output

    @pytest.mark.parametrize(
        "extra",
        [[], ["--all"], ["--crc"], ["--client", "--force"], ["--odo", "--json"]],
    )
    def test_set_without_version(self, extra, install_dir: Path):
        result = CliRunner().invoke(cli, ["--set", "--installdir", str(install_dir), *extra])
        assert result.exit_code == 2
        assert "--set requires --version" in result.output

    @pytest.mark.parametrize("version", ["latest", ""])
    def test_set_with_latest_or_empty_version(self, version, fake_mirror, install_dir: Path):
        result = CliRunner().invoke(
            cli, ["--crc", "--set", "--version", version, "--installdir", str(install_dir)],
        )
        assert result.exit_code == 2
        assert "--set requires --version" in result.output
        assert fake_mirror.requests == []

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_unknown_flag_anywhere(self, position, install_dir: Path):
        args = ["--crc", "--version", "1.2.3"]
        args.insert(position if position < 2 else len(args), "--bogus")
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 2
        assert "No such option" in result.output

    def test_positional_argument(self):
        result = CliRunner().invoke(cli, ["--crc", "extra"])
        assert result.exit_code == 2
        assert "Usage:" in result.output

    def test_version_requires_value(self):
        result = CliRunner().invoke(cli, ["--crc", "--version"])
        assert result.exit_code == 2


class TestInstallRuns:
    def _invoke(self, install_dir: Path, *args: str):
        return CliRunner().invoke(cli, ["--installdir", str(install_dir), *args])

    def test_crc_explicit_version(self, fake_mirror, install_dir: Path):
        fake_mirror.add_crc("1.2.3")
        result = self._invoke(install_dir, "--crc", "--version", "1.2.3")
        assert result.exit_code == 0, result.output
        assert (install_dir / "crc").resolve() == (install_dir / "crc-linux-1.2.3").resolve()
        assert "crc" in result.output
        assert "1/1 succeeded" in result.output

    def test_summary_printed(self, fake_mirror, install_dir: Path):
        fake_mirror.add_crc("1.2.3")
        result = self._invoke(install_dir, "--crc", "--version", "1.2.3")
        assert "crc-linux-amd64.tar.xz" in result.output

    def test_set_missing_artifact(self, fake_mirror, install_dir: Path):
        result = self._invoke(install_dir, "--client", "--set", "--version", "9.9.9")
        assert result.exit_code == 1
        assert "openshift-client-linux-9.9.9" in result.output
        assert not (install_dir / "oc").exists()
        assert fake_mirror.requests == []

    def test_set_existing_artifact(self, fake_mirror, install_dir: Path):
        (install_dir / "openshift-client-linux-9.9.9").write_bytes(b"oc")
        result = self._invoke(install_dir, "--oc", "--set", "--version", "9.9.9")
        assert result.exit_code == 0, result.output
        assert (install_dir / "oc").is_symlink()
        assert fake_mirror.requests == []

    @pytest.mark.parametrize("flag", ["--all", "-a"])
    def test_all_equals_every_flag(self, flag, fake_mirror, tmp_path: Path):
        for add in (fake_mirror.add_client, fake_mirror.add_installer, fake_mirror.add_crc, fake_mirror.add_odo):
            add("1.0.0")

        by_all = CliRunner().invoke(
            cli, ["--installdir", str(tmp_path / "a"), flag, "--version", "1.0.0", "--json"],
        )
        by_each = CliRunner().invoke(
            cli,
            ["--installdir", str(tmp_path / "b"), "--oc", "--installer", "--crc", "--odo",
             "--version", "1.0.0", "--json"],
        )

        assert by_all.exit_code == 0, by_all.output
        assert by_each.exit_code == 0, by_each.output
        products_all = [p["product"] for p in json.loads(by_all.stdout)["products"]]
        products_each = [p["product"] for p in json.loads(by_each.stdout)["products"]]
        assert products_all == products_each == ["client", "installer", "crc", "odo"]

    @pytest.mark.parametrize(
        "flags,expected",
        [
            (["--client"], ["client"]),
            (["--installer", "--odo"], ["installer", "odo"]),
            (["--crc", "--oc"], ["client", "crc"]),
            (["--install"], ["installer"]),
        ],
    )
    def test_exactly_selected(self, flags, expected, fake_mirror, install_dir: Path):
        result = self._invoke(install_dir, *flags, "--version", "1.0.0", "--json")
        data = json.loads(result.stdout)
        assert [p["product"] for p in data["products"]] == expected

    def test_partial_failure_exit_code(self, fake_mirror, install_dir: Path):
        fake_mirror.add_crc("1.2.3")
        result = self._invoke(install_dir, "--crc", "--odo", "--version", "1.2.3", "--json")
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["status"] == "partial"
        assert (install_dir / "crc").is_symlink()

    def test_force(self, fake_mirror, install_dir: Path):
        fake_mirror.add_crc("1.2.3")
        (install_dir / "crc-linux-1.2.3").write_bytes(b"stale")
        result = self._invoke(install_dir, "--crc", "-f", "--version", "1.2.3")
        assert result.exit_code == 0, result.output
        assert (install_dir / "crc-linux-1.2.3").read_bytes() == b"crc 1.2.3"

    def test_installdir_from_env(self, fake_mirror, install_dir: Path, monkeypatch):
        fake_mirror.add_crc("1.2.3")
        monkeypatch.setenv("OCGET_INSTALL_DIR", str(install_dir))
        result = CliRunner().invoke(cli, ["--crc", "--version", "1.2.3"])
        assert result.exit_code == 0, result.output
        assert (install_dir / "crc").is_symlink()

    def test_default_installdir_is_home_bin(self, fake_mirror):
        fake_mirror.add_crc("1.2.3")
        result = CliRunner().invoke(cli, ["--crc", "--version", "1.2.3"])
        assert result.exit_code == 0, result.output
        assert (Path.home() / "bin" / "crc").is_symlink()

    def test_config_mirror_override(self, fake_mirror, install_dir: Path, tmp_path: Path):
        fake_mirror.add(
            "https://mirror.example.com/crc/1.2.3/crc-linux-amd64.tar.xz",
            make_tarball({"crc-linux-1.2.3-amd64/crc": b"crc"}, mode="w:xz"),
        )
        settings = tmp_path / "ocget.yml"
        settings.write_text("mirrors:\n  crc: https://mirror.example.com/crc\n")
        result = self._invoke(install_dir, "--config", str(settings), "--crc", "--version", "1.2.3")
        assert result.exit_code == 0, result.output
        assert fake_mirror.requests == ["https://mirror.example.com/crc/1.2.3/crc-linux-amd64.tar.xz"]

    def test_bad_config(self, fake_mirror, install_dir: Path, tmp_path: Path):
        settings = tmp_path / "ocget.yml"
        settings.write_text("mirrors: [not, a, mapping]\n")
        result = self._invoke(install_dir, "--config", str(settings), "--crc")
        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert fake_mirror.requests == []
