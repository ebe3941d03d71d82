"""
Tests for the command-line entry point: flags, menu and exit codes.
"""

import io
import textwrap
from pathlib import Path

import pytest

from archzfs_installer.main import main


def _run(tmp_path: Path, argv, stdin_text=""):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = main(
        [*argv, "--log", str(tmp_path / "installer.log"), "--step-delay", "0"],
        stdin=io.StringIO(stdin_text),
        stdout=stdout,
        stderr=stderr,
    )
    return code, stdout.getvalue(), stderr.getvalue()


def _config(tmp_path: Path, **values) -> str:
    p = tmp_path / "installer.yaml"
    p.write_text("".join(f"{k}: {v}\n" for k, v in values.items()))
    return str(p)


class TestMenu:
    def test_menu_choice_two_runs_chroot(self, tmp_path):
        code, out, err = _run(tmp_path, ["--dry-run"], "2\nalice\nsecret\nintel\n")
        assert code == 0, err
        assert "Choose an option:" in out
        assert "4. Transfer" in out
        assert "Enter username: " in out

    def test_invalid_choice_exits_zero(self, tmp_path):
        code, out, _err = _run(tmp_path, [], "9\n")
        assert code == 0
        assert "Invalid choice" in out

    def test_end_of_input_exits_one(self, tmp_path):
        code, _out, err = _run(tmp_path, [], "")
        assert code == 1
        assert "Unexpected end of input" in err

    def test_transfer_from_menu(self, tmp_path):
        code, _out, _err = _run(tmp_path, [], "4\n")
        assert code == 0


class TestFlags:
    def test_unknown_flag_reported_without_menu(self, tmp_path):
        code, out, err = _run(tmp_path, ["--bogus"])
        assert code == 0
        assert "Invalid Flag Passed: --bogus" in err
        assert "Choose an option:" not in out

    @pytest.mark.parametrize("flag", ["--us", "--ch", "--z"])
    def test_abbreviated_group_flag_is_invalid(self, tmp_path, flag):
        code, out, err = _run(tmp_path, [flag, "--dry-run"], "alice\n\n\n")
        assert code == 0
        assert f"Invalid Flag Passed: {flag}" in err
        assert "Enter username" not in out
        assert "Available drives" not in out

    def test_malformed_config_exits_one(self, tmp_path):
        bad = tmp_path / "installer.yaml"
        bad.write_text("device_dir: [unclosed\n")
        code, _out, err = _run(tmp_path, ["--zfs", "--dry-run", "--config", str(bad)])
        assert code == 1
        assert "Invalid YAML" in err
        assert "Traceback" not in err

    def test_zfs_dry_run(self, tmp_path, by_id_dir):
        cfg = _config(tmp_path, device_dir=str(by_id_dir))
        code, out, err = _run(tmp_path, ["--zfs", "--dry-run", "--config", cfg], "1\n")
        assert code == 0, err
        assert "  1) ata-WDC_WD10EZEX_WD-WCC6Y3" in out
        assert "Choose an option:" not in out

    def test_zfs_without_devices_exits_one(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        cfg = _config(tmp_path, device_dir=str(empty))
        code, _out, err = _run(tmp_path, ["--zfs", "--dry-run", "--config", cfg])
        assert code == 1
        assert "No candidate devices" in err

    def test_failing_step_exits_one_and_names_command(self, tmp_path):
        recipes = tmp_path / "recipes.yaml"
        recipes.write_text(
            textwrap.dedent(
                """\
                stages:
                  InRootConfigure:
                    - label: ok
                      command: echo first
                    - label: broken
                      command: "false"
                    - label: never
                      command: touch {root}/never
                """
            )
        )
        cfg = _config(tmp_path, recipes_path=str(recipes), staging_root=str(tmp_path))
        code, out, err = _run(tmp_path, ["--chroot", "--config", cfg], "alice\nsecret\namd\n")

        assert code == 1
        assert "first" in out
        assert "Command 'false' failed with exit status: 1" in err
        assert not (tmp_path / "never").exists()

    def test_groups_stop_at_first_failure(self, tmp_path):
        code, out, _err = _run(tmp_path, ["--chroot", "--transfer", "--dry-run"], "alice\n\n")
        assert code == 1
        assert "Enter your Platform" not in out
