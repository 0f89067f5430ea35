"""Integration tests for the command-line interface.

These run backuplist in a subprocess against a real directory tree:
- Listing with exclusions and explicit files
- Gitignore-style ignore patterns
- Output file and summary options
- Exit codes for usage and configuration errors
- Broken pipe handling
"""

import platform
import subprocess
import sys
import textwrap

import pytest

# These tests start a fresh interpreter per case and only run with --run-cli-tests
pytestmark = pytest.mark.skipif(
    "not config.getoption('--run-cli-tests')", reason="Only run when --run-cli-tests is given"
)


@pytest.fixture
def backup_tree(tmp_path):
    """Create a root with a backup directory, a scratch directory and a config file."""
    root = tmp_path / "srv"
    (root / "home" / "cache").mkdir(parents=True)
    (root / "home" / "notes.txt").write_text("notes\n")
    (root / "home" / "notes.txt~").write_text("old notes\n")
    (root / "home" / "cache" / "blob.bin").write_bytes(b"\x00\x01")
    (root / "etc").mkdir()
    (root / "etc" / "hosts").write_text("127.0.0.1 localhost\n")

    config = tmp_path / "backup.conf"
    config.write_text(
        textwrap.dedent(
            f"""\
            # nightly backup
            [[ roots ]]
            [ {root} ]

            [[ backups ]]
            [ home ]
            [ etc ]
            hosts
            shadow

            [[ exclusions ]]
            [ home/cache ]
            """
        )
    )
    return root, config


def run_cli(args, cwd=None, timeout=10):
    """Run the backuplist CLI with the given arguments.

    Args:
        args: List of CLI arguments
        cwd: Working directory, which is where directory lines are checked
        timeout: Maximum time to wait for command to complete

    Returns:
        CompletedProcess object with stdout/stderr as text
    """
    cmd = [sys.executable, "-m", "backuplist.cli.main"] + [str(arg) for arg in args]
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, cwd=cwd, timeout=timeout)


def test_cli_lists_selected_paths(backup_tree):
    root, config = backup_tree
    result = run_cli([config], cwd=root)

    assert result.returncode == 0
    assert result.stdout.splitlines() == [
        f"{root}/home",
        f"{root}/home/notes.txt",
        f"{root}/home/notes.txt~",
        f"{root}/etc/hosts",
    ]
    assert result.stderr == ""


def test_cli_checks_directories_from_working_directory(backup_tree, tmp_path):
    """Run from elsewhere, the relative backup directories do not exist and nothing is listed."""
    root, config = backup_tree
    result = run_cli([config], cwd=tmp_path)

    assert result.returncode == 0
    assert result.stdout == ""


def test_cli_ignore_pattern(backup_tree):
    root, config = backup_tree
    result = run_cli(["-i", "*~", config], cwd=root)

    assert result.returncode == 0
    assert f"{root}/home/notes.txt~" not in result.stdout.splitlines()
    assert f"{root}/home/notes.txt" in result.stdout.splitlines()


def test_cli_exclude_file(backup_tree, tmp_path):
    root, config = backup_tree
    rules = tmp_path / "ignore.rules"
    rules.write_text("*.txt\n")

    result = run_cli(["-e", rules, config], cwd=root)

    assert result.returncode == 0
    assert result.stdout.splitlines() == [f"{root}/home", f"{root}/home/notes.txt~", f"{root}/etc/hosts"]


def test_cli_nonexistent_exclude_file(backup_tree):
    root, config = backup_tree
    result = run_cli(["-e", root / "missing.rules", config], cwd=root)

    assert result.returncode == 2
    assert "Rules file not found" in result.stderr


def test_cli_output_file_and_summary(backup_tree, tmp_path):
    root, config = backup_tree
    output = tmp_path / "files.txt"

    result = run_cli(["-o", output, "-s", "stderr", config], cwd=root)

    assert result.returncode == 0
    assert result.stdout == ""
    assert output.read_text().splitlines()[-1] == f"{root}/etc/hosts"
    assert "Paths: 4" in result.stderr
    assert "Missing: 1" in result.stderr
    assert "Pruned directories: 1" in result.stderr


def test_cli_verbose_reports_skipped_input(backup_tree):
    root, config = backup_tree
    config.write_text(config.read_text() + "[ nowhere ]\n")

    result = run_cli(["-v", config], cwd=root)

    assert result.returncode == 0
    assert "ignoring nowhere, not an existing directory" in result.stderr


def test_cli_missing_config():
    result = run_cli(["/nonexistent/backup.conf"])

    assert result.returncode == 2
    assert result.stdout == ""
    assert "usage: backuplist" in result.stderr


def test_cli_wrong_argument_count():
    result = run_cli([])

    assert result.returncode == 2
    assert result.stdout == ""


def test_cli_malformed_config(tmp_path):
    config = tmp_path / "broken.conf"
    config.write_text("[[ roots ]]\nstray.txt\n")

    result = run_cli([config], cwd=tmp_path)

    assert result.returncode == 1
    assert result.stdout == ""
    assert "Line 2" in result.stderr


def test_cli_missing_section(backup_tree):
    root, config = backup_tree
    config.write_text(f"[[ roots ]]\n[ {root} ]\n[[ exclusions ]]\n")

    result = run_cli([config], cwd=root)

    assert result.returncode == 1
    assert result.stdout == ""
    assert "Missing required section: [[ backups ]]" in result.stderr


def test_cli_version_info():
    result = run_cli(["--version"])

    assert result.returncode == 0
    assert result.stdout.startswith("backuplist ")


@pytest.mark.skipif(platform.system() == "Windows", reason="Signal testing not reliable on Windows")
def test_cli_sigpipe_handling(tmp_path):
    """A reader that stops early ends the listing without an error message."""
    root = tmp_path / "srv"
    (root / "bulk").mkdir(parents=True)
    for index in range(5000):
        (root / "bulk" / f"file{index:05d}.dat").write_text("")
    config = tmp_path / "backup.conf"
    config.write_text(f"[[ roots ]]\n[ {root} ]\n[[ backups ]]\n[ bulk ]\n[[ exclusions ]]\n")

    process = subprocess.Popen(
        f"{sys.executable} -m backuplist.cli.main {config} | head -n 5",
        shell=True,
        cwd=root,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    try:
        stdout, stderr = process.communicate(timeout=30)
    except subprocess.TimeoutExpired:
        process.kill()
        pytest.skip("Signal handling test timed out")

    assert len(stdout.splitlines()) == 5
    assert not stderr.strip()
