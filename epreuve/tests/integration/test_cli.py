"""
Integration tests for the command-line entry point.
"""

import os
import textwrap

import pytest

from epreuve.cli import CAPTURE_FILE, apply_arguments, build_parser, main
from epreuve.config import Settings
from epreuve.reports import load_report, report_name_for

PASSING = """
    class MathChecks:
        def test_addition(self):
            print("adding numbers")
            assert 1 + 1 == 2
"""

FAILING = """
    class MathChecks:
        def test_addition(self):
            assert 1 + 1 == 3, "arithmetic is broken"

        def test_subtraction(self):
            assert 2 - 1 == 1
"""

BROKEN = """
    import module_that_does_not_exist
"""


@pytest.fixture
def workspace(tmp_path, monkeypatch, isolated_imports):
    """Empty project directory as cwd, with a clean environment."""
    for name in list(os.environ):
        if name.upper().startswith("EPREUVE_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "tests").mkdir()
    return tmp_path


def write_test(workspace, source, name="test_epv_cli_math.py"):
    path = workspace / "tests" / name
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


class TestParser:
    """Argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.targets == []
        assert args.matchers is None
        assert args.pattern == "test_*.py"
        assert args.capture is None

    def test_capture_without_file(self):
        assert build_parser().parse_args(["--capture"]).capture == ""

    def test_flags_overlay_settings(self):
        args = build_parser().parse_args(
            ["--reports-dir", "out", "--no-color", "--undecorated", "-v"]
        )
        settings = apply_arguments(Settings(), args)

        assert settings.reports_dir == "out"
        assert settings.color is False
        assert settings.decorated is False
        assert settings.log_levels == "warn,info,debug"

    def test_quiet_disables_levels(self):
        args = build_parser().parse_args(["-q"])
        assert apply_arguments(Settings(), args).log_levels == ""


class TestMain:
    """End-to-end runs through main()."""

    def test_passing_run(self, workspace, capsys):
        write_test(workspace, PASSING)

        assert main(["--undecorated"]) == 0
        out = capsys.readouterr().out
        assert "tests.test_epv_cli_math.MathChecks" in out
        assert "Ran 1 test in" in out

    def test_failing_run(self, workspace, capsys):
        write_test(workspace, FAILING)

        assert main(["--undecorated"]) == 1
        out = capsys.readouterr().out
        assert "[ arithmetic is broken ]" in out

    def test_no_tests_found(self, workspace, capsys):
        assert main(["--undecorated"]) == 0
        assert "No tests found, nothing to test." in capsys.readouterr().out

    def test_matcher_without_match(self, workspace, capsys):
        write_test(workspace, PASSING)

        assert main(["-m", "Nope", "--undecorated"]) == 0
        assert "[warn] No tests matched Nope" in capsys.readouterr().out

    def test_quiet_hides_no_match_warning(self, workspace, capsys):
        write_test(workspace, PASSING)

        assert main(["-m", "Nope", "-q", "--undecorated"]) == 0
        assert "No tests matched" not in capsys.readouterr().out

    def test_matcher_selects_tests(self, workspace, capsys):
        write_test(workspace, FAILING)

        assert main(["-m", "*.test_subtraction", "--undecorated"]) == 0
        out = capsys.readouterr().out
        assert "test_subtraction" in out
        assert "test_addition" not in out

    def test_explicit_file_target(self, workspace, capsys):
        path = write_test(workspace, PASSING, name="arithmetic.py")

        assert main([str(path), "--undecorated"]) == 0
        assert "Ran 1 test in" in capsys.readouterr().out

    def test_reports_dir(self, workspace, capsys):
        write_test(workspace, FAILING)
        reports = workspace / "build" / "reports"

        assert main(["--reports-dir", str(reports), "--undecorated"]) == 1

        name = report_name_for("tests.test_epv_cli_math.MathChecks")
        report = load_report(reports / name)
        assert report is not None
        assert report.failed == 1
        assert f"less {reports / name}" in capsys.readouterr().out

    def test_capture_into_reports_dir(self, workspace, capsys):
        write_test(workspace, PASSING)
        reports = workspace / "reports"

        assert main(["--reports-dir", str(reports), "--undecorated", "--capture"]) == 0

        captured = (reports / CAPTURE_FILE).read_text(encoding="utf-8")
        assert "adding numbers" in captured
        assert "adding numbers" not in capsys.readouterr().out

    def test_config_file(self, workspace, capsys):
        write_test(workspace, FAILING)
        (workspace / "epreuve.yaml").write_text(
            "decorated: false\nreports_dir: from-config\n", encoding="utf-8"
        )

        assert main([]) == 1
        assert (workspace / "from-config").is_dir()

    def test_missing_config_is_fatal(self, workspace):
        assert main(["--config", "absent.yaml"]) == 2

    def test_import_failure_skipped(self, workspace, capsys):
        write_test(workspace, BROKEN, name="test_epv_cli_broken.py")
        write_test(workspace, PASSING)

        assert main(["--undecorated"]) == 0

    def test_import_failure_fatal_in_strict_mode(self, workspace):
        write_test(workspace, BROKEN, name="test_epv_cli_broken.py")
        assert main(["--strict", "--undecorated"]) == 2
