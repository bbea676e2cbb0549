"""
Unit tests for SystemReporter and the symbol table.
"""

import logging

from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.system_reporter import SystemReporter


class TestSystemReporter:
    """Verbosity filtering and file logging."""

    def test_logs_to_file_with_context(self, tmp_path):
        reporter = SystemReporter(name="epv_file", log_dir=str(tmp_path), verbose=1)
        reporter.info("discovered 3 classes", context="Discovery")
        for handler in reporter.logger.handlers:
            handler.flush()

        content = (tmp_path / "epv_file.log").read_text(encoding="utf-8")
        assert "[Discovery] discovered 3 classes" in content
        assert reporter.log_file.endswith("epv_file.log")

    def test_verbose_level_filters(self, caplog):
        reporter = SystemReporter(name="epv_verbose", level=logging.DEBUG, verbose=1)
        reporter.logger.propagate = True

        with caplog.at_level(logging.DEBUG, logger="epv_verbose"):
            reporter.debug("hidden detail", context="Runtime")
            reporter.debug("shown detail", context="Runtime", verbose_level=1)

        messages = [record.getMessage() for record in caplog.records]
        assert messages == ["[Runtime] shown detail"]

    def test_stderr_only_without_log_dir(self):
        reporter = SystemReporter(name="epv_stderr")
        assert reporter.log_file is None
        assert len(reporter.logger.handlers) == 1


class TestEpreuveEmoji:
    def test_outcome_symbols(self):
        symbols = EpreuveEmoji.get_all()
        assert symbols["SUCCESS"] == "✓"
        assert symbols["FAILURE"] == "☠"
        assert "IGNORED" in EpreuveEmoji.list_names()
