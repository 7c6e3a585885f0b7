# Tests for reposync.logger
# Rich console output

import io

from rich.console import Console

from reposync.logger import SyncLogger


def make_logger(verbose: bool = False) -> tuple[SyncLogger, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, no_color=True, width=120)
    return SyncLogger(console=console, verbose=verbose), buffer


class TestSyncLogger:
    """Tests for SyncLogger."""

    def test_levels(self):
        logger, buffer = make_logger()
        logger.info("fetching")
        logger.success("published")
        logger.warning("conflict")
        logger.error("failed")
        output = buffer.getvalue()
        assert "fetching" in output
        assert "published" in output
        assert "conflict" in output
        assert "failed" in output

    def test_debug_only_when_verbose(self):
        quiet, quiet_buffer = make_logger()
        quiet.debug("details")
        assert quiet_buffer.getvalue() == ""

        loud, loud_buffer = make_logger(verbose=True)
        loud.debug("details")
        assert "details" in loud_buffer.getvalue()

    def test_markup_in_paths_is_literal(self):
        logger, buffer = make_logger()
        logger.warning("Conflict in [bold]notes[/bold].txt")
        assert "[bold]notes[/bold].txt" in buffer.getvalue()

    def test_default_console_writes_to_stderr(self):
        logger = SyncLogger()
        assert logger.console.stderr is True
