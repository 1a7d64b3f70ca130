import logging

import pytest

from rentals.core.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_only_without_log_dir(restore_root_logger):
    root = setup_logging("warning")
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1


def test_errors_also_go_to_their_own_file(restore_root_logger, tmp_path):
    setup_logging("INFO", str(tmp_path / "logs"))

    logging.getLogger("rentals.test").error("listing store unavailable")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "listing store unavailable" in (tmp_path / "logs" / "app.log").read_text()
    assert "listing store unavailable" in (tmp_path / "logs" / "errors.log").read_text()
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
