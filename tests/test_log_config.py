import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from dirauth import log_config


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def _file_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, TimedRotatingFileHandler)]


def test_setup_logging_writes_to_log_dir(tmp_path: Path) -> None:
    log_config.setup_logging(level="debug", log_dir=str(tmp_path / "logs"))

    logging.getLogger("dirauth.test").debug("hello")
    for h in _file_handlers():
        h.flush()

    assert logging.getLogger().level == logging.DEBUG
    assert "hello" in (tmp_path / "logs" / "dirauth.log").read_text(encoding="utf-8")
    assert logging.getLogger("ldap3").level == logging.WARNING


def test_setup_logging_reconfigure_replaces_handlers(tmp_path: Path) -> None:
    log_config.setup_logging(level="INFO", log_dir=str(tmp_path))
    log_config.setup_logging(level="WARNING", log_dir=str(tmp_path))

    assert len(_file_handlers()) == 1
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_console_only() -> None:
    log_config.setup_logging(level="INFO", log_dir=None)

    assert _file_handlers() == []


@pytest.mark.parametrize(["name", "expected"], [("bogus", logging.INFO), (None, logging.INFO), (" error ", logging.ERROR)])
def test_parse_level(name, expected: int) -> None:
    assert log_config.parse_level(name) == expected
