import logging

from karaoke_qc.utils.logging import setup_logging, get_logger


def test_setup_logging_adds_file_handler(tmp_path):
    log_path = tmp_path / "logs" / "app.log"

    logger = setup_logging(level="INFO", log_file=log_path, verbose=False)

    handlers = [type(h) for h in logger.handlers]
    assert logging.FileHandler in handlers
    assert logging.StreamHandler in handlers
    assert log_path.parent.exists()


def test_setup_logging_verbose_formatter():
    logger = setup_logging(level="DEBUG", verbose=True)

    # Verbose mode includes timestamps
    formatters = [h.formatter for h in logger.handlers if h.formatter]
    assert any("%(asctime)s" in f._fmt for f in formatters)


def test_setup_logging_level_from_env(monkeypatch):
    monkeypatch.setenv("KARAOKE_QC_LOG_LEVEL", "warning")
    logger = setup_logging()
    assert logger.level == logging.WARNING


def test_setup_logging_replaces_handlers():
    setup_logging(level="INFO")
    logger = setup_logging(level="INFO")
    assert len(logger.handlers) == 1


def test_get_logger_returns_named_logger():
    logger = get_logger("custom")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "custom"
