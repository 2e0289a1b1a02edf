from pathlib import Path

from loguru import logger

from nodepad.logging_config import configure_logging


def test_file_sink_writes_daily_log(temp_base: Path) -> None:
    log_directory = temp_base / "logs"
    try:
        configure_logging("DEBUG", log_directory)
        logger.debug("written to file")
        logger.complete()
    finally:
        # Removing the handlers closes the log file.
        configure_logging()

    log_files = list(log_directory.glob("nodepad-*.log"))
    assert len(log_files) == 1
    assert "written to file" in log_files[0].read_text(encoding="utf-8")
