"""
------------------------------------------------------------------------------
Project:        InkPlanner
File:           inkplanner/logger.py
Version:        1.0.0
Description:    Central logging setup for InkPlanner.
                Console/file output, per-component levels and DEBUG
                helpers for OCR round-trips and SQL statements.
------------------------------------------------------------------------------
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict

# Root logger for the whole package
APP_LOGGER_NAME = "inkplanner"

DEFAULT_FORMAT = "%(asctime)s [%(levelname).4s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Longer OCR texts are cut in the raw interaction log
MAX_LOGGED_TEXT = 4000


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    component_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Configures the 'inkplanner' logger tree.

    Args:
        level: Default level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path of a log file; parent folders are created.
        component_levels: Mapping of component name (e.g. 'ocr') to level.
    """
    root = logging.getLogger(APP_LOGGER_NAME)

    # Re-setup must not stack handlers
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if component_levels:
        for component, cmp_level in component_levels.items():
            set_component_level(component, cmp_level)


def setup_logging_from_config(config) -> None:
    """Applies the level, log file and component levels stored in an AppConfig."""
    setup_logging(
        level=config.get_log_level(),
        log_file=str(config.get_log_file_path()),
        component_levels=config.get_log_components()
    )


def get_logger(name: str) -> logging.Logger:
    """Returns the logger 'inkplanner.<name>' (names already rooted are kept)."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def set_component_level(component: str, level: str) -> None:
    """Changes the level of one component at runtime. Unknown level names are ignored."""
    logger = get_logger(component)
    numeric_level = getattr(logging, level.upper(), None)
    if isinstance(numeric_level, int):
        logger.setLevel(numeric_level)
        logger.propagate = True


def log_ocr_interaction(provider: str, mime_type: str, payload_size: int, text: str) -> None:
    """
    Dumps one OCR round-trip at DEBUG level on 'inkplanner.ocr.raw'.
    """
    logger = get_logger("ocr.raw")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"=== OCR REQUEST: provider={provider} mime={mime_type} bytes={payload_size} ===")
        logger.debug("=== OCR RESPONSE START ===")
        if len(text) > MAX_LOGGED_TEXT:
            logger.debug(text[:MAX_LOGGED_TEXT] + f"... [{len(text) - MAX_LOGGED_TEXT} chars truncated]")
        else:
            logger.debug(text)
        logger.debug("=== OCR INTERACTION END ===")


def log_sql_query(query: str, params: Optional[tuple] = None, result_count: int = 0) -> None:
    """
    Database debugging helper, DEBUG level on 'inkplanner.db.sql'.
    """
    logger = get_logger("db.sql")
    if logger.isEnabledFor(logging.DEBUG):
        msg = f"SQL: {' '.join(query.split())}"
        if params:
            msg += f" | PARAMS: {params}"
        msg += f" | RESULTS: {result_count}"
        logger.debug(msg)
