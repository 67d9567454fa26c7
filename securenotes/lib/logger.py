"""Application logging utilities."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config import settings

LOGGER_NAME = "securenotes"


def configure_logging(log_dir: Path | None = None) -> logging.Logger:
	"""Configure a rotating log file in the data directory plus stderr warnings.

	Idempotent: a logger that already has handlers is returned untouched.
	"""
	logger = logging.getLogger(LOGGER_NAME)
	if logger.handlers:
		return logger

	logger.setLevel(settings.log_level())
	formatter = logging.Formatter(
		fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
	)

	directory = log_dir or settings.data_dir()
	try:
		directory.mkdir(parents=True, exist_ok=True)
		handler = RotatingFileHandler(
			directory / settings.LOG_FILE,
			maxBytes=settings.LOG_MAX_BYTES,
			backupCount=settings.LOG_BACKUP_COUNT,
			encoding="utf-8",
		)
	except OSError as e:
		logger.addHandler(logging.NullHandler())
		logger.warning("File logging disabled: %s", e)
	else:
		handler.setFormatter(formatter)
		logger.addHandler(handler)

	stream_handler = logging.StreamHandler()
	stream_handler.setLevel(logging.WARNING)
	stream_handler.setFormatter(formatter)
	logger.addHandler(stream_handler)

	logger.debug("Logger initialised in %s", directory)
	return logger


def reset_logging() -> None:
	"""Detach and close every handler (used between CLI invocations in tests)."""
	logger = logging.getLogger(LOGGER_NAME)
	for h in list(logger.handlers):
		logger.removeHandler(h)
		h.close()
