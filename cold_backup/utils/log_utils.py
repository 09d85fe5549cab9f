import contextlib
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Generator

LOG_FORMATTER = logging.Formatter('[%(asctime)s %(levelname)s] (%(funcName)s) %(message)s')
LOG_FORMATTER_NO_FUNC = logging.Formatter('[%(asctime)s %(levelname)s] %(message)s')
LOG_FORMATTER.default_msec_format = '%s.%03d'
LOG_FORMATTER_NO_FUNC.default_msec_format = '%s.%03d'


def get_log_level() -> int:
	from cold_backup.config.config import Config
	return logging.DEBUG if Config.get().debug else logging.INFO


def create_file_handler(log_file: Path) -> RotatingFileHandler:
	log_file.parent.mkdir(parents=True, exist_ok=True)
	handler = RotatingFileHandler(
		log_file,
		maxBytes=10 * 1024 * 1024,
		backupCount=1,
		encoding='utf8'
	)
	handler.setFormatter(LOG_FORMATTER)
	return handler


@contextlib.contextmanager
def open_file_handler(logger: logging.Logger, log_file: Path) -> Generator[RotatingFileHandler, None, None]:
	"""
	Mirrors the records of the given logger into a rotating log file, until the context exits
	"""
	handler = create_file_handler(log_file)
	logger.addHandler(handler)
	try:
		yield handler
	finally:
		logger.removeHandler(handler)
		handler.close()
