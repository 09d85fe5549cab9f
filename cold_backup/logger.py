import functools
import logging
import sys

from cold_backup import constants

_NOISY_LOGGERS = ('boto3', 'botocore', 's3transfer', 'urllib3')


def __create_logger() -> logging.Logger:
	from cold_backup.utils.log_utils import LOG_FORMATTER
	logger = logging.Logger(constants.PACKAGE_ID)
	handler = logging.StreamHandler(sys.stdout)
	handler.setFormatter(LOG_FORMATTER)
	logger.addHandler(handler)
	return logger


@functools.lru_cache
def get() -> logging.Logger:
	from cold_backup.utils.log_utils import get_log_level
	logger = __create_logger()
	logger.setLevel(get_log_level())
	return logger


def apply_log_level(debug: bool):
	get().setLevel(logging.DEBUG if debug else logging.INFO)
	for name in _NOISY_LOGGERS:
		logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
