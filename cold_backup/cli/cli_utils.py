import functools
from importlib import metadata

from cold_backup import logger


@functools.lru_cache(None)
def get_version() -> str:
	try:
		return metadata.version('cold-backup')
	except metadata.PackageNotFoundError as e:
		logger.get().debug('Failed to get the package version: {}'.format(e))
		return '?'
