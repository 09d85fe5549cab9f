import functools
from pathlib import Path
from typing import Optional

import psutil
from mcdreforged.api.all import Serializable

from cold_backup.config.backup_config import BackupConfig
from cold_backup.config.storage_config import StorageConfig, StorageBackend
from cold_backup.exceptions import ConfigurationError


class Config(Serializable):
	debug: bool = False
	dry_run: bool = False  # run everything except the writes to the storage
	concurrency: int = 0  # hashing workers per unit, 0 means based on cpu count
	unit_concurrency: int = 1  # units being backed up at the same time
	log_file: str = ''

	backup: BackupConfig = BackupConfig()
	storage: StorageConfig = StorageConfig()

	# ==================== Instance getters ====================

	@classmethod
	@functools.lru_cache
	def __get_default(cls) -> 'Config':
		return Config.get_default()

	@classmethod
	def get(cls) -> 'Config':
		if _config is None:
			return cls.__get_default()
		return _config

	# ==================== Field getters ====================

	def get_effective_concurrency(self) -> int:
		if self.concurrency == 0:
			return max(1, psutil.cpu_count() or 1)
		else:
			return max(1, self.concurrency)

	@property
	def source_path(self) -> Path:
		return Path(self.backup.source_path)

	@property
	def log_file_path(self) -> Optional[Path]:
		return Path(self.log_file) if self.log_file else None

	def validate(self, *, require_storage: bool = True):
		"""
		Checks the things that must be set before any traversal starts

		:param require_storage: if the storage settings are checked too

		:raise ConfigurationError: if anything is missing or invalid
		"""
		if require_storage and not self.storage.bucket:
			raise ConfigurationError('Missing required parameter: bucket')
		if not self.backup.name:
			raise ConfigurationError('Missing required parameter: name')
		if not self.backup.source_path:
			raise ConfigurationError('Missing required parameter: path')
		if self.backup.split_depth < 0:
			raise ConfigurationError('Split depth should be a non-negative integer, got {}'.format(self.backup.split_depth))
		if self.concurrency < 0:
			raise ConfigurationError('Concurrency should be a non-negative integer, got {}'.format(self.concurrency))
		if self.unit_concurrency < 1:
			raise ConfigurationError('Unit concurrency should be at least 1, got {}'.format(self.unit_concurrency))
		if require_storage and self.storage.backend == StorageBackend.local and self.storage.endpoint_url:
			raise ConfigurationError('endpoint_url is not supported by the local storage backend')
		try:
			self.backup.tar_format.value.compress_method.value.ensure_lib()
		except ImportError as e:
			raise ConfigurationError('Archive format {} is unavailable: {}'.format(self.backup.tar_format.name, e))
		try:
			self.backup.hash_method.value.create_hasher()
		except ImportError as e:
			raise ConfigurationError('Hash method {} is unavailable: {}'.format(self.backup.hash_method.name, e))


_config: Optional[Config] = None


def set_config_instance(cfg: Config):
	global _config
	_config = cfg

	from cold_backup import logger
	logger.apply_log_level(cfg.debug)
	if cfg.debug:
		logger.get().debug('debug on')
