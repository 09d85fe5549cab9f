"""
Object storages that backup units are uploaded to
"""
import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, TYPE_CHECKING

if TYPE_CHECKING:
	from cold_backup.config.storage_config import StorageConfig


class Storage(ABC):
	"""
	All operations might block on I/O, and must be safe to call again with the same arguments.
	Implementations raise :class:`~cold_backup.exceptions.ObjectNotFound` for missing objects,
	:class:`~cold_backup.exceptions.RemoteReadError` and :class:`~cold_backup.exceptions.RemoteWriteError`
	for everything else that goes wrong on the storage side
	"""

	def __init__(self):
		from cold_backup import logger
		self.logger: logging.Logger = logger.get()

	@abstractmethod
	def put(self, key: str, stream: BinaryIO, *, chunk_size_hint: Optional[int] = None, storage_class: Optional[str] = None):
		"""
		Write everything read from the stream into the object, replacing the existing one.
		The object becomes visible only if the whole stream is read successfully

		:param chunk_size_hint: multipart chunk size in bytes, if the storage supports it
		:param storage_class: None means the default storage class of the storage
		"""
		...

	@abstractmethod
	def get(self, key: str) -> bytes:
		...

	@abstractmethod
	def exists_exactly(self, key: str) -> bool:
		"""
		If an object with exactly this key exists. Objects that merely share the prefix do not count
		"""
		...

	@abstractmethod
	def describe(self) -> str:
		...


def create_storage(config: 'StorageConfig') -> Storage:
	from cold_backup.config.storage_config import StorageBackend
	if config.backend == StorageBackend.s3:
		from cold_backup.storage.s3_storage import S3Storage
		return S3Storage.from_config(config)
	elif config.backend == StorageBackend.local:
		from cold_backup.storage.local_storage import LocalStorage
		return LocalStorage.from_config(config)
	else:
		raise ValueError('unknown storage backend {!r}'.format(config.backend))
