import os
import shutil
import threading
from pathlib import Path
from typing import BinaryIO, Optional, TYPE_CHECKING

from typing_extensions import override

from cold_backup.exceptions import ObjectNotFound, RemoteReadError, RemoteWriteError
from cold_backup.storage import Storage

if TYPE_CHECKING:
	from cold_backup.config.storage_config import StorageConfig

_COPY_BUF_SIZE = 1024 * 1024


class LocalStorage(Storage):
	"""
	Uses a local directory as the bucket. Object keys are relative paths inside it
	"""

	def __init__(self, root: Path):
		super().__init__()
		self.root = root

	@classmethod
	def from_config(cls, config: 'StorageConfig') -> 'LocalStorage':
		return LocalStorage(Path(config.bucket))

	def __key_to_path(self, key: str) -> Path:
		parts = key.split('/')
		if key.startswith('/') or any(p in ('', '.', '..') for p in parts):
			raise ValueError('bad object key {!r}'.format(key))
		return self.root.joinpath(*parts)

	@override
	def put(self, key: str, stream: BinaryIO, *, chunk_size_hint: Optional[int] = None, storage_class: Optional[str] = None):
		path = self.__key_to_path(key)
		if storage_class is not None:
			self.logger.debug('Storage class {!r} is ignored by the local storage, key {!r}'.format(storage_class, key))

		temp_path = path.parent / '.{}.{}-{}.tmp'.format(path.name, os.getpid(), threading.get_ident())
		try:
			path.parent.mkdir(parents=True, exist_ok=True)
			with open(temp_path, 'wb') as f:
				shutil.copyfileobj(stream, f, chunk_size_hint or _COPY_BUF_SIZE)
			os.replace(temp_path, path)
		except OSError as e:
			raise RemoteWriteError(key, e)
		finally:
			if temp_path.exists():
				temp_path.unlink()

	@override
	def get(self, key: str) -> bytes:
		path = self.__key_to_path(key)
		try:
			with open(path, 'rb') as f:
				return f.read()
		except FileNotFoundError:
			raise ObjectNotFound(key) from None
		except OSError as e:
			raise RemoteReadError(key, e)

	@override
	def exists_exactly(self, key: str) -> bool:
		path = self.__key_to_path(key)
		try:
			return path.is_file()
		except OSError as e:
			raise RemoteReadError(key, e)

	@override
	def describe(self) -> str:
		return 'local directory {!r}'.format(str(self.root))
