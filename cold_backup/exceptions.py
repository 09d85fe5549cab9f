from pathlib import Path
from typing import Optional


class ColdBackupError(Exception):
	pass


class ConfigurationError(ColdBackupError):
	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class UnreadablePath(ColdBackupError):
	"""
	A directory cannot be entered or listed
	"""
	def __init__(self, path: Path, cause: Optional[BaseException] = None):
		super().__init__('cannot access directory {!r}: {}'.format(str(path), cause))
		self.path = path
		self.cause = cause


class UnreadableFileError(ColdBackupError):
	"""
	A listed file vanished or cannot be read any more
	"""
	def __init__(self, path: Path, cause: Optional[BaseException] = None):
		super().__init__('cannot read file {!r}: {}'.format(str(path), cause))
		self.path = path
		self.cause = cause


class VolatileFileError(ColdBackupError):
	"""
	A file changed between being fingerprinted and being archived
	"""
	def __init__(self, path: Path):
		super().__init__('file {!r} changed during the backup'.format(str(path)))
		self.path = path


class ArchiveKeyConflict(ColdBackupError):
	def __init__(self, archive_key: str, path: Path):
		super().__init__('archive key {!r} of {!r} is already used by another unit'.format(archive_key, str(path)))
		self.archive_key = archive_key
		self.path = path


class StorageError(ColdBackupError):
	def __init__(self, key: str, cause: Optional[BaseException] = None, *, retryable: bool = True):
		super().__init__('{} {!r}: {}'.format(self._describe(), key, cause))
		self.key = key
		self.cause = cause
		self.retryable = retryable

	@classmethod
	def _describe(cls) -> str:
		return 'storage operation failed for'


class ObjectNotFound(StorageError):
	def __init__(self, key: str):
		super().__init__(key, None, retryable=False)

	@classmethod
	def _describe(cls) -> str:
		return 'object not found'


class RemoteReadError(StorageError):
	@classmethod
	def _describe(cls) -> str:
		return 'failed to read'


class RemoteWriteError(StorageError):
	@classmethod
	def _describe(cls) -> str:
		return 'failed to write'
