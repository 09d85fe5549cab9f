from typing import Optional

from typing_extensions import override

from cold_backup.action import Action
from cold_backup.exceptions import StorageError, ObjectNotFound
from cold_backup.storage import Storage
from cold_backup.types.hash_method import HashMethod
from cold_backup.types.remote_state import RemoteUnitState
from cold_backup.utils.retry_utils import call_with_retry, RetryPolicy


class ReadRemoteStateAction(Action[RemoteUnitState]):
	"""
	Reads what a previous run left in the storage for an archive key.
	Never raises on read errors: anything that cannot be read counts as absent, which leads to a re-upload
	"""

	def __init__(self, storage: Storage, archive_key: str, hash_method: HashMethod, *, retry_policy: Optional[RetryPolicy] = None):
		super().__init__()
		self.storage = storage
		self.archive_key = archive_key
		self.hash_method = hash_method
		self.retry_policy = retry_policy if retry_policy is not None else self.config.storage.retry.to_policy()

	def __read_fingerprint(self) -> Optional[str]:
		key = self.archive_key + self.hash_method.sidecar_suffix
		try:
			buf = call_with_retry(lambda: self.storage.get(key), self.retry_policy, what='Reading {!r}'.format(key), logger=self.logger)
		except ObjectNotFound:
			self.logger.debug('Fingerprint sidecar {!r} not found'.format(key))
			return None
		except StorageError as e:
			self.logger.warning('Failed to read fingerprint sidecar {!r}, treated as absent: {}'.format(key, e))
			return None

		try:
			fingerprint = buf.decode('ascii').strip()
		except UnicodeDecodeError:
			self.logger.warning('Fingerprint sidecar {!r} is not valid text, treated as absent'.format(key))
			return None
		if len(fingerprint) == 0:
			# emptied by an upload that did not finish
			self.logger.debug('Fingerprint sidecar {!r} is empty'.format(key))
			return None
		if not self.hash_method.is_valid_hex(fingerprint):
			self.logger.warning('Fingerprint sidecar {!r} contains a malformed {} hash {!r}, treated as absent'.format(key, self.hash_method.name, fingerprint[:100]))
			return None
		return fingerprint

	def __check_archive_exists(self) -> bool:
		key = self.archive_key
		try:
			return call_with_retry(lambda: self.storage.exists_exactly(key), self.retry_policy, what='Checking {!r}'.format(key), logger=self.logger)
		except StorageError as e:
			self.logger.warning('Failed to check the existence of archive {!r}, treated as absent: {}'.format(key, e))
			return False

	@override
	def run(self) -> RemoteUnitState:
		stored_fingerprint = self.__read_fingerprint()
		archive_exists = self.__check_archive_exists()
		return RemoteUnitState(stored_fingerprint, archive_exists)
