import io
from typing import Optional

from typing_extensions import override

from cold_backup import constants
from cold_backup.action import Action
from cold_backup.archiver import UnitArchiver
from cold_backup.storage import Storage
from cold_backup.types.backup_unit import BackupUnit
from cold_backup.types.file_set import FileSet
from cold_backup.types.fingerprint import Fingerprint
from cold_backup.types.hash_method import HashMethod
from cold_backup.types.tar_format import TarFormat
from cold_backup.utils.retry_utils import call_with_retry, RetryPolicy


class UploadUnitAction(Action[None]):
	"""
	Writes the 3 objects of a backup unit, in order: the archive, the manifest, and the fingerprint sidecar

	A fingerprint sidecar left by a previous upload is emptied before the archive is overwritten,
	and the new fingerprint is written last. So if anything fails or gets interrupted in between,
	the next run sees no fingerprint and uploads again, even if the files have changed back to what the old fingerprint says
	"""

	def __init__(
			self, storage: Storage, unit: BackupUnit, file_set: FileSet, fingerprint: Fingerprint, *,
			hash_method: HashMethod, tar_format: TarFormat,
			retry_policy: Optional[RetryPolicy] = None,
	):
		super().__init__()
		self.storage = storage
		self.unit = unit
		self.file_set = file_set
		self.fingerprint = fingerprint
		self.hash_method = hash_method
		self.tar_format = tar_format
		self.retry_policy = retry_policy if retry_policy is not None else self.config.storage.retry.to_policy()

	def __upload_archive(self):
		archiver = UnitArchiver(
			self.file_set,
			tar_format=self.tar_format,
			hash_method=self.hash_method,
			single_file=self.unit.single_file,
			expected_hashes=self.fingerprint.file_hashes,
		)
		key = self.unit.archive_key

		def upload_once():
			# the archive stream cannot be rewound, every attempt produces it again
			with archiver.open_stream() as stream:
				self.storage.put(key, stream, chunk_size_hint=self.config.storage.get_chunk_size(), storage_class=self.config.storage.storage_class or None)

		call_with_retry(upload_once, self.retry_policy, what='Uploading {!r}'.format(key), logger=self.logger)

	def __upload_sidecar(self, key: str, content: bytes):
		def upload_once():
			self.storage.put(key, io.BytesIO(content))

		call_with_retry(upload_once, self.retry_policy, what='Uploading {!r}'.format(key), logger=self.logger)

	@override
	def run(self) -> None:
		key = self.unit.archive_key
		self.logger.info('Uploading {} ({} files) to {!r}'.format(self.unit, len(self.file_set), key))

		fingerprint_key = key + self.hash_method.sidecar_suffix
		self.__upload_sidecar(fingerprint_key, b'')

		self.__upload_archive()
		self.logger.debug('Archive {!r} uploaded'.format(key))

		self.__upload_sidecar(key + constants.MANIFEST_SUFFIX, self.file_set.to_manifest())
		self.__upload_sidecar(fingerprint_key, self.fingerprint.to_sidecar())
		self.logger.debug('Sidecars of {!r} uploaded, fingerprint {}'.format(key, self.fingerprint))
