import os
from typing import Dict, List

from typing_extensions import override

from cold_backup.action import Action
from cold_backup.exceptions import UnreadableFileError
from cold_backup.types.file_set import FileSet
from cold_backup.types.fingerprint import Fingerprint
from cold_backup.types.hash_method import HashMethod
from cold_backup.utils import hash_utils
from cold_backup.utils.thread_pool import FailFastThreadPool


class CalcFingerprintAction(Action[Fingerprint]):
	"""
	Calculates the fingerprint of a file set

	Every file gets a line in the "md5sum" output format, and the fingerprint is the hash of all these lines.
	With md5, the result is the same as ``md5sum <files> | md5sum``
	"""

	def __init__(self, file_set: FileSet, hash_method: HashMethod, include_metadata: bool = False):
		super().__init__()
		self.file_set = file_set
		self.hash_method = hash_method
		self.include_metadata = include_metadata

	def __hash_file(self, rel_path: str) -> str:
		path = self.file_set.full_path(rel_path)
		try:
			return hash_utils.calc_file_hash(path, hash_method=self.hash_method)
		except OSError as e:
			raise UnreadableFileError(path, e)

	def __stat_file(self, rel_path: str) -> os.stat_result:
		path = self.file_set.full_path(rel_path)
		try:
			return path.lstat()
		except OSError as e:
			raise UnreadableFileError(path, e)

	@override
	def run(self) -> Fingerprint:
		if self.file_set.is_empty():
			raise ValueError('cannot fingerprint an empty file set')

		with FailFastThreadPool('hasher', max_workers=min(self.config.get_effective_concurrency(), len(self.file_set))) as pool:
			hashes = pool.map_in_order(self.__hash_file, self.file_set)

		file_hashes: Dict[str, str] = {}
		lines: List[bytes] = []
		for rel_path, file_hash in zip(self.file_set, hashes):
			file_hashes[rel_path] = file_hash
			if self.include_metadata:
				st = self.__stat_file(rel_path)
				file_hash = '{} {:o} {}'.format(file_hash, st.st_mode, st.st_mtime_ns)
			lines.append(hash_utils.format_checksum_line(file_hash, rel_path))

		value = hash_utils.calc_bytes_hash(b''.join(lines), hash_method=self.hash_method)
		self.logger.debug('Fingerprint of {} files in {!r}: {}'.format(len(self.file_set), str(self.file_set.base_path), value))
		return Fingerprint(value, file_hashes)
