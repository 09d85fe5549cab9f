import os
import tarfile
from pathlib import Path
from typing import BinaryIO, Dict, Optional

from cold_backup.compressors import Compressor
from cold_backup.exceptions import UnreadableFileError, VolatileFileError
from cold_backup.types.file_set import FileSet
from cold_backup.types.hash_method import HashMethod
from cold_backup.types.tar_format import TarFormat
from cold_backup.utils import hash_utils
from cold_backup.utils.pipe_io import ProducerPipeReader

_COPY_BUF_SIZE = 128 * 1024


class _SourceFileReader:
	"""
	Reads a file to be archived, hashing its content on the way.
	Read errors are raised as :class:`UnreadableFileError`, so they cannot be confused with errors of the output side
	"""

	def __init__(self, path: Path, hash_method: HashMethod):
		self.path = path
		try:
			self.file = open(path, 'rb')
		except OSError as e:
			raise UnreadableFileError(path, e)
		self.__hasher = hash_utils.create_hasher(hash_method=hash_method)

	def read(self, size: int = -1) -> bytes:
		try:
			buf = self.file.read(size)
		except OSError as e:
			raise UnreadableFileError(self.path, e)
		self.__hasher.update(buf)
		return buf

	def get_hash(self) -> str:
		return self.__hasher.hexdigest()

	def close(self):
		self.file.close()

	def __enter__(self) -> '_SourceFileReader':
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.close()


class UnitArchiver:
	"""
	Produces the payload of a backup unit: a tar archive of the file set,
	or the raw bytes of the file in single-file mode

	If ``expected_hashes`` is given, every file is checked against it while being read,
	and :class:`VolatileFileError` is raised for a file that has changed since it was fingerprinted
	"""

	def __init__(
			self, file_set: FileSet, *,
			tar_format: TarFormat,
			hash_method: HashMethod,
			single_file: bool = False,
			expected_hashes: Optional[Dict[str, str]] = None,
	):
		if single_file and len(file_set) != 1:
			raise ValueError('single file mode needs exactly 1 file, got {}'.format(len(file_set)))
		self.file_set = file_set
		self.tar_format = tar_format
		self.hash_method = hash_method
		self.single_file = single_file
		self.expected_hashes = expected_hashes

	def open_stream(self) -> ProducerPipeReader:
		return ProducerPipeReader(self.write_to, name='archiver')

	def write_to(self, f_out: BinaryIO):
		if self.single_file:
			self.__write_raw(f_out)
		else:
			self.__write_tar(f_out)

	def __verify(self, rel_path: str, file_hash: str):
		if self.expected_hashes is not None and self.expected_hashes.get(rel_path) != file_hash:
			raise VolatileFileError(self.file_set.full_path(rel_path))

	def __write_raw(self, f_out: BinaryIO):
		rel_path = self.file_set.paths[0]
		with _SourceFileReader(self.file_set.full_path(rel_path), self.hash_method) as reader:
			while buf := reader.read(_COPY_BUF_SIZE):
				f_out.write(buf)
			self.__verify(rel_path, reader.get_hash())

	def __write_tar(self, f_out: BinaryIO):
		compressor = Compressor.create(self.tar_format.value.compress_method)
		with compressor.compress_stream(f_out) as f_compressed:
			with tarfile.open(fileobj=f_compressed, mode=self.tar_format.value.mode_w_stream) as tar:
				for rel_path in self.file_set:
					self.__add_file(tar, rel_path)

	def __add_file(self, tar: tarfile.TarFile, rel_path: str):
		full_path = self.file_set.full_path(rel_path)
		with _SourceFileReader(full_path, self.hash_method) as reader:
			try:
				tar_info = tar.gettarinfo(arcname=rel_path, fileobj=reader.file)
			except OSError as e:
				raise UnreadableFileError(full_path, e)
			if not tar_info.isfile():
				raise VolatileFileError(full_path)
			try:
				tar.addfile(tar_info, reader)
			except BrokenPipeError:
				raise
			except OSError:
				# the file got shorter than what its stat said
				if os.fstat(reader.file.fileno()).st_size != tar_info.size:
					raise VolatileFileError(full_path) from None
				raise
			self.__verify(rel_path, reader.get_hash())
