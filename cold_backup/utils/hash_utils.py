import os
from pathlib import Path
from typing import IO, Optional, TYPE_CHECKING

if TYPE_CHECKING:
	from cold_backup.types.hash_method import Hasher, HashMethod


def create_hasher(*, hash_method: Optional['HashMethod'] = None) -> 'Hasher':
	if hash_method is None:
		from cold_backup.config.config import Config
		hash_method = Config.get().backup.hash_method
	return hash_method.value.create_hasher()


_READ_BUF_SIZE = 128 * 1024


def calc_reader_hash(file_obj: IO[bytes], *, hash_method: Optional['HashMethod'] = None) -> str:
	hasher = create_hasher(hash_method=hash_method)
	while buf := file_obj.read(_READ_BUF_SIZE):
		hasher.update(buf)
	return hasher.hexdigest()


def calc_file_hash(path: Path, *, hash_method: Optional['HashMethod'] = None) -> str:
	with open(path, 'rb') as f:
		return calc_reader_hash(f, hash_method=hash_method)


def calc_bytes_hash(buf: bytes, *, hash_method: Optional['HashMethod'] = None) -> str:
	hasher = create_hasher(hash_method=hash_method)
	hasher.update(buf)
	return hasher.hexdigest()


def format_checksum_line(file_hash: str, rel_path: str) -> bytes:
	"""
	One line in the coreutils "md5sum" output format: ``<hash>  <path>\\n``

	File names containing a backslash, a newline or a carriage return are escaped,
	and the line gets a leading backslash, same as what coreutils does.
	So a line break always ends a line, no matter how the files are named
	"""
	name = os.fsencode(rel_path)
	escaped = b'\\' in name or b'\n' in name or b'\r' in name
	if escaped:
		name = name.replace(b'\\', b'\\\\').replace(b'\n', b'\\n').replace(b'\r', b'\\r')
	return (b'\\' if escaped else b'') + file_hash.encode('ascii') + b'  ' + name + b'\n'
