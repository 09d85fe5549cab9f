import os
import re
from pathlib import Path
from typing import Iterable, List

_REDUNDANT_SEGMENTS = re.compile(r'/(\./)+')
_REPEATED_SEPARATORS = re.compile(r'/{2,}')


def byte_order_key(rel_path: str) -> bytes:
	"""
	Sort key that orders paths by their raw bytes, like ``LC_ALL=C sort`` does.
	Never depends on the locale of the running machine
	"""
	return os.fsencode(rel_path)


def sorted_by_bytes(rel_paths: Iterable[str]) -> List[str]:
	return sorted(rel_paths, key=byte_order_key)


def join_rel(parent: str, name: str) -> str:
	return name if parent == '' else parent + '/' + name


def normalize_key(key: str) -> str:
	"""
	Collapses "/./" segments and repeated separators, and drops leading "./" and "/"
	"""
	key = key.replace(os.sep, '/') if os.sep != '/' else key
	key = _REDUNDANT_SEGMENTS.sub('/', key)
	key = _REPEATED_SEPARATORS.sub('/', key)
	while key.startswith('./'):
		key = key[2:]
	return key.lstrip('/')


def make_archive_key(backup_name: str, rel_path: str, extension: str = '') -> str:
	return normalize_key('{}/{}{}'.format(backup_name, rel_path, extension))


def absolute_path(path: Path) -> Path:
	"""
	Absolute path with the parent directories resolved, the last component kept as it is
	"""
	path = Path(os.path.abspath(path))
	if path.parent == path:
		return path
	return path.parent.resolve() / path.name
