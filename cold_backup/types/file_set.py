import dataclasses
import os
from pathlib import Path
from typing import Tuple, Iterable, Iterator

from cold_backup.utils import path_utils


@dataclasses.dataclass(frozen=True)
class FileSet:
	"""
	Files of a backup unit, relative to ``base_path`` and ordered by the bytes of their paths
	"""
	base_path: Path
	paths: Tuple[str, ...]

	def __post_init__(self):
		for a, b in zip(self.paths, self.paths[1:]):
			if path_utils.byte_order_key(a) >= path_utils.byte_order_key(b):
				raise ValueError('paths are not strictly byte-ordered: {!r} >= {!r}'.format(a, b))

	@classmethod
	def of(cls, base_path: Path, paths: Iterable[str]) -> 'FileSet':
		return FileSet(base_path, tuple(path_utils.sorted_by_bytes(set(paths))))

	def __len__(self) -> int:
		return len(self.paths)

	def __iter__(self) -> Iterator[str]:
		return iter(self.paths)

	def is_empty(self) -> bool:
		return len(self.paths) == 0

	def full_path(self, rel_path: str) -> Path:
		return self.base_path / rel_path

	def to_manifest(self) -> bytes:
		"""
		Newline separated file list, in the same order the fingerprint is calculated
		"""
		return b''.join(os.fsencode(p) + b'\n' for p in self.paths)
