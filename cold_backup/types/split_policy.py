import dataclasses
from typing import FrozenSet, Iterable

from cold_backup import constants


@dataclasses.dataclass(frozen=True)
class SplitPolicy:
	split_depth: int = 0
	excluded_dir_names: FrozenSet[str] = frozenset(constants.DEFAULT_EXCLUDED_DIR_NAMES)

	def __post_init__(self):
		if self.split_depth < 0:
			raise ValueError('split depth should be non-negative, got {}'.format(self.split_depth))

	@classmethod
	def of(cls, split_depth: int, excluded_dir_names: Iterable[str]) -> 'SplitPolicy':
		return SplitPolicy(split_depth, frozenset(excluded_dir_names))

	def is_excluded(self, dir_name: str) -> bool:
		"""
		Exact match on the name of the directory itself, never a substring match
		"""
		return dir_name in self.excluded_dir_names
