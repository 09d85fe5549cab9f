import os
from pathlib import Path
from typing import List, Optional, Iterable

import pathspec
from typing_extensions import override

from cold_backup.action import Action
from cold_backup.exceptions import UnreadablePath
from cold_backup.types.backup_unit import BackupUnit
from cold_backup.types.file_set import FileSet
from cold_backup.utils import path_utils


class BuildFileSetAction(Action[FileSet]):
	"""
	Lists the regular files of a backup unit. Symlinks, sockets, devices etc. are never included

	Ignore patterns match paths relative to ``pattern_root``, which is the backup root for units from the partitioner,
	so an anchored pattern like ``/build`` means the same directory whatever the split depth is
	"""

	def __init__(
			self, unit_path: Path, files_only: bool, *,
			excluded_dir_names: Iterable[str] = (),
			ignore_patterns: Optional[List[str]] = None,
			pattern_root: Optional[Path] = None,
	):
		super().__init__()
		self.unit_path = unit_path
		self.files_only = files_only
		self.excluded_dir_names = frozenset(excluded_dir_names)
		self.ignore_spec = pathspec.GitIgnoreSpec.from_lines(ignore_patterns) if ignore_patterns else None
		self.pattern_prefix = ''
		if pattern_root is not None and pattern_root != unit_path:
			self.pattern_prefix = unit_path.relative_to(pattern_root).as_posix()

	def __list_dir(self, dir_path: Path) -> List[os.DirEntry]:
		try:
			with os.scandir(dir_path) as it:
				return list(it)
		except OSError as e:
			raise UnreadablePath(dir_path, e)

	def __is_ignored(self, rel_path: str) -> bool:
		return self.ignore_spec is not None and self.ignore_spec.match_file(path_utils.join_rel(self.pattern_prefix, rel_path))

	@override
	def run(self) -> FileSet:
		paths: List[str] = []
		ignored_count = 0

		# iterative DFS, (full path, path relative to the unit)
		stack = [(self.unit_path, '')]
		while stack:
			dir_path, dir_rel = stack.pop()
			for entry in self.__list_dir(dir_path):
				rel_path = path_utils.join_rel(dir_rel, entry.name)
				try:
					if entry.is_file(follow_symlinks=False):
						if self.__is_ignored(rel_path):
							ignored_count += 1
						else:
							paths.append(rel_path)
					elif not self.files_only and entry.is_dir(follow_symlinks=False) and entry.name not in self.excluded_dir_names:
						stack.append((Path(entry.path), rel_path))
				except OSError as e:
					raise UnreadablePath(Path(entry.path), e)

		if ignored_count > 0:
			self.logger.debug('Ignored {} files in {!r} by ignore patterns'.format(ignored_count, str(self.unit_path)))
		return FileSet.of(self.unit_path, paths)


def build_unit_file_set(unit: BackupUnit, root_path: Path) -> FileSet:
	"""
	The file set of a unit from :class:`PartitionTreeAction`, with the exclusions in the config

	:param unit: The unit to list
	:param root_path: The absolute backup root that the unit was partitioned from
	"""
	if unit.single_file:
		return FileSet(unit.path.parent, (unit.path.name,))

	from cold_backup.config.config import Config
	backup_config = Config.get().backup
	return BuildFileSetAction(
		unit.path, unit.files_only,
		excluded_dir_names=backup_config.excluded_dir_names,
		ignore_patterns=backup_config.ignore_patterns,
		pattern_root=root_path,
	).run()
