import os
from pathlib import Path
from typing import Iterator, Callable, Optional, Set, List

from typing_extensions import override

from cold_backup import constants
from cold_backup.action import Action
from cold_backup.exceptions import UnreadablePath, ArchiveKeyConflict, ColdBackupError
from cold_backup.types.backup_unit import BackupUnit
from cold_backup.types.split_policy import SplitPolicy
from cold_backup.utils import path_utils

PartitionErrorHandler = Callable[[ColdBackupError], None]


class PartitionTreeAction(Action[Iterator[BackupUnit]]):
	"""
	Splits the backup root into backup units. Units are yielded lazily, in depth-first order

	Errors of a subtree, e.g. a directory that cannot be listed, are passed to ``on_error``
	and the walk goes on with the sibling subtrees, just like what :func:`os.walk` does with its onerror.
	Without ``on_error``, they are raised
	"""

	def __init__(
			self, root_path: Path, backup_name: str, split_policy: SplitPolicy, archive_extension: str, *,
			on_error: Optional[PartitionErrorHandler] = None,
	):
		super().__init__()
		self.root_path = path_utils.absolute_path(root_path)
		self.backup_name = backup_name
		self.split_policy = split_policy
		self.archive_extension = archive_extension
		self.on_error = on_error
		self.__used_keys: Set[str] = set()

	def __report(self, error: ColdBackupError):
		if self.on_error is None:
			raise error
		self.on_error(error)

	def __create_unit(self, path: Path, rel_path: str, *, files_only: bool = False, single_file: bool = False) -> Optional[BackupUnit]:
		extension = '' if single_file else self.archive_extension
		key = path_utils.make_archive_key(self.backup_name, rel_path, extension)
		if key in self.__used_keys:
			self.__report(ArchiveKeyConflict(key, path))
			return None
		self.__used_keys.add(key)
		return BackupUnit(path=path, archive_key=key, files_only=files_only, single_file=single_file)

	def __list_sub_dirs(self, dir_path: Path) -> Optional[List[os.DirEntry]]:
		try:
			with os.scandir(dir_path) as it:
				entries = [entry for entry in it if entry.is_dir(follow_symlinks=False)]
		except OSError as e:
			self.__report(UnreadablePath(dir_path, e))
			return None
		return sorted(entries, key=lambda entry: path_utils.byte_order_key(entry.name))

	def __walk(self, dir_path: Path, rel_path: str, depth: int) -> Iterator[BackupUnit]:
		# the directory is listed before anything of it is emitted, so an unreadable directory yields nothing
		sub_dirs = self.__list_sub_dirs(dir_path)
		if sub_dirs is None:
			return

		unit = self.__create_unit(dir_path, path_utils.join_rel(rel_path, constants.LOOSE_FILES_UNIT_NAME), files_only=True)
		if unit is not None:
			yield unit

		for entry in sub_dirs:
			if self.split_policy.is_excluded(entry.name):
				self.logger.debug('Skipping excluded directory {!r}'.format(entry.path))
				continue
			child_path = dir_path / entry.name
			child_rel_path = path_utils.join_rel(rel_path, entry.name)
			if depth == self.split_policy.split_depth:
				unit = self.__create_unit(child_path, child_rel_path)
				if unit is not None:
					yield unit
			else:
				yield from self.__walk(child_path, child_rel_path, depth + 1)

	def __iterate(self) -> Iterator[BackupUnit]:
		self.__used_keys.clear()
		root_name = self.root_path.name

		if self.root_path.is_file():
			unit = self.__create_unit(self.root_path, root_name, single_file=True)
			if unit is not None:
				yield unit
		elif not self.root_path.is_dir():
			self.__report(UnreadablePath(self.root_path, FileNotFoundError('not a regular file or a directory')))
		elif self.split_policy.split_depth == 0:
			unit = self.__create_unit(self.root_path, root_name)
			if unit is not None:
				yield unit
		else:
			yield from self.__walk(self.root_path, root_name, 1)

	@override
	def run(self) -> Iterator[BackupUnit]:
		return self.__iterate()
