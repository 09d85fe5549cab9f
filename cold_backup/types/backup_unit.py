import dataclasses
from pathlib import Path


@dataclasses.dataclass(frozen=True)
class BackupUnit:
	path: Path  # absolute local path of the directory, or of the file in single-file mode
	archive_key: str
	files_only: bool = False  # only the files directly inside the directory
	single_file: bool = False  # the path is a regular file, uploaded as it is

	@property
	def base_path(self) -> Path:
		"""
		The directory that the paths in the unit's file set are relative to
		"""
		return self.path.parent if self.single_file else self.path

	@property
	def kind(self) -> str:
		if self.single_file:
			return 'file'
		return 'files' if self.files_only else 'tree'

	def __str__(self) -> str:
		return '{}({})'.format(self.archive_key, self.kind)
