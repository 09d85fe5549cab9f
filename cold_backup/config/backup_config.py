from typing import List, Any

from mcdreforged.api.utils import Serializable

from cold_backup import constants
from cold_backup.types.hash_method import HashMethod
from cold_backup.types.split_policy import SplitPolicy
from cold_backup.types.tar_format import TarFormat


class BackupConfig(Serializable):
	name: str = ''  # prefix of all remote object keys
	source_path: str = ''
	split_depth: int = 0
	excluded_dir_names: List[str] = list(constants.DEFAULT_EXCLUDED_DIR_NAMES)
	ignore_patterns: List[str] = []
	hash_method: HashMethod = HashMethod.md5
	fingerprint_metadata: bool = False  # also fingerprint file modes and mtimes
	tar_format: TarFormat = TarFormat.gzip

	def validate_attribute(self, attr_name: str, attr_value: Any, **kwargs):
		if attr_name == 'split_depth' and attr_value < 0:
			raise ValueError('split_depth should be a non-negative integer, got {}'.format(attr_value))

	@property
	def archive_extension(self) -> str:
		return self.tar_format.value.extension

	def get_split_policy(self) -> SplitPolicy:
		return SplitPolicy.of(self.split_depth, self.excluded_dir_names)
