import enum
from typing import Any

from mcdreforged.api.utils import Serializable

from cold_backup import constants
from cold_backup.types.units import ByteCount, Duration
from cold_backup.utils.retry_utils import RetryPolicy


class StorageBackend(enum.Enum):
	s3 = enum.auto()
	local = enum.auto()  # the bucket is a local directory


class RetryConfig(Serializable):
	max_attempts: int = 5
	initial_delay: Duration = Duration('1s')
	max_delay: Duration = Duration('1m')
	backoff_factor: float = 2.0

	def validate_attribute(self, attr_name: str, attr_value: Any, **kwargs):
		if attr_name == 'max_attempts' and attr_value < 1:
			raise ValueError('max_attempts should be at least 1, got {}'.format(attr_value))
		if attr_name == 'backoff_factor' and attr_value < 1:
			raise ValueError('backoff_factor should be at least 1, got {}'.format(attr_value))

	def to_policy(self) -> RetryPolicy:
		return RetryPolicy(
			max_attempts=self.max_attempts,
			initial_delay=self.initial_delay.value,
			max_delay=self.max_delay.value,
			backoff_factor=self.backoff_factor,
		)


class StorageConfig(Serializable):
	backend: StorageBackend = StorageBackend.s3
	bucket: str = ''
	storage_class: str = 'GLACIER'  # passed to the backend as it is
	max_archive_size: ByteCount = ByteCount('1TiB')  # only used to calculate the multipart chunk size
	upload_concurrency: int = 8
	endpoint_url: str = ''
	region: str = ''
	connect_timeout: Duration = Duration('10s')
	read_timeout: Duration = Duration('1m')
	retry: RetryConfig = RetryConfig()

	def validate_attribute(self, attr_name: str, attr_value: Any, **kwargs):
		if attr_name == 'upload_concurrency' and attr_value < 1:
			raise ValueError('upload_concurrency should be at least 1, got {}'.format(attr_value))
		if attr_name == 'max_archive_size' and attr_value.value <= 0:
			raise ValueError('max_archive_size should be positive, got {}'.format(attr_value))

	def get_chunk_size(self) -> int:
		"""
		Multipart chunk size in bytes, large enough to fit an archive of max_archive_size in the part count limit
		"""
		mib = 1024 * 1024
		chunk_mib = int(self.max_archive_size.value) // mib // constants.MULTIPART_MAX_PARTS + 1
		return max(chunk_mib * mib, constants.MULTIPART_MIN_CHUNK_SIZE)
