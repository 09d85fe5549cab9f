import dataclasses
import enum

from cold_backup.compressors import CompressMethod


@dataclasses.dataclass(frozen=True)
class _TarFormatItem:
	extension: str  # appended to the archive key
	mode_extra: str  # compression done by tarfile
	compress_method: CompressMethod  # compression done outside of tarfile

	@property
	def mode_w_stream(self) -> str:
		"""
		tarfile mode for writing to a non-seekable stream
		"""
		return 'w|' + self.mode_extra


class TarFormat(enum.Enum):
	plain = _TarFormatItem('.tar', '', CompressMethod.plain)
	gzip = _TarFormatItem('.tar.gz', 'gz', CompressMethod.plain)
	bz2 = _TarFormatItem('.tar.bz2', 'bz2', CompressMethod.plain)
	lzma = _TarFormatItem('.tar.xz', 'xz', CompressMethod.plain)
	zstd = _TarFormatItem('.tar.zst', '', CompressMethod.zstd)
