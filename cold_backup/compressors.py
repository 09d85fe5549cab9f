import contextlib
import enum
from abc import abstractmethod, ABC
from typing import BinaryIO, Union, ContextManager


class Compressor(ABC):
	"""
	A compression layer between a tar stream and the archive object, for the formats that tarfile cannot compress itself
	"""

	@classmethod
	def create(cls, method: Union[str, 'CompressMethod']) -> 'Compressor':
		if not isinstance(method, CompressMethod):
			if method not in CompressMethod.__members__:
				raise ValueError('Unknown compression method: {}'.format(method))
			method = CompressMethod[method]
		return method.value()

	@classmethod
	@abstractmethod
	def ensure_lib(cls):
		"""
		Raises ImportError if the library of the compressor is not installed
		"""
		...

	@abstractmethod
	def compress_stream(self, f_out: BinaryIO) -> ContextManager[BinaryIO]:
		"""
		Everything written to the yielded stream is compressed into ``f_out``.
		``f_out`` is left open, the compressed data is complete once the context exits
		"""
		...


class PlainCompressor(Compressor):
	@classmethod
	def ensure_lib(cls):
		pass

	@contextlib.contextmanager
	def compress_stream(self, f_out: BinaryIO) -> ContextManager[BinaryIO]:
		yield f_out


class ZstdCompressor(Compressor):
	LEVEL = 3

	@classmethod
	def ensure_lib(cls):
		import zstandard  # noqa: F401

	@contextlib.contextmanager
	def compress_stream(self, f_out: BinaryIO) -> ContextManager[BinaryIO]:
		import zstandard
		with zstandard.ZstdCompressor(level=self.LEVEL).stream_writer(f_out, closefd=False) as writer:
			yield writer


class CompressMethod(enum.Enum):
	plain = PlainCompressor
	zstd = ZstdCompressor

	def __repr__(self) -> str:
		return '{}({!r})'.format(self.__class__.__name__, self.name)
