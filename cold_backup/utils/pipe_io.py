import io
import os
import threading
from typing import Callable, BinaryIO, Optional, Any

from cold_backup.utils import misc_utils


class ProducerPipeReader(io.RawIOBase):
	"""
	A readable stream whose content is written by ``producer`` in a background thread, through an OS pipe

	If the producer raises, the reader raises the same exception instead of reporting a clean end-of-stream,
	so a consumer never mistakes a partial stream for a complete one
	"""

	def __init__(self, producer: Callable[[BinaryIO], Any], *, name: str = 'producer'):
		super().__init__()
		self.__producer = producer
		read_fd, write_fd = os.pipe()
		self.__reader: BinaryIO = os.fdopen(read_fd, 'rb')
		self.__writer: BinaryIO = os.fdopen(write_fd, 'wb')
		self.__error: Optional[BaseException] = None
		self.__thread = threading.Thread(target=self.__run, name=misc_utils.make_thread_name(name), daemon=True)
		self.__thread.start()

	def __run(self):
		try:
			with self.__writer:
				self.__producer(self.__writer)
		except BaseException as e:
			self.__error = e

	def __check_finished(self):
		self.__thread.join()
		if self.__error is not None:
			raise self.__error

	def readable(self) -> bool:
		return True

	def read(self, size: int = -1) -> bytes:
		data = self.__reader.read(size)
		if size is None or size < 0 or len(data) < size:
			# buffered read only returns less than requested at the end of stream
			self.__check_finished()
		return data

	def readall(self) -> bytes:
		return self.read(-1)

	def readinto(self, b) -> int:
		data = self.read(len(b))
		n = len(data)
		b[:n] = data
		return n

	def close(self):
		if not self.closed:
			# closing the read end first unblocks a producer stuck on a full pipe
			self.__reader.close()
			self.__thread.join()
		super().close()
