import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Optional, Callable, Iterable, List, TypeVar

from cold_backup.utils import misc_utils

_T = TypeVar('_T')
_R = TypeVar('_R')


class FailFastThreadPool(ThreadPoolExecutor):
	"""
	A thread pool that stops taking tasks after a task has failed.
	The failure is raised to the submitter on its next :meth:`submit`, or when the pool exits.

	At most ``max_workers`` tasks are pending at any time, so the submitter is throttled to the workers' pace
	"""

	def __init__(self, name: str, *, max_workers: Optional[int] = None):
		if max_workers is None:
			from cold_backup.config.config import Config
			max_workers = Config.get().get_effective_concurrency()
		super().__init__(max_workers=max_workers, thread_name_prefix=misc_utils.make_thread_name(name))
		self.__slots = threading.Semaphore(max_workers)
		self.__failure: Optional[BaseException] = None

	def __on_done(self, future: Future):
		# record the failure before freeing the slot, so the next submit sees it
		if not future.cancelled() and future.exception() is not None and self.__failure is None:
			self.__failure = future.exception()
		self.__slots.release()

	def __raise_failure(self):
		if self.__failure is not None:
			raise self.__failure

	def submit(self, __fn, *args, **kwargs) -> Future:
		self.__slots.acquire()
		if self.__failure is not None:
			self.__slots.release()
			self.__raise_failure()
		future = super().submit(__fn, *args, **kwargs)
		future.add_done_callback(self.__on_done)
		return future

	def map_in_order(self, fn: Callable[[_T], _R], items: Iterable[_T]) -> List[_R]:
		"""
		Runs ``fn`` on all items, and returns the results in the order of the items
		"""
		futures = [self.submit(fn, item) for item in items]
		return [future.result() for future in futures]

	def __exit__(self, exc_type, exc_val, exc_tb):
		if exc_type is None:
			self.shutdown(wait=True)
			self.__raise_failure()
		else:
			self.shutdown(wait=True, cancel_futures=True)
		return False
