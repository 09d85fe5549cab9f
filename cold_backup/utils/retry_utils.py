import dataclasses
import logging
import time
from typing import Callable, TypeVar, Optional

from cold_backup.exceptions import StorageError

_T = TypeVar('_T')


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
	max_attempts: int = 5
	initial_delay: float = 1.0  # seconds
	max_delay: float = 60.0  # seconds
	backoff_factor: float = 2.0

	def get_delay(self, attempt: int) -> float:
		"""
		:param attempt: the 1-based index of the attempt that just failed
		"""
		return min(self.max_delay, self.initial_delay * (self.backoff_factor ** (attempt - 1)))

	@classmethod
	def no_retry(cls) -> 'RetryPolicy':
		return RetryPolicy(max_attempts=1)


def call_with_retry(
		func: Callable[[], _T], policy: RetryPolicy, *,
		what: str,
		logger: Optional[logging.Logger] = None,
		sleep: Callable[[float], None] = time.sleep,
) -> _T:
	"""
	Calls ``func`` until it succeeds, retrying on retryable :class:`StorageError` with exponential backoff.
	The last error is re-raised once all attempts are used up
	"""
	attempt = 0
	while True:
		attempt += 1
		try:
			return func()
		except StorageError as e:
			if not e.retryable or attempt >= policy.max_attempts:
				raise
			delay = policy.get_delay(attempt)
			if logger is not None:
				logger.warning('{} failed (attempt {}/{}), retrying in {:.1f}s: {}'.format(what, attempt, policy.max_attempts, delay, e))
			sleep(delay)
