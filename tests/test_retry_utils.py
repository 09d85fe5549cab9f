import unittest
from typing import List

from cold_backup.exceptions import RemoteWriteError, ObjectNotFound, VolatileFileError
from cold_backup.utils.retry_utils import RetryPolicy, call_with_retry


class _Flaky:
	def __init__(self, fail_times: int, error_factory):
		self.fail_times = fail_times
		self.error_factory = error_factory
		self.calls = 0

	def __call__(self) -> str:
		self.calls += 1
		if self.calls <= self.fail_times:
			raise self.error_factory()
		return 'ok'


class RetryUtilsTestCase(unittest.TestCase):
	def setUp(self):
		self.sleeps: List[float] = []

	def call(self, func, policy: RetryPolicy = RetryPolicy(max_attempts=4, initial_delay=1, max_delay=3, backoff_factor=2)):
		return call_with_retry(func, policy, what='test', sleep=self.sleeps.append)

	def test_1_delay(self):
		policy = RetryPolicy(max_attempts=10, initial_delay=0.5, max_delay=5, backoff_factor=3)
		self.assertEqual([0.5, 1.5, 4.5, 5, 5], [policy.get_delay(i) for i in range(1, 6)])

	def test_2_success_after_retries(self):
		func = _Flaky(3, lambda: RemoteWriteError('k', OSError('boom')))
		self.assertEqual('ok', self.call(func))
		self.assertEqual(4, func.calls)
		self.assertEqual([1, 2, 3], self.sleeps)

	def test_3_exhausted(self):
		func = _Flaky(10, lambda: RemoteWriteError('k', OSError('boom')))
		with self.assertRaises(RemoteWriteError):
			self.call(func)
		self.assertEqual(4, func.calls)
		self.assertEqual(3, len(self.sleeps))

	def test_4_not_retryable(self):
		for factory in [lambda: ObjectNotFound('k'), lambda: RemoteWriteError('k', None, retryable=False)]:
			func = _Flaky(10, factory)
			with self.assertRaises(Exception):
				self.call(func)
			self.assertEqual(1, func.calls)
		self.assertEqual([], self.sleeps)

	def test_5_other_errors(self):
		from pathlib import Path
		func = _Flaky(10, lambda: VolatileFileError(Path('x')))
		with self.assertRaises(VolatileFileError):
			self.call(func)
		self.assertEqual(1, func.calls)

	def test_6_no_retry(self):
		func = _Flaky(1, lambda: RemoteWriteError('k', OSError('boom')))
		with self.assertRaises(RemoteWriteError):
			self.call(func, RetryPolicy.no_retry())
		self.assertEqual(1, func.calls)


if __name__ == '__main__':
	unittest.main()
