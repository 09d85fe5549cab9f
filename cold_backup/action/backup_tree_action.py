import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import List, Union, Set, Tuple

from typing_extensions import override

from cold_backup.action import Action
from cold_backup.action.backup_unit_action import BackupUnitAction
from cold_backup.action.partition_tree_action import PartitionTreeAction
from cold_backup.exceptions import ColdBackupError, UnreadablePath, ArchiveKeyConflict
from cold_backup.storage import Storage
from cold_backup.types.backup_report import BackupReport, UnitResult
from cold_backup.types.backup_unit import BackupUnit
from cold_backup.utils import misc_utils
from cold_backup.utils.timer import Timer

_ResultSlot = Union[UnitResult, Tuple[BackupUnit, 'Future[UnitResult]']]


class BackupTreeAction(Action[BackupReport]):
	"""
	Backs up the configured source path: partitions it into units, and backs up each unit

	A failed unit never stops the others, it's reported in the returned :class:`BackupReport`
	"""

	def __init__(self, storage: Storage):
		super().__init__()
		self.storage = storage
		self.__results: List[_ResultSlot] = []
		self.__running_actions: Set[BackupUnitAction] = set()
		self.__running_actions_lock = threading.Lock()

	def __on_partition_error(self, error: ColdBackupError):
		if isinstance(error, (UnreadablePath, ArchiveKeyConflict)):
			path = error.path
		else:
			path = self.config.source_path
		self.logger.error('Failed to partition {!r}: {}'.format(str(path), error))
		self.__results.append(UnitResult.of_failure(path, error))

	def __backup_unit(self, unit: BackupUnit) -> UnitResult:
		action = BackupUnitAction(self.storage, unit)
		with self.__running_actions_lock:
			if self.is_interrupted.is_set():
				return UnitResult.of_cancelled(unit)
			self.__running_actions.add(action)
		try:
			return action.run()
		except ColdBackupError as e:
			self.logger.error('Backup of unit {} failed: {}'.format(unit, e))
			return UnitResult.of_failure(unit.path, e, unit=unit)
		except Exception as e:
			self.logger.exception('Backup of unit {} failed with unexpected error'.format(unit))
			return UnitResult.of_failure(unit.path, e, unit=unit)
		finally:
			with self.__running_actions_lock:
				self.__running_actions.discard(action)

	def __create_partition_action(self) -> PartitionTreeAction:
		backup_config = self.config.backup
		return PartitionTreeAction(
			self.config.source_path, backup_config.name,
			backup_config.get_split_policy(), backup_config.archive_extension,
			on_error=self.__on_partition_error,
		)

	def __run_sequentially(self):
		for unit in self.__create_partition_action().run():
			if self.is_interrupted.is_set():
				break
			try:
				result = self.__backup_unit(unit)
			except KeyboardInterrupt:
				self.__results.append(UnitResult.of_cancelled(unit))
				raise
			self.__results.append(result)

	def __run_concurrently(self, unit_concurrency: int):
		sem = threading.Semaphore(unit_concurrency)

		def task(u: BackupUnit) -> UnitResult:
			try:
				return self.__backup_unit(u)
			finally:
				sem.release()

		pool = ThreadPoolExecutor(max_workers=unit_concurrency, thread_name_prefix=misc_utils.make_thread_name('unit'))
		try:
			for unit in self.__create_partition_action().run():
				# the partitioner is consumed lazily, at most unit_concurrency units are in flight
				sem.acquire()
				if self.is_interrupted.is_set():
					sem.release()
					break
				self.__results.append((unit, pool.submit(task, unit)))
		except KeyboardInterrupt:
			# let the running units know before waiting for them
			self.interrupt()
			raise
		finally:
			# a released semaphore does not mean its worker is free yet, so queued units are only dropped on interrupt
			pool.shutdown(wait=True, cancel_futures=self.is_interrupted.is_set())

	@staticmethod
	def __collect_results(slots: List[_ResultSlot]) -> List[UnitResult]:
		results: List[UnitResult] = []
		for slot in slots:
			if isinstance(slot, UnitResult):
				results.append(slot)
				continue
			unit, future = slot
			if future.cancelled():
				results.append(UnitResult.of_cancelled(unit))
			else:
				results.append(future.result())
		return results

	@override
	def run(self) -> BackupReport:
		timer = Timer()
		self.__results.clear()
		unit_concurrency = self.config.unit_concurrency
		self.logger.info('Backing up {!r} as {!r} to {}, split depth {}{}'.format(
			str(self.config.source_path), self.config.backup.name, self.storage.describe(),
			self.config.backup.split_depth, ' (dry run)' if self.config.dry_run else '',
		))

		interrupted = False
		try:
			if unit_concurrency <= 1:
				self.__run_sequentially()
			else:
				self.__run_concurrently(unit_concurrency)
		except KeyboardInterrupt:
			self.logger.warning('Interrupted, waiting for running units to stop')
			self.interrupt()
			interrupted = True
		interrupted = interrupted or self.is_interrupted.is_set()

		report = BackupReport(results=self.__collect_results(self.__results), interrupted=interrupted, cost_sec=timer.get_elapsed())
		self.__log_summary(report)
		return report

	def __log_summary(self, report: BackupReport):
		counts = report.count_by_status()
		self.logger.info('Backup {} in {:.2f}s, {} units: {}'.format(
			'interrupted' if report.interrupted else 'done', report.cost_sec, len(report.results),
			', '.join('{} {}'.format(count, status.name) for status, count in counts.items() if count > 0) or 'nothing',
		))
		for result in report.failures:
			self.logger.error('Failed: {}: {}'.format(result.name, result.error))

	@override
	def interrupt(self):
		super().interrupt()
		with self.__running_actions_lock:
			for action in self.__running_actions:
				action.interrupt()
