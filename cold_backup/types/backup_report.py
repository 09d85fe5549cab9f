import collections
import dataclasses
import enum
from pathlib import Path
from typing import Optional, List, Dict

from cold_backup.types.backup_unit import BackupUnit


class UnitStatus(enum.Enum):
	empty = enum.auto()  # no file in the unit, nothing to back up
	skipped = enum.auto()  # remote copy is up-to-date
	uploaded = enum.auto()
	would_upload = enum.auto()  # dry run
	failed = enum.auto()
	cancelled = enum.auto()


@dataclasses.dataclass(frozen=True)
class UnitResult:
	path: Path
	status: UnitStatus
	unit: Optional[BackupUnit] = None  # None if the failure happened before a unit was created
	file_count: int = 0
	fingerprint: Optional[str] = None
	error: Optional[BaseException] = None

	@property
	def name(self) -> str:
		return self.unit.archive_key if self.unit is not None else str(self.path)

	@classmethod
	def of_failure(cls, path: Path, error: BaseException, *, unit: Optional[BackupUnit] = None) -> 'UnitResult':
		return UnitResult(path=path, status=UnitStatus.failed, unit=unit, error=error)

	@classmethod
	def of_cancelled(cls, unit: BackupUnit) -> 'UnitResult':
		return UnitResult(path=unit.path, status=UnitStatus.cancelled, unit=unit)


@dataclasses.dataclass
class BackupReport:
	results: List[UnitResult] = dataclasses.field(default_factory=list)
	interrupted: bool = False
	cost_sec: float = 0

	def count(self, status: UnitStatus) -> int:
		return sum(1 for r in self.results if r.status == status)

	def count_by_status(self) -> Dict[UnitStatus, int]:
		counter = collections.Counter(r.status for r in self.results)
		return {status: counter.get(status, 0) for status in UnitStatus}

	@property
	def failures(self) -> List[UnitResult]:
		return [r for r in self.results if r.status == UnitStatus.failed]

	@property
	def has_failure(self) -> bool:
		return len(self.failures) > 0

	@property
	def is_complete(self) -> bool:
		"""
		If every unit has been backed up, skipped, or found to be empty
		"""
		return not self.has_failure and self.count(UnitStatus.cancelled) == 0
