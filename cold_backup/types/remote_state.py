import dataclasses
from typing import Optional


@dataclasses.dataclass(frozen=True)
class RemoteUnitState:
	stored_fingerprint: Optional[str]  # None if never backed up, or unreadable
	archive_exists: bool

	@classmethod
	def absent(cls) -> 'RemoteUnitState':
		return RemoteUnitState(None, False)
