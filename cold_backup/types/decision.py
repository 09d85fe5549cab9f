import enum

from cold_backup.types.fingerprint import Fingerprint
from cold_backup.types.remote_state import RemoteUnitState


class Decision(enum.Enum):
	skip = enum.auto()
	upload = enum.auto()


def decide(fingerprint: Fingerprint, remote_state: RemoteUnitState) -> Decision:
	"""
	Skip only when the stored fingerprint matches AND the archive object is there.
	A matching fingerprint alone might be left by an interrupted run
	"""
	if remote_state.stored_fingerprint == fingerprint.value and remote_state.archive_exists:
		return Decision.skip
	return Decision.upload
