from typing import Optional

from typing_extensions import override

from cold_backup.action import Action
from cold_backup.action.build_file_set_action import build_unit_file_set
from cold_backup.action.calc_fingerprint_action import CalcFingerprintAction
from cold_backup.action.read_remote_state_action import ReadRemoteStateAction
from cold_backup.action.upload_unit_action import UploadUnitAction
from cold_backup.storage import Storage
from cold_backup.types.backup_report import UnitResult, UnitStatus
from cold_backup.types.backup_unit import BackupUnit
from cold_backup.types.decision import Decision, decide
from cold_backup.types.file_set import FileSet
from cold_backup.utils import path_utils


class BackupUnitAction(Action[UnitResult]):
	"""
	Backs up a single unit: list -> fingerprint -> read remote state -> decide -> upload

	Errors are raised to the caller, who decides how a failed unit is reported
	"""

	def __init__(self, storage: Storage, unit: BackupUnit):
		super().__init__()
		self.storage = storage
		self.unit = unit

	def __result(self, status: UnitStatus, file_set: FileSet, fingerprint: Optional[str] = None) -> UnitResult:
		return UnitResult(path=self.unit.path, status=status, unit=self.unit, file_count=len(file_set), fingerprint=fingerprint)

	@override
	def run(self) -> UnitResult:
		backup_config = self.config.backup
		unit = self.unit

		file_set = build_unit_file_set(unit, path_utils.absolute_path(self.config.source_path))
		self.logger.info('Listed {} files in unit {}'.format(len(file_set), unit))
		if file_set.is_empty():
			self.logger.info('Nothing to back up for {}'.format(unit))
			return self.__result(UnitStatus.empty, file_set)
		if self.is_interrupted.is_set():
			return UnitResult.of_cancelled(unit)

		fingerprint = CalcFingerprintAction(file_set, backup_config.hash_method, backup_config.fingerprint_metadata).run()
		remote_state = ReadRemoteStateAction(self.storage, unit.archive_key, backup_config.hash_method).run()
		decision = decide(fingerprint, remote_state)
		self.logger.info('Unit {}: local fingerprint {}, remote fingerprint {}, archive exists: {}, decision: {}'.format(
			unit, fingerprint, remote_state.stored_fingerprint, remote_state.archive_exists, decision.name,
		))

		if decision == Decision.skip:
			return self.__result(UnitStatus.skipped, file_set, fingerprint.value)
		if self.config.dry_run:
			self.logger.info('Dry run, not uploading {}'.format(unit))
			return self.__result(UnitStatus.would_upload, file_set, fingerprint.value)
		if self.is_interrupted.is_set():
			return UnitResult.of_cancelled(unit)

		UploadUnitAction(
			self.storage, unit, file_set, fingerprint,
			hash_method=backup_config.hash_method,
			tar_format=backup_config.tar_format,
		).run()
		self.logger.info('Uploaded {}'.format(unit))
		return self.__result(UnitStatus.uploaded, file_set, fingerprint.value)
