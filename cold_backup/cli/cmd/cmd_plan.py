import argparse
import dataclasses
from typing import Optional, Dict, Any, List

from typing_extensions import override

from cold_backup.action.build_file_set_action import build_unit_file_set
from cold_backup.action.partition_tree_action import PartitionTreeAction
from cold_backup.cli.cmd import CliCommandHandlerBase, CommonCommandArgs, CliCommandAdapterBase, set_if_given
from cold_backup.cli.return_codes import ErrorReturnCodes
from cold_backup.exceptions import ColdBackupError
from cold_backup.utils import path_utils


@dataclasses.dataclass(frozen=True)
class PlanCommandArgs:
	name: Optional[str]
	path: Optional[str]
	split_depth: Optional[int]


class PlanCommandHandler(CliCommandHandlerBase):
	def __init__(self, common_args: CommonCommandArgs, args: PlanCommandArgs):
		super().__init__(common_args)
		self.args = args
		self.errors: List[ColdBackupError] = []

	@override
	def _get_config_overrides(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {}
		set_if_given(data, 'backup.name', self.args.name)
		set_if_given(data, 'backup.source_path', self.args.path)
		set_if_given(data, 'backup.split_depth', self.args.split_depth)
		return data

	def __on_error(self, error: ColdBackupError):
		self.logger.error('{}'.format(error))
		self.errors.append(error)

	def handle(self):
		self.init_environment(require_storage=False)
		backup_config = self.config.backup
		root_path = path_utils.absolute_path(self.config.source_path)

		unit_count, file_count = 0, 0
		for unit in PartitionTreeAction(
				self.config.source_path, backup_config.name,
				backup_config.get_split_policy(), backup_config.archive_extension,
				on_error=self.__on_error,
		).run():
			try:
				file_set = build_unit_file_set(unit, root_path)
			except ColdBackupError as e:
				self.__on_error(e)
				continue
			unit_count += 1
			file_count += len(file_set)
			print('{}\t{}\t{}'.format(len(file_set), unit.kind, unit.archive_key))

		self.logger.info('Total: {} units, {} files'.format(unit_count, file_count))
		if len(self.errors) > 0:
			self.logger.error('Found {} errors during the planning'.format(len(self.errors)))
			ErrorReturnCodes.action_failed.sys_exit()


class PlanCommandAdapter(CliCommandAdapterBase):
	@property
	@override
	def command(self) -> str:
		return 'plan'

	@property
	@override
	def description(self) -> str:
		return 'List the backup units of the given path, with their file counts and archive keys. The storage is not accessed'

	@override
	def build_parser(self, parser: argparse.ArgumentParser):
		self._add_source_arguments(parser)

	@override
	def run(self, args: argparse.Namespace):
		handler = PlanCommandHandler(self._make_common_args(args), PlanCommandArgs(
			name=args.name,
			path=args.path,
			split_depth=args.split_depth,
		))
		handler.handle()
