import argparse
from typing import List, Dict

from cold_backup.cli import cli_utils
from cold_backup.cli.cmd import CliCommandAdapterBase
from cold_backup.cli.cmd.cmd_backup import BackupCommandAdapter
from cold_backup.cli.cmd.cmd_plan import PlanCommandAdapter
from cold_backup.cli.return_codes import ErrorReturnCodes
from cold_backup.exceptions import ConfigurationError
from cold_backup.logger import get as get_logger
from cold_backup.utils import log_utils

__all__ = ['cli_entry']


def __prepare_logger():
	logger = get_logger()
	assert len(logger.handlers) == 1
	logger.handlers[0].setFormatter(log_utils.LOG_FORMATTER_NO_FUNC)


__prepare_logger()


class CliEntrypoint:
	def __init__(self):
		self.logger = get_logger()
		self.adaptors = self.__create_command_adapters()

	@classmethod
	def __create_command_adapters(cls) -> Dict[str, CliCommandAdapterBase]:
		all_adapters: List[CliCommandAdapterBase] = [
			BackupCommandAdapter(),
			PlanCommandAdapter(),
		]
		adaptor_by_command = {adapter.command: adapter for adapter in all_adapters}

		if len(all_adapters) != len(adaptor_by_command):
			raise AssertionError(all_adapters, adaptor_by_command)

		return adaptor_by_command

	def main(self):
		parser = argparse.ArgumentParser(description='Cold Backup v{} CLI tools'.format(cli_utils.get_version()), formatter_class=argparse.ArgumentDefaultsHelpFormatter)
		parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logs')
		parser.add_argument('-c', '--config', help='Path to a json config file. Command line arguments take precedence over it')
		parser.add_argument('--log-file', help='Also write logs to this file')
		subparsers = parser.add_subparsers(title='Command', help='Available commands', dest='command')

		for adapter in self.adaptors.values():
			subparser = subparsers.add_parser(adapter.command, help=adapter.description, description=adapter.description)
			adapter.build_parser(subparser)

		args = parser.parse_args()
		if args.command is None:
			parser.print_help()
			return

		adapter = self.adaptors.get(args.command)
		if adapter is None:
			self.logger.error('Unknown command {!r}'.format(args.command))
			ErrorReturnCodes.invalid_argument.sys_exit()

		try:
			adapter.run(args)
		except ConfigurationError as e:
			self.logger.error(e.message)
			ErrorReturnCodes.invalid_argument.sys_exit()
		except KeyboardInterrupt:
			self.logger.warning('Interrupted')
			ErrorReturnCodes.interrupted.sys_exit()


def cli_entry():
	CliEntrypoint().main()
