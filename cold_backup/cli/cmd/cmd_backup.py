import argparse
import dataclasses
import re
from typing import Optional, Dict, Any

from typing_extensions import override

from cold_backup.action.backup_tree_action import BackupTreeAction
from cold_backup.cli.cmd import CliCommandHandlerBase, CommonCommandArgs, CliCommandAdapterBase, set_if_given
from cold_backup.cli.return_codes import ErrorReturnCodes
from cold_backup.config.storage_config import StorageBackend
from cold_backup.storage import create_storage
from cold_backup.types.units import ByteCount
from cold_backup.utils import log_utils


def parse_max_size(s: str) -> str:
	"""
	A number without unit is in GiB
	"""
	if re.fullmatch(r'[\d.]+', s):
		s += 'GiB'
	try:
		ByteCount(s)
	except ValueError:
		raise argparse.ArgumentTypeError('invalid size {!r}'.format(s)) from None
	return s


@dataclasses.dataclass(frozen=True)
class BackupCommandArgs:
	bucket: Optional[str]
	name: Optional[str]
	path: Optional[str]
	storage_class: Optional[str]
	dry_run: bool
	max_size: Optional[str]
	split_depth: Optional[int]
	local: bool
	endpoint_url: Optional[str]
	region: Optional[str]
	unit_concurrency: Optional[int]
	concurrency: Optional[int]


class BackupCommandHandler(CliCommandHandlerBase):
	def __init__(self, common_args: CommonCommandArgs, args: BackupCommandArgs):
		super().__init__(common_args)
		self.args = args

	@override
	def _get_config_overrides(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {}
		set_if_given(data, 'storage.bucket', self.args.bucket)
		set_if_given(data, 'backup.name', self.args.name)
		set_if_given(data, 'backup.source_path', self.args.path)
		set_if_given(data, 'storage.storage_class', self.args.storage_class)
		set_if_given(data, 'storage.max_archive_size', self.args.max_size)
		set_if_given(data, 'backup.split_depth', self.args.split_depth)
		set_if_given(data, 'storage.endpoint_url', self.args.endpoint_url)
		set_if_given(data, 'storage.region', self.args.region)
		set_if_given(data, 'unit_concurrency', self.args.unit_concurrency)
		set_if_given(data, 'concurrency', self.args.concurrency)
		if self.args.dry_run:
			data['dry_run'] = True
		if self.args.local:
			set_if_given(data, 'storage.backend', StorageBackend.local.name)
		return data

	def handle(self):
		self.init_environment()

		storage = create_storage(self.config.storage)
		self.logger.info('Multipart chunk size: {}'.format(ByteCount(self.config.storage.get_chunk_size()).auto_str()))

		action = BackupTreeAction(storage)
		if (log_file := self.config.log_file_path) is not None:
			with log_utils.open_file_handler(self.logger, log_file):
				report = action.run()
		else:
			report = action.run()

		if report.interrupted:
			ErrorReturnCodes.interrupted.sys_exit()
		if not report.is_complete:
			ErrorReturnCodes.action_failed.sys_exit()


class BackupCommandAdapter(CliCommandAdapterBase):
	@property
	@override
	def command(self) -> str:
		return 'backup'

	@property
	@override
	def description(self) -> str:
		return 'Back up a file or a directory tree to the storage, skipping the units that are already up-to-date'

	@override
	def build_parser(self, parser: argparse.ArgumentParser):
		parser.add_argument('-b', '--bucket', help='The bucket to upload to. With --local, it is the path to a local directory')
		self._add_source_arguments(parser)
		parser.add_argument('--storage-class', help='Storage class of the uploaded archives, e.g. GLACIER, DEEP_ARCHIVE, STANDARD. Default: GLACIER')
		parser.add_argument('--dry-run', action='store_true', help='Calculate fingerprints and check the storage, but do not upload anything')
		parser.add_argument('--max-size', type=parse_max_size, help='The largest archive size expected, used to calculate the multipart chunk size. A number without unit is in GiB. Example: 500GiB. Default: 1TiB')
		parser.add_argument('--local', action='store_true', help='Use a local directory as the storage instead of S3')
		parser.add_argument('--endpoint-url', help='Endpoint URL of an S3-compatible service')
		parser.add_argument('--region', help='Region of the bucket')
		parser.add_argument('--unit-concurrency', type=int, help='How many units are backed up at the same time. Default: 1')
		parser.add_argument('--concurrency', type=int, help='How many files are hashed at the same time in a unit. 0 means based on the cpu count. Default: 0')

	@override
	def run(self, args: argparse.Namespace):
		handler = BackupCommandHandler(self._make_common_args(args), BackupCommandArgs(
			bucket=args.bucket,
			name=args.name,
			path=args.path,
			storage_class=args.storage_class,
			dry_run=args.dry_run,
			max_size=args.max_size,
			split_depth=args.split_depth,
			local=args.local,
			endpoint_url=args.endpoint_url,
			region=args.region,
			unit_concurrency=args.unit_concurrency,
			concurrency=args.concurrency,
		))
		handler.handle()
