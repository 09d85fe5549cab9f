import argparse
import dataclasses
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Dict, Any

from cold_backup import logger
from cold_backup.config.config import Config, set_config_instance
from cold_backup.exceptions import ConfigurationError


@dataclasses.dataclass(frozen=True)
class CommonCommandArgs:
	config_path: Optional[Path]
	verbose: bool
	log_file: Optional[Path]


def _merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]):
	for key, value in overrides.items():
		if isinstance(value, dict) and isinstance(base.get(key), dict):
			_merge_dict(base[key], value)
		else:
			base[key] = value


def load_config(config_path: Optional[Path], overrides: Dict[str, Any], *, require_storage: bool = True) -> Config:
	"""
	Config values from the lowest to the highest priority: defaults, the config file, the command line

	:raise ConfigurationError: if the config file cannot be read, or the resulting config is invalid
	"""
	data: Dict[str, Any] = Config.get_default().serialize()
	if config_path is not None:
		try:
			with open(config_path, 'r', encoding='utf8') as f:
				file_data = json.load(f)
		except (OSError, ValueError) as e:
			raise ConfigurationError('Failed to load config file {!r}: {}'.format(str(config_path), e))
		if not isinstance(file_data, dict):
			raise ConfigurationError('Config file {!r} should contain a json object'.format(str(config_path)))
		_merge_dict(data, file_data)
	_merge_dict(data, overrides)

	try:
		config = Config.deserialize(data)
	except (TypeError, ValueError, KeyError) as e:
		raise ConfigurationError('Bad config: {}'.format(e))
	config.validate(require_storage=require_storage)
	return config


class CliCommandHandlerBase(ABC):
	def __init__(self, common_args: CommonCommandArgs):
		self.logger: logging.Logger = logger.get()
		self.common_args = common_args

	@property
	def config(self) -> Config:
		return Config.get()

	@abstractmethod
	def _get_config_overrides(self) -> Dict[str, Any]:
		...

	# ==================== Utils ====================

	def init_environment(self, *, require_storage: bool = True):
		overrides = self._get_config_overrides()
		if self.common_args.verbose:
			overrides['debug'] = True
		if self.common_args.log_file is not None:
			overrides['log_file'] = str(self.common_args.log_file)
		config = load_config(self.common_args.config_path, overrides, require_storage=require_storage)
		set_config_instance(config)


def set_if_given(data: Dict[str, Any], path: str, value: Any):
	"""
	Set a value into the nested dict, with "a.b.c" styled path. None values are ignored
	"""
	if value is None:
		return
	keys = path.split('.')
	for key in keys[:-1]:
		data = data.setdefault(key, {})
	data[keys[-1]] = value


class CliCommandAdapterBase(ABC):
	@property
	@abstractmethod
	def command(self) -> str:
		raise NotImplementedError()

	@property
	@abstractmethod
	def description(self) -> str:
		raise NotImplementedError()

	@abstractmethod
	def build_parser(self, parser: argparse.ArgumentParser):
		raise NotImplementedError()

	@abstractmethod
	def run(self, args: argparse.Namespace):
		raise NotImplementedError()

	# ==================== Utils ====================

	@classmethod
	def _make_common_args(cls, args: argparse.Namespace) -> CommonCommandArgs:
		return CommonCommandArgs(
			config_path=Path(args.config) if args.config else None,
			verbose=args.verbose,
			log_file=Path(args.log_file) if args.log_file else None,
		)

	@classmethod
	def _add_source_arguments(cls, parser: argparse.ArgumentParser):
		parser.add_argument('-n', '--name', help='Name of the backup, the prefix of all object keys in the storage')
		parser.add_argument('-p', '--path', help='Path to the file or directory to back up')
		parser.add_argument('--split-depth', type=int, help='Directories at this depth are archived as a whole, shallower directories are split into per-directory units. 0 means a single archive for everything')
