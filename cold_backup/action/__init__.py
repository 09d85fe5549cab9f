"""
Actions for all the steps of a backup run
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

_T = TypeVar('_T')


class Action(Generic[_T], ABC):
	def __init__(self):
		self.is_interrupted = threading.Event()

		from cold_backup import logger
		from cold_backup.config.config import Config
		self.logger: logging.Logger = logger.get()
		self.config: Config = Config.get()

	@abstractmethod
	def run(self) -> _T:
		...

	def interrupt(self):
		self.is_interrupted.set()
