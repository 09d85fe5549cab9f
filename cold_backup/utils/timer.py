import time


def _now() -> float:
	return time.time()


class Timer:
	__start_time: float

	def __init__(self):
		self.start()

	def start(self):
		self.__start_time = _now()

	def get_elapsed(self) -> float:
		return _now() - self.__start_time
