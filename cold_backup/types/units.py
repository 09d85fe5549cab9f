"""
Config values with a unit, like "10GiB" or "1m"

They are str, so a config file keeps the text the user wrote, and the parsed number is in :attr:`value`
"""
import re
from typing import Union, List, Tuple

_Number = Union[int, float]
_VALUE_PATTERN = re.compile(r'(\d+(?:\.\d*)?|\.\d+)\s*([a-zA-Z]*)')


def _normalize(value: _Number) -> _Number:
	if isinstance(value, float) and value.is_integer():
		return int(value)
	return value


def _trim_digits(value: _Number) -> str:
	return '{:.2f}'.format(value).rstrip('0').rstrip('.')


class _UnitValue(str):
	_value: _Number

	# (unit names, multiplier), the first name is the one used in formatting. Order: small -> large
	_units: List[Tuple[Tuple[str, ...], _Number]]

	@classmethod
	def _lookup_unit(cls, unit: str) -> _Number:
		unit = unit.lower()
		for names, k in cls._units:
			if unit in (n.lower() for n in names):
				return k
		raise ValueError('unknown unit {!r} for {}'.format(unit, cls.__name__))

	@classmethod
	def _parse(cls, s: str) -> _Number:
		match = _VALUE_PATTERN.fullmatch(s.strip())
		if match is None:
			raise ValueError('bad {} value {!r}'.format(cls.__name__, s))
		number, unit = match.groups()
		n = int(number) if number.isdigit() else float(number)
		return _normalize(n * cls._lookup_unit(unit))

	@classmethod
	def _exact_text(cls, value: _Number) -> str:
		# the largest unit that divides the value, so parsing the text gives the value back
		text = '{}{}'.format(value, next(names[0] for names, k in cls._units if k == 1))
		for names, k in cls._units:
			x = value / k
			if x.is_integer() and x != 0:
				text = '{}{}'.format(int(x), names[0])
		return text

	def __new__(cls, s: Union[str, int, float]):
		if isinstance(s, bool) or not isinstance(s, (str, int, float)):
			raise TypeError(type(s))
		if isinstance(s, str):
			value = cls._parse(s)
			obj = super().__new__(cls, s)
		else:
			if s < 0:
				raise ValueError('{} cannot be negative: {}'.format(cls.__name__, s))
			value = _normalize(s)
			obj = super().__new__(cls, cls._exact_text(value))
		obj._value = value
		return obj

	@property
	def value(self) -> _Number:
		return self._value

	def auto_str(self) -> str:
		"""
		A human friendly text with the largest unit that keeps the number >= 1, e.g. "1.5GiB"
		"""
		names, k = self._units[0]
		for unit_names, unit_k in self._units:
			if self._value >= unit_k:
				names, k = unit_names, unit_k
		return _trim_digits(self._value / k) + names[0]

	def __repr__(self) -> str:
		return '{}({!r})'.format(type(self).__name__, str(self))


class Duration(_UnitValue):
	"""
	A duration, :attr:`value` is in seconds
	"""
	_units = [
		(('ms',), 1e-3),
		(('s', 'sec'), 1),
		(('m', 'min'), 60),
		(('h', 'hour'), 60 * 60),
		(('d', 'day'), 60 * 60 * 24),
	]


def _byte_units() -> List[Tuple[Tuple[str, ...], int]]:
	units = [(('B', ''), 1)]
	for i, prefix in enumerate(['K', 'M', 'G', 'T', 'P']):
		units.append(((prefix + 'B', prefix), 1000 ** (i + 1)))
		units.append(((prefix + 'iB', prefix + 'i'), 1024 ** (i + 1)))
	units.sort(key=lambda u: u[1])
	return units


class ByteCount(_UnitValue):
	"""
	A size in bytes. K/M/G/T/P are powers of 1000, Ki/Mi/Gi/Ti/Pi are powers of 1024
	"""
	_units = _byte_units()

