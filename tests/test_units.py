import json
import unittest

from mcdreforged.api.utils import serializer

from cold_backup.types.units import Duration, ByteCount


class UnitValueTestCase(unittest.TestCase):
	def test_1_duration(self):
		self.assertEqual(10, Duration('10s').value)
		self.assertEqual(60, Duration('1m').value)
		self.assertEqual(0.5, Duration('500ms').value)
		self.assertEqual(36 * 60, Duration('36min').value)
		self.assertEqual('1.5m', Duration('90s').auto_str())
		self.assertEqual('24m', str(Duration(1440)))
		self.assertIsInstance(Duration('1s'), str)

	def test_2_byte_count(self):
		self.assertEqual(2 ** 40, ByteCount('1TiB').value)
		self.assertEqual(2 ** 40, ByteCount('1Ti').value)
		self.assertEqual(512 * 2 ** 30, ByteCount('512GiB').value)
		self.assertEqual(5 * 10 ** 9, ByteCount('5GB').value)
		self.assertEqual(1536, ByteCount('1.5KiB').value)
		self.assertEqual(500, ByteCount('500').value)
		self.assertEqual('1TiB', str(ByteCount(2 ** 40)))
		self.assertEqual('105MiB', ByteCount(105 * 2 ** 20).auto_str())
		self.assertEqual('1.5GiB', ByteCount(3 * 2 ** 29).auto_str())

	def test_3_bad_values(self):
		for cls, bad in [(ByteCount, '12 parsecs'), (ByteCount, 'GiB'), (ByteCount, '-1GiB'), (Duration, '10'), (Duration, '1 fortnight')]:
			with self.subTest(cls=cls.__name__, value=bad):
				with self.assertRaises(ValueError):
					cls(bad)
		with self.assertRaises(ValueError):
			ByteCount(-1)
		with self.assertRaises(TypeError):
			Duration(True)

	def test_4_config_serialization(self):
		for cls, values in [(Duration, [0, 1440, '0s', '18s', '36m']), (ByteCount, [0, 1024, '2Gi', '3M', '4kib'])]:
			for val in values:
				with self.subTest(cls=cls.__name__, value=val):
					a = cls(val)
					self.assertEqual(str(a), serializer.serialize(a))

					b = serializer.deserialize(serializer.serialize(a), cls)
					self.assertIs(cls, type(b))
					self.assertEqual(a.value, b.value)
					self.assertEqual(str(a), json.loads(json.dumps(a)))


if __name__ == '__main__':
	unittest.main()
