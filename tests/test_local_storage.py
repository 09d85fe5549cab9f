import io
import tempfile
import unittest
from pathlib import Path

from cold_backup.exceptions import ObjectNotFound, RemoteWriteError
from cold_backup.storage.local_storage import LocalStorage
from cold_backup.utils.pipe_io import ProducerPipeReader
from tests.fakes import install_config


class LocalStorageTestCase(unittest.TestCase):
	def setUp(self):
		install_config()
		self.temp_dir = tempfile.TemporaryDirectory()
		self.root = Path(self.temp_dir.name)
		self.storage = LocalStorage(self.root)

	def tearDown(self):
		self.temp_dir.cleanup()

	def test_1_put_get(self):
		self.storage.put('a/b/c.tar.gz', io.BytesIO(b'data'), storage_class='GLACIER')
		self.assertEqual(b'data', self.storage.get('a/b/c.tar.gz'))
		self.assertTrue(self.storage.exists_exactly('a/b/c.tar.gz'))
		self.assertFalse(self.storage.exists_exactly('a/b/c.tar'))
		self.assertFalse(self.storage.exists_exactly('a/b'))

		self.storage.put('a/b/c.tar.gz', io.BytesIO(b'new'))
		self.assertEqual(b'new', self.storage.get('a/b/c.tar.gz'))

	def test_2_not_found(self):
		with self.assertRaises(ObjectNotFound):
			self.storage.get('missing')

	def test_3_bad_keys(self):
		for key in ['/abs', 'a/../b', 'a//b', '', './a']:
			with self.subTest(key=key):
				with self.assertRaises(ValueError):
					self.storage.put(key, io.BytesIO(b''))

	def test_4_failed_stream(self):
		class _Boom(Exception):
			pass

		def producer(f):
			f.write(b'partial')
			raise _Boom()

		with self.assertRaises(_Boom):
			with ProducerPipeReader(producer) as stream:
				self.storage.put('k', stream)
		self.assertFalse(self.storage.exists_exactly('k'))
		self.assertEqual([], list(self.root.iterdir()))

	def test_5_write_error(self):
		(self.root / 'file').write_bytes(b'')
		with self.assertRaises(RemoteWriteError):
			self.storage.put('file/k', io.BytesIO(b'x'))


if __name__ == '__main__':
	unittest.main()
