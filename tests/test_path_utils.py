import unittest
from pathlib import Path

from cold_backup.types.file_set import FileSet
from cold_backup.utils import path_utils


class PathUtilsTestCase(unittest.TestCase):
	def test_1_byte_order(self):
		self.assertEqual(['B.txt', 'a.txt', 'a/b.txt', 'a0.txt', 'b.txt'], path_utils.sorted_by_bytes(['b.txt', 'a0.txt', 'a/b.txt', 'a.txt', 'B.txt']))
		self.assertEqual(['z', 'é'], path_utils.sorted_by_bytes(['é', 'z']))

	def test_2_normalize_key(self):
		self.assertEqual('name/d.tar.gz', path_utils.normalize_key('name/./d.tar.gz'))
		self.assertEqual('name/d/sub', path_utils.normalize_key('./name//d/./././sub'))
		self.assertEqual('name/d', path_utils.normalize_key('/name/d'))

	def test_3_archive_key(self):
		self.assertEqual('backup/d.tar.gz', path_utils.make_archive_key('backup', 'd', '.tar.gz'))
		self.assertEqual('backup/d/_files.tar', path_utils.make_archive_key('backup', 'd/_files', '.tar'))
		self.assertEqual('my/backup/file.bin', path_utils.make_archive_key('my/backup/', 'file.bin'))

	def test_4_join_rel(self):
		self.assertEqual('a', path_utils.join_rel('', 'a'))
		self.assertEqual('a/b', path_utils.join_rel('a', 'b'))

	def test_5_file_set_order(self):
		fs = FileSet.of(Path('/x'), ['b', 'a', 'B', 'a'])
		self.assertEqual(('B', 'a', 'b'), fs.paths)
		self.assertEqual(b'B\na\nb\n', fs.to_manifest())
		self.assertEqual(Path('/x/a'), fs.full_path('a'))
		self.assertTrue(FileSet.of(Path('/x'), []).is_empty())
		with self.assertRaises(ValueError):
			FileSet(Path('/x'), ('b', 'a'))
		with self.assertRaises(ValueError):
			FileSet(Path('/x'), ('a', 'a'))


if __name__ == '__main__':
	unittest.main()
