import os
import tempfile
import unittest
from pathlib import Path

from cold_backup.action.build_file_set_action import BuildFileSetAction, build_unit_file_set
from cold_backup.exceptions import UnreadablePath
from cold_backup.types.backup_unit import BackupUnit
from tests.fakes import install_config, write_file


class BuildFileSetTestCase(unittest.TestCase):
	def setUp(self):
		install_config()
		self.temp_dir = tempfile.TemporaryDirectory()
		self.root = Path(self.temp_dir.name) / 'unit'
		write_file(self.root / 'b.txt', b'b')
		write_file(self.root / 'A.txt', b'A')
		write_file(self.root / 'sub' / 'c.txt', b'c')
		write_file(self.root / 'sub' / 'deep' / 'd.txt', b'd')
		write_file(self.root / '$RECYCLE.BIN' / 'junk.txt', b'junk')
		write_file(self.root / 'my$RECYCLE.BIN' / 'kept.txt', b'kept')
		(self.root / 'empty').mkdir()

	def tearDown(self):
		self.temp_dir.cleanup()

	def build(self, files_only: bool, **kwargs):
		kwargs.setdefault('excluded_dir_names', ['$RECYCLE.BIN'])
		return BuildFileSetAction(self.root, files_only, **kwargs).run()

	def test_1_files_only(self):
		fs = self.build(True)
		self.assertEqual(('A.txt', 'b.txt'), fs.paths)
		self.assertEqual(self.root, fs.base_path)

	def test_2_recursive(self):
		fs = self.build(False)
		self.assertEqual(('A.txt', 'b.txt', 'my$RECYCLE.BIN/kept.txt', 'sub/c.txt', 'sub/deep/d.txt'), fs.paths)

	def test_3_no_exclusion(self):
		fs = self.build(False, excluded_dir_names=[])
		self.assertIn('$RECYCLE.BIN/junk.txt', fs.paths)

	@unittest.skipIf(not hasattr(os, 'symlink'), 'symlink not supported')
	def test_4_symlinks(self):
		os.symlink(self.root / 'b.txt', self.root / 'link.txt')
		os.symlink(self.root / 'sub', self.root / 'link_dir')
		fs = self.build(False)
		self.assertNotIn('link.txt', fs.paths)
		self.assertFalse(any(p.startswith('link_dir/') for p in fs.paths))

	def test_5_ignore_patterns(self):
		fs = self.build(False, ignore_patterns=['*.txt', '!c.txt'])
		self.assertEqual(('sub/c.txt',), fs.paths)

	def test_6_empty(self):
		fs = BuildFileSetAction(self.root / 'empty', False).run()
		self.assertTrue(fs.is_empty())

	def test_7_missing_dir(self):
		with self.assertRaises(UnreadablePath) as cm:
			BuildFileSetAction(self.root / 'not_exists', False).run()
		self.assertEqual(self.root / 'not_exists', cm.exception.path)

	def test_8_patterns_relative_to_backup_root(self):
		write_file(self.root / 'build' / 'x.o', b'x')
		write_file(self.root / 'sub' / 'build' / 'y.o', b'y')
		patterns = ['/build', '/sub/deep/']

		# the whole tree as one unit, and the same tree split into a unit per directory
		fs = self.build(False, ignore_patterns=patterns, pattern_root=self.root)
		self.assertNotIn('build/x.o', fs.paths)
		self.assertIn('sub/build/y.o', fs.paths)
		self.assertNotIn('sub/deep/d.txt', fs.paths)

		sub_fs = BuildFileSetAction(self.root / 'sub', False, ignore_patterns=patterns, pattern_root=self.root).run()
		self.assertEqual(('build/y.o', 'c.txt'), sub_fs.paths)
		build_fs = BuildFileSetAction(self.root / 'build', False, ignore_patterns=patterns, pattern_root=self.root).run()
		self.assertTrue(build_fs.is_empty())

	def test_9_unit_file_set(self):
		install_config(self.root, **{'backup.ignore_patterns': ['/sub/c.txt']})
		fs = build_unit_file_set(BackupUnit(self.root / 'sub', 'test/unit/sub.tar.gz'), self.root)
		self.assertEqual(('deep/d.txt',), fs.paths)

		fs = build_unit_file_set(BackupUnit(self.root / 'b.txt', 'test/b.txt', single_file=True), self.root)
		self.assertEqual(self.root, fs.base_path)
		self.assertEqual(('b.txt',), fs.paths)


if __name__ == '__main__':
	unittest.main()
