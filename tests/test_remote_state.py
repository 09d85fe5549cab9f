import unittest

from cold_backup.action.read_remote_state_action import ReadRemoteStateAction
from cold_backup.types.decision import decide, Decision
from cold_backup.types.fingerprint import Fingerprint
from cold_backup.types.hash_method import HashMethod
from cold_backup.types.remote_state import RemoteUnitState
from cold_backup.utils.retry_utils import RetryPolicy
from tests.fakes import install_config, MemoryStorage

_FP = '5d41402abc4b2a76b9719d911017c592'
_FP2 = '7d793037a0760186574b0282f2f435e7'


class DecisionTestCase(unittest.TestCase):
	def test_1_decide(self):
		fp = Fingerprint(_FP)
		self.assertEqual(Decision.skip, decide(fp, RemoteUnitState(_FP, True)))
		self.assertEqual(Decision.upload, decide(fp, RemoteUnitState(_FP, False)))
		self.assertEqual(Decision.upload, decide(fp, RemoteUnitState(_FP2, True)))
		self.assertEqual(Decision.upload, decide(fp, RemoteUnitState(None, True)))
		self.assertEqual(Decision.upload, decide(fp, RemoteUnitState.absent()))


class ReadRemoteStateTestCase(unittest.TestCase):
	def setUp(self):
		install_config()
		self.storage = MemoryStorage()

	def read(self, key: str = 'n/d.tar.gz', hash_method: HashMethod = HashMethod.md5) -> RemoteUnitState:
		return ReadRemoteStateAction(self.storage, key, hash_method, retry_policy=RetryPolicy(max_attempts=2, initial_delay=0)).run()

	def test_1_absent(self):
		self.assertEqual(RemoteUnitState(None, False), self.read())

	def test_2_present(self):
		self.storage.objects['n/d.tar.gz'] = b'archive'
		self.storage.objects['n/d.tar.gz.md5'] = ('  ' + _FP + '\n').encode()
		self.assertEqual(RemoteUnitState(_FP, True), self.read())

	def test_3_exact_key(self):
		# objects sharing the prefix never count as the archive
		self.storage.objects['n/d.tar.gz.md5'] = _FP.encode()
		self.storage.objects['n/d.tar.gz.txt'] = b'a.txt\n'
		self.storage.objects['n/d.tar.gz.bak'] = b'x'
		self.assertEqual(RemoteUnitState(_FP, False), self.read())

	def test_4_malformed(self):
		self.storage.objects['n/d.tar.gz'] = b'archive'
		for content in [b'', b'abc', _FP.upper().encode(), b'\xff\xfe' * 16, (_FP + _FP).encode(), b'g' * 32]:
			with self.subTest(content=content):
				self.storage.objects['n/d.tar.gz.md5'] = content
				self.assertEqual(RemoteUnitState(None, True), self.read())

	def test_5_hash_method_sidecar(self):
		sha = 'a' * 64
		self.storage.objects['k'] = b''
		self.storage.objects['k.sha256'] = sha.encode()
		self.storage.objects['k.md5'] = _FP.encode()
		self.assertEqual(RemoteUnitState(sha, True), self.read('k', HashMethod.sha256))

	def test_6_read_error(self):
		self.storage.objects['n/d.tar.gz'] = b'archive'
		self.storage.objects['n/d.tar.gz.md5'] = _FP.encode()
		self.storage.failing_read_keys.add('n/d.tar.gz.md5')
		self.assertEqual(RemoteUnitState(None, True), self.read())
		self.assertEqual(2, self.storage.get_keys.count('n/d.tar.gz.md5'))

		self.storage.failing_read_keys.add('n/d.tar.gz')
		self.assertEqual(RemoteUnitState(None, False), self.read())


if __name__ == '__main__':
	unittest.main()
