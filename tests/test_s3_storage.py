import io
import unittest

import boto3
from botocore.response import StreamingBody
from botocore.stub import Stubber

from cold_backup.exceptions import ObjectNotFound, RemoteReadError
from cold_backup.storage.s3_storage import S3Storage
from tests.fakes import install_config


class S3StorageTestCase(unittest.TestCase):
	def setUp(self):
		install_config()
		self.client = boto3.session.Session().client(
			's3', region_name='us-east-1',
			aws_access_key_id='test', aws_secret_access_key='test',
		)
		self.stubber = Stubber(self.client)
		self.stubber.activate()
		self.storage = S3Storage(self.client, 'bucket')

	def tearDown(self):
		self.stubber.deactivate()

	def test_1_exists(self):
		params = {'Bucket': 'bucket', 'Key': 'n/d.tar.gz'}
		self.stubber.add_response('head_object', {'ContentLength': 3}, params)
		self.stubber.add_client_error('head_object', service_error_code='404', http_status_code=404, expected_params=params)
		self.assertTrue(self.storage.exists_exactly('n/d.tar.gz'))
		self.assertFalse(self.storage.exists_exactly('n/d.tar.gz'))
		self.stubber.assert_no_pending_responses()

	def test_2_exists_error(self):
		self.stubber.add_client_error('head_object', service_error_code='403', http_status_code=403)
		self.stubber.add_client_error('head_object', service_error_code='500', http_status_code=500)
		with self.assertRaises(RemoteReadError) as cm:
			self.storage.exists_exactly('k')
		self.assertFalse(cm.exception.retryable)
		with self.assertRaises(RemoteReadError) as cm:
			self.storage.exists_exactly('k')
		self.assertTrue(cm.exception.retryable)

	def test_3_get(self):
		self.stubber.add_response(
			'get_object', {'Body': StreamingBody(io.BytesIO(b'abc'), 3), 'ContentLength': 3},
			{'Bucket': 'bucket', 'Key': 'k.md5'},
		)
		self.assertEqual(b'abc', self.storage.get('k.md5'))

	def test_4_get_errors(self):
		self.stubber.add_client_error('get_object', service_error_code='NoSuchKey', http_status_code=404)
		self.stubber.add_client_error('get_object', service_error_code='SlowDown', http_status_code=503)
		self.stubber.add_client_error('get_object', service_error_code='AccessDenied', http_status_code=403)
		with self.assertRaises(ObjectNotFound):
			self.storage.get('k.md5')
		with self.assertRaises(RemoteReadError) as cm:
			self.storage.get('k.md5')
		self.assertTrue(cm.exception.retryable)
		with self.assertRaises(RemoteReadError) as cm:
			self.storage.get('k.md5')
		self.assertFalse(cm.exception.retryable)

	def test_5_from_config(self):
		config = install_config(**{'storage.region': 'eu-west-1', 'storage.endpoint_url': 'http://localhost:9000', 'storage.upload_concurrency': 3})
		storage = S3Storage.from_config(config.storage)
		self.assertEqual('bucket', storage.bucket)
		self.assertEqual(3, storage.upload_concurrency)
		self.assertEqual('eu-west-1', storage.client.meta.region_name)
		self.assertEqual('http://localhost:9000', storage.client.meta.endpoint_url)
		self.assertEqual(10, storage.client.meta.config.connect_timeout)
		self.assertEqual(60, storage.client.meta.config.read_timeout)


if __name__ == '__main__':
	unittest.main()
