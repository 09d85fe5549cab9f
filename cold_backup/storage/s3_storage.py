from typing import BinaryIO, Optional, TYPE_CHECKING, Any, Dict

import boto3
from boto3.exceptions import S3UploadFailedError
from boto3.s3.transfer import TransferConfig
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, ParamValidationError
from typing_extensions import override

from cold_backup.exceptions import ObjectNotFound, RemoteReadError, RemoteWriteError
from cold_backup.storage import Storage

if TYPE_CHECKING:
	from cold_backup.config.storage_config import StorageConfig

_NOT_FOUND_CODES = frozenset(['404', 'NoSuchKey', 'NotFound'])
_RETRYABLE_CODES = frozenset([
	'Throttling', 'ThrottlingException', 'SlowDown', 'RequestTimeout', 'RequestTimeTooSkewed',
	'InternalError', 'ServiceUnavailable', 'RequestLimitExceeded', 'BadDigest',
])


def _is_not_found(e: ClientError) -> bool:
	return str(e.response.get('Error', {}).get('Code')) in _NOT_FOUND_CODES


def _is_retryable(e: BaseException) -> bool:
	if isinstance(e, S3UploadFailedError):
		return e.__cause__ is None or _is_retryable(e.__cause__)
	if isinstance(e, ClientError):
		code = str(e.response.get('Error', {}).get('Code'))
		status = e.response.get('ResponseMetadata', {}).get('HTTPStatusCode') or 0
		return code in _RETRYABLE_CODES or status >= 500
	if isinstance(e, (NoCredentialsError, ParamValidationError)):
		return False
	return isinstance(e, BotoCoreError)


class S3Storage(Storage):
	def __init__(self, client: Any, bucket: str, *, upload_concurrency: int = 8):
		super().__init__()
		self.client = client
		self.bucket = bucket
		self.upload_concurrency = upload_concurrency

	@classmethod
	def from_config(cls, config: 'StorageConfig') -> 'S3Storage':
		boto_config = BotoConfig(
			connect_timeout=config.connect_timeout.value,
			read_timeout=config.read_timeout.value,
			# retries are done by the caller, with its own backoff policy
			retries={'max_attempts': 0, 'mode': 'standard'},
		)
		kwargs: Dict[str, Any] = {'config': boto_config}
		if config.endpoint_url:
			kwargs['endpoint_url'] = config.endpoint_url
		if config.region:
			kwargs['region_name'] = config.region
		client = boto3.session.Session().client('s3', **kwargs)
		return S3Storage(client, config.bucket, upload_concurrency=config.upload_concurrency)

	@override
	def put(self, key: str, stream: BinaryIO, *, chunk_size_hint: Optional[int] = None, storage_class: Optional[str] = None):
		transfer_kwargs: Dict[str, Any] = {'max_concurrency': self.upload_concurrency}
		if chunk_size_hint is not None:
			transfer_kwargs['multipart_threshold'] = chunk_size_hint
			transfer_kwargs['multipart_chunksize'] = chunk_size_hint
		extra_args: Dict[str, str] = {}
		if storage_class:
			extra_args['StorageClass'] = storage_class

		try:
			self.client.upload_fileobj(stream, self.bucket, key, ExtraArgs=extra_args, Config=TransferConfig(**transfer_kwargs))
		except (ClientError, BotoCoreError, S3UploadFailedError) as e:
			raise RemoteWriteError(key, e, retryable=_is_retryable(e))

	@override
	def get(self, key: str) -> bytes:
		try:
			response = self.client.get_object(Bucket=self.bucket, Key=key)
			return response['Body'].read()
		except ClientError as e:
			if _is_not_found(e):
				raise ObjectNotFound(key) from None
			raise RemoteReadError(key, e, retryable=_is_retryable(e))
		except BotoCoreError as e:
			raise RemoteReadError(key, e, retryable=_is_retryable(e))

	@override
	def exists_exactly(self, key: str) -> bool:
		# HEAD addresses the exact key, so objects that only share the prefix never count
		try:
			self.client.head_object(Bucket=self.bucket, Key=key)
		except ClientError as e:
			if _is_not_found(e):
				return False
			raise RemoteReadError(key, e, retryable=_is_retryable(e))
		except BotoCoreError as e:
			raise RemoteReadError(key, e, retryable=_is_retryable(e))
		else:
			return True

	@override
	def describe(self) -> str:
		return 's3 bucket {!r}'.format(self.bucket)
