import uuid

INSTANCE_ID = uuid.uuid4().hex[:4]
PACKAGE_ID = 'cold_backup'

# remote object layout
LOOSE_FILES_UNIT_NAME = '_files'
MANIFEST_SUFFIX = '.txt'

# S3 allows at most 10000 parts per multipart upload, each part at least 5MiB
MULTIPART_MAX_PARTS = 10000
MULTIPART_MIN_CHUNK_SIZE = 5 * 1024 * 1024

DEFAULT_EXCLUDED_DIR_NAMES = [
	'$RECYCLE.BIN',
	'.Trash-1000',
	'System Volume Information',
]
