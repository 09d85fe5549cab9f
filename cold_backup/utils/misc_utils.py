def make_thread_name(name: str) -> str:
	from cold_backup import constants
	return f'CB@{constants.INSTANCE_ID}-{name}'
