import dataclasses
from typing import Dict


@dataclasses.dataclass(frozen=True)
class Fingerprint:
	value: str  # hex digest of the whole unit
	file_hashes: Dict[str, str] = dataclasses.field(default_factory=dict, compare=False, repr=False)  # relative path -> content hash

	def __str__(self) -> str:
		return self.value

	def to_sidecar(self) -> bytes:
		return (self.value + '\n').encode('ascii')
