"""Value objects for pre-fix DOM snapshots."""

import uuid
from dataclasses import dataclass

SNAPSHOT_ID_PREFIX = "snapshot-"


@dataclass(frozen=True)
class SnapshotId:
    """Opaque handle returned by ``save_snapshot`` and passed to ``rollback``.

    The prefix only makes ids recognisable in logs; callers must not parse it.
    """
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("SnapshotId cannot be empty")

    @classmethod
    def generate(cls) -> "SnapshotId":
        return cls(value=f"{SNAPSHOT_ID_PREFIX}{uuid.uuid4().hex}")

    def __str__(self) -> str:
        return self.value
