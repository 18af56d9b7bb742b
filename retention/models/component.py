from dataclasses import field
from datetime import datetime, timezone
from pydantic.dataclasses import dataclass
from .asset import Asset

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Component:
    id: str
    repository: str
    name: str
    version: str
    assets: list[Asset] = field(default_factory=list)

    @property
    def last_modified(self) -> datetime:
        """Most recent asset modification, or the epoch for a component without assets."""
        timestamps = [_as_utc(a.last_modified) for a in self.assets if a.last_modified is not None]
        return max(timestamps, default=EPOCH)


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are read as UTC so they compare with offset-aware ones
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
