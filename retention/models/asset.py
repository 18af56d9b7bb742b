from datetime import datetime
from pydantic.dataclasses import dataclass

@dataclass(frozen=True)
class Asset:
    id: str
    path: str = ""
    last_modified: datetime | None = None
