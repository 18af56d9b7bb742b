from dataclasses import dataclass
from datetime import datetime

@dataclass(frozen=True)
class DeletionRecord:
    timestamp: datetime
    repository: str
    image_name: str
    tag: str
    component_id: str
    rule: str
    dry_run: bool
