import csv
import os
import threading
from datetime import datetime
from pathlib import Path
from retention.models import DeletionRecord

HEADER = ["Timestamp", "Repository", "Image Name", "Tag", "Component ID", "Rule", "Dry Run"]


class DeletionLogRepository:
    """Append-only CSV log with one row per deletion decision.

    Appends are serialized with a lock and the file is only held open for the
    duration of a single write.
    """

    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self._lock: threading.Lock = threading.Lock()
        with self._lock:
            self._ensure_file()

    def append(self, record: DeletionRecord) -> None:
        with self._lock:
            # the log may have been rotated away since the last append
            self._ensure_file()
            with open(self.file_path, "a", newline="") as f:
                csv.writer(f).writerow(self._to_row(record))

    def find_all(self) -> list[DeletionRecord]:
        """Read the log back. The retention run itself never reads it."""
        with self._lock:
            with open(self.file_path, "r", newline="") as f:
                rows = list(csv.reader(f))
        try:
            return [self._from_row(row) for row in rows[1:] if row]
        except Exception as e:
            raise ValueError(f"Invalid deletion log {self.file_path}: {e}") from e

    def _ensure_file(self) -> None:
        if os.path.isfile(self.file_path):
            return
        Path(self.file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(self.file_path, "w", newline="") as f:
            csv.writer(f).writerow(HEADER)

    def _to_row(self, record: DeletionRecord) -> list[str]:
        return [
            record.timestamp.isoformat(timespec="seconds"),
            record.repository,
            record.image_name,
            record.tag,
            record.component_id,
            record.rule,
            "true" if record.dry_run else "false",
        ]

    def _from_row(self, row: list[str]) -> DeletionRecord:
        timestamp, repository, image_name, tag, component_id, rule, dry_run = row
        return DeletionRecord(
            timestamp=datetime.fromisoformat(timestamp),
            repository=repository,
            image_name=image_name,
            tag=tag,
            component_id=component_id,
            rule=rule,
            dry_run=dry_run == "true",
        )
