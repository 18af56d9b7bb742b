import threading
from datetime import datetime, timezone

from retention.models import DeletionRecord
from retention.repositories import DeletionLogRepository

HEADER_LINE = "Timestamp,Repository,Image Name,Tag,Component ID,Rule,Dry Run"


def record(tag="v1", dry_run=False):
    return DeletionRecord(
        timestamp=datetime(2025, 3, 10, 10, 32, 4, tzinfo=timezone.utc),
        repository="docker-hosted",
        image_name="prod-app",
        tag=tag,
        component_id=f"id-{tag}",
        rule="prod",
        dry_run=dry_run,
    )


def test_new_log_gets_header(tmp_path):
    log_file = tmp_path / "logs" / "deletion_log.csv"
    DeletionLogRepository(str(log_file))
    assert log_file.read_text().splitlines() == [HEADER_LINE]


def test_append_writes_one_line_per_record(tmp_path):
    log_file = tmp_path / "deletion_log.csv"
    repo = DeletionLogRepository(str(log_file))

    repo.append(record("v1"))
    repo.append(record("v2", dry_run=True))

    assert log_file.read_text().splitlines() == [
        HEADER_LINE,
        "2025-03-10T10:32:04+00:00,docker-hosted,prod-app,v1,id-v1,prod,false",
        "2025-03-10T10:32:04+00:00,docker-hosted,prod-app,v2,id-v2,prod,true",
    ]


def test_existing_log_is_appended_without_new_header(tmp_path):
    log_file = tmp_path / "deletion_log.csv"
    DeletionLogRepository(str(log_file)).append(record("v1"))

    repo = DeletionLogRepository(str(log_file))
    repo.append(record("v2"))

    lines = log_file.read_text().splitlines()
    assert lines.count(HEADER_LINE) == 1
    assert len(lines) == 3


def test_find_all(tmp_path):
    repo = DeletionLogRepository(str(tmp_path / "deletion_log.csv"))
    repo.append(record("v1", dry_run=True))

    assert repo.find_all() == [record("v1", dry_run=True)]


def test_concurrent_appends_are_not_interleaved(tmp_path):
    log_file = tmp_path / "deletion_log.csv"
    repo = DeletionLogRepository(str(log_file))

    def write(worker):
        for i in range(50):
            repo.append(record(f"w{worker}-{i}"))

    threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = repo.find_all()
    assert len(records) == 200
    assert len({r.tag for r in records}) == 200


def test_removed_log_is_recreated_with_header(tmp_path):
    log_file = tmp_path / "deletion_log.csv"
    repo = DeletionLogRepository(str(log_file))
    repo.append(record("v1"))

    log_file.unlink()
    repo.append(record("v2"))

    assert log_file.read_text().splitlines()[0] == HEADER_LINE
    assert [r.tag for r in repo.find_all()] == ["v2"]
