import logging
import threading
from datetime import datetime
from typing import Any, Callable

from croniter import croniter

from retention.utils.logging import setup_logger


class ScheduledRunner:
    """Calls a job on every fire time of a cron expression until stopped.

    Runs never overlap: the next fire time is computed once the current job has
    returned, so triggers missed during a long run are skipped.
    """

    def __init__(self, schedule: str, job: Callable[[], Any]):
        if not croniter.is_valid(schedule):
            raise ValueError(f"Invalid cron schedule: {schedule!r}")
        self.schedule: str = schedule
        self.job: Callable[[], Any] = job
        self.logger: logging.Logger = setup_logger("ScheduledRunner")
        self._stopped: threading.Event = threading.Event()

    def next_fire_time(self, now: datetime) -> datetime:
        return croniter(self.schedule, now).get_next(datetime)

    def run_forever(self) -> None:
        while not self._stopped.is_set():
            now = datetime.now().astimezone()
            next_run = self.next_fire_time(now)
            self.logger.info(f"Next execution scheduled at {next_run.isoformat()}")
            if self._stopped.wait(max((next_run - now).total_seconds(), 0)):
                break
            self.run_once()
        self.logger.info("Scheduler stopped")

    def run_once(self) -> None:
        self.logger.info("Scheduled execution started")
        try:
            self.job()
        except Exception as e:
            self.logger.error(f"Scheduled execution failed: {e}")
            return
        self.logger.info("Scheduled execution completed")

    def stop(self) -> None:
        self._stopped.set()
