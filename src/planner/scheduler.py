from __future__ import annotations

import logging
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from .settings import AppSettings
from .storage import EventStoreError, SqliteEventStore, prune_backups, write_backup

LOGGER = logging.getLogger(__name__)

BACKUP_JOB_ID = "events_backup_job"


def run_backup_job(settings: AppSettings) -> None:
    started_at = datetime.now(timezone.utc)
    store = SqliteEventStore(db_path=settings.db_path)
    try:
        events = store.read_events()
        backup_path = write_backup(events, settings.backup_path, now=started_at)
        pruned = prune_backups(settings.backup_path, settings.yaml.backup.keep)
    except (EventStoreError, OSError):
        # Older backups stay untouched when the store cannot be read.
        LOGGER.exception("Event backup job failed")
        return

    LOGGER.info(
        "Event backup job wrote %d events to '%s' (pruned %d old backups)",
        len(events),
        backup_path,
        pruned,
    )


def build_scheduler(settings: AppSettings) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=settings.timezone)
    if not settings.yaml.backup.enabled:
        return scheduler

    scheduler.add_job(
        run_backup_job,
        "interval",
        kwargs={"settings": settings},
        hours=settings.yaml.backup.interval_hours,
        id=BACKUP_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=600,
    )
    return scheduler
