"""
Background translation jobs

When automatic translation runs asynchronously, each cascade request is
handed to the APScheduler ``BackgroundScheduler`` as a one-off job. The
job re-loads the host in a fresh session and performs the translation,
so it never runs inside the transaction that triggered it.

Start the scheduler once at application startup (``scheduler.start()``);
jobs added before that stay pending.
"""

from __future__ import annotations

import logging
from typing import Protocol

from apscheduler.schedulers.background import BackgroundScheduler

from autotranslate.automatic.registry import host_registry
from autotranslate.database import SessionLocal

scheduler = BackgroundScheduler()

logger = logging.getLogger(__name__)


class JobQueue(Protocol):
    def enqueue(self, host_type: str, host_id: int, field: str, from_locale: str, to_locale: str) -> None:
        ...


def run_translation_job(host_type: str, host_id: int, field: str, from_locale: str, to_locale: str) -> bool:
    """Translate one (field, to_locale) unit of a host; safe to run more than once."""
    with SessionLocal() as db:
        host = host_registry.load(db, host_type, host_id)
        if host is None:
            logger.warning("[Scheduler] %s %s vanished before translating %s into %s", host_type, host_id, field, to_locale)
            return False
        return host.automatic_translation.dispatcher.translate_into(field, from_locale, to_locale)


def job_id_for(host_type: str, host_id: int, field: str, to_locale: str) -> str:
    return f"autotranslate:{host_type}:{host_id}:{field}:{to_locale}"


class SchedulerJobQueue:
    """JobQueue running each request as an immediate APScheduler job.

    Requests for the same (host, field, target) replace a job still waiting
    to run, since the job re-reads the current source text anyway.
    """

    def __init__(self, job_scheduler: BackgroundScheduler):
        self.scheduler = job_scheduler

    def enqueue(self, host_type: str, host_id: int, field: str, from_locale: str, to_locale: str) -> None:
        job_id = job_id_for(host_type, host_id, field, to_locale)
        self.scheduler.add_job(
            run_translation_job,
            args=[host_type, host_id, field, from_locale, to_locale],
            id=job_id,
            replace_existing=True,
        )
        logger.info("[Scheduler] Translation job queued: %s from %s", job_id, from_locale)


job_queue = SchedulerJobQueue(scheduler)
