"""Celery entry points; the work itself lives in worker_jobs so it can run without a broker."""
from app.tasks import worker_jobs
from app.tasks.celery_app import celery


@celery.task(name="app.tasks.jobs.process_email_queue")
def process_email_queue(limit: int = 50) -> dict:
    return worker_jobs.process_email_queue(limit=limit)


@celery.task(name="app.tasks.jobs.close_past_departures")
def close_past_departures() -> dict:
    return worker_jobs.close_past_departures()
