from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready

from app.core.config import settings


def _redis_url_for_celery(url: str) -> str:
    """rediss:// brokers need ssl_cert_reqs in the URL or Celery refuses them."""
    if not url or urlparse(url).scheme.lower() != "rediss":
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    qs.setdefault("ssl_cert_reqs", ["CERT_NONE"])
    return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))


broker_url = _redis_url_for_celery(settings.REDIS_URL)

celery = Celery("trekbook", broker=broker_url, backend=broker_url, include=["app.tasks.jobs"])
celery.conf.update(
    timezone=settings.CELERY_TIMEZONE,
    task_ignore_result=True,
    beat_schedule={
        "retry-confirmation-emails": {
            "task": "app.tasks.jobs.process_email_queue",
            "schedule": settings.EMAIL_RETRY_INTERVAL_SECONDS,
            "kwargs": {"limit": 50},
        },
        "close-past-departures": {
            "task": "app.tasks.jobs.close_past_departures",
            "schedule": crontab(minute=5),
        },
    },
)


@worker_ready.connect
def drain_email_queue_on_start(sender, **kwargs):
    # mail queued while no worker was up should not wait for the first beat tick
    from app.tasks.jobs import process_email_queue
    process_email_queue.delay()
