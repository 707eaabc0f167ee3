from datetime import datetime, timezone
import html
import logging
import smtplib
import uuid
from email.message import EmailMessage

import requests
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.email_log import EmailLog

logger = logging.getLogger(__name__)


def queue_email(db: Session, to_email: str, subject: str, text_body: str, html_body: str | None = None,
                booking_id: str = "") -> str:
    """Queue and attempt immediate send. Bodies are stored so the worker can retry on failure."""
    eid = str(uuid.uuid4())
    db.add(
        EmailLog(
            id=eid,
            booking_id=booking_id,
            to_email=to_email,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
            status="queued",
        )
    )
    db.commit()

    if settings.EMAIL_SEND_IMMEDIATELY:
        log = db.get(EmailLog, eid)
        _attempt(log)
        db.commit()

    return eid


def _attempt(log: EmailLog) -> bool:
    log.attempts = (log.attempts or 0) + 1
    try:
        send_email(log.to_email, log.subject, log.text_body, log.html_body)
    except (OSError, smtplib.SMTPException, requests.RequestException, RuntimeError) as e:
        # left for process_pending_emails
        log.status = "failed"
        log.last_error = str(e)[:1000]
        logger.warning("email %s to %s failed: %s", log.id, log.to_email, e)
        return False
    log.status = "sent"
    log.sent_at = datetime.now(timezone.utc)
    log.last_error = None
    return True


def send_email(to_email: str, subject: str, text_body: str, html_body: str | None = None):
    """Send email via SendGrid if configured, otherwise SMTP (MailHog recommended for local)."""

    if settings.SENDGRID_API_KEY:
        _send_via_sendgrid(to_email, subject, text_body, html_body)
        return

    msg = EmailMessage()
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
        if settings.SMTP_USERNAME:
            smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        smtp.send_message(msg)


def _send_via_sendgrid(to_email: str, subject: str, text_body: str, html_body: str | None):
    from_email = settings.SENDGRID_FROM_EMAIL or settings.SMTP_FROM
    content = [{"type": "text/plain", "value": text_body}]
    if html_body:
        content.append({"type": "text/html", "value": html_body})
    payload = {
        "personalizations": [{"to": [{"email": to_email}]}],
        "from": {"email": from_email, "name": settings.SITE_NAME},
        "subject": subject,
        "content": content,
    }
    r = requests.post(
        "https://api.sendgrid.com/v3/mail/send",
        json=payload,
        headers={"Authorization": f"Bearer {settings.SENDGRID_API_KEY}"},
        timeout=20,
    )
    if r.status_code >= 400:
        raise RuntimeError(f"SendGrid error {r.status_code}: {r.text}")


def process_pending_emails(db: Session, limit: int = 50, max_attempts: int = 5) -> dict:
    """Retry up to `limit` queued or failed emails; returns counts."""
    pending = (
        db.query(EmailLog)
        .filter(EmailLog.status.in_(["queued", "failed"]), EmailLog.attempts < max_attempts)
        .order_by(EmailLog.created_at.asc())
        .limit(limit)
        .all()
    )
    sent = sum(1 for log in pending if _attempt(log))
    if pending:
        db.commit()
    return {"processed": len(pending), "sent": sent, "failed": len(pending) - sent}


# -------------------------
# Booking confirmation
# -------------------------
def _money(amount: int) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,}"


def booking_confirmation_email(booking, package_title: str, guest_name: str) -> tuple[str, str, str]:
    """(subject, text, html) for a confirmed booking receipt."""
    short_id = booking.id[-5:].upper()
    balance = int(booking.total_price or 0) - int(booking.advance_paid or 0)
    travel_date = booking.booking_date.strftime("%A, %d %B %Y")
    members = [f"{m.member_name} ({m.member_phone})" for m in (booking.members or [])]
    rows = [
        ("Booking ID", f"#{short_id}"),
        ("Date", travel_date),
        ("Package", package_title),
        ("Group", booking.travel_group_name),
        ("Members", str(booking.number_of_members)),
        ("Total", _money(int(booking.total_price or 0))),
        ("Advance paid", _money(int(booking.advance_paid or 0))),
        ("Balance due", _money(balance)),
    ]

    subject = f"{settings.SITE_NAME}: booking #{short_id} confirmed"
    text = "\n".join(
        [f"Hi {guest_name},", "", "Thank you for booking with us! Here are your booking details.", ""]
        + [f"{k}: {v}" for k, v in rows]
        + ([""] + ["Travellers:"] + [f"  {i}. {m}" for i, m in enumerate(members, 1)] if members else [])
    )
    table = "".join(
        f'<tr><td>{html.escape(k)}</td><td style="text-align:right;font-weight:bold;">{html.escape(v)}</td></tr>'
        for k, v in rows
    )
    travellers = "".join(f"<li>{html.escape(m)}</li>" for m in members)
    body = (
        '<html><body style="font-family: Arial, sans-serif; max-width:600px;margin:0 auto;padding:20px;">'
        f"<h1>{html.escape(settings.SITE_NAME)}</h1><p>Booking Confirmation</p>"
        f"<h2>Hi {html.escape(guest_name)},</h2>"
        "<p>Thank you for booking with us! Here are your booking details.</p>"
        f'<table style="width:100%;">{table}</table>'
        + (f"<h3>Travellers</h3><ol>{travellers}</ol>" if travellers else "")
        + "</body></html>"
    )
    return subject, text, body
