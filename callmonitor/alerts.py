## callmonitor/alerts.py

from __future__ import annotations
import os, smtplib, requests
from email.message import EmailMessage
from .utils import logger


def send_email(subject: str, body: str):
    host = os.getenv("SMTP_HOST"); to_addr = os.getenv("ALERT_EMAIL_TO")
    user = os.getenv("SMTP_USER"); pwd = os.getenv("SMTP_PASS")
    if not all([host, user, pwd, to_addr]):
        return
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = os.getenv("ALERT_EMAIL_FROM") or user
    msg["To"] = to_addr
    msg.set_content(body)
    with smtplib.SMTP(host, int(os.getenv("SMTP_PORT", "587")), timeout=10) as s:
        s.starttls()
        s.login(user, pwd)
        s.send_message(msg)


def send_slack(text: str):
    url = os.getenv("SLACK_WEBHOOK_URL")
    if not url: return
    r = requests.post(url, json={"text": text}, timeout=5)
    r.raise_for_status()


def failure_message(path: str, error: Exception) -> tuple[str, str]:
    """Subject and body for an undelivered file."""
    name = os.path.basename(path)
    subject = f"callmonitor: {name} not delivered ({type(error).__name__})"
    body = (
        f"File: {path}\n"
        f"Error: {error}\n\n"
        "The file stays in the input directory and will not be retried\n"
        "until the watcher restarts."
    )
    return subject, body


def notify_failure(path: str, error: Exception):
    """Tell operators a file failed. Alert transport errors are only logged."""
    subject, body = failure_message(path, error)
    try:
        send_email(subject, body)
    except (OSError, smtplib.SMTPException, ValueError) as e:
        logger.warning(f"Email alert failed for {path}: {e}")
    try:
        send_slack(f":rotating_light: {subject}\n{path}: {error}")
    except requests.RequestException as e:
        logger.warning(f"Slack alert failed for {path}: {e}")
