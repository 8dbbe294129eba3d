"""
callmonitor package: file drop directory -> message broker bridge
- watcher: directory poller and the fixed-delay polling loop
- tracker: in-memory dedup of files already handed downstream
- reader: charset-aware file reads
- records: positional five-column CSV decoding
- pipeline: reader -> publisher, records -> optional consumers
- sinks: AMQP publisher and record consumers
- alerts: email/slack on per-file failures
"""

from dotenv import load_dotenv

__all__ = [
    "watcher",
    "tracker",
    "reader",
    "records",
    "pipeline",
    "sinks",
    "alerts",
    "schemas",
    "utils",
]

__version__ = "0.1.0"

# .env is read early so AMQP_URL / SMTP_* / SLACK_WEBHOOK_URL are visible
load_dotenv()
