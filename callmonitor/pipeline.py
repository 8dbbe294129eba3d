## callmonitor/pipeline.py

from __future__ import annotations
import csv
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from .schemas import FileHandle, FilePayload, Record, Settings
from .reader import read_payload, validate_charset
from .records import decode_records
from .alerts import notify_failure
from .sinks import AmqpPublisher, log_records
from .watcher import DirectoryPoller
from .utils import DecodeError, FileReadError, PublishError, logger, retry

RecordConsumer = Callable[[FilePayload, List[Record]], None]


@dataclass
class PollStats:
    processed: int = 0
    failed: int = 0


class Pipeline:
    """Poller -> reader -> publisher, with decoded records fanned out to
    optional consumers. The publisher only ever sees the text read from disk.

    A file is marked seen as soon as its processing starts; per-file errors
    are logged and alerted but leave the mark in place.
    """

    def __init__(self, poller, publisher, charset: str = "UTF-8", csv_header: bool = False,
                 record_consumers: Sequence[RecordConsumer] = (),
                 retry_times: int = 1, retry_delay: float = 1.0):
        self.poller = poller
        self.publisher = publisher
        self.charset = charset
        self.csv_header = csv_header
        self.record_consumers = list(record_consumers)
        self._publish = publisher.publish
        if retry_times > 1:
            self._publish = retry(retry_times, retry_delay)(publisher.publish)

    def process_file(self, handle: FileHandle) -> bool:
        try:
            payload = read_payload(handle, self.charset)
            self._publish(payload)
        except (DecodeError, FileReadError) as e:
            logger.error(f"Skipped {handle.path}: {e}")
            notify_failure(handle.path, e)
            return False
        except PublishError as e:
            logger.exception(f"Failed publishing {handle.path}: {e}")
            notify_failure(handle.path, e)
            return False
        except Exception as e:
            logger.exception(f"Failed processing {handle.path}: {e}")
            notify_failure(handle.path, e)
            return False
        logger.info(f"Published OK: {handle.path} ({len(payload.text)} chars)")
        self._dispatch_records(payload)
        return True

    def _dispatch_records(self, payload: FilePayload):
        if not self.record_consumers:
            return
        try:
            records = decode_records(payload.text, self.csv_header)
        except csv.Error as e:
            logger.error(f"Record decoding failed for {payload.handle.path}: {e}")
            return
        for consumer in self.record_consumers:
            try:
                consumer(payload, records)
            except Exception as e:
                logger.exception(f"Record consumer {getattr(consumer, '__name__', consumer)} "
                                 f"failed for {payload.handle.path}: {e}")

    def poll_once(self, should_continue: Optional[Callable[[], bool]] = None) -> PollStats:
        stats = PollStats()
        for handle in self.poller.poll(should_continue):
            if self.process_file(handle):
                stats.processed += 1
            else:
                stats.failed += 1
        if stats.processed or stats.failed:
            logger.info(f"Poll cycle done: {stats.processed} published, {stats.failed} failed")
        return stats

    def close(self):
        close = getattr(self.publisher, "close", None)
        if close is not None:
            close()


def build_pipeline(settings: Settings, publisher=None, tracker=None) -> Pipeline:
    mon = settings.callmonitor
    validate_charset(mon.charset)
    poller = DirectoryPoller(mon.input_dir, tracker=tracker, file_glob=mon.file_glob)
    poller.check()
    if publisher is None:
        publisher = AmqpPublisher.from_settings(settings.broker)
    consumers: List[RecordConsumer] = [log_records] if mon.log_records else []
    return Pipeline(
        poller,
        publisher,
        charset=mon.charset,
        csv_header=mon.csv_header,
        record_consumers=consumers,
        retry_times=settings.broker.retry.times,
        retry_delay=settings.broker.retry.delay,
    )
