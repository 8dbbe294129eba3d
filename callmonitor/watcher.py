## callmonitor/watcher.py

from __future__ import annotations
import glob, os, signal, sys, threading
from typing import Callable, Iterator, List, Optional
from .schemas import FileHandle
from .tracker import DedupTracker
from .utils import StartupConfigError, check_input_dir, load_config, logger, setup_logging


class DirectoryPoller:
    """Non-recursive scan of one directory, yielding files not seen before.

    Scanning is active (no OS file events). Files are never moved or deleted.
    """

    def __init__(self, input_dir: str, tracker: Optional[DedupTracker] = None, file_glob: str = "*"):
        self.input_dir = os.path.abspath(input_dir)
        self.tracker = tracker if tracker is not None else DedupTracker()
        self.file_glob = file_glob

    def check(self):
        check_input_dir(self.input_dir)

    def scan(self) -> List[FileHandle]:
        pattern = os.path.join(glob.escape(self.input_dir), self.file_glob)
        handles = []
        for path in sorted(glob.glob(pattern)):
            if self.tracker.seen(path) or not os.path.isfile(path):
                continue
            try:
                st = os.stat(path)
            except FileNotFoundError:
                continue  # removed since listing; not marked
            handles.append(FileHandle(path=path, mtime=st.st_mtime, size=st.st_size))
        return handles

    def poll(self, should_continue: Optional[Callable[[], bool]] = None) -> Iterator[FileHandle]:
        for handle in self.scan():
            if should_continue is not None and not should_continue():
                return
            self.tracker.mark_seen(handle.key)
            yield handle


def run(cfg_path: str = "config.yaml", stop: Optional[threading.Event] = None):
    from .pipeline import build_pipeline

    settings = load_config(cfg_path)
    setup_logging(settings.logging.path, settings.logging.level)
    stop = stop or threading.Event()
    pipeline = build_pipeline(settings)
    interval = settings.callmonitor.monitoring_interval / 1000.0

    logger.info(f"Watching {pipeline.poller.input_dir} every {interval:g}s")
    try:
        while not stop.is_set():
            pipeline.poll_once(should_continue=lambda: not stop.is_set())
            stop.wait(interval)
    finally:
        pipeline.close()
        logger.info("Watcher stopped")


def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    cfg_path = argv[0] if argv else "config.yaml"
    stop = threading.Event()

    def _stop(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        stop.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)
    try:
        run(cfg_path, stop)
    except StartupConfigError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
