from __future__ import annotations
import os, sys
from collections import deque
from datetime import datetime, timedelta
from pathlib import Path

from callmonitor.utils import load_yaml

# ---------- Paths ----------
ROOT = Path(__file__).resolve().parent
CONFIG_PATH = ROOT / "config.yaml"
DEFAULT_INPUT = ROOT / "incoming"
DEFAULT_LOG = ROOT / "logs" / "callmonitor.log"

def resolve_paths(cfg_path: Path = CONFIG_PATH) -> tuple[Path, Path, str]:
    """Return (input_dir, log_path, file_glob) from config, falling back to defaults."""
    if not cfg_path.exists():
        return DEFAULT_INPUT, DEFAULT_LOG, "*"
    cfg = load_yaml(str(cfg_path))
    mon = cfg.get("callmonitor") or {}
    input_dir = Path(os.getenv("CALLMONITOR_INPUT_DIR") or mon.get("input_dir") or DEFAULT_INPUT)
    log_path = Path((cfg.get("logging") or {}).get("path") or DEFAULT_LOG)
    if not input_dir.is_absolute():
        input_dir = cfg_path.parent / input_dir
    if not log_path.is_absolute():
        log_path = cfg_path.parent / log_path
    return input_dir, log_path, mon.get("file_glob") or "*"

def count_dir(p: Path, pattern: str = "*"):
    if not p.exists():
        return 0
    return sum(1 for f in p.glob(pattern) if f.is_file())

def recent_files_per_minute(p: Path, minutes: int = 5, pattern: str = "*") -> float:
    if not p.exists():
        return 0.0
    cutoff = datetime.now() - timedelta(minutes=minutes)
    hits = 0
    for f in p.glob(pattern):
        try:
            ts = datetime.fromtimestamp(f.stat().st_mtime)
        except FileNotFoundError:
            continue
        if ts >= cutoff:
            hits += 1
    return hits / max(minutes, 1)

def tail(path: Path, lines: int = 20) -> list[str]:
    """Last `lines` lines of the watcher log, undecodable bytes replaced."""
    if not path.exists():
        return ["<log file not found>"]
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            last = [line.rstrip("\n") for line in deque(f, maxlen=lines)]
    except OSError as e:
        return [f"<log unreadable: {e}>"]
    return last or ["<empty>"]

def main(cfg_path: Path = CONFIG_PATH):
    input_dir, log_path, pattern = resolve_paths(cfg_path)

    print("="*70)
    print("callmonitor - Health Report")
    print(f"As of: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("="*70)

    print(f"\nInput folder: {input_dir}")
    if not input_dir.is_dir():
        print("  MISSING: the watcher will refuse to start")
    else:
        print(f"  Files present ({pattern}): {count_dir(input_dir, pattern):,}")
        print(f"  Arrival rate (5m):    {recent_files_per_minute(input_dir, 5, pattern):.2f} files/min")

    print(f"\nLog tail: {log_path}")
    for line in tail(log_path, lines=20):
        print("  " + line)

    print("\nDone.\n")
    return 0 if input_dir.is_dir() else 1

if __name__ == "__main__":
    sys.exit(main(Path(sys.argv[1]) if len(sys.argv) > 1 else CONFIG_PATH))
