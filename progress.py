"""
Per-pattern practice progress.

ProgressStore owns the in-memory state (best catch count and completion
date per pattern key) and writes a full snapshot through its gateway after
every mutation. Writing a count for any pattern ("DD") writes the same
count to every repetition of its base ("D", "DD", ... "DDDDDD").
"""
import json
import logging
import threading
from collections import namedtuple
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from models import db, StoredBlob, today_local
from patterns import related_patterns

log = logging.getLogger(__name__)

STORAGE_KEY = "juggleLogProgress"
COMPLETION_THRESHOLD = 100
MIN_CATCHES = 0
MAX_CATCHES = 100

ProgressRecord = namedtuple("ProgressRecord", ["max_catches", "completed", "completion_date"])


def _clamp_catches(value):
    return max(MIN_CATCHES, min(MAX_CATCHES, int(value)))


# ── Dates ─────────────────────────────────────────────────────────────────────

def format_date(d: date) -> str:
    """M-D-YYYY without zero padding, e.g. 3-7-2024."""
    return f"{d.month}-{d.day}-{d.year}"


def parse_date(text):
    try:
        month, day, year = (int(part) for part in str(text).split("-"))
        return date(year, month, day)
    except (TypeError, ValueError):
        return None


# ── Blob codec ────────────────────────────────────────────────────────────────

def encode_state(completed, max_catches, completion_dates, indent=None) -> str:
    return json.dumps({
        "completedPatterns": list(completed),
        "maxCatches": dict(max_catches),
        "completionDates": {p: format_date(d) for p, d in completion_dates.items()},
    }, indent=indent)


def decode_state(blob):
    """Parse a stored blob into (completed, max_catches, completion_dates).

    Returns None when the blob is missing, is not JSON, or does not have the
    three expected fields with the expected types.
    """
    if not blob:
        return None
    try:
        data = json.loads(blob)
    except (TypeError, ValueError):
        log.warning("Stored progress is not valid JSON; ignoring it")
        return None
    if (not isinstance(data, dict)
            or not isinstance(data.get("completedPatterns"), list)
            or not isinstance(data.get("maxCatches"), dict)
            or not isinstance(data.get("completionDates"), dict)):
        log.warning("Stored progress has an unexpected structure; ignoring it")
        return None

    max_catches = {}
    for pattern, value in data["maxCatches"].items():
        try:
            max_catches[str(pattern)] = int(value)
        except (TypeError, ValueError):
            log.warning("Dropping non-numeric catch count for %r: %r", pattern, value)

    completion_dates = {}
    for pattern, value in data["completionDates"].items():
        parsed = parse_date(value)
        if parsed is None:
            log.warning("Dropping unreadable completion date for %r: %r", pattern, value)
            continue
        completion_dates[str(pattern)] = parsed

    completed = [p for p in data["completedPatterns"] if isinstance(p, str)]
    return completed, max_catches, completion_dates


# ── Gateways ──────────────────────────────────────────────────────────────────

class MemoryGateway:
    """Keeps the blob in a dict. Used by tests and throwaway sessions."""

    def __init__(self, blob=None, key=STORAGE_KEY):
        self.key = key
        self.blobs = {}
        self.saves = 0
        if blob is not None:
            self.blobs[key] = blob

    def load(self):
        return self.blobs.get(self.key)

    def save(self, blob):
        self.blobs[self.key] = blob
        self.saves += 1


class SqlGateway:
    """Keeps the blob in the ``stored_blob`` table. Needs an app context."""

    def __init__(self, key=STORAGE_KEY):
        self.key = key

    def load(self):
        row = db.session.get(StoredBlob, self.key)
        return row.value if row else None

    def save(self, blob):
        row = db.session.get(StoredBlob, self.key)
        if row is None:
            row = StoredBlob(key=self.key, value=blob)
            db.session.add(row)
        else:
            row.value = blob
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise


# ── Store ─────────────────────────────────────────────────────────────────────

class ProgressStore:

    def __init__(self, gateway, today=today_local, symbols=None):
        self.gateway = gateway
        self._today = today
        self._symbols = symbols
        # Held for every read-modify-write, including the save that follows it.
        self._lock = threading.Lock()
        self._completed = []
        self._max_catches = {}
        self._completion_dates = {}
        self.load()

    # -- lifecycle --

    def load(self):
        """Replace the in-memory state with what the gateway holds."""
        with self._lock:
            decoded = decode_state(self.gateway.load())
            if decoded is None:
                self._set_state([], {}, {})
            else:
                self._set_state(*decoded)

    def reset(self):
        with self._lock:
            self._set_state([], {}, {})
            self._persist()
        log.info("Progress reset")

    def _set_state(self, completed, max_catches, completion_dates):
        self._max_catches = {p: _clamp_catches(n) for p, n in max_catches.items()}
        self._completion_dates = dict(completion_dates)
        # The completed list is redundant with the counts; rebuild it so the two agree.
        done = {p for p, n in self._max_catches.items() if n >= COMPLETION_THRESHOLD}
        ordered = [p for p in dict.fromkeys(completed) if p in done]
        ordered += sorted(done.difference(ordered))
        self._completed = ordered
        undated = [p for p in ordered if p not in self._completion_dates]
        if undated:
            today = self._today()
            for p in undated:
                self._completion_dates[p] = today
            log.warning("Dated %d completed patterns that had no completion date", len(undated))

    def _snapshot(self):
        return list(self._completed), dict(self._max_catches), dict(self._completion_dates)

    def _persist(self):
        self.gateway.save(encode_state(self._completed, self._max_catches, self._completion_dates))
        log.debug("Saved progress for %d patterns", len(self._max_catches))

    # -- mutation --

    def set_max_catches(self, pattern, catches):
        """Record a best catch count and fan it out to the pattern's family.

        ``catches`` is clamped to [MIN_CATCHES, MAX_CATCHES]. Returns the
        pattern keys that were written; a blank pattern or non-numeric count
        writes nothing and returns [].
        """
        key = pattern if isinstance(pattern, str) else "".join(pattern)
        if not key.strip():
            log.error("Invalid pattern: empty string")
            return []
        try:
            catches = _clamp_catches(catches)
        except (TypeError, ValueError, OverflowError):
            log.error("Invalid catches value for %s: %r", key, catches)
            return []

        # Every repetition of the same base shares one count, so "D" and "DDD"
        # move together whichever of them is written.
        targets = related_patterns(key, self._symbols)
        if key not in targets:
            targets.append(key)

        with self._lock:
            before = self._snapshot()
            today = self._today()
            for target in targets:
                self._apply(target, catches, today)
            try:
                self._persist()
            except Exception:
                log.exception("Could not save progress; rolling back update to %s", key)
                self._completed, self._max_catches, self._completion_dates = before
                raise
        return targets

    def _apply(self, pattern, catches, today):
        self._max_catches[pattern] = catches
        if catches >= COMPLETION_THRESHOLD:
            if pattern not in self._completed:
                self._completed.append(pattern)
            # First completion date sticks
            self._completion_dates.setdefault(pattern, today)
        else:
            if pattern in self._completed:
                self._completed.remove(pattern)
            if catches == 0:
                self._completion_dates.pop(pattern, None)

    # -- queries --

    def get_max_catches(self, pattern) -> int:
        return self._max_catches.get(pattern, 0)

    def is_completed(self, pattern) -> bool:
        return self.get_max_catches(pattern) >= COMPLETION_THRESHOLD

    def get_completion_date(self, pattern):
        return self._completion_dates.get(pattern)

    def record(self, pattern):
        return ProgressRecord(
            self.get_max_catches(pattern),
            self.is_completed(pattern),
            self.get_completion_date(pattern),
        )

    @property
    def completed_patterns(self):
        return list(self._completed)

    def summary(self, patterns):
        counts = [self.get_max_catches(p) for p in patterns]
        return {
            "total": len(counts),
            "completed": sum(1 for n in counts if n >= COMPLETION_THRESHOLD),
            "in_progress": sum(1 for n in counts if 0 < n < COMPLETION_THRESHOLD),
        }

    # -- import / export --

    def export_data(self) -> str:
        with self._lock:
            return encode_state(*self._snapshot(), indent=2)

    def import_data(self, text) -> bool:
        """Replace all progress with an export. False (and no change) if it is invalid."""
        decoded = decode_state(text)
        if decoded is None:
            log.error("Rejected progress import: invalid format")
            return False
        with self._lock:
            before = self._snapshot()
            self._set_state(*decoded)
            try:
                self._persist()
            except Exception:
                log.exception("Could not save imported progress")
                self._completed, self._max_catches, self._completion_dates = before
                raise
            count = len(self._max_catches)
        log.info("Imported progress for %d patterns", count)
        return True
