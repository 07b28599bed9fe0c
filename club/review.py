# club/review.py
"""Review-prompt gating.

The gate keeps a small JSON record per installation (action count, first
launch, last prompt, reviewed latch) in a key-value store and decides whether
the store-review prompt may be shown now. Storage trouble never reaches the
caller: reads fall back to defaults, writes are dropped, and each such event
is logged and kept in ``PromptGate.faults``.
"""
from __future__ import annotations
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone as dt_timezone
import json
import logging
import math
import sys
import threading
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.cache import caches
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .exceptions import StoreError

logger = logging.getLogger(__name__)

REVIEW_STORAGE_KEY = "@review_prompt"
MIN_ACTIONS_BEFORE_REVIEW = 3
DAYS_AFTER_FIRST_LAUNCH = 3
DAYS_BETWEEN_PROMPTS = 30

# Suppression reasons, in evaluation order
UNAVAILABLE = "unavailable"
ALREADY_REVIEWED = "alreadyReviewed"
TOO_SOON_AFTER_INSTALL = "tooSoonAfterInstall"
INSUFFICIENT_ACTIONS = "insufficientActions"
TOO_SOON_AFTER_LAST_PROMPT = "tooSoonAfterLastPrompt"


# ----------------------------- Record ----------------------------------------


def _as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are read as UTC, the same as stored blobs."""
    if dt is not None and timezone.is_naive(dt):
        return timezone.make_aware(dt, dt_timezone.utc)
    return dt


def _to_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    dt = _as_utc(dt)
    return dt.astimezone(dt_timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _from_iso(value) -> Optional[datetime]:
    if not value:
        return None
    dt = parse_datetime(str(value))
    if dt is None:
        raise ValueError(f"bad timestamp {value!r}")
    return _as_utc(dt)


@dataclass(frozen=True)
class PromptRecord:
    action_count: int = 0
    last_prompt_date: Optional[datetime] = None
    first_launch_date: Optional[datetime] = None
    has_reviewed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        # Field names are the stored-blob format; keep them stable
        return {
            "actionCount": self.action_count,
            "lastPromptDate": _to_iso(self.last_prompt_date),
            "firstLaunchDate": _to_iso(self.first_launch_date),
            "hasReviewed": self.has_reviewed,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, blob: str) -> "PromptRecord":
        raw = json.loads(blob)
        if not isinstance(raw, dict):
            raise ValueError("review record is not an object")
        return cls(
            action_count=max(int(raw.get("actionCount") or 0), 0),
            last_prompt_date=_from_iso(raw.get("lastPromptDate")),
            first_launch_date=_from_iso(raw.get("firstLaunchDate")),
            has_reviewed=bool(raw.get("hasReviewed", False)),
        )


def days_since(then: datetime, now: datetime) -> int:
    """Whole days between two instants, rounded up; order does not matter."""
    seconds = abs((_as_utc(now) - _as_utc(then)).total_seconds())
    return math.ceil(seconds / 86400)


@dataclass(frozen=True)
class Decision:
    eligible: bool
    reason: Optional[str] = None

    def __bool__(self):
        return self.eligible

    def __str__(self):
        return "Eligible" if self.eligible else f"Suppressed({self.reason})"


ELIGIBLE = Decision(eligible=True)


def suppressed(reason: str) -> Decision:
    return Decision(eligible=False, reason=reason)


@dataclass(frozen=True)
class StoreFault:
    operation: str      # "read", "write", "remove", "lock" or "commit"
    key: str
    error: str
    at: datetime = field(default_factory=timezone.now)


# ----------------------------- Stores ----------------------------------------


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key):
        return self._data.get(key)

    def set(self, key, blob):
        self._data[key] = blob

    def remove(self, key):
        self._data.pop(key, None)

    def locked(self, key):
        return self._lock


_cache_lock = threading.RLock()


class CacheStore:
    """Django cache backend; blobs never expire."""

    def __init__(self, alias="default", prefix="review:"):
        self.alias = alias
        self.prefix = prefix

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key):
        try:
            return self.cache.get(self.prefix + key)
        except Exception as e:
            raise StoreError(f"cache read failed: {e}") from e

    def set(self, key, blob):
        try:
            self.cache.set(self.prefix + key, blob, timeout=None)
        except Exception as e:
            raise StoreError(f"cache write failed: {e}") from e

    def remove(self, key):
        try:
            self.cache.delete(self.prefix + key)
        except Exception as e:
            raise StoreError(f"cache delete failed: {e}") from e

    def locked(self, key):
        # Only serializes within this process
        return _cache_lock


class ModelStore:
    """KeyValueEntry rows; the gate's read-modify-write runs under a row lock."""

    def __init__(self, using=None):
        self.using = using
        self._depth = 0

    def _qs(self):
        from .models import KeyValueEntry
        qs = KeyValueEntry.objects.all()
        if self.using:
            qs = qs.using(self.using)
        return qs

    def get(self, key):
        try:
            qs = self._qs()
            if self._depth:
                qs = qs.select_for_update()
            entry = qs.filter(key=key).first()
        except Exception as e:
            raise StoreError(f"read failed: {e}") from e
        return entry.value if entry else None

    def set(self, key, blob):
        try:
            self._qs().update_or_create(key=key, defaults={"value": blob})
        except Exception as e:
            raise StoreError(f"write failed: {e}") from e

    def remove(self, key):
        try:
            self._qs().filter(key=key).delete()
        except Exception as e:
            raise StoreError(f"delete failed: {e}") from e

    @contextmanager
    def locked(self, key):
        with transaction.atomic(using=self.using):
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1


STORES = {
    "memory": MemoryStore,
    "cache": CacheStore,
    "model": ModelStore,
}


def get_store(name: Optional[str] = None):
    name = (name or getattr(settings, "REVIEW_STORE", "model") or "model").lower()
    try:
        return STORES[name]()
    except KeyError:
        raise ValueError(f"Unknown REVIEW_STORE {name!r}; expected one of {sorted(STORES)}")


# ----------------------------- Gate ------------------------------------------


class PromptGate:
    """Decides whether to show the store-review prompt for one installation.

    ``channel`` must provide ``is_available()``, ``trigger()`` and
    ``has_direct_action()``.
    """

    def __init__(self, store, channel, key: str = REVIEW_STORAGE_KEY, *,
                 min_actions: Optional[int] = None,
                 days_after_first_launch: Optional[int] = None,
                 days_between_prompts: Optional[int] = None,
                 clock=timezone.now):
        self.store = store
        self.channel = channel
        self.key = key
        self.min_actions = min_actions if min_actions is not None else int(
            getattr(settings, "REVIEW_MIN_ACTIONS", MIN_ACTIONS_BEFORE_REVIEW))
        self.days_after_first_launch = days_after_first_launch if days_after_first_launch is not None else int(
            getattr(settings, "REVIEW_DAYS_AFTER_FIRST_LAUNCH", DAYS_AFTER_FIRST_LAUNCH))
        self.days_between_prompts = days_between_prompts if days_between_prompts is not None else int(
            getattr(settings, "REVIEW_DAYS_BETWEEN_PROMPTS", DAYS_BETWEEN_PROMPTS))
        self.clock = clock
        self.faults: List[StoreFault] = []

    # -- persistence (fail-soft) --

    def _fault(self, operation, error):
        fault = StoreFault(operation=operation, key=self.key, error=str(error))
        self.faults.append(fault)
        logger.warning("[review] store %s failed for key=%s: %s", operation, self.key, error)

    def load(self) -> PromptRecord:
        try:
            blob = self.store.get(self.key)
            if blob:
                return PromptRecord.from_json(blob)
        except (StoreError, ValueError, TypeError) as e:
            self._fault("read", e)
        return PromptRecord()

    def _save(self, record: PromptRecord) -> None:
        try:
            self.store.set(self.key, record.to_json())
        except StoreError as e:
            self._fault("write", e)

    @contextmanager
    def _exclusive(self):
        stack = ExitStack()
        try:
            stack.enter_context(self.store.locked(self.key))
        except Exception as e:
            self._fault("lock", e)
        try:
            yield
        except BaseException:
            if not stack.__exit__(*sys.exc_info()):
                raise
        else:
            try:
                stack.close()
            except Exception as e:
                self._fault("commit", e)

    # -- transitions --

    def initialize(self, now: Optional[datetime] = None) -> PromptRecord:
        """Stamp the first launch date once; later calls change nothing."""
        with self._exclusive():
            record = self.load()
            if record.first_launch_date is None:
                record = replace(record, first_launch_date=_as_utc(now or self.clock()))
                self._save(record)
        return record

    def record_action(self) -> PromptRecord:
        with self._exclusive():
            record = self.load()
            record = replace(record, action_count=record.action_count + 1)
            self._save(record)
        return record

    def evaluate(self, now: Optional[datetime] = None, record: Optional[PromptRecord] = None) -> Decision:
        now = _as_utc(now or self.clock())
        if not self.channel.is_available():
            logger.info("[review] store review not available on this device")
            return suppressed(UNAVAILABLE)

        record = record if record is not None else self.load()
        if record.has_reviewed:
            logger.info("[review] user already left a review")
            return suppressed(ALREADY_REVIEWED)

        if record.first_launch_date is not None:
            days = days_since(record.first_launch_date, now)
            if days < self.days_after_first_launch:
                logger.info("[review] only %d days since first launch", days)
                return suppressed(TOO_SOON_AFTER_INSTALL)

        if record.action_count < self.min_actions:
            logger.info("[review] only %d actions, %d needed", record.action_count, self.min_actions)
            return suppressed(INSUFFICIENT_ACTIONS)

        if record.last_prompt_date is not None:
            days = days_since(record.last_prompt_date, now)
            if days < self.days_between_prompts:
                logger.info("[review] only %d days since last prompt", days)
                return suppressed(TOO_SOON_AFTER_LAST_PROMPT)

        return ELIGIBLE

    def request_review_if_appropriate(self, now: Optional[datetime] = None) -> bool:
        """Show the prompt when eligible. True means a prompt was attempted,
        not that the user reviewed."""
        now = _as_utc(now or self.clock())
        # Claim the prompt under the lock; the trigger runs after it is released
        with self._exclusive():
            record = self.load()
            decision = self.evaluate(now, record=record)
            if not decision:
                return False
            self._save(replace(record, last_prompt_date=now))

        logger.info("[review] showing review prompt")
        try:
            self.channel.trigger()
        except Exception:
            logger.exception("[review] prompt trigger failed")
            self._release_claim(now, record.last_prompt_date)
            return False
        return True

    def _release_claim(self, claimed: datetime, previous: Optional[datetime]) -> None:
        with self._exclusive():
            current = self.load()
            # Leave it alone if another prompt has stamped the record since
            if _to_iso(current.last_prompt_date) == _to_iso(claimed):
                self._save(replace(current, last_prompt_date=previous))

    def mark_as_reviewed(self) -> PromptRecord:
        with self._exclusive():
            record = replace(self.load(), has_reviewed=True)
            self._save(record)
        return record

    def open_store_for_review(self) -> bool:
        """Direct "rate the app" button; skips every gating rule."""
        if not self.channel.has_direct_action():
            logger.info("[review] no direct review action available")
            return False
        try:
            self.channel.trigger()
        except Exception:
            logger.exception("[review] direct review trigger failed")
            return False
        return True

    def reset(self) -> None:
        with self._exclusive():
            try:
                self.store.remove(self.key)
            except StoreError as e:
                self._fault("remove", e)
                return
        logger.info("[review] review state reset for key=%s", self.key)


# ----------------------------- Channels --------------------------------------


REVIEW_PROMPT = "review_prompt"


class PushPromptChannel:
    """Asks the user's app to open the store-review sheet via a push message."""

    def __init__(self, user_id, directory=None, push=None):
        from .directory import ORMRecipientDirectory
        from .push import ExpoPushChannel
        self.user_id = user_id
        self.directory = directory or ORMRecipientDirectory()
        self.push = push or ExpoPushChannel()

    def _tokens(self):
        return self.directory.addresses_for(self.user_id)

    def is_available(self) -> bool:
        return bool(self.push.enabled and self._tokens())

    def has_direct_action(self) -> bool:
        return self.is_available()

    def trigger(self) -> None:
        from .notifications import MessagePayload
        payload = MessagePayload(
            title="¿Te gusta la app?",
            body="Danos tu valoración en la tienda, ¡nos ayuda mucho!",
            data={"type": REVIEW_PROMPT},
        )
        self.push.send(self._tokens(), payload)


def gate_for_user(user, store=None, channel=None) -> PromptGate:
    user_id = getattr(user, "pk", user)
    return PromptGate(
        store or get_store(),
        channel or PushPromptChannel(user_id),
        key=f"{REVIEW_STORAGE_KEY}:{user_id}",
    )
