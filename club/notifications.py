# club/notifications.py
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import (
    DispatchError,
    InvalidEventKindError,
    InvalidEventPayloadError,
)

logger = logging.getLogger(__name__)


# ----------------------------- Events ----------------------------------------

# Event kind constants (exported)
MATCH_REMINDER = "match_reminder"
BOOKING_CANCELLED = "booking_cancelled"
MATCH_ENDED = "match_ended"
RESULT_PROPOSED = "result_proposed"


@dataclass(frozen=True)
class MatchReminder:
    user_id: Any
    start_time: Any
    court_number: Any
    kind = MATCH_REMINDER


@dataclass(frozen=True)
class BookingCancelled:
    community_id: Any
    full_name: Any
    date: Any
    start_time: Any
    kind = BOOKING_CANCELLED


@dataclass(frozen=True)
class MatchEnded:
    user_id: Any
    kind = MATCH_ENDED


@dataclass(frozen=True)
class ResultProposed:
    match_id: Any
    proposed_by_player: Any
    match_date: Any
    kind = RESULT_PROPOSED


# Known events (the closed set; the router has one branch per entry)
EVENTS: Dict[str, type] = {
    MATCH_REMINDER: MatchReminder,
    BOOKING_CANCELLED: BookingCancelled,
    MATCH_ENDED: MatchEnded,
    RESULT_PROPOSED: ResultProposed,
}


def parse_event(kind, data: Optional[Mapping[str, Any]]):
    """Build a typed event from the inbound ``{type, data}`` request body."""
    cls = EVENTS.get(kind) if isinstance(kind, str) else None
    if cls is None:
        raise InvalidEventKindError(kind)
    if not isinstance(data, Mapping):
        raise InvalidEventPayloadError(f"{kind}: 'data' must be an object")
    names = [f.name for f in fields(cls)]
    missing = [n for n in names if data.get(n) in (None, "")]
    if missing:
        raise InvalidEventPayloadError(f"{kind}: missing {', '.join(missing)}")
    return cls(**{n: data[n] for n in names})


# ----------------------------- Payloads --------------------------------------


@dataclass(frozen=True)
class MessagePayload:
    title: str
    body: str
    data: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mapping so every copy sent to a device is identical
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def as_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "body": self.body, "data": dict(self.data)}


@dataclass(frozen=True)
class Route:
    recipient_ids: Tuple
    payload: MessagePayload


@dataclass(frozen=True)
class DispatchOutcome:
    event_type: str
    recipient_ids: Tuple
    addresses: Tuple[str, ...]
    payload: MessagePayload
    result: Any = None  # DispatchResult when a request was sent

    @property
    def no_recipients(self) -> bool:
        return not self.addresses


def _unique(ids: Iterable) -> Tuple:
    seen = set()
    out = []
    for i in ids:
        if i is None or i in seen:
            continue
        seen.add(i)
        out.append(i)
    return tuple(out)


# ----------------------------- Router ----------------------------------------


class EventRouter:
    """Maps an event to recipients and a payload, then sends one batched push.

    ``directory`` needs ``addresses_for_many``, ``members_of``, ``match_players``
    and ``display_name``; ``channel`` needs ``send(addresses, payload)``.
    """

    def __init__(self, directory, channel):
        self.directory = directory
        self.channel = channel
        self._routes = {
            MatchReminder: self._route_match_reminder,
            BookingCancelled: self._route_booking_cancelled,
            MatchEnded: self._route_match_ended,
            ResultProposed: self._route_result_proposed,
        }

    # -- routing --

    def route(self, event) -> Route:
        handler = self._routes.get(type(event))
        if handler is None:
            raise InvalidEventKindError(getattr(event, "kind", type(event).__name__))
        return handler(event)

    def _route_match_reminder(self, event: MatchReminder) -> Route:
        return Route(
            recipient_ids=(event.user_id,),
            payload=MessagePayload(
                title="¡Recordatorio de partido!",
                body=f"Tienes un partido programado a las {event.start_time} en la pista {event.court_number}.",
                data={"type": MATCH_REMINDER},
            ),
        )

    def _route_booking_cancelled(self, event: BookingCancelled) -> Route:
        members = self.directory.members_of(event.community_id)
        return Route(
            recipient_ids=_unique(members),
            payload=MessagePayload(
                title="Pista liberada",
                body=f"{event.full_name} ha cancelado una reserva el {event.date} a las {event.start_time}. ¡Reserva ahora!",
                data={"type": BOOKING_CANCELLED},
            ),
        )

    def _route_match_ended(self, event: MatchEnded) -> Route:
        return Route(
            recipient_ids=(event.user_id,),
            payload=MessagePayload(
                title="Partido terminado",
                body="Por favor, añade el resultado de tu partido ahora.",
                data={"type": MATCH_ENDED},
            ),
        )

    def _route_result_proposed(self, event: ResultProposed) -> Route:
        slots = self.directory.match_players(event.match_id)  # NotFoundError propagates
        proposer = event.proposed_by_player
        candidates = [slots.get(f"player{n}") for n in range(1, 5)]
        # Compare as strings so "7" from a JSON body matches the stored pk 7
        recipients = _unique(c for c in candidates if c is not None and str(c) != str(proposer))
        proposer_name = self.directory.display_name(proposer)
        return Route(
            recipient_ids=recipients,
            payload=MessagePayload(
                title="Resultado propuesto",
                body=f"{proposer_name} ha propuesto un resultado para el partido del {event.match_date}. Revisa y confirma.",
                data={"type": RESULT_PROPOSED, "match_id": str(event.match_id)},
            ),
        )

    # -- addresses & dispatch --

    def resolve_addresses(self, recipient_ids: Iterable) -> List[str]:
        ids = list(recipient_ids)
        if not ids:
            return []
        # Tokens are unique per user; repeats across users are dropped
        return list(_unique(self.directory.addresses_for_many(ids)))

    def dispatch(self, addresses, payload: MessagePayload):
        """Send one batched request; ``None`` when there is nobody to send to."""
        if not addresses:
            return None
        try:
            return self.channel.send(list(addresses), payload)
        except DispatchError:
            raise
        except Exception as e:
            raise DispatchError(str(e)) from e

    def handle(self, event) -> DispatchOutcome:
        """Route, resolve and dispatch one event.

        A DispatchError carries the unsent outcome on ``.outcome``.
        """
        route = self.route(event)
        addresses = self.resolve_addresses(route.recipient_ids)
        outcome = DispatchOutcome(event.kind, route.recipient_ids, tuple(addresses), route.payload)
        if not addresses:
            logger.info("[send-push] %s: no tokens for recipients=%s", event.kind, list(route.recipient_ids))
            return outcome
        try:
            result = self.dispatch(addresses, route.payload)
        except DispatchError as e:
            e.outcome = outcome
            logger.warning("[send-push] %s: dispatch failed tokens=%d error=%s", event.kind, len(addresses), e)
            raise
        logger.info(
            "[send-push] %s: recipients=%d tokens=%d result=%s",
            event.kind, len(route.recipient_ids), len(addresses),
            result.as_dict() if hasattr(result, "as_dict") else result,
        )
        return replace(outcome, result=result)


# ----------------------------- Public API ------------------------------------


def default_router() -> EventRouter:
    from .directory import ORMRecipientDirectory
    from .push import ExpoPushChannel
    return EventRouter(ORMRecipientDirectory(), ExpoPushChannel())


def _record_dispatch(outcome: DispatchOutcome, status, error=""):
    from .models import PushDispatch
    result = outcome.result
    try:
        PushDispatch.objects.create(
            event_type=outcome.event_type,
            title=outcome.payload.title[:200],
            recipients=len(outcome.recipient_ids),
            tokens=len(outcome.addresses),
            ok_count=getattr(result, "ok_count", 0),
            error_count=getattr(result, "error_count", 0),
            status=status,
            error=str(error)[:500],
            response=result.as_dict() if hasattr(result, "as_dict") else {},
        )
    except Exception:
        logger.exception("[send-push] failed to record dispatch for %s", outcome.event_type)


def send_event(event, router: Optional[EventRouter] = None) -> DispatchOutcome:
    """Route and dispatch one event, keeping a PushDispatch row for the attempt.

    Errors from routing or lookups propagate before anything is recorded;
    a DispatchError is recorded as FAILED and then re-raised.
    """
    from .models import PushDispatch

    router = router or default_router()
    try:
        outcome = router.handle(event)
    except DispatchError as e:
        if e.outcome is not None:
            _record_dispatch(e.outcome, PushDispatch.Status.FAILED, error=e)
        raise

    if outcome.no_recipients:
        status = PushDispatch.Status.NO_RECIPIENTS
    elif getattr(outcome.result, "suppressed", False):
        status = PushDispatch.Status.SUPPRESSED
    else:
        status = PushDispatch.Status.SENT
    _record_dispatch(outcome, status)
    return outcome
