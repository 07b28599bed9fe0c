# club/push.py
from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, List, Sequence

import requests
from django.conf import settings

from .exceptions import DispatchError

logger = logging.getLogger(__name__)

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"
# Expo rejects requests carrying more than this many messages
EXPO_MAX_BATCH = 100


@dataclass(frozen=True)
class DispatchResult:
    ok_count: int = 0
    error_count: int = 0
    tickets: List[Dict[str, Any]] = field(default_factory=list)
    suppressed: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok_count": self.ok_count,
            "error_count": self.error_count,
            "tickets": self.tickets,
            "suppressed": self.suppressed,
        }


def build_messages(addresses: Sequence[str], payload) -> List[Dict[str, Any]]:
    """One Expo message per device token; every copy carries the same title/body/data."""
    return [
        {
            "to": token,
            "title": payload.title,
            "body": payload.body,
            "data": dict(payload.data),
            "sound": "default",
            "priority": "high",
        }
        for token in addresses
    ]


def _parse_tickets(resp) -> List[Dict[str, Any]]:
    try:
        body = resp.json() if resp.text else {}
    except ValueError:
        logger.warning("[push] non-JSON response from Expo: %s", resp.text[:200])
        return []
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, dict):
        # Single-message requests come back as one ticket object
        data = [data]
    return data if isinstance(data, list) else []


class ExpoPushChannel:
    """Sends one batched request to the Expo push service per event."""

    def __init__(self, url=None, access_token=None, timeout=None, enabled=None, session=None):
        self.url = url or getattr(settings, "EXPO_PUSH_URL", EXPO_PUSH_URL)
        self.access_token = access_token if access_token is not None else getattr(settings, "EXPO_ACCESS_TOKEN", "")
        self.timeout = timeout or getattr(settings, "PUSH_TIMEOUT_SECONDS", 10)
        self.enabled = enabled if enabled is not None else bool(getattr(settings, "ENABLE_PUSH", True))
        self.session = session or requests

    def _headers(self) -> Dict[str, str]:
        headers = {
            "accept": "application/json",
            "accept-encoding": "gzip, deflate",
            "content-type": "application/json",
        }
        if self.access_token:
            headers["authorization"] = f"Bearer {self.access_token}"
        return headers

    def send(self, addresses: Sequence[str], payload) -> DispatchResult:
        if not self.enabled:
            logger.info("[push] ENABLE_PUSH is off; suppressing %d messages", len(addresses))
            return DispatchResult(suppressed=True)
        if len(addresses) > EXPO_MAX_BATCH:
            raise DispatchError(f"{len(addresses)} tokens exceeds the Expo batch limit of {EXPO_MAX_BATCH}")

        messages = build_messages(addresses, payload)
        logger.info("[push] Attempting Expo push → tokens=%d title=%r", len(messages), payload.title)
        try:
            resp = self.session.post(
                self.url,
                headers=self._headers(),
                data=json.dumps(messages),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DispatchError(f"Expo push request failed: {e}") from e

        if resp.status_code // 100 != 2:
            raise DispatchError(f"{resp.status_code} {resp.text[:500]}", status_code=resp.status_code)

        tickets = _parse_tickets(resp)
        ok = sum(1 for t in tickets if t.get("status") == "ok")
        result = DispatchResult(ok_count=ok, error_count=len(tickets) - ok, tickets=tickets)
        logger.info("[push] Expo response ok=%d errors=%d", result.ok_count, result.error_count)
        return result
