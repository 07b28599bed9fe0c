# club/tests/conftest.py
import json

import pytest

from club.exceptions import DispatchError, NotFoundError, StoreError
from club.models import Community, UserDevice
from club.push import DispatchResult


class FakeDirectory:
    def __init__(self, devices=None, communities=None, matches=None, names=None):
        self.devices = devices or {}
        self.communities = communities or {}
        self.matches = matches or {}
        self.names = names or {}

    def addresses_for(self, user_id):
        return list(self.devices.get(user_id, []))

    def addresses_for_many(self, user_ids):
        out = []
        for uid in user_ids:
            out.extend(self.devices.get(uid, []))
        return out

    def members_of(self, community_id):
        return list(self.communities.get(community_id, []))

    def match_players(self, match_id):
        if match_id not in self.matches:
            raise NotFoundError(f"Match {match_id} not found")
        return dict(self.matches[match_id])

    def display_name(self, user_id):
        return self.names.get(user_id, "")


class RecordingChannel:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def send(self, addresses, payload):
        self.calls.append((list(addresses), payload))
        if self.error:
            raise self.error
        return DispatchResult(ok_count=len(addresses), tickets=[{"status": "ok"} for _ in addresses])


class ScriptedPromptChannel:
    def __init__(self, available=True, direct_action=True, fail=False):
        self.available = available
        self.direct_action = direct_action
        self.fail = fail
        self.triggers = 0

    def is_available(self):
        return self.available

    def has_direct_action(self):
        return self.direct_action

    def trigger(self):
        self.triggers += 1
        if self.fail:
            raise RuntimeError("store review sheet failed to open")


class FailingStore:
    """Every operation blows up, like a corrupted or unreachable backend."""

    def get(self, key):
        raise StoreError("disk unavailable")

    def set(self, key, blob):
        raise StoreError("disk unavailable")

    def remove(self, key):
        raise StoreError("disk unavailable")

    def locked(self, key):
        import threading
        return threading.Lock()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")

    def json(self):
        return json.loads(self.text)


class FakeExpo:
    """Stands in for requests.post; answers every message with an ok ticket."""

    def __init__(self, status_code=200, error=None):
        self.calls = []
        self.status_code = status_code
        self.error = error

    def __call__(self, url, headers=None, data=None, timeout=None):
        messages = json.loads(data)
        self.calls.append({"url": url, "headers": headers, "messages": messages, "timeout": timeout})
        if self.error:
            raise self.error
        if self.status_code != 200:
            return FakeResponse(self.status_code, text="upstream unavailable")
        return FakeResponse(200, {"data": [{"status": "ok", "id": f"ticket-{i}"} for i, _ in enumerate(messages)]})


@pytest.fixture
def fake_expo(monkeypatch):
    fake = FakeExpo()
    monkeypatch.setattr("club.push.requests.post", fake)
    return fake


@pytest.fixture
def community(db):
    return Community.objects.create(name="Residencial Los Pinos", court_count=4)


@pytest.fixture
def make_player(db, django_user_model):
    def _make(username, full_name="", community=None, tokens=()):
        user = django_user_model.objects.create_user(username=username, password="x")
        profile = user.profile
        profile.full_name = full_name
        profile.resident_community = community
        profile.save()
        for t in tokens:
            UserDevice.objects.create(user=user, expo_push_token=t, platform="ios")
        return user
    return _make
