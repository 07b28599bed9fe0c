# club/tests/test_review_api.py
import pytest
from django.urls import reverse

from club.models import KeyValueEntry


@pytest.mark.django_db
def test_review_flow_over_http(client, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    client.force_login(ana)

    resp = client.post(reverse("review_init"))
    assert resp.status_code == 200
    first_launch = resp.json()["record"]["firstLaunchDate"]
    assert first_launch

    for _ in range(3):
        client.post(reverse("review_action"))

    state = client.get(reverse("review_state")).json()
    assert state["record"]["actionCount"] == 3
    assert state["record"]["firstLaunchDate"] == first_launch
    assert state["decision"] == "Suppressed(tooSoonAfterInstall)"
    assert state["eligible"] is False

    resp = client.post(reverse("review_request"))
    assert resp.json()["prompted"] is False
    assert fake_expo.calls == []

    assert KeyValueEntry.objects.filter(key=f"@review_prompt:{ana.id}").exists()


@pytest.mark.django_db
def test_open_store_sends_review_push(client, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    client.force_login(ana)

    resp = client.post(reverse("review_open_store"))

    assert resp.json()["prompted"] is True
    assert fake_expo.calls[0]["messages"][0]["data"] == {"type": "review_prompt"}


@pytest.mark.django_db
def test_reviewed_and_reset(client, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    client.force_login(ana)

    client.post(reverse("review_reviewed"))
    assert client.get(reverse("review_state")).json()["decision"] == "Suppressed(alreadyReviewed)"

    resp = client.post(reverse("review_reset"))
    assert resp.json()["record"] == {
        "actionCount": 0, "lastPromptDate": None, "firstLaunchDate": None, "hasReviewed": False,
    }


@pytest.mark.django_db
def test_user_without_devices_is_unavailable(client, make_player):
    bea = make_player("bea", "Bea")
    client.force_login(bea)
    assert client.get(reverse("review_state")).json()["decision"] == "Suppressed(unavailable)"


@pytest.mark.django_db
def test_anonymous_users_are_redirected(client):
    resp = client.post(reverse("review_action"))
    assert resp.status_code == 302
