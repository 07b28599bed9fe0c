# club/tests/test_send_push_view.py
import json

import pytest
from django.urls import reverse

from club.models import Match, PushDispatch


def post_event(client, kind, data):
    return client.post(
        reverse("send_push"),
        data=json.dumps({"type": kind, "data": data}),
        content_type="application/json",
    )


@pytest.mark.django_db
def test_match_reminder_sends_to_every_device_of_the_user(client, make_player, fake_expo):
    ana = make_player("ana", "Ana Ruiz", tokens=["ExponentPushToken[ana-phone]", "ExponentPushToken[ana-tablet]"])

    resp = post_event(client, "match_reminder", {"user_id": ana.id, "start_time": "19:00", "court_number": 2})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert len(fake_expo.calls) == 1
    messages = fake_expo.calls[0]["messages"]
    assert [m["to"] for m in messages] == ["ExponentPushToken[ana-phone]", "ExponentPushToken[ana-tablet]"]
    assert messages[0]["body"] == "Tienes un partido programado a las 19:00 en la pista 2."

    row = PushDispatch.objects.get()
    assert row.status == PushDispatch.Status.SENT
    assert (row.recipients, row.tokens, row.ok_count) == (1, 2, 2)


@pytest.mark.django_db
def test_booking_cancelled_reaches_all_residents_in_one_batch(client, community, make_player, fake_expo):
    make_player("p1", "Pablo", community=community, tokens=["t-p1a", "t-p1b"])
    make_player("p2", "Paula", community=community, tokens=["t-p2"])
    make_player("p3", "Pedro", community=community, tokens=["t-p3"])
    make_player("outsider", "Olga", tokens=["t-out"])

    resp = post_event(client, "booking_cancelled", {
        "community_id": community.id, "full_name": "Pablo", "date": "2026-05-03", "start_time": "10:00",
    })

    assert resp.status_code == 200
    assert len(fake_expo.calls) == 1
    messages = fake_expo.calls[0]["messages"]
    assert sorted(m["to"] for m in messages) == ["t-p1a", "t-p1b", "t-p2", "t-p3"]
    assert len({(m["title"], m["body"], json.dumps(m["data"], sort_keys=True)) for m in messages}) == 1
    assert messages[0]["title"] == "Pista liberada"


@pytest.mark.django_db
def test_result_proposed_skips_proposer_and_empty_slots(client, community, make_player, fake_expo):
    lucia = make_player("lucia", "Lucía Gómez", tokens=["t-lucia"])
    mario = make_player("mario", "Mario", tokens=["t-mario"])
    sara = make_player("sara", "Sara", tokens=["t-sara"])
    match = Match.objects.create(
        community=community, match_date="2026-05-02",
        player1=lucia, player2=mario, player3=sara, player4=None, proposed_by_player=lucia,
    )

    resp = post_event(client, "result_proposed", {
        "match_id": match.id, "proposed_by_player": lucia.id, "match_date": "2026-05-02",
    })

    assert resp.status_code == 200
    messages = fake_expo.calls[0]["messages"]
    assert sorted(m["to"] for m in messages) == ["t-mario", "t-sara"]
    assert messages[0]["body"].startswith("Lucía Gómez ha propuesto un resultado")
    assert messages[0]["data"] == {"type": "result_proposed", "match_id": str(match.id)}


@pytest.mark.django_db
def test_result_proposed_for_unknown_match_is_404(client, make_player, fake_expo):
    lucia = make_player("lucia", "Lucía", tokens=["t-lucia"])
    resp = post_event(client, "result_proposed", {"match_id": 999, "proposed_by_player": lucia.id, "match_date": "hoy"})
    assert resp.status_code == 404
    assert "error" in resp.json()
    assert fake_expo.calls == []
    assert not PushDispatch.objects.exists()


@pytest.mark.django_db
def test_unknown_type_is_400(client, fake_expo):
    resp = post_event(client, "court_flooded", {})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid notification type"}
    assert fake_expo.calls == []


@pytest.mark.django_db
def test_no_tokens_is_400_with_distinct_message(client, make_player, fake_expo):
    ana = make_player("ana", "Ana")
    resp = post_event(client, "match_ended", {"user_id": ana.id})
    assert resp.status_code == 400
    assert resp.json() == {"error": "No valid tokens found"}
    assert fake_expo.calls == []
    assert PushDispatch.objects.get().status == PushDispatch.Status.NO_RECIPIENTS


@pytest.mark.django_db
def test_provider_failure_is_502_and_recorded(client, make_player, monkeypatch):
    from .conftest import FakeExpo
    fake = FakeExpo(status_code=500)
    monkeypatch.setattr("club.push.requests.post", fake)
    ana = make_player("ana", "Ana", tokens=["t-ana"])

    resp = post_event(client, "match_ended", {"user_id": ana.id})

    assert resp.status_code == 502
    assert len(fake.calls) == 1
    row = PushDispatch.objects.get()
    assert row.status == PushDispatch.Status.FAILED
    assert "500" in row.error


@pytest.mark.django_db
def test_missing_fields_and_bad_json_are_400(client, fake_expo):
    resp = post_event(client, "match_reminder", {"user_id": 1})
    assert resp.status_code == 400
    assert "start_time" in resp.json()["error"]

    resp = client.post(reverse("send_push"), data="{oops", content_type="application/json")
    assert resp.status_code == 400
    assert fake_expo.calls == []


def test_get_is_not_allowed(client):
    assert client.get(reverse("send_push")).status_code == 405
