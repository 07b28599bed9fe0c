# club/tests/test_commands.py
from datetime import timedelta
from io import StringIO
import json

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from club.models import Booking, Match, PushDispatch


def _booking(community, user, start_local, minutes=90, **extra):
    start_local = start_local.replace(second=0, microsecond=0)
    end_local = start_local + timedelta(minutes=minutes)
    return Booking.objects.create(
        community=community, user=user, court_number=3,
        date=start_local.date(), start_time=start_local.time(), end_time=end_local.time(),
        **extra,
    )


@pytest.mark.django_db
def test_match_reminders_only_for_bookings_in_the_window(community, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    leo = make_player("leo", "Leo", tokens=["t-leo"])
    now = timezone.localtime()
    soon = _booking(community, ana, now + timedelta(minutes=66))
    _booking(community, leo, now + timedelta(minutes=66), cancelled_at=timezone.now())
    _booking(community, leo, now + timedelta(hours=5))

    out = StringIO()
    call_command("send_match_reminders", stdout=out)

    assert len(fake_expo.calls) == 1
    message = fake_expo.calls[0]["messages"][0]
    assert message["to"] == "t-ana"
    assert message["body"] == f"Tienes un partido programado a las {soon.start_time:%H:%M} en la pista 3."
    assert "sent=1" in out.getvalue()


@pytest.mark.django_db
def test_match_reminders_dry_run_sends_nothing(community, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    _booking(community, ana, timezone.localtime() + timedelta(minutes=66))

    out = StringIO()
    call_command("send_match_reminders", "--dry-run", stdout=out)

    assert fake_expo.calls == []
    assert "would remind" in out.getvalue()
    assert not PushDispatch.objects.exists()


@pytest.mark.django_db
def test_match_ended_skips_bookings_that_already_have_a_match(community, make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    leo = make_player("leo", "Leo", tokens=["t-leo"])
    now = timezone.localtime()
    _booking(community, ana, now - timedelta(minutes=95), minutes=90)
    done = _booking(community, leo, now - timedelta(minutes=95), minutes=90)
    Match.objects.create(booking=done, community=community, match_date=done.date, player1=leo)

    call_command("send_match_ended", stdout=StringIO())

    assert len(fake_expo.calls) == 1
    assert fake_expo.calls[0]["messages"][0]["to"] == "t-ana"
    assert fake_expo.calls[0]["messages"][0]["data"] == {"type": "match_ended"}


@pytest.mark.django_db
def test_send_push_command(make_player, fake_expo):
    ana = make_player("ana", "Ana", tokens=["t-ana"])
    out = StringIO()
    call_command("send_push", "match_ended", json.dumps({"user_id": ana.id}), stdout=out)
    assert "Sent match_ended to 1 devices" in out.getvalue()


@pytest.mark.django_db
def test_send_push_command_rejects_bad_input(fake_expo):
    with pytest.raises(CommandError):
        call_command("send_push", "match_ended", "{nope")
    with pytest.raises(CommandError):
        call_command("send_push", "result_proposed", json.dumps({"match_id": 1}))
    assert fake_expo.calls == []


@pytest.mark.django_db
def test_review_prompt_command(make_player):
    make_player("ana", "Ana")
    out = StringIO()
    call_command("review_prompt", "ana", "action", stdout=out)
    call_command("review_prompt", "ana", "action", stdout=out)
    text = out.getvalue()
    assert "actionCount     : 2" in text
    assert "Suppressed(unavailable)" in text

    with pytest.raises(CommandError):
        call_command("review_prompt", "nobody")
