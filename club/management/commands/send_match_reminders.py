# club/management/commands/send_match_reminders.py
from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta
import logging

from club.exceptions import DispatchError
from club.models import Booking
from club.notifications import MatchReminder, send_event

logger = logging.getLogger("club")


def bookings_starting_between(start, end):
    """Non-cancelled bookings whose local start falls in [start, end)."""
    start_l, end_l = timezone.localtime(start), timezone.localtime(end)
    days = {start_l.date(), end_l.date()}
    qs = (
        Booking.objects.filter(date__in=days, cancelled_at__isnull=True)
        .select_related("community", "user")
        .order_by("date", "start_time")
    )
    return [b for b in qs if start <= b.starts_at() < end]


class Command(BaseCommand):
    help = "Push a match reminder to the owner of every booking starting soon. Run it every --interval minutes."

    def add_arguments(self, parser):
        parser.add_argument("--lead-minutes", type=int, default=60, help="How long before the start to remind")
        parser.add_argument("--interval-minutes", type=int, default=15, help="Cron interval; sets the window width")
        parser.add_argument("--dry-run", action="store_true", help="List the bookings without sending")

    def handle(self, *args, **opts):
        now = timezone.now()
        start = now + timedelta(minutes=opts["lead_minutes"])
        end = start + timedelta(minutes=opts["interval_minutes"])
        bookings = bookings_starting_between(start, end)

        sent = skipped = failed = 0
        for b in bookings:
            event = MatchReminder(
                user_id=b.user_id,
                start_time=b.start_time.strftime("%H:%M"),
                court_number=b.court_number,
            )
            if opts["dry_run"]:
                self.stdout.write(f"  would remind user={b.user_id} · {b}")
                continue
            try:
                outcome = send_event(event)
            except DispatchError as e:
                failed += 1
                logger.warning("MATCH_REMINDER: booking=%s dispatch failed: %s", b.id, e)
                continue
            if outcome.no_recipients:
                skipped += 1
                logger.info("MATCH_REMINDER: booking=%s user=%s has no devices; skipping", b.id, b.user_id)
            else:
                sent += 1

        self.stdout.write(self.style.SUCCESS(
            f"Match reminders done. bookings={len(bookings)} sent={sent} no_devices={skipped} failed={failed}"
        ))
