# club/management/commands/send_match_ended.py
from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta
import logging

from club.exceptions import DispatchError
from club.models import Booking
from club.notifications import MatchEnded, send_event

logger = logging.getLogger("club")


class Command(BaseCommand):
    help = "Ask booking owners to add a result once their court time is over and no match was recorded."

    def add_arguments(self, parser):
        parser.add_argument("--minutes", type=int, default=15, help="Look back this far for bookings that ended")
        parser.add_argument("--dry-run", action="store_true", help="List the bookings without sending")

    def handle(self, *args, **opts):
        now = timezone.now()
        since = now - timedelta(minutes=opts["minutes"])
        since_day = timezone.localtime(since).date()
        # Bookings that started yesterday can end after midnight
        days = {since_day - timedelta(days=1), since_day, timezone.localtime(now).date()}
        qs = (
            Booking.objects.filter(date__in=days, cancelled_at__isnull=True, matches__isnull=True)
            .select_related("community")
            .order_by("date", "end_time")
        )
        ended = [b for b in qs if since <= b.ends_at() < now]

        sent = 0
        for b in ended:
            if opts["dry_run"]:
                self.stdout.write(f"  would ask user={b.user_id} for a result · {b}")
                continue
            try:
                outcome = send_event(MatchEnded(user_id=b.user_id))
            except DispatchError as e:
                logger.warning("MATCH_ENDED: booking=%s dispatch failed: %s", b.id, e)
                continue
            if not outcome.no_recipients:
                sent += 1

        self.stdout.write(self.style.SUCCESS(f"Match-ended prompts done. bookings={len(ended)} sent={sent}"))
