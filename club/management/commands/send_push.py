# club/management/commands/send_push.py
from django.core.management.base import BaseCommand, CommandError
import json

from club.exceptions import ClubNotifyError
from club.notifications import EVENTS, parse_event, send_event


class Command(BaseCommand):
    help = "Fire one push event by hand, e.g. send_push match_ended '{\"user_id\": 3}'"

    def add_arguments(self, parser):
        parser.add_argument("type", choices=sorted(EVENTS), help="Event kind")
        parser.add_argument("data", help="Event payload as a JSON object")

    def handle(self, *args, **opts):
        try:
            data = json.loads(opts["data"])
        except ValueError as e:
            raise CommandError(f"data is not valid JSON: {e}")

        try:
            outcome = send_event(parse_event(opts["type"], data))
        except ClubNotifyError as e:
            raise CommandError(str(e))

        if outcome.no_recipients:
            self.stdout.write(self.style.WARNING(
                f"No valid tokens found for recipients={list(outcome.recipient_ids)}; nothing sent."
            ))
            return
        result = outcome.result.as_dict() if outcome.result is not None else {}
        self.stdout.write(self.style.SUCCESS(
            f"Sent {outcome.event_type} to {len(outcome.addresses)} devices "
            f"(ok={result.get('ok_count', 0)} errors={result.get('error_count', 0)})"
        ))
