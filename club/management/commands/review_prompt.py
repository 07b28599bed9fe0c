# club/management/commands/review_prompt.py
from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

from club.review import gate_for_user


class Command(BaseCommand):
    help = "Inspect or drive a user's review-prompt state (for support and testing)."

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument(
            "action",
            choices=["status", "init", "action", "request", "reviewed", "reset"],
            nargs="?",
            default="status",
        )

    def handle(self, *args, **opts):
        User = get_user_model()
        try:
            user = User.objects.get(username=opts["username"])
        except User.DoesNotExist:
            raise CommandError(f"User {opts['username']!r} not found.")

        gate = gate_for_user(user)
        action = opts["action"]
        if action == "init":
            gate.initialize()
        elif action == "action":
            gate.record_action()
        elif action == "request":
            prompted = gate.request_review_if_appropriate()
            self.stdout.write(f"prompted: {prompted}")
        elif action == "reviewed":
            gate.mark_as_reviewed()
        elif action == "reset":
            gate.reset()
            self.stdout.write(self.style.SUCCESS("🔄 Review state reset"))

        record = gate.load()
        for k, v in record.to_dict().items():
            self.stdout.write(f"  {k.ljust(15)} : {v}")
        self.stdout.write(f"  {'decision'.ljust(15)} : {gate.evaluate()}")
        for fault in gate.faults:
            self.stderr.write(self.style.WARNING(f"⚠️  store {fault.operation} failed: {fault.error}"))
