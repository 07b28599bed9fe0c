from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone
from datetime import datetime, timedelta


class Community(models.Model):
    name = models.CharField(max_length=200)
    court_count = models.PositiveIntegerField(default=1, help_text="Number of bookable courts")
    booking_start_time = models.TimeField(null=True, blank=True, help_text="First bookable slot of the day")

    class Meta:
        verbose_name_plural = "communities"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=200, blank=True)
    resident_community = models.ForeignKey(
        Community, on_delete=models.SET_NULL, null=True, blank=True, related_name="residents"
    )

    def __str__(self):
        return self.full_name or getattr(self.user, "username", str(self.user_id))


class UserDevice(models.Model):
    """One registered Expo push token. A user may own several (one per device)."""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="devices")
    expo_push_token = models.CharField(max_length=255, unique=True)
    platform = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_seen_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["user_id", "created_at"]

    def __str__(self):
        return f"{self.user_id} · {self.expo_push_token[:24]}"


class Booking(models.Model):
    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="bookings")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="bookings")
    court_number = models.PositiveIntegerField()
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "start_time", "court_number"]

    def __str__(self):
        return f"{self.community} · court {self.court_number} · {self.date} {self.start_time:%H:%M}"

    def starts_at(self):
        return timezone.make_aware(
            datetime.combine(self.date, self.start_time), timezone.get_current_timezone()
        )

    def ends_at(self):
        end = timezone.make_aware(
            datetime.combine(self.date, self.end_time), timezone.get_current_timezone()
        )
        # Late bookings may run past midnight
        if self.end_time <= self.start_time:
            end += timedelta(days=1)
        return end


class Match(models.Model):
    booking = models.ForeignKey(Booking, on_delete=models.SET_NULL, null=True, blank=True, related_name="matches")
    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="matches")
    # Team 1 is player1/player2, team 2 is player3/player4
    player1 = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    player2 = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    player3 = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    player4 = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    match_date = models.DateField()
    match_time = models.TimeField(null=True, blank=True)
    court_number = models.PositiveIntegerField(null=True, blank=True)
    score = models.CharField(max_length=100, blank=True)
    winner_team = models.PositiveSmallIntegerField(null=True, blank=True)
    proposed_by_player = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="proposed_matches"
    )
    is_validated = models.BooleanField(default=False)
    validation_deadline = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name_plural = "matches"
        ordering = ["-match_date"]

    def __str__(self):
        return f"Match {self.pk} on {self.match_date} ({self.score or 'no score'})"

    def player_ids(self):
        return [self.player1_id, self.player2_id, self.player3_id, self.player4_id]


# --- Notifications core ---

class PushDispatch(models.Model):
    class Status(models.TextChoices):
        SENT = "SENT", "Sent"
        FAILED = "FAILED", "Failed"
        SUPPRESSED = "SUPPRESSED", "Suppressed"
        NO_RECIPIENTS = "NO_RECIPIENTS", "No recipients"

    event_type = models.CharField(max_length=40, db_index=True)
    title = models.CharField(max_length=200, blank=True)
    recipients = models.PositiveIntegerField(default=0)
    tokens = models.PositiveIntegerField(default=0)
    ok_count = models.PositiveIntegerField(default=0)
    error_count = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=Status.choices)
    error = models.TextField(blank=True)
    response = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["event_type", "created_at"], name="club_push_event_created_idx")]

    def __str__(self):
        return f"PushDispatch({self.event_type} → {self.tokens} tokens, {self.status})"


class KeyValueEntry(models.Model):
    """Opaque persisted blobs (review prompt records and the like)."""
    key = models.CharField(max_length=191, unique=True)
    value = models.TextField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "key-value entries"

    def __str__(self):
        return self.key


from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=User)
def ensure_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.get_or_create(user=instance, defaults={"full_name": instance.get_full_name()})
