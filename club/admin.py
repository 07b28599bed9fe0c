from django.contrib import admin
from .models import Community, Profile, UserDevice, Booking, Match, PushDispatch, KeyValueEntry


@admin.register(Community)
class CommunityAdmin(admin.ModelAdmin):
    list_display = ("name", "court_count", "booking_start_time")
    search_fields = ("name",)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "full_name", "resident_community")
    list_filter = ("resident_community",)
    search_fields = ("full_name", "user__username", "user__email")
    autocomplete_fields = ("resident_community",)


@admin.register(UserDevice)
class UserDeviceAdmin(admin.ModelAdmin):
    list_display = ("user", "platform", "expo_push_token", "created_at", "last_seen_at")
    list_filter = ("platform",)
    search_fields = ("user__username", "expo_push_token")
    readonly_fields = ("created_at",)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("community", "court_number", "date", "start_time", "end_time", "user", "cancelled_at")
    list_filter = ("community", "date")
    date_hierarchy = "date"


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("id", "community", "match_date", "score", "winner_team", "proposed_by_player", "is_validated")
    list_filter = ("community", "is_validated")
    date_hierarchy = "match_date"


@admin.register(PushDispatch)
class PushDispatchAdmin(admin.ModelAdmin):
    list_display = ("event_type", "status", "recipients", "tokens", "ok_count", "error_count", "created_at")
    list_filter = ("event_type", "status")
    readonly_fields = [f.name for f in PushDispatch._meta.fields]
    ordering = ("-created_at",)


@admin.register(KeyValueEntry)
class KeyValueEntryAdmin(admin.ModelAdmin):
    list_display = ("key", "updated_at")
    search_fields = ("key",)
