# club/directory.py
"""Recipient lookups backed by the club's tables.

Every call hits the database; nothing is cached between events.
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model

from .exceptions import NotFoundError
from .models import Match, Profile, UserDevice

logger = logging.getLogger(__name__)


class ORMRecipientDirectory:
    def addresses_for(self, user_id) -> List[str]:
        return self.addresses_for_many([user_id])

    def addresses_for_many(self, user_ids: Iterable) -> List[str]:
        ids = [uid for uid in user_ids if uid is not None]
        if not ids:
            return []
        return list(
            UserDevice.objects.filter(user_id__in=ids)
            .order_by("user_id", "created_at")
            .values_list("expo_push_token", flat=True)
        )

    def members_of(self, community_id) -> List:
        return list(
            Profile.objects.filter(resident_community_id=community_id)
            .order_by("user_id")
            .values_list("user_id", flat=True)
        )

    def match_players(self, match_id) -> Dict[str, Optional[int]]:
        try:
            match = Match.objects.only(
                "player1", "player2", "player3", "player4"
            ).get(pk=match_id)
        except (Match.DoesNotExist, ValueError):
            raise NotFoundError(f"Match {match_id} not found")
        return {f"player{n}": uid for n, uid in enumerate(match.player_ids(), start=1)}

    def display_name(self, user_id) -> str:
        profile = Profile.objects.filter(user_id=user_id).only("full_name").first()
        if profile and profile.full_name:
            return profile.full_name
        # Fall back to the auth user's names when the profile is empty
        user = get_user_model().objects.filter(pk=user_id).first()
        if not user:
            logger.info("[directory] no display name for user=%s", user_id)
            return ""
        return (user.get_full_name() or user.get_username()).strip()
