# src/profile/json_profile_store.py — v1
"""Profile store reading ``<user_id>.json`` documents from a directory."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from nutriguard.core.models import HealthCondition
from nutriguard.profile.base_profile_store import BaseProfileStore
from nutriguard.profile.conditions import derive_health_conditions

logger = logging.getLogger(__name__)

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.@-]+$")


class JsonProfileStore(BaseProfileStore):
    """File-backed profiles, one JSON document per user."""

    def __init__(self, profile_root: Path | str) -> None:
        self._root = Path(profile_root).expanduser()

    async def get_health_conditions(self, user_id: str) -> list[HealthCondition]:
        if not _USER_ID_RE.match(user_id) or user_id.startswith("."):
            raise ValueError(f"Invalid user id: {user_id!r}")

        path = self._root / f"{user_id}.json"
        if not path.exists():
            logger.info("No health profile found for user %s", user_id)
            return []

        profile = json.loads(path.read_text(encoding="utf-8"))
        conditions = derive_health_conditions(profile)
        logger.info("Found %d health conditions for user %s", len(conditions), user_id)
        return conditions
