# src/profile/base_profile_store.py — v1
"""Abstract read-only access to users' health conditions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from nutriguard.core.models import HealthCondition


class BaseProfileStore(ABC):
    """Read side of the health-profile store."""

    @abstractmethod
    async def get_health_conditions(self, user_id: str) -> list[HealthCondition]:
        """Conditions for ``user_id``; empty if the user has no profile."""
