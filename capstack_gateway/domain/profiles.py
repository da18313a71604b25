"""Profile lookup seam between the calculators and whatever stores profiles"""

import logging
from dataclasses import replace
from typing import Optional, Protocol, Tuple

from capstack_gateway.domain.exceptions import ProfileUnavailableError
from capstack_gateway.domain.models import DEFAULT_PROFILE, FinancialProfile

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    def get_profile(self, user_id: int) -> Optional[FinancialProfile]:
        """Stored profile, or None when the user has not saved one. Raises ProfileUnavailableError."""
        ...


def default_profile() -> FinancialProfile:
    """A fresh copy of DEFAULT_PROFILE, safe for callers to modify"""
    return replace(DEFAULT_PROFILE)


def resolve_profile(repository: ProfileRepository, user_id: int) -> Tuple[FinancialProfile, bool]:
    """
    Load a user's profile, substituting a copy of DEFAULT_PROFILE when it is
    missing or the store cannot be read.

    Returns (profile, used_default).
    """
    try:
        profile = repository.get_profile(user_id)
    except ProfileUnavailableError as e:
        logger.warning(f"Profile store unavailable, using default profile: {e}", extra={"user_id": user_id})
        return default_profile(), True

    if profile is None:
        logger.info("No stored profile, using default profile", extra={"user_id": user_id})
        return default_profile(), True

    return profile, False
