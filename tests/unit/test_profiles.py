"""Unit tests for profile resolution and default fallback"""

from capstack_gateway.domain.exceptions import ProfileUnavailableError
from capstack_gateway.domain.models import DEFAULT_PROFILE
from capstack_gateway.domain.profiles import resolve_profile


class InMemoryProfiles:
    def __init__(self, profiles=None):
        self.profiles = profiles or {}

    def get_profile(self, user_id):
        return self.profiles.get(user_id)


class BrokenProfiles:
    def get_profile(self, user_id):
        raise ProfileUnavailableError("connection refused")


def test_stored_profile_is_used(strong_profile):
    profile, used_default = resolve_profile(InMemoryProfiles({1: strong_profile}), 1)

    assert profile is strong_profile
    assert used_default is False


def test_missing_profile_falls_back_to_default():
    profile, used_default = resolve_profile(InMemoryProfiles(), 42)

    assert profile == DEFAULT_PROFILE
    assert used_default is True


def test_store_failure_falls_back_to_default():
    profile, used_default = resolve_profile(BrokenProfiles(), 42)

    assert profile == DEFAULT_PROFILE
    assert used_default is True


def test_default_profile_values():
    assert DEFAULT_PROFILE.monthly_income == 52000
    assert DEFAULT_PROFILE.monthly_expenses == 31000
    assert DEFAULT_PROFILE.emergency_fund == 186000
    assert DEFAULT_PROFILE.debt_amount == 50000
    assert DEFAULT_PROFILE.job_stability_score == 7


def test_fallback_is_a_private_copy():
    first, _ = resolve_profile(InMemoryProfiles(), 42)
    first.monthly_income = 1
    first.emergency_fund = 0

    second, _ = resolve_profile(BrokenProfiles(), 42)

    assert first is not DEFAULT_PROFILE
    assert DEFAULT_PROFILE.monthly_income == 52000
    assert second.monthly_income == 52000
    assert second.emergency_fund == 186000
