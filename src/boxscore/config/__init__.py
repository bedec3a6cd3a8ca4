"""Configuration helpers for the team whose box scores are ingested."""

from .team import DEFAULT_PROFILE_KEY, TeamProfile, get_profile, iter_profiles, register_profile

__all__ = [
    "DEFAULT_PROFILE_KEY",
    "TeamProfile",
    "get_profile",
    "iter_profiles",
    "register_profile",
]
