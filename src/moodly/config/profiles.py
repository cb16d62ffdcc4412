"""Configuration profile management.

Provides utilities for detecting the configuration profile from the
environment and locating its YAML file.
"""

import os
from enum import Enum
from importlib import resources
from pathlib import Path

# Profile YAML files ship inside the package
DEFAULT_CONFIG_DIR = Path(str(resources.files("moodly.config") / "defaults"))


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect appropriate configuration profile.

    Checks the MOODLY_PROFILE environment variable and falls back to
    the development profile.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get("MOODLY_PROFILE", "").strip().lower()
    profile_map = {
        "prod": Profile.PROD,
        "dev": Profile.DEV,
        "test": Profile.TEST,
    }
    return profile_map.get(env_profile, Profile.DEV)


def get_profile_path(
    profile: Profile | str | None = None,
    config_dir: Path | None = None,
) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile or profile name, or None to auto-detect
        config_dir: Configuration directory, or None for the packaged profiles

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()
    name = profile.value if isinstance(profile, Profile) else profile

    if config_dir is None:
        config_dir = DEFAULT_CONFIG_DIR

    return config_dir / f"{name}.yaml"


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "Profile",
    "detect_profile",
    "get_profile_path",
]
