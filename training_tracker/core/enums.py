"""Shared enums for models and API."""

from enum import Enum


class Difficulty(str, Enum):
    """Perceived difficulty of a set or warmup (values are stored as shown in the UI)."""

    LEICHT = "Leicht"
    MITTEL = "Mittel"
    SCHWER = "Schwer"
    SEHR_SCHWER = "Sehr schwer"


class RawDurationPolicy(str, Enum):
    """What to do with a negative or overlong raw rest gap."""

    ABSOLUTE = "absolute"  # keep abs(gap) so the cleaner still sees a signal
    DISCARD = "discard"  # store null
