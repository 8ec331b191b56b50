"""
Game and text format versions.
"""

from enum import Enum

from .errors import MalformedSource


class GameVersion(str, Enum):
    """Game a project belongs to."""

    JAK1 = "jak1"
    JAK2 = "jak2"
    JAK3 = "jak3"
    JAKX = "jakx"


class TextVersion(str, Enum):
    """Structural grammar revision a text document was authored against."""

    JAK1_V1 = "jak1-v1"
    JAK1_V2 = "jak1-v2"
    JAK2 = "jak2"
    JAK3 = "jak3"
    JAKX = "jakx"


DEFAULT_TEXT_VERSION = TextVersion.JAK1_V2


def text_version_from_name(name: str) -> TextVersion:
    """Look up a text version by its name (e.g. "jak1-v2")."""
    try:
        return TextVersion(str(name).strip().lower())
    except ValueError:
        known = ", ".join(v.value for v in TextVersion)
        raise MalformedSource(f"Unknown text version '{name}' (known: {known})") from None


def game_version_from_name(name: str) -> GameVersion:
    """Look up a game version by its name (e.g. "jak1")."""
    try:
        return GameVersion(str(name).strip().lower())
    except ValueError:
        known = ", ".join(v.value for v in GameVersion)
        raise MalformedSource(f"Unknown game version '{name}' (known: {known})") from None
