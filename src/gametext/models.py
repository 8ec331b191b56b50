"""
Data models shared by the text and subtitle databases.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class SourceFormat(str, Enum):
    """Format of a source document."""

    DSL = "goal"
    JSON = "json"


class SceneKind(IntEnum):
    """Classification of a subtitle scene."""

    INVALID = -1
    MOVIE = 0
    HINT = 1
    HINT_NAMED = 2


@dataclass(frozen=True)
class SubtitleLine:
    """A single timed subtitle line; empty text and speaker mark a clear entry."""

    frame: int
    text: str = ""
    speaker: str = ""
    offscreen: bool = False

    @property
    def is_clear(self) -> bool:
        return not self.text and not self.speaker


@dataclass
class TextDefinitionFile:
    """Descriptor of one text source document."""

    format: SourceFormat
    path: str
    language_id: int = -1
    text_version: str = "jak1-v2"
    group_name: str | None = None


@dataclass
class SubtitleDefinitionFile:
    """Descriptor of one language's subtitle documents (lines + meta)."""

    format: SourceFormat
    language_id: int = -1
    text_version: str = "jak1-v2"
    lines_path: str = ""
    lines_base_path: str | None = None
    meta_path: str = ""
    meta_base_path: str | None = None
