"""
JSON document models for subtitle sources and JSON dumps of the databases.

Subtitle sources are split in two documents per language:
- the lines file (SubtitleFile): speaker names and the text of every line
- the meta file (SubtitleMetadataFile): frames, speakers and clear entries
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import MalformedSource
from .subtitle_db import SubtitleDatabase
from .text_db import TextDatabase

logger = logging.getLogger("gametext")


def _section_object(data: dict[str, Any], key: str, source: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise MalformedSource(f"{source}: '{key}' must be an object")
    return value


def _require_frame(data: Any, where: str) -> int:
    if not isinstance(data, dict):
        raise MalformedSource(f"{where}: expected an object, got {type(data).__name__}")
    frame = data.get("frame")
    if not isinstance(frame, int) or isinstance(frame, bool):
        raise MalformedSource(f"{where}: 'frame' must be an integer")
    return frame


@dataclass
class SubtitleCutsceneLineMetadata:
    """Timing entry of a cutscene line; clear entries carry only a frame."""

    frame: int
    offscreen: bool = False
    speaker: str = ""
    clear: bool = False

    def to_dict(self) -> dict[str, Any]:
        if self.clear:
            return {"frame": self.frame, "clear": True}
        return {"frame": self.frame, "offscreen": self.offscreen, "speaker": self.speaker}

    @classmethod
    def from_dict(cls, data: dict[str, Any], where: str = "cutscene line") -> "SubtitleCutsceneLineMetadata":
        frame = _require_frame(data, where)
        return cls(
            frame=frame,
            offscreen=bool(data.get("offscreen", False)),
            speaker=str(data.get("speaker", "")),
            clear=bool(data.get("clear", False)),
        )


@dataclass
class SubtitleHintLineMetadata:
    """Timing entry of a hint line."""

    frame: int
    speaker: str = ""
    clear: bool = False

    def to_dict(self) -> dict[str, Any]:
        if self.clear:
            return {"frame": self.frame, "clear": True}
        return {"frame": self.frame, "speaker": self.speaker}

    @classmethod
    def from_dict(cls, data: dict[str, Any], where: str = "hint line") -> "SubtitleHintLineMetadata":
        frame = _require_frame(data, where)
        return cls(
            frame=frame,
            speaker=str(data.get("speaker", "")),
            clear=bool(data.get("clear", False)),
        )


@dataclass
class SubtitleHintMetadata:
    """
    Hint timing info.

    Fields:
    - id: hint id as a hex string; "0" marks a hint addressed by name
    - lines: timing entries
    """

    id: str = "0"
    lines: list[SubtitleHintLineMetadata] = field(default_factory=list)

    @property
    def numeric_id(self) -> int:
        try:
            return int(self.id, 16)
        except ValueError:
            raise MalformedSource(f"Hint id '{self.id}' is not a hex number") from None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "lines": [ln.to_dict() for ln in self.lines]}

    @classmethod
    def from_dict(cls, data: dict[str, Any], where: str = "hint") -> "SubtitleHintMetadata":
        if not isinstance(data, dict):
            raise MalformedSource(f"{where}: expected an object")
        lines = data.get("lines", [])
        if not isinstance(lines, list):
            raise MalformedSource(f"{where}: 'lines' must be a list")
        return cls(
            id=str(data.get("id", "0")),
            lines=[
                SubtitleHintLineMetadata.from_dict(ln, f"{where} line {i}")
                for i, ln in enumerate(lines)
            ],
        )


@dataclass
class SubtitleMetadataFile:
    cutscenes: dict[str, list[SubtitleCutsceneLineMetadata]] = field(default_factory=dict)
    hints: dict[str, SubtitleHintMetadata] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cutscenes": {
                name: [ln.to_dict() for ln in lines] for name, lines in self.cutscenes.items()
            },
            "hints": {name: hint.to_dict() for name, hint in self.hints.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<meta>") -> "SubtitleMetadataFile":
        if not isinstance(data, dict):
            raise MalformedSource(f"{source}: expected a JSON object")
        cutscenes: dict[str, list[SubtitleCutsceneLineMetadata]] = {}
        for name, lines in _section_object(data, "cutscenes", source).items():
            if not isinstance(lines, list):
                raise MalformedSource(f"{source}: cutscene '{name}' must be a list")
            cutscenes[name] = [
                SubtitleCutsceneLineMetadata.from_dict(ln, f"{source}: cutscene '{name}' line {i}")
                for i, ln in enumerate(lines)
            ]
        hints = {
            name: SubtitleHintMetadata.from_dict(hint, f"{source}: hint '{name}'")
            for name, hint in _section_object(data, "hints", source).items()
        }
        return cls(cutscenes=cutscenes, hints=hints)


@dataclass
class SubtitleFile:
    speakers: dict[str, str] = field(default_factory=dict)
    cutscenes: dict[str, list[str]] = field(default_factory=dict)
    hints: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "speakers": dict(self.speakers),
            "cutscenes": {name: list(lines) for name, lines in self.cutscenes.items()},
            "hints": {name: list(lines) for name, lines in self.hints.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<lines>") -> "SubtitleFile":
        if not isinstance(data, dict):
            raise MalformedSource(f"{source}: expected a JSON object")
        speakers = data.get("speakers", {})
        if not isinstance(speakers, dict):
            raise MalformedSource(f"{source}: 'speakers' must be an object")

        def _section(key: str) -> dict[str, list[str]]:
            out: dict[str, list[str]] = {}
            for name, lines in _section_object(data, key, source).items():
                if not isinstance(lines, list) or not all(isinstance(s, str) for s in lines):
                    raise MalformedSource(f"{source}: {key} '{name}' must be a list of strings")
                out[name] = list(lines)
            return out

        return cls(
            speakers={str(k): str(v) for k, v in speakers.items()},
            cutscenes=_section("cutscenes"),
            hints=_section("hints"),
        )


def load_json(path: str | Path) -> Any:
    """Read a JSON document, reporting problems as MalformedSource."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise MalformedSource(f"Source file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise MalformedSource(f"{path} is not valid JSON: {e}") from e


def save_json(data: Any, path: str | Path) -> None:
    Path(path).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def merge_over_base(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Layer a language document over its base document.

    Object-valued sections are merged key by key (override wins); any other
    value is replaced outright.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def text_db_to_dict(db: TextDatabase) -> dict[str, Any]:
    """Dump a text database as {group: {language: {"0x<id>": text}}}."""
    return {
        group: {
            str(lang): {f"{line_id:#x}": text for line_id, text in bank.lines.items()}
            for lang, bank in banks.items()
        }
        for group, banks in sorted(db.groups.items())
    }


def subtitle_db_to_dict(db: SubtitleDatabase) -> dict[str, Any]:
    """Dump a subtitle database including groups and every scene timeline."""
    banks: dict[str, Any] = {}
    for lang, bank in db.banks.items():
        scenes = {}
        for name, scene in bank.scenes.items():
            scenes[name] = {
                "kind": scene.kind.name.lower(),
                "id": scene.numeric_id,
                "sorting_group": scene.sorting_group,
                "sorting_group_index": scene.sorting_group_index,
                "lines": [
                    {"frame": ln.frame, "clear": True}
                    if ln.is_clear
                    else {
                        "frame": ln.frame,
                        "text": ln.text,
                        "speaker": ln.speaker,
                        "offscreen": ln.offscreen,
                    }
                    for ln in scene.lines
                ],
            }
        banks[str(lang)] = {
            "text_version": bank.text_version,
            "source_path": bank.source_path,
            "scenes": scenes,
        }
    return {"groups": db.subtitle_groups.to_asset_dict(), "banks": banks}
