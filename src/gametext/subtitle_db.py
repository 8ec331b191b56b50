"""
Subtitle scenes, banks and the subtitle database.

A scene is a frame-ordered timeline of subtitle lines and clear entries. A bank
holds every scene of one language; the database holds one bank per language and
the scene groups shared by all of them.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .errors import NotFound, StructuralViolation
from .groups import SubtitleGroups
from .models import SceneKind, SubtitleLine
from .versions import GameVersion

logger = logging.getLogger("gametext")


class SubtitleScene:
    """
    One scene's timeline.

    Lines are kept sorted by frame after every insertion. The sort is stable,
    so lines sharing a frame stay in the order they were added.
    """

    def __init__(self, name: str, kind: SceneKind, numeric_id: int = 0):
        self._name = name
        self._kind = SceneKind(kind)
        self._id = int(numeric_id)
        self._lines: list[SubtitleLine] = []
        self._sorting_group = ""
        self._sorting_group_index = -1

    def __repr__(self) -> str:
        return (
            f"SubtitleScene(name={self._name!r}, kind={self._kind.name}, "
            f"id={self._id}, lines={len(self._lines)})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> SceneKind:
        return self._kind

    @property
    def numeric_id(self) -> int:
        return self._id

    @property
    def lines(self) -> tuple[SubtitleLine, ...]:
        return tuple(self._lines)

    @property
    def sorting_group(self) -> str:
        return self._sorting_group

    @property
    def sorting_group_index(self) -> int:
        return self._sorting_group_index

    def set_name(self, name: str) -> None:
        self._name = name

    def set_id(self, numeric_id: int) -> None:
        self._id = int(numeric_id)

    def set_sorting_group(self, group: str, index: int) -> None:
        self._sorting_group = group
        self._sorting_group_index = index

    def add_line(self, frame: int, text: str, speaker: str, offscreen: bool) -> None:
        self._lines.append(SubtitleLine(int(frame), text, speaker, bool(offscreen)))
        self._lines.sort(key=lambda ln: ln.frame)

    def add_clear_entry(self, frame: int) -> None:
        self._lines.append(SubtitleLine(int(frame)))
        self._lines.sort(key=lambda ln: ln.frame)

    def clear_lines(self) -> None:
        self._lines.clear()

    def from_other_scene(self, other: "SubtitleScene") -> None:
        """Take over another scene's name, lines, kind and id."""
        self._name = other.name
        self._lines = list(other.lines)
        self._kind = other.kind
        self._id = other.numeric_id


class SubtitleBank:
    """All subtitle scenes for one language."""

    def __init__(self, language_id: int, text_version: str = "jak1-v2", source_path: str = ""):
        self._language_id = int(language_id)
        self.text_version = text_version
        self.source_path = source_path
        self._scenes: dict[str, SubtitleScene] = {}

    def __repr__(self) -> str:
        return f"SubtitleBank(language_id={self._language_id}, scenes={len(self._scenes)})"

    @property
    def language_id(self) -> int:
        return self._language_id

    @property
    def scenes(self) -> Mapping[str, SubtitleScene]:
        """Read-only view of the scenes, sorted by name."""
        return MappingProxyType(dict(sorted(self._scenes.items())))

    def scene_exists(self, name: str) -> bool:
        return name in self._scenes

    def scene_by_name(self, name: str) -> SubtitleScene:
        try:
            return self._scenes[name]
        except KeyError:
            raise NotFound(
                f"Scene '{name}' not found in subtitle bank for language {self._language_id}"
            ) from None

    def add_scene(self, scene: SubtitleScene) -> SubtitleScene:
        if scene.name in self._scenes:
            raise StructuralViolation(
                f"Subtitle bank for language {self._language_id} already has scene '{scene.name}'"
            )
        self._scenes[scene.name] = scene
        return scene


class SubtitleDatabase:
    """Subtitle banks per language plus the scene groups."""

    def __init__(self, game_version: GameVersion = GameVersion.JAK1):
        self._banks: dict[int, SubtitleBank] = {}
        self._subtitle_groups = SubtitleGroups(game_version)

    def __repr__(self) -> str:
        return f"SubtitleDatabase(languages={sorted(self._banks)})"

    @property
    def banks(self) -> Mapping[int, SubtitleBank]:
        return MappingProxyType(dict(sorted(self._banks.items())))

    @property
    def subtitle_groups(self) -> SubtitleGroups:
        return self._subtitle_groups

    def bank_exists(self, language_id: int) -> bool:
        return language_id in self._banks

    def add_bank(self, bank: SubtitleBank) -> SubtitleBank:
        if self.bank_exists(bank.language_id):
            raise StructuralViolation(
                f"Subtitle database already has a bank for language {bank.language_id}"
            )
        self._banks[bank.language_id] = bank
        logger.debug("Added subtitle bank: lang=%d", bank.language_id)
        return bank

    def bank_by_id(self, language_id: int) -> SubtitleBank | None:
        return self._banks.get(language_id)

    def bank_for(
        self, language_id: int, text_version: str = "jak1-v2", source_path: str = ""
    ) -> SubtitleBank:
        """Return the bank for a language, creating it on first reference."""
        bank = self.bank_by_id(language_id)
        if bank is None:
            bank = self.add_bank(SubtitleBank(language_id, text_version, source_path))
        return bank
