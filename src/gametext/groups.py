"""
Subtitle scene groups.

Groups categorize scene names for display and sorting. The group-definition
asset file is a JSON object keyed by group name, each listing scene names, plus
the reserved "_groups" key that gives the display order of the groups.
"""

import json
import logging
from pathlib import Path

from .config import get_settings
from .errors import MalformedSource, StructuralViolation
from .versions import GameVersion

logger = logging.getLogger("gametext")

GROUP_ORDER_KEY = "_groups"
UNCATEGORIZED_GROUP = "uncategorized"


class SubtitleGroups:
    """Maps every scene to one group and keeps the declared group order."""

    group_order_key = GROUP_ORDER_KEY
    uncategorized_group = UNCATEGORIZED_GROUP

    def __init__(self, game_version: GameVersion = GameVersion.JAK1):
        self.game_version = GameVersion(game_version)
        self._group_order: list[str] = []
        self._groups: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return f"SubtitleGroups(order={self._group_order}, groups={len(self._groups)})"

    @property
    def group_order(self) -> tuple[str, ...]:
        return tuple(self._group_order)

    @property
    def groups(self) -> dict[str, tuple[str, ...]]:
        return {name: tuple(scenes) for name, scenes in self._groups.items()}

    def hydrate_from_asset_file(self, path: str | Path | None = None) -> None:
        """Replace the current groups with the contents of a group-definition file."""
        if path is None:
            path = get_settings().subtitle_groups_file(self.game_version)
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise MalformedSource(f"Subtitle group file not found: {path}") from None
        except json.JSONDecodeError as e:
            raise MalformedSource(f"Subtitle group file {path} is not valid JSON: {e}") from e
        self.hydrate_from_dict(data, source=str(path))
        logger.info(
            f"Loaded {len(self._groups)} subtitle groups from {path} "
            f"({len(self._group_order)} ordered)"
        )

    def hydrate_from_dict(self, data: dict, source: str = "<dict>") -> None:
        if not isinstance(data, dict):
            raise MalformedSource(f"{source}: expected a JSON object of groups")
        order = data.get(self.group_order_key, [])
        if not isinstance(order, list) or not all(isinstance(g, str) for g in order):
            raise MalformedSource(f"{source}: '{self.group_order_key}' must be a list of names")

        groups: dict[str, list[str]] = {}
        owner: dict[str, str] = {}
        for name, scenes in data.items():
            if name == self.group_order_key:
                continue
            if not isinstance(scenes, list) or not all(isinstance(s, str) for s in scenes):
                raise MalformedSource(f"{source}: group '{name}' must be a list of scene names")
            groups[name] = []
            for scene in scenes:
                if scene in owner and owner[scene] != name:
                    raise MalformedSource(
                        f"{source}: scene '{scene}' is listed in both '{owner[scene]}' and '{name}'"
                    )
                owner[scene] = name
                if scene not in groups[name]:
                    groups[name].append(scene)

        self._group_order = list(order)
        self._groups = groups

    def to_asset_dict(self) -> dict[str, list[str]]:
        """Encode back into the group-definition format, ordering key first."""
        out: dict[str, list[str]] = {self.group_order_key: list(self._group_order)}
        for name, scenes in self._groups.items():
            out[name] = list(scenes)
        return out

    def find_group(self, scene_name: str) -> str:
        for name, scenes in self._groups.items():
            if scene_name in scenes:
                return name
        return self.uncategorized_group

    def find_group_index(self, group_name: str) -> int:
        try:
            return self._group_order.index(group_name)
        except ValueError:
            return -1

    def add_scene(self, group_name: str, scene_name: str) -> None:
        """Append a scene to a group, creating the group if needed."""
        current = self.find_group(scene_name)
        if current == group_name and scene_name in self._groups.get(group_name, []):
            return
        if scene_name in self._groups.get(current, []):
            raise StructuralViolation(
                f"Scene '{scene_name}' is already in group '{current}', remove it first"
            )
        self._groups.setdefault(group_name, []).append(scene_name)

    def remove_scene(self, group_name: str, scene_name: str) -> None:
        scenes = self._groups.get(group_name)
        if scenes and scene_name in scenes:
            scenes.remove(scene_name)
