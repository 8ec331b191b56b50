"""
Settings for locating project manifests and subtitle asset files.

Values come from environment variables; a project-level .env file is loaded
first if present (without overriding variables already set).
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .versions import GameVersion

logger = logging.getLogger("gametext")

TEXT_PROJECT_NAME = "game_text.json"
SUBTITLE_PROJECT_NAME = "game_subtitle.json"
SUBTITLE_GROUPS_NAME = "subtitle-groups.json"


def load_env_file(env_path: str | Path | None = None) -> bool:
    """
    Load a .env file into the environment.

    If env_path is None, look in the current directory and then in the project
    root (parent of src/). Returns True if a file was loaded.
    """
    if env_path is not None:
        env_path = Path(env_path)
        if not env_path.exists():
            return False
        return load_dotenv(env_path, override=False)

    candidates = [Path.cwd() / ".env", Path(__file__).resolve().parent.parent.parent / ".env"]
    for candidate in candidates:
        if candidate.exists():
            logger.debug("Loading environment from %s", candidate)
            return load_dotenv(candidate, override=False)
    return False


@dataclass
class Settings:
    # Root holding one directory per game (jak1/, jak2/, ...)
    assets_dir: str = field(default_factory=lambda: os.getenv("GAMETEXT_ASSETS_DIR", "game/assets"))
    # Explicit group-definition file, overrides the per-game default
    subtitle_groups_path: str | None = field(
        default_factory=lambda: os.getenv("GAMETEXT_SUBTITLE_GROUPS") or None
    )

    def game_dir(self, game_version: GameVersion) -> Path:
        return Path(self.assets_dir) / GameVersion(game_version).value

    def text_project_path(self, game_version: GameVersion) -> Path:
        return self.game_dir(game_version) / TEXT_PROJECT_NAME

    def subtitle_project_path(self, game_version: GameVersion) -> Path:
        return self.game_dir(game_version) / SUBTITLE_PROJECT_NAME

    def subtitle_groups_file(self, game_version: GameVersion) -> Path:
        if self.subtitle_groups_path:
            return Path(self.subtitle_groups_path)
        return self.game_dir(game_version) / "subtitle" / SUBTITLE_GROUPS_NAME


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
