"""
Project manifests and whole-project loading.

A manifest is a JSON document whose single top-level key names its kind and
lists the source files in the order they are ingested:

    {"text": [
        {"format": "goal", "path": "text/game_text.gs"},
        {"format": "json", "path": "text/game_text_fr.json",
         "language_id": 1, "group_name": "common"}
    ]}

    {"subtitle": [
        {"format": "json", "language_id": 0,
         "lines": "subtitle/lines_en.json", "meta": "subtitle/meta_en.json"},
        {"format": "json", "language_id": 1,
         "lines": "subtitle/lines_fr.json", "lines_base": "subtitle/lines_en.json",
         "meta": "subtitle/meta_fr.json", "meta_base": "subtitle/meta_en.json"}
    ]}

Relative paths are resolved against the manifest's directory.
"""

import logging
from pathlib import Path

from tqdm import tqdm

from .config import get_settings
from .errors import MalformedSource
from .models import SourceFormat, SubtitleDefinitionFile, TextDefinitionFile
from .serialization import load_json
from .sexp import read_file
from .subtitle_db import SubtitleDatabase
from .subtitle_parser import parse_subtitle, parse_subtitle_json
from .text_db import TextDatabase
from .text_parser import parse_text, parse_text_json
from .versions import DEFAULT_TEXT_VERSION, GameVersion, text_version_from_name

logger = logging.getLogger("gametext")


def _manifest_entries(kind: str, filename: str | Path) -> tuple[list[dict], Path]:
    filename = Path(filename)
    data = load_json(filename)
    if not isinstance(data, dict) or kind not in data:
        raise MalformedSource(f"{filename}: expected a '{kind}' project manifest")
    entries = data[kind]
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise MalformedSource(f"{filename}: '{kind}' must be a list of file entries")
    return entries, filename.parent


def _format(entry: dict, where: str) -> SourceFormat:
    try:
        return SourceFormat(entry.get("format", SourceFormat.DSL.value))
    except ValueError:
        raise MalformedSource(f"{where}: unknown format '{entry.get('format')}'") from None


def _resolve(base_dir: Path, value, where: str, key: str) -> str:
    if not isinstance(value, str) or not value:
        raise MalformedSource(f"{where}: '{key}' must be a non-empty path")
    path = Path(value)
    return str(path if path.is_absolute() else base_dir / path)


def _optional_path(base_dir: Path, entry: dict, key: str, where: str) -> str | None:
    if entry.get(key) is None:
        return None
    return _resolve(base_dir, entry[key], where, key)


def _language_id(entry: dict, where: str) -> int:
    lang = entry.get("language_id", -1)
    if not isinstance(lang, int) or isinstance(lang, bool):
        raise MalformedSource(f"{where}: 'language_id' must be an integer")
    return lang


def _text_version(entry: dict) -> str:
    return text_version_from_name(entry.get("text_version", DEFAULT_TEXT_VERSION.value)).value


def open_text_project(kind: str, filename: str | Path, inputs: list[TextDefinitionFile]) -> None:
    """Append the text file descriptors listed in a manifest to inputs."""
    entries, base_dir = _manifest_entries(kind, filename)
    for i, entry in enumerate(entries):
        where = f"{filename}: entry {i}"
        fmt = _format(entry, where)
        info = TextDefinitionFile(
            format=fmt,
            path=_resolve(base_dir, entry.get("path"), where, "path"),
            language_id=_language_id(entry, where),
            text_version=_text_version(entry),
            group_name=entry.get("group_name"),
        )
        if fmt == SourceFormat.JSON and info.language_id < 0:
            raise MalformedSource(f"{where}: JSON text entries need a 'language_id'")
        inputs.append(info)


def open_subtitle_project(
    kind: str, filename: str | Path, inputs: list[SubtitleDefinitionFile]
) -> None:
    """Append the subtitle file descriptors listed in a manifest to inputs."""
    entries, base_dir = _manifest_entries(kind, filename)
    for i, entry in enumerate(entries):
        where = f"{filename}: entry {i}"
        fmt = _format(entry, where)
        if fmt == SourceFormat.DSL:
            info = SubtitleDefinitionFile(
                format=fmt,
                language_id=_language_id(entry, where),
                text_version=_text_version(entry),
                lines_path=_resolve(base_dir, entry.get("path"), where, "path"),
            )
        else:
            info = SubtitleDefinitionFile(
                format=fmt,
                language_id=_language_id(entry, where),
                text_version=_text_version(entry),
                lines_path=_resolve(base_dir, entry.get("lines"), where, "lines"),
                lines_base_path=_optional_path(base_dir, entry, "lines_base", where),
                meta_path=_resolve(base_dir, entry.get("meta"), where, "meta"),
                meta_base_path=_optional_path(base_dir, entry, "meta_base", where),
            )
            if info.language_id < 0:
                raise MalformedSource(f"{where}: JSON subtitle entries need a 'language_id'")
        inputs.append(info)


def load_text_project(
    game_version: GameVersion = GameVersion.JAK1,
    manifest: str | Path | None = None,
    *,
    progress: bool = True,
) -> TextDatabase:
    """Build a text database from every file in a text project."""
    manifest = Path(manifest) if manifest else get_settings().text_project_path(game_version)
    inputs: list[TextDefinitionFile] = []
    open_text_project("text", manifest, inputs)
    logger.info(f"Text project {manifest}: {len(inputs)} files")

    db = TextDatabase()
    for info in tqdm(inputs, desc="Text files", disable=not progress):
        if info.format == SourceFormat.DSL:
            parse_text(read_file(info.path), db, info)
        else:
            parse_text_json(load_json(info.path), db, info)
    return db


def load_subtitle_project(
    game_version: GameVersion = GameVersion.JAK1,
    manifest: str | Path | None = None,
    groups_file: str | Path | None = None,
    *,
    progress: bool = True,
) -> SubtitleDatabase:
    """Build a subtitle database (groups included) from a subtitle project."""
    settings = get_settings()
    game_version = GameVersion(game_version)
    manifest = Path(manifest) if manifest else settings.subtitle_project_path(game_version)
    groups_file = Path(groups_file) if groups_file else settings.subtitle_groups_file(game_version)

    db = SubtitleDatabase(game_version)
    if groups_file.exists():
        db.subtitle_groups.hydrate_from_asset_file(groups_file)
    else:
        logger.warning(f"No subtitle group file at {groups_file}, all scenes are uncategorized")

    inputs: list[SubtitleDefinitionFile] = []
    open_subtitle_project("subtitle", manifest, inputs)
    logger.info(f"Subtitle project {manifest}: {len(inputs)} files")

    for info in tqdm(inputs, desc="Subtitle files", disable=not progress):
        if info.format == SourceFormat.DSL:
            parse_subtitle(read_file(info.lines_path), db, info.lines_path)
        else:
            parse_subtitle_json(db, info)
    return db
