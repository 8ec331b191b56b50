"""
Subtitle ingestion from DSL and JSON source documents.

DSL subtitle documents hold one language:

    (language-id 0)
    (text-version jak1-v2)
    ("intro"
      (10 "SAGE" "Wake up.")
      (30 :offscreen "DAXTER" "Five more minutes...")
      (60 clear))
    ("fuel-cell-hint" :hint #x2a3
      (0 "Grab the cell!"))

JSON subtitles are a lines document and a meta document per language, each
optionally layered over a base document (usually the original language).
"""

import logging

from .errors import MalformedSource
from .models import SceneKind, SubtitleDefinitionFile
from .serialization import SubtitleFile, SubtitleMetadataFile, load_json, merge_over_base
from .sexp import is_string, is_symbol
from .subtitle_db import SubtitleBank, SubtitleDatabase, SubtitleScene
from .versions import DEFAULT_TEXT_VERSION, text_version_from_name

logger = logging.getLogger("gametext")


def _hint_kind(hint_id: int) -> SceneKind:
    return SceneKind.HINT_NAMED if hint_id == 0 else SceneKind.HINT


def _install_scene(db: SubtitleDatabase, bank: SubtitleBank, scene: SubtitleScene) -> None:
    """Add a scene to a bank, replacing an earlier definition of the same name."""
    groups = db.subtitle_groups
    group = groups.find_group(scene.name)
    if group == groups.uncategorized_group:
        groups.add_scene(group, scene.name)

    if bank.scene_exists(scene.name):
        target = bank.scene_by_name(scene.name)
        logger.debug(f"Scene '{scene.name}' redefined for language {bank.language_id}")
        target.clear_lines()
        target.from_other_scene(scene)
    else:
        target = bank.add_scene(scene)
    target.set_sorting_group(group, groups.find_group_index(group))


def _parse_scene_entry(scene: SubtitleScene, entry, where: str) -> None:
    if not isinstance(entry, list) or not entry or not isinstance(entry[0], int):
        raise MalformedSource(f"{where}: entries must start with a frame number, got {entry!r}")
    frame, args = entry[0], entry[1:]
    if frame < 0:
        raise MalformedSource(f"{where}: negative frame {frame}")

    if len(args) == 1 and is_symbol(args[0], "clear"):
        scene.add_clear_entry(frame)
        return
    offscreen = bool(args) and is_symbol(args[0], ":offscreen")
    if offscreen:
        args = args[1:]
    if not args or len(args) > 2 or not all(is_string(a) for a in args):
        raise MalformedSource(
            f"{where}: expected (frame [:offscreen] [\"speaker\"] \"text\") or (frame clear)"
        )
    speaker, text = (args[0], args[1]) if len(args) == 2 else ("", args[0])
    scene.add_line(frame, text, speaker, offscreen)


def _parse_scene_form(form: list, where: str) -> SubtitleScene:
    name, rest = form[0], form[1:]
    kind, hint_id = SceneKind.MOVIE, 0
    if rest and is_symbol(rest[0], ":hint"):
        if len(rest) < 2 or not isinstance(rest[1], int):
            raise MalformedSource(f"{where}: :hint needs an integer id")
        hint_id = rest[1]
        kind = _hint_kind(hint_id)
        rest = rest[2:]

    scene = SubtitleScene(name, kind, hint_id)
    for i, entry in enumerate(rest):
        _parse_scene_entry(scene, entry, f"{where} entry {i}")
    return scene


def parse_subtitle(data: list, db: SubtitleDatabase, file_path: str) -> None:
    """Ingest a DSL subtitle document into the bank for its language."""
    source = file_path or "<subtitle>"
    language_id: int | None = None
    version = DEFAULT_TEXT_VERSION
    scenes: list[SubtitleScene] = []

    for index, form in enumerate(data):
        where = f"{source}: form {index}"
        if not isinstance(form, list) or not form:
            raise MalformedSource(f"{where}: expected a non-empty list, got {form!r}")
        head = form[0]
        if is_symbol(head, "language-id"):
            if len(form) != 2 or not isinstance(form[1], int):
                raise MalformedSource(f"{where}: subtitle files take exactly one language id")
            language_id = form[1]
        elif is_symbol(head, "text-version"):
            if len(form) != 2 or not isinstance(form[1], str):
                raise MalformedSource(f"{where}: (text-version NAME) takes exactly one name")
            version = text_version_from_name(form[1])
        elif is_string(head):
            scenes.append(_parse_scene_form(form, f"{where} scene '{head}'"))
        else:
            raise MalformedSource(f"{where}: unknown form {head!r}")

    if language_id is None:
        raise MalformedSource(f"{source}: no (language-id ...) form")

    bank = db.bank_for(language_id, version.value, source)
    for scene in scenes:
        _install_scene(db, bank, scene)
    logger.info(f"Loaded {len(scenes)} subtitle scenes from {source} (language={language_id})")


def _load_layered(path: str, base_path: str | None) -> dict:
    data = load_json(path)
    if base_path:
        base = load_json(base_path)
        if not isinstance(base, dict) or not isinstance(data, dict):
            raise MalformedSource(f"{path}: base and language documents must be JSON objects")
        data = merge_over_base(base, data)
    return data


def parse_subtitle_json(db: SubtitleDatabase, file_info: SubtitleDefinitionFile) -> None:
    """Ingest one language's JSON lines and meta documents."""
    if file_info.language_id < 0:
        raise MalformedSource(f"{file_info.lines_path}: JSON subtitle files need a language id")
    version = text_version_from_name(file_info.text_version)

    lines = SubtitleFile.from_dict(
        _load_layered(file_info.lines_path, file_info.lines_base_path), file_info.lines_path
    )
    meta = SubtitleMetadataFile.from_dict(
        _load_layered(file_info.meta_path, file_info.meta_base_path), file_info.meta_path
    )

    scenes: list[SubtitleScene] = []
    for name, entries in meta.cutscenes.items():
        if name not in lines.cutscenes:
            logger.warning(f"Cutscene '{name}' has timing info but no lines, skipping")
            continue
        texts = lines.cutscenes[name]
        scene = SubtitleScene(name, SceneKind.MOVIE)
        used = 0
        for entry in entries:
            if entry.clear:
                scene.add_clear_entry(entry.frame)
                continue
            if used >= len(texts):
                raise MalformedSource(
                    f"{file_info.lines_path}: cutscene '{name}' has fewer lines than timing entries"
                )
            speaker = lines.speakers.get(entry.speaker, entry.speaker)
            scene.add_line(entry.frame, texts[used], speaker, entry.offscreen)
            used += 1
        if used < len(texts):
            logger.warning(f"Cutscene '{name}' has {len(texts) - used} lines without timing info")
        scenes.append(scene)

    for name, hint in meta.hints.items():
        if name not in lines.hints:
            logger.warning(f"Hint '{name}' has timing info but no lines, skipping")
            continue
        texts = lines.hints[name]
        hint_id = hint.numeric_id
        scene = SubtitleScene(name, _hint_kind(hint_id), hint_id)
        used = 0
        for entry in hint.lines:
            if entry.clear:
                scene.add_clear_entry(entry.frame)
                continue
            if used >= len(texts):
                raise MalformedSource(
                    f"{file_info.lines_path}: hint '{name}' has fewer lines than timing entries"
                )
            speaker = lines.speakers.get(entry.speaker, entry.speaker)
            scene.add_line(entry.frame, texts[used], speaker, False)
            used += 1
        scenes.append(scene)

    bank = db.bank_for(file_info.language_id, version.value, file_info.lines_path)
    for scene in scenes:
        _install_scene(db, bank, scene)
    logger.info(
        f"Loaded {len(scenes)} subtitle scenes from {file_info.lines_path} "
        f"(language={file_info.language_id})"
    )
