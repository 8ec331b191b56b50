"""
Text ingestion from DSL and JSON source documents.

DSL text documents look like:

    (group-name "common")
    (language-id 0 6)
    (text-version jak1-v2)
    (#x100 "Text for language 0" "Text for language 6")
    (credits :begin #xb00 "Line one" "Line two")

JSON text documents map hex line ids to text for the single language named by
the file descriptor: {"0100": "Text", "0x101": "More text"}.
"""

import logging
from pathlib import Path

from .errors import MalformedSource
from .models import TextDefinitionFile
from .sexp import Symbol, is_string, is_symbol, read_file
from .text_db import DEFAULT_TEXT_GROUP, TextDatabase
from .versions import TextVersion, text_version_from_name

logger = logging.getLogger("gametext")


def _version_from_form(form: list, where: str) -> TextVersion:
    if len(form) != 2 or not isinstance(form[1], str):
        raise MalformedSource(f"{where}: (text-version NAME) takes exactly one name")
    return text_version_from_name(form[1])


def parse_text_only_version(source) -> TextVersion:
    """
    Find the text version a DSL document was written against.

    source is either a path to the document or its already-read forms.
    Documents without a (text-version ...) form are treated as jak1-v1.
    """
    if isinstance(source, (str, Path)):
        where = str(source)
        forms = read_file(source)
    else:
        where = "<text>"
        forms = source
    for form in forms:
        if isinstance(form, list) and form and is_symbol(form[0], "text-version"):
            return _version_from_form(form, where)
    return TextVersion.JAK1_V1


def _string_args(items: list, where: str) -> list[str]:
    if not all(is_string(s) for s in items):
        raise MalformedSource(f"{where}: expected only string literals, got {items!r}")
    return list(items)


def parse_text(data: list, db: TextDatabase, file_info: TextDefinitionFile) -> None:
    """
    Ingest a DSL text document into the database.

    The whole document is decoded before any bank is touched, so a malformed
    document leaves the database unchanged.
    """
    source = file_info.path or "<text>"
    languages: list[int] = []
    version = text_version_from_name(file_info.text_version)
    group = file_info.group_name or DEFAULT_TEXT_GROUP
    entries: list[tuple[int, list[str]]] = []

    for index, form in enumerate(data):
        where = f"{source}: form {index}"
        if not isinstance(form, list) or not form:
            raise MalformedSource(f"{where}: expected a non-empty list, got {form!r}")
        head = form[0]

        if is_symbol(head, "language-id"):
            ids = form[1:]
            if not ids or not all(isinstance(i, int) for i in ids):
                raise MalformedSource(f"{where}: (language-id N ...) needs integer ids")
            if len(set(ids)) != len(ids):
                raise MalformedSource(f"{where}: duplicate language ids {ids}")
            languages = list(ids)
        elif is_symbol(head, "text-version"):
            version = _version_from_form(form, where)
        elif is_symbol(head, "group-name"):
            if len(form) != 2 or not is_string(form[1]):
                raise MalformedSource(f"{where}: (group-name \"NAME\") takes one string")
            group = form[1]
        elif is_symbol(head, "credits"):
            if not languages:
                raise MalformedSource(f"{where}: credits before (language-id ...)")
            if len(form) < 3 or not is_symbol(form[1], ":begin") or not isinstance(form[2], int):
                raise MalformedSource(f"{where}: credits must start with :begin ID")
            for offset, text in enumerate(_string_args(form[3:], where)):
                entries.append((form[2] + offset, [text] * len(languages)))
        elif isinstance(head, int) and not isinstance(head, bool):
            if not languages:
                raise MalformedSource(f"{where}: line #x{head:x} before (language-id ...)")
            texts = _string_args(form[1:], where)
            if len(texts) != len(languages):
                raise MalformedSource(
                    f"{where}: line #x{head:x} has {len(texts)} strings "
                    f"but {len(languages)} languages are declared"
                )
            entries.append((head, texts))
        else:
            name = head if isinstance(head, Symbol) else repr(head)
            raise MalformedSource(f"{where}: unknown form '{name}'")

    if not languages:
        raise MalformedSource(f"{source}: no (language-id ...) form")

    banks = [db.bank_for(group, lang) for lang in languages]
    for line_id, texts in entries:
        for bank, text in zip(banks, texts):
            bank.set_line(line_id, text)
    logger.info(
        f"Loaded {len(entries)} text lines from {source} "
        f"(group={group}, languages={languages}, version={version.value})"
    )


def _parse_line_id(key: str, where: str) -> int:
    try:
        return int(key, 16)
    except (TypeError, ValueError):
        raise MalformedSource(f"{where}: line id '{key}' is not a hex number") from None


def parse_text_json(data: dict, db: TextDatabase, file_info: TextDefinitionFile) -> None:
    """Ingest a JSON text document for the descriptor's language and group."""
    source = file_info.path or "<json>"
    if not isinstance(data, dict):
        raise MalformedSource(f"{source}: expected a JSON object of lines")
    if file_info.language_id < 0:
        raise MalformedSource(f"{source}: JSON text files need a language id")
    version = text_version_from_name(file_info.text_version)
    group = file_info.group_name or DEFAULT_TEXT_GROUP

    lines: dict[int, str] = {}
    for key, text in data.items():
        if not isinstance(text, str):
            raise MalformedSource(f"{source}: line '{key}' must be a string")
        lines[_parse_line_id(key, source)] = text

    bank = db.bank_for(group, file_info.language_id)
    for line_id, text in lines.items():
        bank.set_line(line_id, text)
    logger.info(
        f"Loaded {len(lines)} text lines from {source} "
        f"(group={group}, language={file_info.language_id}, version={version.value})"
    )
