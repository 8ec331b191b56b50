"""
Tests for text ingestion.
"""

import pytest

from gametext.errors import MalformedSource, StructuralViolation
from gametext.models import SourceFormat, TextDefinitionFile
from gametext.sexp import read_string
from gametext.text_db import TextBank, TextDatabase
from gametext.text_parser import parse_text, parse_text_json, parse_text_only_version
from gametext.versions import TextVersion

TEXT_DSL = """
(group-name "common")
(language-id 0 6)
(text-version jak1-v2)

(#x100 "Power Cell" "Energiezelle")
(#x101 "Precursor Orb" "Vorläufer-Kugel")
(credits :begin #xb00
  "JAK AND DAXTER"
  "THE PRECURSOR LEGACY")
"""


def _dsl_info(path: str = "game_text.gs") -> TextDefinitionFile:
    return TextDefinitionFile(format=SourceFormat.DSL, path=path)


def _json_info(lang: int, group: str | None = "common") -> TextDefinitionFile:
    return TextDefinitionFile(
        format=SourceFormat.JSON, path=f"text_{lang}.json", language_id=lang, group_name=group
    )


def test_parse_text_multi_language():
    """Test one DSL document filling a bank per declared language."""
    db = TextDatabase()
    parse_text(read_string(TEXT_DSL), db, _dsl_info())

    en = db.bank_by_id("common", 0)
    de = db.bank_by_id("common", 6)
    assert en.line(0x100) == "Power Cell"
    assert de.line(0x100) == "Energiezelle"
    assert de.line(0x101) == "Vorläufer-Kugel"
    # Credits get consecutive ids in every language
    assert en.line(0xB00) == "JAK AND DAXTER"
    assert de.line(0xB01) == "THE PRECURSOR LEGACY"


def test_parse_text_rejects_wrong_string_count():
    """Test that a malformed document leaves the database untouched."""
    db = TextDatabase()
    doc = read_string('(language-id 0 6)\n(#x100 "ok" "ok")\n(#x101 "only one")')
    with pytest.raises(MalformedSource):
        parse_text(doc, db, _dsl_info())
    assert len(db.groups) == 0


def test_parse_text_rejects_unknown_forms():
    """Test unknown forms, missing language ids and unknown versions."""
    db = TextDatabase()
    with pytest.raises(MalformedSource):
        parse_text(read_string('(language-id 0)\n(bogus 1 2)'), db, _dsl_info())
    with pytest.raises(MalformedSource):
        parse_text(read_string('(#x100 "no language")'), db, _dsl_info())
    with pytest.raises(MalformedSource):
        parse_text(read_string("(language-id 0)\n(text-version jak9)"), db, _dsl_info())


def test_two_languages_then_reingest():
    """Test per-language banks for one group and overwrite on re-ingestion."""
    db = TextDatabase()
    parse_text_json({"7": "Hello"}, db, _json_info(0))
    parse_text_json({"7": "Bonjour"}, db, _json_info(1))

    assert db.bank_by_id("common", 0).line(7) == "Hello"
    assert db.bank_by_id("common", 1).line(7) == "Bonjour"

    # Rewritten language-0 file: only lines change, no duplicate bank
    parse_text_json({"7": "Hi there"}, db, _json_info(0))
    assert db.bank_by_id("common", 0).line(7) == "Hi there"
    assert db.bank_by_id("common", 1).line(7) == "Bonjour"
    assert list(db.banks("common")) == [0, 1]


def test_parse_text_json_hex_ids_and_default_group():
    """Test hex line ids and the default group name."""
    db = TextDatabase()
    parse_text_json({"0100": "Orb", "0x101": "Cell"}, db, _json_info(2, group=None))
    bank = db.bank_by_id("common", 2)
    assert bank.line(0x100) == "Orb"
    assert bank.line(0x101) == "Cell"


def test_parse_text_json_errors():
    """Test bad JSON text documents and descriptors."""
    db = TextDatabase()
    with pytest.raises(MalformedSource):
        parse_text_json({"xyz": "bad id"}, db, _json_info(0))
    with pytest.raises(MalformedSource):
        parse_text_json({"10": 5}, db, _json_info(0))
    with pytest.raises(MalformedSource):
        parse_text_json({"10": "no language"}, db, _json_info(-1))
    with pytest.raises(MalformedSource):
        parse_text_json(["not", "an", "object"], db, _json_info(0))


def test_bank_level_duplicate_still_enforced():
    """Test that add_bank keeps rejecting duplicates after ingestion."""
    db = TextDatabase()
    parse_text_json({"1": "one"}, db, _json_info(0))
    with pytest.raises(StructuralViolation):
        db.add_bank("common", TextBank(0))


def test_parse_text_only_version(tmp_path):
    """Test version detection from forms and from a file."""
    assert parse_text_only_version(read_string(TEXT_DSL)) == TextVersion.JAK1_V2
    assert parse_text_only_version(read_string("(language-id 0)")) == TextVersion.JAK1_V1

    path = tmp_path / "jak2_text.gs"
    path.write_text("(text-version jak2)\n(language-id 0)\n", encoding="utf-8")
    assert parse_text_only_version(str(path)) == TextVersion.JAK2
    assert parse_text_only_version(path) == TextVersion.JAK2

    with pytest.raises(MalformedSource):
        parse_text_only_version(read_string("(text-version nope)"))
