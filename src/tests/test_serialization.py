"""
Tests for subtitle JSON documents and database dumps.
"""

import json

import pytest

from gametext.errors import MalformedSource
from gametext.models import SceneKind
from gametext.serialization import (
    SubtitleCutsceneLineMetadata,
    SubtitleFile,
    SubtitleHintLineMetadata,
    SubtitleHintMetadata,
    SubtitleMetadataFile,
    merge_over_base,
    subtitle_db_to_dict,
    text_db_to_dict,
)
from gametext.subtitle_db import SubtitleDatabase, SubtitleScene
from gametext.text_db import TextDatabase


def test_metadata_file_roundtrip():
    """Test that encoding then decoding the meta document is lossless."""
    meta = SubtitleMetadataFile(
        cutscenes={
            "intro": [
                SubtitleCutsceneLineMetadata(frame=10, offscreen=False, speaker="sage"),
                SubtitleCutsceneLineMetadata(frame=30, offscreen=True, speaker="daxter"),
                SubtitleCutsceneLineMetadata(frame=60, clear=True),
            ]
        },
        hints={
            "cell-hint": SubtitleHintMetadata(
                id="2a3",
                lines=[
                    SubtitleHintLineMetadata(frame=0, speaker="keira"),
                    SubtitleHintLineMetadata(frame=90, clear=True),
                ],
            )
        },
    )

    decoded = SubtitleMetadataFile.from_dict(json.loads(json.dumps(meta.to_dict())))
    assert decoded == meta
    assert decoded.hints["cell-hint"].numeric_id == 0x2A3


def test_lines_file_roundtrip():
    """Test that encoding then decoding the lines document is lossless."""
    lines = SubtitleFile(
        speakers={"sage": "Samos", "daxter": "Daxter"},
        cutscenes={"intro": ["Wake up.", "Five more minutes..."]},
        hints={"cell-hint": ["Grab the cell!"]},
    )
    assert SubtitleFile.from_dict(json.loads(json.dumps(lines.to_dict()))) == lines


def test_clear_entries_encode_frame_only():
    """Test the compact encoding of clear entries."""
    assert SubtitleCutsceneLineMetadata(frame=5, clear=True).to_dict() == {"frame": 5, "clear": True}
    assert SubtitleHintLineMetadata(frame=7, speaker="x").to_dict() == {"frame": 7, "speaker": "x"}


def test_malformed_documents():
    """Test decoding errors."""
    with pytest.raises(MalformedSource):
        SubtitleMetadataFile.from_dict({"cutscenes": {"intro": [{"speaker": "sage"}]}})
    with pytest.raises(MalformedSource):
        SubtitleMetadataFile.from_dict({"cutscenes": []})
    with pytest.raises(MalformedSource):
        SubtitleFile.from_dict({"cutscenes": {"intro": [1, 2]}})
    with pytest.raises(MalformedSource):
        SubtitleHintMetadata(id="zz").numeric_id


def test_merge_over_base():
    """Test that sections are merged key by key."""
    base = {"speakers": {"sage": "Samos", "daxter": "Daxter"}, "cutscenes": {"a": ["1"], "b": ["2"]}}
    override = {"speakers": {"sage": "Samos le Sage"}, "cutscenes": {"a": ["un"]}}

    merged = merge_over_base(base, override)
    assert merged["speakers"] == {"sage": "Samos le Sage", "daxter": "Daxter"}
    assert merged["cutscenes"] == {"a": ["un"], "b": ["2"]}
    # Inputs are untouched
    assert base["cutscenes"]["a"] == ["1"]


def test_database_dumps():
    """Test the JSON dumps of both databases."""
    text_db = TextDatabase()
    text_db.bank_for("common", 0).set_line(0x100, "Orb")
    assert text_db_to_dict(text_db) == {"common": {"0": {"0x100": "Orb"}}}

    sub_db = SubtitleDatabase()
    bank = sub_db.bank_for(0, "jak1-v2", "lines_en.json")
    scene = SubtitleScene("intro", SceneKind.MOVIE)
    scene.add_line(10, "Wake up.", "Samos", False)
    scene.add_clear_entry(20)
    bank.add_scene(scene)

    dump = subtitle_db_to_dict(sub_db)
    assert dump["groups"] == {"_groups": []}
    intro = dump["banks"]["0"]["scenes"]["intro"]
    assert intro["kind"] == "movie"
    assert intro["lines"] == [
        {"frame": 10, "text": "Wake up.", "speaker": "Samos", "offscreen": False},
        {"frame": 20, "clear": True},
    ]
    json.dumps(dump)
