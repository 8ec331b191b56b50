"""
Tests for subtitle scenes, banks and the subtitle database.
"""

import random

import pytest

from gametext.errors import NotFound, StructuralViolation
from gametext.models import SceneKind
from gametext.subtitle_db import SubtitleBank, SubtitleDatabase, SubtitleScene


def _frames(scene: SubtitleScene) -> list[int]:
    return [ln.frame for ln in scene.lines]


def test_lines_stay_sorted_by_frame():
    """Test that every insertion keeps the timeline sorted."""
    rng = random.Random(1234)
    scene = SubtitleScene("village1-intro", SceneKind.MOVIE)
    for i in range(200):
        frame = rng.randint(0, 5000)
        if i % 7 == 0:
            scene.add_clear_entry(frame)
        else:
            scene.add_line(frame, f"line {i}", "SAGE", i % 2 == 0)
        frames = _frames(scene)
        assert frames == sorted(frames)
    assert len(scene.lines) == 200


def test_intro_scene_order():
    """Test lines at [50, 10, 30] with a clear at 60."""
    scene = SubtitleScene("intro", SceneKind.MOVIE)
    scene.add_line(50, "third", "SAGE", False)
    scene.add_line(10, "first", "SAGE", False)
    scene.add_line(30, "second", "DAXTER", True)
    scene.add_clear_entry(60)

    assert _frames(scene) == [10, 30, 50, 60]
    assert scene.lines[-1].is_clear
    assert not scene.lines[0].is_clear
    assert scene.lines[1].offscreen


def test_equal_frames_keep_insertion_order():
    """Test that lines sharing a frame keep the order they were added."""
    scene = SubtitleScene("tie", SceneKind.MOVIE)
    scene.add_line(20, "b", "", False)
    scene.add_line(10, "a", "", False)
    scene.add_clear_entry(20)
    scene.add_line(20, "c", "", False)

    assert [ln.text for ln in scene.lines] == ["a", "b", "", "c"]


def test_clear_lines_and_from_other_scene():
    """Test truncation and wholesale replacement."""
    stub = SubtitleScene("hint", SceneKind.HINT, 0x10)
    stub.add_line(0, "old", "", False)
    stub.set_sorting_group("misc", 2)

    full = SubtitleScene("hint-renamed", SceneKind.HINT_NAMED)
    full.add_line(5, "new", "KEIRA", False)

    stub.clear_lines()
    assert stub.lines == ()

    stub.from_other_scene(full)
    assert stub.name == "hint-renamed"
    assert stub.kind == SceneKind.HINT_NAMED
    assert stub.numeric_id == 0
    assert [ln.text for ln in stub.lines] == ["new"]
    # Sorting group is not part of the copy
    assert stub.sorting_group == "misc"

    # The copy is independent of the source scene
    full.add_line(1, "later", "", False)
    assert len(stub.lines) == 1


def test_bank_scene_uniqueness():
    """Test duplicate scene names and scene lookup."""
    bank = SubtitleBank(0, "jak1-v2", "lines_en.json")
    bank.add_scene(SubtitleScene("intro", SceneKind.MOVIE))

    with pytest.raises(StructuralViolation):
        bank.add_scene(SubtitleScene("intro", SceneKind.HINT))

    assert bank.scene_exists("intro")
    assert bank.scene_by_name("intro").kind == SceneKind.MOVIE
    with pytest.raises(NotFound):
        bank.scene_by_name("outro")


def test_database_banks():
    """Test duplicate bank detection and absent lookups."""
    db = SubtitleDatabase()
    bank = db.add_bank(SubtitleBank(0))
    assert db.bank_by_id(0) is bank
    assert db.bank_by_id(1) is None

    with pytest.raises(StructuralViolation):
        db.add_bank(SubtitleBank(0))

    assert db.bank_for(0) is bank
    assert db.bank_for(5, "jak1-v2", "lines_de.json").source_path == "lines_de.json"
    assert list(db.banks) == [0, 5]
    assert db.subtitle_groups.find_group("anything") == "uncategorized"
