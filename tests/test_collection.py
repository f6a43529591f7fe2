"""Tests for collection persistence and drop intake."""

from pathlib import Path

import pytest

from collector.collection import (
    CollectedImage,
    CollectionError,
    CollectionRepository,
    CollectionSnapshot,
    DropCandidate,
    ImageGroup,
    MissingGroupError,
    MissingImageError,
    accept_candidates,
)


def _snapshot() -> CollectionSnapshot:
    return CollectionSnapshot(
        groups=[
            ImageGroup(
                id="g1",
                name="Trip",
                images=[CollectedImage(url="https://x.com/a.jpg")],
            )
        ],
        ungrouped=[CollectedImage(url="https://x.com/b.jpg")],
    )


def test_load_missing_collection_returns_empty_snapshot(tmp_path: Path) -> None:
    repository = CollectionRepository(tmp_path / "collection.json")

    snapshot = repository.load()

    assert snapshot.groups == []
    assert snapshot.ungrouped == []


def test_save_and_load_collection(tmp_path: Path) -> None:
    repository = CollectionRepository(tmp_path / "nested" / "collection.json")

    repository.save(_snapshot())

    assert repository.path.exists()
    assert repository.load() == _snapshot()


def test_invalid_collection_raises(tmp_path: Path) -> None:
    path = tmp_path / "collection.json"
    repository = CollectionRepository(path)

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CollectionError):
        repository.load()

    path.write_text('{"groups": [{"name": "no id"}]}', encoding="utf-8")
    with pytest.raises(CollectionError):
        repository.load()


def test_update_custom_filename_persists(tmp_path: Path) -> None:
    repository = CollectionRepository(tmp_path / "collection.json")
    repository.save(_snapshot())

    repository.update_custom_filename("https://x.com/a.jpg", "beach.jpg", group_id="g1")
    repository.update_custom_filename("https://x.com/b.jpg", "loose.png")

    stored = repository.load()
    assert stored.find_image("https://x.com/a.jpg").custom_filename == "beach.jpg"
    assert stored.find_image("https://x.com/b.jpg").custom_filename == "loose.png"


def test_update_custom_filename_reports_missing_targets(tmp_path: Path) -> None:
    repository = CollectionRepository(tmp_path / "collection.json")
    repository.save(_snapshot())

    with pytest.raises(MissingImageError):
        repository.update_custom_filename("https://x.com/zzz.jpg", "z.jpg")
    with pytest.raises(MissingImageError):
        repository.update_custom_filename("https://x.com/b.jpg", "z.jpg", group_id="g1")
    with pytest.raises(MissingGroupError):
        repository.update_custom_filename("https://x.com/a.jpg", "z.jpg", group_id="nope")


def test_snapshot_lookups() -> None:
    snapshot = _snapshot()

    assert snapshot.all_urls() == ["https://x.com/a.jpg", "https://x.com/b.jpg"]
    assert snapshot.group_for("https://x.com/a.jpg").id == "g1"
    assert snapshot.group_for("https://x.com/b.jpg") is None
    assert snapshot.find_group("missing") is None


def test_accept_candidates_filters_and_fills_defaults() -> None:
    original = _snapshot()
    candidates = [
        DropCandidate(url="https://x.com/new.png", filename="hero", format="PNG", hint="primary"),
        DropCandidate(url="https://x.com/icon.svg", hint="ui-element"),
        DropCandidate(url="https://x.com/copy.jpg", hint="duplicate"),
        DropCandidate(url="https://x.com/a.jpg"),
        DropCandidate(url="https://x.com/plain"),
        DropCandidate(url="https://x.com/plain"),
    ]

    updated = accept_candidates(original, candidates, group_id="g1")

    images = updated.find_group("g1").images
    assert [image.url for image in images] == [
        "https://x.com/a.jpg",
        "https://x.com/new.png",
        "https://x.com/plain",
    ]
    assert (images[1].inferred_filename, images[1].extension) == ("hero", ".png")
    assert (images[2].inferred_filename, images[2].extension) == ("image", ".jpg")
    assert len(original.find_group("g1").images) == 1


def test_accept_candidates_defaults_to_ungrouped_and_checks_group() -> None:
    updated = accept_candidates(_snapshot(), [DropCandidate(url="https://x.com/c.gif")])
    assert updated.ungrouped[-1].url == "https://x.com/c.gif"

    with pytest.raises(MissingGroupError):
        accept_candidates(_snapshot(), [], group_id="missing")


def test_accept_candidates_normalizes_formats() -> None:
    candidates = [
        DropCandidate(url="https://x.com/one", format="jpeg"),
        DropCandidate(url="https://x.com/two", format=".PNG"),
        DropCandidate(url="https://x.com/three", format="../x"),
    ]

    updated = accept_candidates(_snapshot(), candidates)

    assert [image.extension for image in updated.ungrouped[-3:]] == [".jpg", ".png", ".jpg"]
