"""Tests for conflict detection and the directory tree views."""

from collector.planning.conflicts import (
    detect_conflicts,
    has_any_conflicts,
    has_overwrite_conflicts,
)
from collector.planning.models import DownloadRequest, PlannedDownload
from collector.planning.tree import (
    build_tree,
    group_by_directory,
    sorted_directories,
    tree_stats,
    unique_directories,
)


def _entry(directory: str, filename: str, **extra) -> PlannedDownload:
    return PlannedDownload(
        url=f"https://x.com/{directory}/{filename}/{len(extra)}",
        directory=directory,
        filename=filename,
        **extra,
    )


def _sample_plan() -> list[PlannedDownload]:
    return [
        _entry("Trip", "a.jpg"),
        _entry("Trip", "a.jpg"),
        _entry("Trip", "b.jpg"),
        _entry("Home", "a.jpg"),
        _entry("", "c.png"),
    ]


def test_detect_conflicts_flags_shared_paths() -> None:
    plan = detect_conflicts(_sample_plan())

    assert [entry.has_conflict for entry in plan] == [True, True, False, False, False]
    assert [entry.will_rename for entry in plan] == [False, False, True, True, True]
    assert has_any_conflicts(plan)
    assert has_overwrite_conflicts(plan)


def test_detect_conflicts_uses_auto_rename_default() -> None:
    plan = detect_conflicts(_sample_plan(), auto_rename_default=True)

    assert [entry.will_rename for entry in plan] == [True] * 5
    assert has_any_conflicts(plan)
    assert not has_overwrite_conflicts(plan)


def test_detect_conflicts_is_case_sensitive() -> None:
    plan = detect_conflicts([_entry("Trip", "a.jpg"), _entry("Trip", "A.jpg")])
    assert not has_any_conflicts(plan)


def test_detect_conflicts_preserves_existing_choice_and_is_idempotent() -> None:
    source = _sample_plan()
    source[0] = source[0].model_copy(update={"will_rename": True})

    once = detect_conflicts(source)
    twice = detect_conflicts(once)

    assert twice == once
    assert [entry.will_rename for entry in once[:2]] == [True, False]
    # Inputs are never mutated.
    assert source[1].has_conflict is False
    assert source[1].will_rename is None


def test_detect_conflicts_clears_resolved_entries() -> None:
    entry = _entry("Trip", "a.jpg", has_conflict=True, will_rename=False)
    (result,) = detect_conflicts([entry])
    assert result.has_conflict is False
    assert result.will_rename is True


def test_build_tree_groups_by_directory() -> None:
    tree = build_tree(detect_conflicts(_sample_plan()))

    assert sorted_directories(tree) == ["(root)", "Home", "Trip"]
    assert [item.plan_index for item in tree["Trip"]] == [0, 1, 2]
    assert [item.filename for item in tree["(root)"]] == ["c.png"]
    assert tree["Trip"][0].will_rename is False


def test_tree_stats_counts_conflicts_and_overwrites() -> None:
    stats = tree_stats(build_tree(detect_conflicts(_sample_plan())))

    assert (stats.total, stats.conflicts, stats.will_overwrite) == (5, 2, 2)


def test_tree_treats_undecided_entries_as_renaming() -> None:
    tree = build_tree(_sample_plan())
    assert all(item.will_rename for items in tree.values() for item in items)


def test_directory_helpers() -> None:
    plan = _sample_plan()

    assert unique_directories(plan) == ["Home", "Trip"]
    grouped = group_by_directory(plan)
    assert list(grouped) == ["Trip", "Home", ""]
    assert len(grouped["Trip"]) == 3


def test_download_request_reflects_resolution() -> None:
    plan = detect_conflicts(_sample_plan())

    requests = [DownloadRequest.from_planned(entry) for entry in plan]

    assert requests[0].path == "Trip/a.jpg"
    assert requests[0].conflict_action == "overwrite"
    assert requests[2].conflict_action == "uniquify"
    assert requests[4].path == "c.png"
