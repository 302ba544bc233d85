"""Tests for applier module."""

import os
from pathlib import Path

import pytest

from plexify import filesystem
from plexify.applier import CreatedDirectory, MovedFile, MovedFolder, PlanApplier
from plexify.errors import ApplyConflictError, ApplyError, ApplyIOError, PermissionDeniedError
from plexify.models import FileRename, RenamePlan, SeasonFolder


def touch(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def snapshot(root: Path) -> set[str]:
    return {str(p.relative_to(root)) for p in root.rglob("*")}


def movie_plan(source: Path) -> RenamePlan:
    name = "The Matrix (1999) {imdb-tt0133093}"
    return RenamePlan(
        source_folder_path=source,
        target_folder_name=name,
        file_renames=[FileRename(source / "matrix.mkv", f"{name}.mkv")],
    )


def show_plan(source: Path) -> RenamePlan:
    return RenamePlan(
        source_folder_path=source,
        target_folder_name="Show (2001)",
        file_renames=[
            FileRename(source / "s01e01.mkv", "Show (2001) - s01e01.mkv", season_number=1),
            FileRename(source / "Disc 2" / "s02e01.mkv", "Show (2001) - s02e01.mkv", season_number=2),
        ],
        season_folders=[SeasonFolder(1, "Season 01"), SeasonFolder(2, "Season 02")],
    )


class TestApply:
    """Tests for successful applies."""

    def test_movie(self, tmp_path: Path):
        source = tmp_path / "matrix"
        touch(source / "matrix.mkv")

        report = PlanApplier().apply(movie_plan(source))

        target = tmp_path / "The Matrix (1999) {imdb-tt0133093}"
        assert not source.exists()
        assert (target / "The Matrix (1999) {imdb-tt0133093}.mkv").exists()
        assert report.target_folder == target
        assert report.journal == [
            MovedFolder(source, target),
            MovedFile(target / "matrix.mkv", target / "The Matrix (1999) {imdb-tt0133093}.mkv"),
        ]

    def test_tv_show_with_nested_source(self, tmp_path: Path):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")

        PlanApplier().apply(show_plan(source))

        target = tmp_path / "Show (2001)"
        assert (target / "Season 01" / "Show (2001) - s01e01.mkv").exists()
        assert (target / "Season 02" / "Show (2001) - s02e01.mkv").exists()

    def test_already_named_folder(self, tmp_path: Path):
        source = tmp_path / "The Matrix (1999) {imdb-tt0133093}"
        touch(source / "matrix.mkv")

        report = PlanApplier().apply(movie_plan(source))

        assert report.target_folder == source
        assert not any(isinstance(entry, MovedFolder) for entry in report.journal)

    def test_existing_season_folder_is_reused(self, tmp_path: Path):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")
        (source / "Season 01").mkdir()

        report = PlanApplier().apply(show_plan(source))

        created = [e for e in report.journal if isinstance(e, CreatedDirectory)]
        assert created == [CreatedDirectory(tmp_path / "Show (2001)" / "Season 02")]

    def test_existing_destination_is_skipped(self, tmp_path: Path):
        source = tmp_path / "The Matrix (1999) {imdb-tt0133093}"
        touch(source / "matrix.mkv", "new")
        touch(source / "The Matrix (1999) {imdb-tt0133093}.mkv", "old")

        report = PlanApplier().apply(movie_plan(source))

        assert len(report.skipped) == 1
        assert (source / "matrix.mkv").read_text() == "new"
        assert (source / "The Matrix (1999) {imdb-tt0133093}.mkv").read_text() == "old"

    def test_reapply_is_noop(self, tmp_path: Path):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")
        plan = show_plan(source)

        PlanApplier().apply(plan)
        before = snapshot(tmp_path)
        second = PlanApplier().apply(plan)

        assert second.journal == []
        assert second.skipped == []
        assert snapshot(tmp_path) == before

    def test_fallback_file_stays_in_its_folder(self, tmp_path: Path):
        source = tmp_path / "show"
        touch(source / "Season 1" / "pilot.mkv")
        plan = RenamePlan(
            source_folder_path=source,
            target_folder_name="Show (2001)",
            file_renames=[FileRename(source / "Season 1" / "pilot.mkv", "Show (2001) - pilot.mkv")],
        )

        PlanApplier().apply(plan)

        target = tmp_path / "Show (2001)"
        assert (target / "Season 1" / "Show (2001) - pilot.mkv").exists()
        assert not (target / "Show (2001) - pilot.mkv").exists()

    def test_dry_run_touches_nothing(self, tmp_path: Path):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")
        before = snapshot(tmp_path)

        report = PlanApplier().apply(show_plan(source), dry_run=True)

        assert snapshot(tmp_path) == before
        assert report.dry_run
        assert len(report.journal) == 5


class TestApplyFailures:
    """Tests for conflicts and rollback."""

    def test_conflicting_target_folder(self, tmp_path: Path):
        source = tmp_path / "matrix"
        touch(source / "matrix.mkv")
        touch(tmp_path / "The Matrix (1999) {imdb-tt0133093}" / "other.mkv")
        before = snapshot(tmp_path)

        with pytest.raises(ApplyConflictError):
            PlanApplier().apply(movie_plan(source))

        assert snapshot(tmp_path) == before

    def test_conflict_is_an_apply_error(self):
        assert issubclass(ApplyConflictError, ApplyError)

    def test_symlinked_target_is_the_same_folder(self, tmp_path: Path):
        source = tmp_path / "matrix"
        touch(source / "matrix.mkv")
        os.symlink(source, tmp_path / "The Matrix (1999) {imdb-tt0133093}")

        report = PlanApplier().apply(movie_plan(source))

        assert not any(isinstance(entry, MovedFolder) for entry in report.journal)
        assert (source / "The Matrix (1999) {imdb-tt0133093}.mkv").exists()

    def test_missing_source_folder(self, tmp_path: Path):
        with pytest.raises(ApplyIOError):
            PlanApplier().apply(movie_plan(tmp_path / "gone"))

    def test_failure_rolls_back(self, tmp_path: Path, monkeypatch):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")
        before = snapshot(tmp_path)

        real_move = filesystem.move

        def flaky_move(src: Path, dst: Path) -> None:
            if src.name == "s02e01.mkv":
                raise PermissionDeniedError(src, "Permission denied")
            real_move(src, dst)

        monkeypatch.setattr(filesystem, "move", flaky_move)

        with pytest.raises(ApplyIOError) as excinfo:
            PlanApplier().apply(show_plan(source))

        assert isinstance(excinfo.value.cause, PermissionDeniedError)
        assert snapshot(tmp_path) == before

    def test_rollback_continues_past_a_failed_step(self, tmp_path: Path, monkeypatch, caplog):
        source = tmp_path / "show"
        touch(source / "s01e01.mkv")
        touch(source / "Disc 2" / "s02e01.mkv")

        real_move = filesystem.move

        def flaky_move(src: Path, dst: Path) -> None:
            if src.name in ("s02e01.mkv", "Show (2001) - s01e01.mkv"):
                raise PermissionDeniedError(src, "Permission denied")
            real_move(src, dst)

        monkeypatch.setattr(filesystem, "move", flaky_move)

        with pytest.raises(ApplyIOError) as excinfo:
            PlanApplier().apply(show_plan(source))

        assert isinstance(excinfo.value.cause, PermissionDeniedError)
        assert source.exists()
        assert not (tmp_path / "Show (2001)").exists()
        assert not (source / "Season 02").exists()
        assert (source / "Season 01" / "Show (2001) - s01e01.mkv").exists()
        assert (source / "Disc 2" / "s02e01.mkv").exists()
        assert "Rollback step" in caplog.text
