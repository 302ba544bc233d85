"""Transactional execution of rename plans.

Every completed filesystem step is recorded in a journal.  If a later step
fails the journal is replayed backwards to restore the original layout and
the failure is re-raised as an ``ApplyError``.

Applying a plan that has already been applied is a no-op.  Callers must not
apply two plans to the same folder at the same time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import filesystem
from .errors import ApplyConflictError, ApplyIOError, PlexifyError
from .models import FileRename, RenamePlan

log = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Journal entries
# ------------------------------------------------------------------

@dataclass(frozen=True)
class MovedFolder:
    source: Path
    destination: Path


@dataclass(frozen=True)
class CreatedDirectory:
    path: Path


@dataclass(frozen=True)
class MovedFile:
    source: Path
    destination: Path


JournalEntry = MovedFolder | CreatedDirectory | MovedFile


@dataclass
class ApplyReport:
    """What apply() did (or, for a dry run, would do)."""
    target_folder: Path
    journal: list[JournalEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.journal)


class PlanApplier:
    """Applies RenamePlans to the filesystem with rollback on failure."""

    def apply(self, plan: RenamePlan, dry_run: bool = False) -> ApplyReport:
        """
        Apply *plan*.

        Args:
            plan: The plan to execute
            dry_run: Report the steps without touching the filesystem

        Returns:
            ApplyReport with the journal of performed steps and the
            renames that were skipped because their destination exists

        Raises:
            ApplyConflictError: If the target folder is a different,
                already existing folder (nothing is changed)
            ApplyIOError: If a step failed; completed steps are rolled back
        """
        source = plan.source_folder_path
        target = source.parent / plan.target_folder_name
        working, move_folder = self._working_folder(source, target)

        report = ApplyReport(target_folder=working, dry_run=dry_run)
        if dry_run:
            self._run(plan, source, working, move_folder, report, dry_run=True)
            return report

        try:
            self._run(plan, source, working, move_folder, report, dry_run=False)
        except (PlexifyError, OSError) as e:
            log.error("Applying plan for %s failed: %s", source.name, e)
            self.rollback(report.journal)
            raise ApplyIOError(f"Rename of '{source.name}' failed: {e}", cause=e) from e

        log.info(
            "Applied plan for %s: %d step(s), %d skipped",
            working.name, len(report.journal), len(report.skipped),
        )
        return report

    def _working_folder(self, source: Path, target: Path) -> tuple[Path, bool]:
        """Decide where the show / movie folder ends up. Returns (folder, needs_move)."""
        if source == target:
            return source, False

        if filesystem.exists(target):
            if not filesystem.exists(source):
                # Folder move already happened on an earlier run.
                return target, False
            if filesystem.same_file(source, target):
                return target, False
            raise ApplyConflictError(
                f"Cannot rename '{source.name}' to '{target.name}': "
                f"a different item with that name already exists in {target.parent}"
            )

        if not filesystem.exists(source):
            raise ApplyIOError(f"Source folder does not exist: {source}")
        return target, True

    def _run(
        self,
        plan: RenamePlan,
        source: Path,
        working: Path,
        move_folder: bool,
        report: ApplyReport,
        dry_run: bool,
    ) -> None:
        def on_disk(path: Path) -> Path:
            # During a dry run the folder has not moved; look inside the source.
            if dry_run and move_folder:
                return source / path.relative_to(working)
            return path

        if move_folder:
            if not dry_run:
                filesystem.move(source, working)
            report.journal.append(MovedFolder(source, working))

        for season_folder in plan.season_folders or ():
            path = working / season_folder.target_name
            if filesystem.exists(on_disk(path)):
                continue
            if not dry_run:
                filesystem.create_directory(path)
            report.journal.append(CreatedDirectory(path))

        for rename in plan.file_renames:
            relative = self._relative_source(plan, rename)
            src = working / relative
            dst = self._destination(plan, rename, working, relative)
            if src == dst:
                continue
            if filesystem.exists(on_disk(dst)):
                if not filesystem.exists(on_disk(src)):
                    # Renamed on an earlier run.
                    continue
                message = f"Skipped {src.name}: '{dst.name}' already exists"
                log.warning("%s", message)
                report.skipped.append(message)
                continue
            if not dry_run:
                filesystem.move(src, dst)
            report.journal.append(MovedFile(src, dst))

    @staticmethod
    def _relative_source(plan: RenamePlan, rename: FileRename) -> Path:
        try:
            return rename.source_path.relative_to(plan.source_folder_path)
        except ValueError:
            return Path(rename.source_path.name)

    @staticmethod
    def _destination(plan: RenamePlan, rename: FileRename, working: Path, relative: Path) -> Path:
        """Into the season folder if the rename has one; otherwise the file stays in its folder."""
        season_folder = plan.season_folder(rename.season_number)
        if season_folder:
            return working / season_folder.target_name / rename.target_name
        return working / relative.parent / rename.target_name

    def rollback(self, journal: list[JournalEntry]) -> None:
        """Undo journal entries newest first. Failures are logged, not raised."""
        for entry in reversed(journal):
            try:
                if isinstance(entry, CreatedDirectory):
                    if filesystem.exists(entry.path):
                        filesystem.remove_empty_directory(entry.path)
                elif filesystem.exists(entry.destination):
                    filesystem.move(entry.destination, entry.source)
            except (PlexifyError, OSError) as e:
                log.warning("Rollback step %s failed: %s", entry, e)
