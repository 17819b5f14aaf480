"""Stage lines for ``docgraph validate --progress``."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import click

VALIDATE_STAGES: tuple[tuple[str, str], ...] = (
    ("parse", "Parsing front-matter"),
    ("register", "Registering documents"),
    ("resolve", "Resolving references"),
    ("check", "Checking graph invariants"),
)


@dataclass
class StageRecord:
    """One validation stage and what it found."""

    stage: str
    description: str
    started: float | None = None
    finished: float | None = None
    findings: int | None = None
    note: str = ""

    @property
    def elapsed(self) -> float:
        if self.started is None:
            return 0.0
        return (self.finished or time.monotonic()) - self.started


def _stderr(line: str) -> None:
    click.echo(line, err=True)


class StageProgress:
    """
    Report the validation stages as the pipeline runs them.

    Each stage prints a start line, an optional note, and a closing line
    with the number of findings the stage produced. Stages are numbered in
    pipeline order so a run that aborts shows where it stopped.

    Usage:
        progress = StageProgress()
        ValidationPipeline(config, progress=progress).validate_directory(root)
        progress.records["resolve"].findings
    """

    CLEAN = "✓"
    FLAGGED = "✗"

    def __init__(
        self,
        stages: tuple[tuple[str, str], ...] = VALIDATE_STAGES,
        output: Callable[[str], None] | None = None,
    ):
        self.records = {stage: StageRecord(stage, text) for stage, text in stages}
        self.order = [stage for stage, _ in stages]
        self.output = output or _stderr
        self._current: str | None = None

    def _label(self, stage: str) -> str:
        return f"[{self.order.index(stage) + 1}/{len(self.order)}]"

    def on_stage_start(self, stage: str) -> None:
        record = self.records[stage]
        record.started = time.monotonic()
        record.finished = None
        record.findings = None
        record.note = ""
        self._current = stage
        self.output(f"{self._label(stage)} {record.description} ...")

    def on_stage_note(self, note: str) -> None:
        if self._current is None:
            return
        self.records[self._current].note = note
        self.output(f"    → {note}")

    def on_stage_complete(self, stage: str, findings: int) -> None:
        record = self.records[stage]
        record.finished = time.monotonic()
        record.findings = findings
        self._current = None

        mark = self.CLEAN if findings == 0 else self.FLAGGED
        self.output(
            f"{self._label(stage)} {mark} {record.description}: "
            f"{findings} finding(s) ({record.elapsed:.1f}s)"
        )


__all__ = ["StageProgress", "StageRecord", "VALIDATE_STAGES"]
