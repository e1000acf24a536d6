import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table


@dataclass
class ProgressStep:
    """Track individual progress steps."""
    name: str
    status: str = "pending"  # pending, running, completed, failed
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> Optional[float]:
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        elif self.start_time:
            return time.time() - self.start_time
        return None

    def start(self):
        """Mark step as started."""
        self.status = "running"
        self.start_time = time.time()

    def complete(self, **details):
        """Mark step as completed."""
        self.status = "completed"
        self.end_time = time.time()
        self.details.update(details)

    def fail(self, error: str):
        """Mark step as failed."""
        self.status = "failed"
        self.end_time = time.time()
        self.details["error"] = error


class ProgressTracker:
    """Rich progress display that doubles as the indexer/tracer progress listener.

    Pass the instance itself as ``on_progress``; it accepts the partial-state
    dictionaries emitted during discovery and tracing and ignores keys it
    does not know.
    """

    def __init__(self, console: Optional[Console] = None, show_details: bool = True):
        self.console = console or Console(stderr=True)
        self.show_details = show_details
        self.steps: List[ProgressStep] = []
        self.current_step: Optional[ProgressStep] = None
        self.stats: Dict[str, Any] = {
            "files_scanned": 0,
            "total_files": 0,
            "steps_found": 0,
        }
        self.progress: Optional[Progress] = None
        self.task_id: Optional[TaskID] = None

    def start_step(self, name: str, **details) -> ProgressStep:
        """Start a new progress step, completing any running one."""
        if self.current_step and self.current_step.status == "running":
            self.complete_current_step()

        step = ProgressStep(name=name, details=details)
        self.steps.append(step)
        step.start()
        self.current_step = step

        if self.show_details:
            self._start_progress(name)
        return step

    def complete_current_step(self, **details):
        """Complete the current step."""
        if self.current_step:
            self.current_step.complete(**details)
        self._stop_progress()

    def fail_current_step(self, error: str):
        """Fail the current step."""
        if self.current_step:
            self.current_step.fail(error)
        self._stop_progress()

    def __call__(self, progress: Dict[str, Any]) -> None:
        """Progress listener entry point."""
        for key in ("files_scanned", "total_files", "steps_found"):
            if key in progress:
                self.stats[key] = progress[key]

        if self.progress is None or self.task_id is None:
            return

        current = progress.get("current_file")
        phase = progress.get("phase")
        if phase == "discovery":
            self.progress.update(
                self.task_id,
                total=progress.get("total_files"),
                completed=progress.get("files_scanned", 0),
                description=f"Scanning {self._shorten(current)}" if current else "Scanning",
            )
        elif phase == "trace":
            self.progress.update(
                self.task_id,
                description=f"Tracing {self._shorten(current)} ({progress.get('steps_found', 0)} steps)",
            )
        elif phase:
            self.progress.update(self.task_id, description=f"Indexing: {phase.replace('_', ' ')}")

    @staticmethod
    def _shorten(path: Optional[str], width: int = 50) -> str:
        if not path:
            return ""
        return path if len(path) <= width else "..." + path[-(width - 3):]

    def _start_progress(self, description: str):
        self._stop_progress()
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True
        )
        self.progress.start()
        self.task_id = self.progress.add_task(description, total=None)

    def _stop_progress(self):
        if self.progress:
            self.progress.stop()
            self.progress = None
            self.task_id = None

    def show_summary(self):
        """Show final progress summary."""
        self._stop_progress()

        summary_table = Table(title="Indexing & Tracing Summary")
        summary_table.add_column("Phase", style="cyan")
        summary_table.add_column("Status", style="green")
        summary_table.add_column("Duration", style="yellow")
        summary_table.add_column("Details", style="dim")

        for step in self.steps:
            duration_text = f"{step.duration:.2f}s" if step.duration else "-"
            details_text = " | ".join(
                f"{key.replace('_', ' ').title()}: {value}" for key, value in step.details.items()
            ) or "-"
            summary_table.add_row(step.name, step.status.title(), duration_text, details_text)

        self.console.print(summary_table)

    def get_timing_summary(self) -> Dict[str, float]:
        """Get timing summary for all completed steps."""
        timing = {}
        total_time = 0.0

        for step in self.steps:
            if step.duration:
                timing[step.name] = step.duration
                total_time += step.duration

        timing["total"] = total_time
        return timing
