"""Per-run diagnostics passed explicitly through the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A file left out of the document, with the reason shown to the user."""

    path: str
    reason: str


@dataclass(slots=True)
class Report:
    """Mutable run report.

    Every component that can warn or skip takes the report as an argument
    instead of touching shared state, so two runs never see each other's
    diagnostics.

    Attributes:
        files: Final file list produced by the selection engine.
        warnings: Non-fatal warnings in the order they occurred.
        skipped: Files excluded during content aggregation.
        processed: Number of files written to the document.
        total_size: Bytes of text content written to the document.
    """

    files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    processed: int = 0
    total_size: int = 0

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def skip(self, path: str, reason: str) -> None:
        self.skipped.append(SkippedFile(path=path, reason=reason))

    def summary_lines(self) -> list[str]:
        """Return the human-readable end-of-run summary."""
        lines = [
            f"Processed {self.processed} of {len(self.files)} files",
            f"Total output size: {self.total_size / 1024 / 1024:.2f}MB",
        ]
        if self.skipped:
            lines.append("")
            lines.append(f"Skipped {len(self.skipped)} files:")
            lines.extend(f"  - {s.path} ({s.reason})" for s in self.skipped)
        return lines
