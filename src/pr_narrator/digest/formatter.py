from dataclasses import dataclass, field
from typing import Sequence

from pr_narrator.diff.models import FileChange

# Up to this many files the narrative speaks for itself
ANNOTATION_THRESHOLD = 3

FILES_HEADING = "#### Files Changed"


@dataclass
class Report:
    narrative: str
    file_annotations: list[str] = field(default_factory=list)

    def to_markdown(self) -> str:
        if not self.file_annotations:
            return self.narrative + "\n"
        annotations = "\n".join(self.file_annotations)
        return f"{self.narrative}\n\n{FILES_HEADING}\n{annotations}\n"


def format_narrative(text: str) -> str:
    lines = [line.strip() for line in text.splitlines()]
    return "\n\n".join(line for line in lines if line)


def annotate(file: FileChange) -> str:
    kind = file.change_kind
    if kind == "deleted":
        return f"- `{file.from_path}` 🗑️ (deleted)"
    if kind == "added":
        return f"- `{file.to_path}` ✨ (new)"
    if kind == "renamed":
        return f"- `{file.from_path}` ➜ `{file.to_path}` 📝 (renamed)"
    return f"- `{file.path or 'unknown file'}` 📝 (modified)"


def format_report(narrative: str | None, files: Sequence[FileChange]) -> Report | None:
    """Build the comment from the narrative and the full, unfiltered file list."""
    if narrative is None:
        return None
    body = format_narrative(narrative)
    if not body:
        return None

    annotations = []
    if len(files) > ANNOTATION_THRESHOLD:
        annotations = [annotate(f) for f in files]
    return Report(narrative=body, file_annotations=annotations)
