from dataclasses import dataclass, field
from typing import Literal

ChangeKind = Literal["added", "deleted", "renamed", "modified"]
LineKind = Literal["add", "delete", "context"]


@dataclass(frozen=True)
class ChangeLine:
    """One line inside a hunk."""

    text: str
    kind: LineKind
    line_number: int | None = None


@dataclass
class ChangeChunk:
    header: str
    lines: list[ChangeLine] = field(default_factory=list)


@dataclass
class FileChange:
    """File touched by the diff. None stands for /dev/null."""

    from_path: str | None = None
    to_path: str | None = None
    chunks: list[ChangeChunk] = field(default_factory=list)

    @property
    def path(self) -> str | None:
        return self.to_path or self.from_path

    @property
    def change_kind(self) -> ChangeKind:
        if self.to_path is None and self.from_path is not None:
            return "deleted"
        if self.from_path is None and self.to_path is not None:
            return "added"
        if self.from_path and self.to_path and self.from_path != self.to_path:
            return "renamed"
        return "modified"

    @property
    def additions(self) -> int:
        return sum(1 for c in self.chunks for line in c.lines if line.kind == "add")

    @property
    def deletions(self) -> int:
        return sum(1 for c in self.chunks for line in c.lines if line.kind == "delete")
