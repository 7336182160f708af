from dataclasses import dataclass
from typing import Sequence

from pr_narrator.diff.models import FileChange
from pr_narrator.github.models import CommitInfo


@dataclass(frozen=True)
class DigestInputs:
    """Plain-text views of the change set shared by both generative stages."""

    commit_messages: str
    files_changed: str
    diff_summary: str


def render_commit_messages(commits: Sequence[CommitInfo]) -> str:
    return "\n".join(f"- {c.message}" for c in commits)


def render_file_list(files: Sequence[FileChange]) -> str:
    return ", ".join(f.path for f in files if f.path)


def render_diff_summary(files: Sequence[FileChange]) -> str:
    lines = []
    for f in files:
        name = f.path or "unknown file"
        lines.append(f"{name}: {len(f.chunks)} change(s) detected.")
    return "\n".join(lines)


def build_inputs(commits: Sequence[CommitInfo], files: Sequence[FileChange]) -> DigestInputs:
    return DigestInputs(
        commit_messages=render_commit_messages(commits),
        files_changed=render_file_list(files),
        diff_summary=render_diff_summary(files),
    )
