import re
from collections.abc import Iterable, Sequence
from functools import lru_cache

from pr_narrator.diff.models import FileChange


def parse_patterns(raw: str | None) -> list[str]:
    """Split the comma-separated exclude option into glob patterns."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


_SEGMENT = r"(?!\.)[^/]+"


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    """Translate a shell glob into a regex.

    Unlike fnmatch, '*' and '?' stop at '/', and '**' spans directories.
    Wildcards never match a leading '.' in a path segment; dot-files only
    match when the pattern spells the dot out (".github/**", "**/.env").
    """
    parts = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        segment_start = i == 0 or pattern[i - 1] == "/"
        no_dot = r"(?!\.)" if segment_start else ""
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            if j - i > 1 and segment_start and (j == n or pattern[j] == "/"):
                if j == n:
                    parts.append(f"(?:{_SEGMENT}(?:/{_SEGMENT})*)?")
                else:
                    # "**/" also matches zero directories
                    parts.append(f"(?:{_SEGMENT}/)*")
                    j += 1
            else:
                parts.append(no_dot + "[^/]*")
            i = j
            continue
        elif c == "?":
            parts.append(no_dot + "[^/]")
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                parts.append(re.escape(c))
            else:
                body = pattern[i + 1:j]
                if body[:1] in ("!", "^"):
                    body = "^" + body[1:]
                parts.append("[" + body.replace("\\", "\\\\") + "]")
                i = j
        else:
            parts.append(re.escape(c))
        i += 1
    return re.compile("".join(parts) + r"\Z", re.DOTALL)


def glob_match(path: str, pattern: str) -> bool:
    return _compile(pattern).match(path) is not None


def is_excluded(file: FileChange, patterns: Iterable[str]) -> bool:
    path = file.path
    if path is None:
        return False
    return any(glob_match(path, p) for p in patterns)


def filter_files(files: Sequence[FileChange], patterns: Sequence[str]) -> list[FileChange]:
    """Drop files whose path matches any exclude pattern, keeping order."""
    active = [p.strip() for p in patterns if p and p.strip()]
    if not active:
        return list(files)
    return [f for f in files if not is_excluded(f, active)]
