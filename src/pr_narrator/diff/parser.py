import logging
import re

from pr_narrator.diff.models import ChangeChunk, ChangeLine, FileChange

logger = logging.getLogger(__name__)

NULL_DEVICE = "/dev/null"

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")


def parse_diff(text: str) -> list[FileChange]:
    """Parse unified diff text into FileChange records, in source order.

    Never raises: file sections without a parseable hunk are dropped.
    """
    if not text or not text.strip():
        return []
    return _DiffParser().parse(text)


def _clean_path(raw: str, prefix: str) -> str | None:
    # "--- a/foo.py\t2024-01-01 00:00:00" -> "foo.py"
    path = raw.split("\t", 1)[0].strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if path == NULL_DEVICE:
        return None
    if path.startswith(prefix):
        path = path[len(prefix):]
    return path or None


def _split_git_header(rest: str) -> tuple[str | None, str | None]:
    """Split the 'a/x b/y' tail of a 'diff --git' line."""
    rest = rest.strip()
    half = len(rest) // 2
    # Same path on both sides is the common case and survives spaces in names
    if len(rest) % 2 == 1 and rest[half] == " " and rest[:half][2:] == rest[half + 1:][2:]:
        return _clean_path(rest[:half], "a/"), _clean_path(rest[half + 1:], "b/")

    idx = rest.rfind(" b/")
    if idx == -1:
        idx = rest.rfind(' "b/')
    if idx == -1:
        return None, None
    return _clean_path(rest[:idx], "a/"), _clean_path(rest[idx + 1:], "b/")


class _DiffParser:
    def __init__(self):
        self.files: list[FileChange] = []
        self.current: FileChange | None = None
        self.seen_from_header = False
        self.chunk: ChangeChunk | None = None
        self.old_line = 0
        self.new_line = 0
        self.old_remaining = 0
        self.new_remaining = 0

    def parse(self, text: str) -> list[FileChange]:
        for raw_line in text.splitlines():
            line = raw_line.rstrip("\r")

            if self._in_hunk():
                if self._consume_hunk_line(line):
                    continue
                logger.debug("Hunk ended early in %s", self._current_name())
                self._end_hunk()

            self._dispatch(line)

        self._finish_file()
        return self.files

    def _dispatch(self, line: str):
        if line.startswith("diff --git "):
            self._start_file()
            self.current.from_path, self.current.to_path = _split_git_header(line[len("diff --git "):])
        elif line.startswith("--- "):
            if self.current is None or self.current.chunks or self.seen_from_header:
                self._start_file()
            self.current.from_path = _clean_path(line[4:], "a/")
            self.seen_from_header = True
        elif line.startswith("+++ "):
            if self.current is not None and not self.current.chunks:
                self.current.to_path = _clean_path(line[4:], "b/")
        elif line.startswith("@@"):
            self._start_hunk(line)
        elif line.startswith("\\") and self.chunk is not None:
            self.chunk.lines.append(ChangeLine(text=line, kind="context"))
        elif self.current is not None and not self.current.chunks:
            self._extended_header(line)

    def _extended_header(self, line: str):
        if line.startswith("rename from "):
            self.current.from_path = line[len("rename from "):].strip() or None
        elif line.startswith("rename to "):
            self.current.to_path = line[len("rename to "):].strip() or None
        elif line.startswith("new file mode"):
            self.current.from_path = None
        elif line.startswith("deleted file mode"):
            self.current.to_path = None

    def _start_file(self):
        self._finish_file()
        self.current = FileChange()
        self.seen_from_header = False

    def _finish_file(self):
        self._end_hunk()
        if self.current is None:
            return
        if self.current.chunks:
            self.files.append(self.current)
        else:
            logger.debug("Skipping %s: no parseable hunk", self._current_name())
        self.current = None

    def _start_hunk(self, line: str):
        self._end_hunk()
        if self.current is None:
            logger.debug("Skipping hunk outside of a file section: %s", line)
            return

        match = HUNK_HEADER_RE.match(line)
        if not match:
            logger.debug("Skipping malformed hunk header in %s: %s", self._current_name(), line)
            return

        old_start, old_len, new_start, new_len, _ = match.groups()
        self.old_line = int(old_start)
        self.new_line = int(new_start)
        self.old_remaining = int(old_len) if old_len is not None else 1
        self.new_remaining = int(new_len) if new_len is not None else 1
        self.chunk = ChangeChunk(header=line)
        self.current.chunks.append(self.chunk)

    def _end_hunk(self):
        self.chunk = None
        self.old_remaining = 0
        self.new_remaining = 0

    def _in_hunk(self) -> bool:
        return self.chunk is not None and (self.old_remaining > 0 or self.new_remaining > 0)

    def _consume_hunk_line(self, line: str) -> bool:
        marker = line[:1]

        if marker == "\\":
            self.chunk.lines.append(ChangeLine(text=line, kind="context"))
            return True

        if marker == "+" and self.new_remaining > 0:
            self.chunk.lines.append(ChangeLine(text=line[1:], kind="add", line_number=self.new_line))
            self.new_line += 1
            self.new_remaining -= 1
            return True

        if marker == "-" and self.old_remaining > 0:
            self.chunk.lines.append(ChangeLine(text=line[1:], kind="delete", line_number=self.old_line))
            self.old_line += 1
            self.old_remaining -= 1
            return True

        # Some tools strip the leading space from empty context lines
        if marker in (" ", "") and self.old_remaining > 0 and self.new_remaining > 0:
            self.chunk.lines.append(ChangeLine(text=line[1:], kind="context", line_number=self.new_line))
            self.old_line += 1
            self.new_line += 1
            self.old_remaining -= 1
            self.new_remaining -= 1
            return True

        return False

    def _current_name(self) -> str:
        if self.current is None or self.current.path is None:
            return "unknown file"
        return self.current.path
