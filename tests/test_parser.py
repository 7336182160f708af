import pytest

from pr_narrator.diff import parse_diff
from tests.conftest import FIVE_FILES_DIFF, SINGLE_ADDED_DIFF


def make_diff(n):
    sections = []
    for i in range(n):
        sections.append(
            f"diff --git a/f{i}.txt b/f{i}.txt\n"
            f"--- a/f{i}.txt\n"
            f"+++ b/f{i}.txt\n"
            "@@ -1 +1 @@\n"
            f"-old {i}\n"
            f"+new {i}\n"
        )
    return "".join(sections)


class TestParseDiff:
    def test_empty(self):
        assert parse_diff("") == []
        assert parse_diff("  \n\n") == []

    @pytest.mark.parametrize("n", [1, 4, 10])
    def test_one_entry_per_section_in_order(self, n):
        files = parse_diff(make_diff(n))
        assert [f.path for f in files] == [f"f{i}.txt" for i in range(n)]

    def test_added_file(self):
        [f] = parse_diff(SINGLE_ADDED_DIFF)
        assert f.from_path is None
        assert f.to_path == "src/log.py"
        assert f.change_kind == "added"
        lines = f.chunks[0].lines
        assert [(line.line_number, line.text) for line in lines] == [
            (1, "import logging"),
            (2, "logger = logging.getLogger(__name__)"),
        ]

    def test_change_kinds(self):
        files = parse_diff(FIVE_FILES_DIFF)
        assert [(f.path, f.change_kind) for f in files] == [
            ("README.md", "modified"),
            ("src/new_a.py", "added"),
            ("src/new_b.py", "added"),
            ("src/old.py", "deleted"),
            ("src/helpers.py", "renamed"),
        ]
        assert files[3].from_path == "src/old.py"
        assert files[4].from_path == "src/util.py"

    def test_line_numbers(self):
        readme = parse_diff(FIVE_FILES_DIFF)[0]
        lines = readme.chunks[0].lines
        assert [(line.kind, line.line_number) for line in lines] == [
            ("context", 1),
            ("delete", 2),
            ("add", 2),
            ("context", 3),
        ]
        assert readme.additions == 1
        assert readme.deletions == 1

    def test_removed_line_looking_like_header(self):
        diff = (
            "diff --git a/q.sql b/q.sql\n"
            "--- a/q.sql\n"
            "+++ b/q.sql\n"
            "@@ -1,2 +1,1 @@\n"
            "--- sql comment\n"
            " select 1;\n"
        )
        [f] = parse_diff(diff)
        assert f.path == "q.sql"
        assert [line.text for line in f.chunks[0].lines] == ["-- sql comment", "select 1;"]

    def test_skips_malformed_hunk_header(self):
        diff = (
            "diff --git a/bad.py b/bad.py\n"
            "--- a/bad.py\n"
            "+++ b/bad.py\n"
            "@@ this is not a hunk @@\n"
            "+x\n"
            "diff --git a/good.py b/good.py\n"
            "--- a/good.py\n"
            "+++ b/good.py\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
        )
        assert [f.path for f in parse_diff(diff)] == ["good.py"]

    def test_skips_binary_and_hunkless_sections(self):
        diff = (
            "diff --git a/img.png b/img.png\n"
            "Binary files a/img.png and b/img.png differ\n"
            "diff --git a/run.sh b/run.sh\n"
            "old mode 100644\n"
            "new mode 100755\n"
        ) + make_diff(1)
        assert [f.path for f in parse_diff(diff)] == ["f0.txt"]

    def test_plain_unified_diff(self):
        diff = (
            "--- a.txt\n"
            "+++ a.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
            "--- b.txt\n"
            "+++ b.txt\n"
            "@@ -1 +1 @@\n"
            "-c\n"
            "+d\n"
        )
        assert [f.path for f in parse_diff(diff)] == ["a.txt", "b.txt"]

    def test_strips_timestamps(self):
        diff = (
            "--- a/x.py\t2024-01-01 00:00:00\n"
            "+++ b/x.py\t2024-01-02 00:00:00\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
        )
        [f] = parse_diff(diff)
        assert f.from_path == "x.py"
        assert f.change_kind == "modified"

    def test_no_newline_marker(self):
        diff = (
            "--- a/x.txt\n"
            "+++ b/x.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "\\ No newline at end of file\n"
            "+b\n"
            "\\ No newline at end of file\n"
        )
        [f] = parse_diff(diff)
        numbers = [line.line_number for line in f.chunks[0].lines]
        assert numbers == [1, None, 1, None]

    def test_multiple_hunks(self):
        diff = (
            "--- a/x.txt\n"
            "+++ b/x.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
            "@@ -10,2 +10,3 @@ def main():\n"
            " keep\n"
            "+added\n"
            " keep\n"
        )
        [f] = parse_diff(diff)
        assert len(f.chunks) == 2
        assert f.chunks[1].header.endswith("def main():")
        assert [line.line_number for line in f.chunks[1].lines] == [10, 11, 12]
