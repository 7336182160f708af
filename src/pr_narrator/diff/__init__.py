from pr_narrator.diff.filters import filter_files, glob_match, parse_patterns
from pr_narrator.diff.models import ChangeChunk, ChangeLine, FileChange
from pr_narrator.diff.parser import parse_diff

__all__ = [
    "ChangeChunk",
    "ChangeLine",
    "FileChange",
    "filter_files",
    "glob_match",
    "parse_diff",
    "parse_patterns",
]
