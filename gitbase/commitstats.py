"""Line-based statistics of the changes made by commits."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Optional, Union


class LineKind(IntEnum):
    """The kind of a line in a file."""

    CODE = 1
    COMMENT = 2
    BLANK = 3
    OTHER = 4


@dataclass
class KindStats:
    """Added and deleted lines of one kind."""

    additions: int = 0
    deletions: int = 0

    def add(self, other: "KindStats") -> None:
        """Accumulate the given stats into these."""
        self.additions += other.additions
        self.deletions += other.deletions


@dataclass
class LineInfo:
    """How many times a line occurs and what kind of line it is."""

    kind: LineKind
    count: int = 0


class FileStats(dict):
    """Line text to its LineInfo; negative counts mean removed lines."""

    def add(self, line: str, kind: LineKind) -> None:
        """Count one more occurrence of the line, recording its kind."""
        info = self.get(line)
        if info is None:
            info = self[line] = LineInfo(kind)
        info.count += 1
        info.kind = kind

    def sub(self, other: "FileStats") -> None:
        """Subtract the occurrences of the other file's lines from these."""
        for line, info in other.items():
            mine = self.get(line)
            if mine is not None:
                mine.count -= info.count
            else:
                self[line] = LineInfo(info.kind, -info.count)

    def __str__(self) -> str:
        out = []
        for line, info in self.items():
            sign = "+" if info.count > 0 else "-" if info.count < 0 else " "
            out.append(f"{sign} [{info.count:3d}x] {line}\n")
        return "".join(out)


@dataclass
class CommitFileStats:
    """The stats for one file of a commit."""

    path: str
    language: str = ""
    code: KindStats = field(default_factory=KindStats)
    comment: KindStats = field(default_factory=KindStats)
    blank: KindStats = field(default_factory=KindStats)
    other: KindStats = field(default_factory=KindStats)
    total: KindStats = field(default_factory=KindStats)


@dataclass
class CommitStats:
    """The stats for a whole commit."""

    files: int = 0
    code: KindStats = field(default_factory=KindStats)
    comment: KindStats = field(default_factory=KindStats)
    blank: KindStats = field(default_factory=KindStats)
    other: KindStats = field(default_factory=KindStats)
    total: KindStats = field(default_factory=KindStats)

    def __str__(self) -> str:
        return (
            f"Code (+{self.code.additions}/-{self.code.deletions})\n"
            f"Comment (+{self.comment.additions}/-{self.comment.deletions})\n"
            f"Blank (+{self.blank.additions}/-{self.blank.deletions})\n"
            f"Other (+{self.other.additions}/-{self.other.deletions})\n"
            f"Total (+{self.total.additions}/-{self.total.deletions})\n"
            f"Files ({self.files})\n"
        )


def fill_kind_stats(stats: KindStats, info: LineInfo) -> None:
    """Count the line as added or deleted depending on the sign of its count."""
    if info.count > 0:
        stats.additions += info.count
    elif info.count < 0:
        stats.deletions += -info.count


def file_stats_from_text(text: Union[str, bytes]) -> FileStats:
    """Stats of plain text where every line is of kind OTHER."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    stats = FileStats()
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        stats.add(line, LineKind.OTHER)
    return stats


def diff_file_stats(
    src: Optional[FileStats], dst: Optional[FileStats]
) -> FileStats:
    """Stats of a modified file: lines of dst minus lines of src."""
    result = FileStats()
    for line, info in (dst or {}).items():
        result[line] = LineInfo(info.kind, info.count)
    result.sub(src or FileStats())
    return result


def commit_file_stats_from_file_stats(
    fi: Optional[FileStats], path: str, lang: str
) -> CommitFileStats:
    """Summarise file stats per line kind; None means a binary file."""
    stats = CommitFileStats(path=path)
    if fi is None:
        return stats
    stats.language = lang
    by_kind = {
        LineKind.CODE: stats.code,
        LineKind.COMMENT: stats.comment,
        LineKind.BLANK: stats.blank,
        LineKind.OTHER: stats.other,
    }
    for info in fi.values():
        fill_kind_stats(stats.total, info)
        target = by_kind.get(info.kind)
        if target is not None:
            fill_kind_stats(target, info)
    return stats


def commit_stats_from_file_stats(
    file_stats: Iterable[CommitFileStats],
) -> CommitStats:
    """Add up the stats of all files of a commit."""
    stats = CommitStats()
    for f in file_stats:
        stats.blank.add(f.blank)
        stats.comment.add(f.comment)
        stats.code.add(f.code)
        stats.other.add(f.other)
        stats.total.add(f.total)
        stats.files += 1
    return stats