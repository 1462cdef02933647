"""Per-author statistics aggregated from ``git log --shortstat``."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass

from ..core.enums import StatType
from ..core.errors import DataFormatError, ExternalProcessError
from ..core.logging_config import get_logger
from ..core.models import SeriesModel
from .base import BaseSource

logger = get_logger(__name__)

LOG_FORMAT = "--format=name:<%an>,email:<%ae>"
AUTHOR_RE = re.compile(r"^name:<(?P<name>.*)>,email:<(?P<email>.*)>$")
SHORTSTAT_RE = re.compile(
    r"(?P<count>\d+) (?P<kind>files? changed|insertions?\(\+\)|deletions?\(-\))"
)


@dataclass
class AuthorStats:
    name: str
    email: str
    commits: int = 0
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def delta(self) -> int:
        return self.insertions - self.deletions

    def get(self, stat: StatType) -> int:
        if stat is StatType.COMMITS:
            return self.commits
        if stat is StatType.FILES_CHANGED:
            return self.files_changed
        if stat is StatType.INSERTIONS:
            return self.insertions
        if stat is StatType.DELETIONS:
            return self.deletions
        if stat is StatType.DELTA:
            return self.delta
        raise ValueError(f"invalid stat type: {stat}")

    def read_shortstat(self, line: str) -> None:
        """Accumulate a ``N files changed, M insertions(+), K deletions(-)`` line."""
        for match in SHORTSTAT_RE.finditer(line):
            count = int(match.group("count"))
            kind = match.group("kind")
            if kind.startswith("file"):
                self.files_changed += count
            elif kind.startswith("insertion"):
                self.insertions += count
            else:
                self.deletions += count


def aggregate_log(lines: Iterable[str]) -> dict[str, AuthorStats]:
    """Fold ``git log`` output into per-author totals keyed by email.

    The first name seen for an email is kept as the display name.
    """
    results: dict[str, AuthorStats] = {}
    current: AuthorStats | None = None
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        author = AUTHOR_RE.match(line)
        if author:
            email = author.group("email")
            current = results.get(email)
            if current is None:
                current = AuthorStats(name=author.group("name"), email=email)
                results[email] = current
            current.commits += 1
        elif "changed" in line:
            if current is None:
                raise DataFormatError("shortstat line before any author line", line_number, line)
            current.read_shortstat(line)
    return results


def to_series(
    stats: dict[str, AuthorStats], stat: StatType, colors: Iterable[int] = ()
) -> SeriesModel:
    """One-series model of ``stat`` per author, largest first."""
    ordered = sorted(stats.values(), key=lambda s: (-s.get(stat), s.name))
    return SeriesModel.from_rows(
        [s.name for s in ordered],
        [[s.get(stat)] for s in ordered],
        colors=colors,
    )


class GitLogSource(BaseSource):
    """Runs ``git log`` in a repository and charts one stat per author."""

    def __init__(
        self,
        repo_path: str,
        stat: StatType,
        git_binary: str = "git",
        colors: Iterable[int] = (),
    ):
        self.repo_path = repo_path
        self.stat = stat
        self.git_binary = git_binary
        self.colors = tuple(colors)

    def command(self) -> list[str]:
        return [self.git_binary, "-C", self.repo_path, "log", "--no-merges", "--shortstat", LOG_FORMAT]

    def collect(self) -> dict[str, AuthorStats]:
        cmd = self.command()
        logger.info("Running git log", extra={"command": " ".join(cmd)})
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ExternalProcessError(f"could not run {self.git_binary}: {e}", cmd) from e

        with proc:
            stats = aggregate_log(proc.stdout)
            stderr = proc.stderr.read()
            returncode = proc.wait()

        if returncode != 0:
            raise ExternalProcessError(
                f"git log failed with exit code {returncode}: {stderr.strip()}", cmd, returncode
            )
        logger.debug("Aggregated git history", extra={"authors": len(stats)})
        return stats

    def load(self) -> SeriesModel:
        return to_series(self.collect(), self.stat, self.colors)
