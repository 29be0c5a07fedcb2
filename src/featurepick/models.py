"""Data models for featurepick.

The selection stage produces a CommitSequence of CommitRecords; the pick stage
consumes it and fills a PickSession with one PickResult per processed commit.

Example usage:
    queries = parse_branch_queries("feat-a, feat-b")
    sequence = CommitSequence.sorted_unique(records)
    for commit in sequence:
        print(commit.to_line())
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from .utils.git_utils import short_sha


def parse_branch_queries(text: str) -> List[str]:
    """Split comma separated user input into branch queries.

    Tokens are trimmed, empty tokens dropped and duplicates collapsed to their
    first occurrence. Order follows the input.

    Args:
        text: Raw user input, e.g. "feat-a, feat-b,,feat-a".

    Returns:
        List of unique, non-empty queries, e.g. ["feat-a", "feat-b"].
    """
    queries = []
    for token in text.split(","):
        token = token.strip()
        if token and token not in queries:
            queries.append(token)
    return queries


@dataclass(frozen=True)
class CommitRecord:
    """A commit matched by at least one branch query.

    Attributes:
        hexsha: Full commit hash.
        timestamp: Committer date, timezone aware.
        summary: First line of the commit message.
    """

    hexsha: str
    timestamp: datetime
    summary: str = ""

    @property
    def short_sha(self) -> str:
        return short_sha(self.hexsha)

    def to_line(self) -> str:
        """Serialize as `<hexsha> <iso-timestamp> <summary>`."""
        return f"{self.hexsha} {self.timestamp.isoformat()} {self.summary}".rstrip()

    @classmethod
    def from_line(cls, line: str) -> "CommitRecord":
        """Parse a line produced by to_line() or by `git log --format=%H %cI %s`.

        Raises:
            ValueError: If the line has no hash/timestamp pair or the timestamp
                is not ISO 8601.
        """
        parts = line.strip().split(" ", 2)
        if len(parts) < 2 or not parts[0]:
            raise ValueError(f"expected '<hash> <timestamp> <summary>', got '{line}'")

        summary = parts[2] if len(parts) == 3 else ""
        return cls(
            hexsha=parts[0],
            timestamp=datetime.fromisoformat(parts[1]),
            summary=summary,
        )

    def to_dict(self) -> dict:
        return {
            "hexsha": self.hexsha,
            "short_sha": self.short_sha,
            "timestamp": self.timestamp.isoformat(),
            "summary": self.summary,
        }


@dataclass(frozen=True)
class CommitSequence:
    """Ordered, immutable list of commits to pick.

    Use sorted_unique() to build one from raw search results. Direct
    construction keeps the given order, which is how an edited commit list
    file is honoured.
    """

    records: Tuple[CommitRecord, ...] = ()

    def __post_init__(self):
        # Accept any iterable but store a tuple
        object.__setattr__(self, "records", tuple(self.records))
        seen = set()
        for record in self.records:
            if record.hexsha in seen:
                raise ValueError(f"Duplicate commit in sequence: {record.hexsha}")
            seen.add(record.hexsha)

    @classmethod
    def sorted_unique(cls, records: Iterable[CommitRecord]) -> "CommitSequence":
        """De-duplicate by hash and sort ascending by timestamp.

        The first occurrence of a hash wins. sorted() is stable, so commits with
        equal timestamps keep their discovery order.
        """
        unique = {}
        for record in records:
            if record.hexsha not in unique:
                unique[record.hexsha] = record

        ordered = sorted(unique.values(), key=lambda r: r.timestamp)
        return cls(tuple(ordered))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> CommitRecord:
        return self.records[index]

    def __bool__(self) -> bool:
        return bool(self.records)

    def hexshas(self) -> List[str]:
        return [r.hexsha for r in self.records]

    def skip(self, count: int) -> "CommitSequence":
        """Drop the first `count` commits."""
        if count < 0:
            raise ValueError("count must not be negative")
        return CommitSequence(self.records[count:])

    def starting_at(self, sha: str) -> "CommitSequence":
        """Drop every commit before the one whose hash starts with `sha`.

        Raises:
            KeyError: If no commit matches.
        """
        for index, record in enumerate(self.records):
            if record.hexsha.startswith(sha):
                return CommitSequence(self.records[index:])
        raise KeyError(sha)

    def to_dict(self) -> dict:
        return {
            "count": len(self.records),
            "commits": [r.to_dict() for r in self.records],
        }


class PickOutcome(str, Enum):
    APPLIED = "applied"
    RESOLVED = "conflicted-then-resolved"
    ABORTED = "aborted"
    # Pick failed for a reason other than a conflict (empty diff, already applied)
    SKIPPED = "skipped"


class SessionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class PickResult:
    commit: CommitRecord
    outcome: PickOutcome
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "commit": self.commit.to_dict(),
            "outcome": self.outcome.value,
            "message": self.message,
        }


@dataclass
class PickSession:
    """State of one run of the pick driver.

    Attributes:
        sequence: The commits being picked.
        index: Index of the commit currently being processed.
        results: One result per processed commit, in sequence order.
        status: Running until the last commit is done or the operator aborts.
    """

    sequence: CommitSequence
    index: int = 0
    results: List[PickResult] = field(default_factory=list)
    status: SessionStatus = SessionStatus.RUNNING

    @property
    def current_commit(self) -> Optional[CommitRecord]:
        if self.index < len(self.sequence):
            return self.sequence[self.index]
        return None

    @property
    def cancelled(self) -> bool:
        return self.status == SessionStatus.CANCELLED

    @property
    def all_applied(self) -> bool:
        """True when every commit was applied, with or without a conflict."""
        if self.status != SessionStatus.COMPLETED:
            return False
        if len(self.results) != len(self.sequence):
            return False
        return all(
            r.outcome in (PickOutcome.APPLIED, PickOutcome.RESOLVED)
            for r in self.results
        )

    def outcomes(self) -> List[PickOutcome]:
        return [r.outcome for r in self.results]

    def counts(self) -> dict:
        counts = {outcome.value: 0 for outcome in PickOutcome}
        for result in self.results:
            counts[result.outcome.value] += 1
        counts["not attempted"] = len(self.sequence) - len(self.results)
        return counts

    def record(self, outcome: PickOutcome, message: str = "") -> PickResult:
        result = PickResult(commit=self.sequence[self.index], outcome=outcome, message=message)
        self.results.append(result)
        return result

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "total": len(self.sequence),
            "counts": self.counts(),
            "results": [r.to_dict() for r in self.results],
        }
