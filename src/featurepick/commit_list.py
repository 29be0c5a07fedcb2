from pathlib import Path
from typing import Union

from .errors import CommitListError, CommitListErrorType
from .models import CommitRecord, CommitSequence


class CommitListStore:
    """The ordered commit list shared by the select and pick stages.

    One commit per line, `<hexsha> <iso-timestamp> <summary>`. The file is
    read back in file order, so it can be edited or trimmed by hand between
    the two stages.
    """

    DEFAULT_FILE = "commit_list.txt"

    def __init__(self, dir: Union[str, Path], filename: str = DEFAULT_FILE):
        self.path = Path(dir) / filename

    def exists(self) -> bool:
        return self.path.exists()

    def remove(self):
        if self.exists():
            self.path.unlink()

    def save(self, sequence: CommitSequence):
        with open(self.path, "w", encoding="utf-8") as f:
            for record in sequence:
                f.write(record.to_line() + "\n")

    def load(self) -> CommitSequence:
        if not self.exists():
            raise CommitListError(CommitListErrorType.MISSING, str(self.path))

        records = []
        seen = set()
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    record = CommitRecord.from_line(line)
                except ValueError as e:
                    raise CommitListError(
                        CommitListErrorType.MALFORMED, f"{self.path}:{lineno}: {e}"
                    ) from e
                if record.hexsha in seen:
                    raise CommitListError(
                        CommitListErrorType.MALFORMED,
                        f"{self.path}:{lineno}: duplicate commit {record.hexsha}",
                    )
                seen.add(record.hexsha)
                records.append(record)

        return CommitSequence(tuple(records))
