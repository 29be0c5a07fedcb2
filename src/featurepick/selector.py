import logging
from typing import Iterable, List

from .errors import SearchError
from .models import CommitRecord, CommitSequence
from .repo_ops import CommitHistory

log = logging.getLogger(__name__)


def select_commits(queries: Iterable[str], history: CommitHistory) -> CommitSequence:
    """Collect the commits matching any query into one ordered sequence.

    Each query is searched independently. A query whose search fails or
    matches nothing contributes no commits; the others still run. Results are
    de-duplicated by hash and sorted by commit time, oldest first, with ties
    kept in discovery order.

    Args:
        queries: Branch names (or any text) to look for in commit messages.
        history: Backend used to search commit messages.

    Returns:
        The ordered CommitSequence; empty when there are no queries.

    Raises:
        GitUnavailableError: If git cannot be invoked at all.
    """
    found: List[CommitRecord] = []

    for query in queries:
        log.info(f"Checking commits for branch: {query}")
        try:
            records = history.search(query)
        except SearchError as e:
            log.warning(f"{e}. Skipping.")
            continue

        if not records:
            log.warning(f"No commits found for '{query}'")
            continue

        log.debug(f"Found {len(records)} commits for '{query}'")
        found.extend(records)

    sequence = CommitSequence.sorted_unique(found)
    duplicates = len(found) - len(sequence)
    if duplicates:
        log.debug(f"Dropped {duplicates} commits matched by more than one query")

    return sequence
