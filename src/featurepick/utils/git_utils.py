from git import Repo
from pathlib import Path
from typing import List
import logging

log = logging.getLogger(__name__)

# Format requested from `git log` for every matched commit.
# %cI is the strict ISO 8601 committer date, so the line splits on spaces.
LOG_FORMAT = "%H %cI %s"


def short_sha(sha: str) -> str:
    return sha[:12]


def is_cherry_pick_in_progress(repo: Repo) -> bool:
    cherry_pick_head = Path(repo.git_dir) / "CHERRY_PICK_HEAD"
    return cherry_pick_head.exists()


def get_current_branch(repo: Repo) -> str:
    """Name of the checked out branch, or the short HEAD sha when detached."""
    try:
        return repo.active_branch.name
    except TypeError:
        # Detached HEAD state
        return short_sha(repo.head.commit.hexsha)


def get_unmerged_paths(repo: Repo) -> List[str]:
    """Return the paths that still have unmerged index stages.

    `repo.index` builds a fresh IndexFile on every access, so this always
    reflects the index as it is on disk right now, including edits made by
    the operator while the driver was waiting.
    """
    blobs_map = repo.index.unmerged_blobs()
    return sorted(str(path) for path in blobs_map.keys())


def build_log_args(
    query: str,
    all_refs: bool = True,
    fixed_strings: bool = False,
    ignore_case: bool = False,
) -> List[str]:
    args = []
    if all_refs:
        args.append("--all")
    args += [
        f"--grep={query}",
        "--no-merges",
        f"--format={LOG_FORMAT}",
    ]
    if fixed_strings:
        args.append("--fixed-strings")
    if ignore_case:
        args.append("--regexp-ignore-case")
    # Terminate revisions so a query never gets read as a path
    args.append("--")
    return args


def command_error_output(error) -> str:
    """Return the output of a GitCommandError without GitPython's decoration.

    GitPython stores stdout/stderr as "\\n  stdout: '<text>'"; strip that back
    to the text git actually printed.
    """
    parts = []
    for name in ("stdout", "stderr"):
        text = (getattr(error, name, "") or "").strip()
        marker = f"{name}: '"
        if text.startswith(marker):
            text = text[len(marker):]
            if text.endswith("'"):
                text = text[:-1]
        if text.strip():
            parts.append(text.strip())
    return "\n".join(parts) or str(error)
