"""Repository operations used by the selector and the pick driver.

The driver never touches the working tree itself. Everything it does to or
learns about the repository goes through a RepoOps instance, so tests can
swap in an in-memory fake.

To add another backend:
    1. Subclass CommitHistory and RepoOps
    2. Raise GitUnavailableError when the backend cannot run at all
    3. Report soft failures through SearchError / PickAttempt
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union
import logging

import git
from git.exc import (
    GitCommandError,
    GitCommandNotFound,
    InvalidGitRepositoryError,
    NoSuchPathError,
)

from .errors import GitUnavailableError, SearchError
from .models import CommitRecord
from .utils import git_utils

log = logging.getLogger(__name__)


@dataclass
class PickAttempt:
    """Result of a single `cherry-pick --no-commit`.

    Attributes:
        ok: Whether git reported success. This says nothing about conflicts;
            a failed pick can leave unmerged paths and so can a clean exit.
        output: Combined stdout/stderr of the command.
    """

    ok: bool
    output: str = ""


class CommitHistory(ABC):
    """Searches history for commits whose message matches a query."""

    @abstractmethod
    def search(self, query: str) -> List[CommitRecord]:
        """Return non-merge commits whose message matches `query`.

        Raises:
            SearchError: If this one search failed. Callers treat it as soft.
            GitUnavailableError: If git cannot be invoked at all.
        """
        pass


class RepoOps(ABC):
    """Mutating and observing operations on the working tree."""

    @abstractmethod
    def cherry_pick_no_commit(self, sha: str) -> PickAttempt:
        """Apply a commit's changes to the index and tree without committing."""
        pass

    @abstractmethod
    def unmerged_paths(self) -> List[str]:
        """Paths with unresolved conflicts, read live from the index."""
        pass

    def has_unmerged_paths(self) -> bool:
        return bool(self.unmerged_paths())

    @abstractmethod
    def abort_cherry_pick(self) -> None:
        pass

    @abstractmethod
    def continue_cherry_pick(self) -> PickAttempt:
        pass


def open_repo(path: Union[str, Path] = ".") -> git.Repo:
    """Open the repository containing `path`.

    Raises:
        GitUnavailableError: If `path` is not inside a git repository.
    """
    try:
        return git.Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise GitUnavailableError(f"Not a git repository: {path}") from e


class GitRepoOps(CommitHistory, RepoOps):
    """CommitHistory and RepoOps backed by a GitPython repository.

    Attributes:
        repo: The repository to operate on.
        all_refs: Search every ref instead of HEAD only.
        fixed_strings: Treat queries as literal strings, not regexes.
        ignore_case: Match queries case-insensitively.
    """

    def __init__(
        self,
        repo: git.Repo,
        all_refs: bool = True,
        fixed_strings: bool = False,
        ignore_case: bool = False,
    ):
        self.repo = repo
        self.all_refs = all_refs
        self.fixed_strings = fixed_strings
        self.ignore_case = ignore_case

    def _git(self, *args) -> str:
        try:
            return self.repo.git.execute(["git", *args])
        except GitCommandNotFound as e:
            raise GitUnavailableError(f"git executable not found: {e}") from e

    def search(self, query: str) -> List[CommitRecord]:
        args = git_utils.build_log_args(
            query,
            all_refs=self.all_refs,
            fixed_strings=self.fixed_strings,
            ignore_case=self.ignore_case,
        )
        try:
            output = self._git("log", *args)
        except GitCommandError as e:
            raise SearchError(query, git_utils.command_error_output(e)) from e

        records = []
        for line in output.splitlines():
            if not line.strip():
                continue
            try:
                records.append(CommitRecord.from_line(line))
            except ValueError as e:
                log.warning(f"Ignoring unparsable log line for '{query}': {e}")
        return records

    def cherry_pick_no_commit(self, sha: str) -> PickAttempt:
        try:
            output = self._git("cherry-pick", "--no-commit", sha)
            return PickAttempt(ok=True, output=output)
        except GitCommandError as e:
            return PickAttempt(ok=False, output=git_utils.command_error_output(e))

    def unmerged_paths(self) -> List[str]:
        return git_utils.get_unmerged_paths(self.repo)

    def abort_cherry_pick(self) -> None:
        # --no-commit picks leave no CHERRY_PICK_HEAD behind, so usually there
        # is nothing for git to abort. Resetting instead would also throw away
        # the commits already applied in this session; leave the tree alone.
        if not self.is_cherry_pick_in_progress():
            log.warning(
                "No cherry-pick in progress to abort; working tree left as is. "
                f"Unmerged paths: {', '.join(self.unmerged_paths()) or '(none)'}"
            )
            return

        try:
            self._git("cherry-pick", "--abort")
        except GitCommandError as e:
            log.warning(f"cherry-pick --abort failed: {git_utils.command_error_output(e)}")

    def continue_cherry_pick(self) -> PickAttempt:
        try:
            output = self._git("cherry-pick", "--continue")
            return PickAttempt(ok=True, output=output)
        except GitCommandError as e:
            return PickAttempt(ok=False, output=git_utils.command_error_output(e))

    def is_cherry_pick_in_progress(self) -> bool:
        return git_utils.is_cherry_pick_in_progress(self.repo)

    def current_branch(self) -> str:
        return git_utils.get_current_branch(self.repo)
