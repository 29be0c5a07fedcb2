"""Shared fixtures: in-memory repository fakes and a scratch git repository."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from git import Actor, Repo
from git.exc import GitCommandError

from featurepick.errors import SearchError
from featurepick.models import CommitRecord
from featurepick.repo_ops import CommitHistory, PickAttempt, RepoOps


EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_commit(sha: str, seconds: int, summary: str = "") -> CommitRecord:
    """Build a CommitRecord whose timestamp is EPOCH + `seconds`."""
    return CommitRecord(
        hexsha=sha,
        timestamp=EPOCH + timedelta(seconds=seconds),
        summary=summary or f"commit {sha}",
    )


class FakeHistory(CommitHistory):
    """CommitHistory answering from a dict of query -> records.

    A query mapped to an exception instance raises it.
    """

    def __init__(self, results: dict):
        self.results = results
        self.searched = []

    def search(self, query):
        self.searched.append(query)
        result = self.results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeRepoOps(RepoOps):
    """RepoOps keeping the "working tree" as a list of unmerged paths.

    Args:
        conflicting: Hashes whose pick leaves unmerged paths.
        failing: Hashes whose pick fails without conflicts.
    """

    def __init__(self, conflicting=(), failing=()):
        self.conflicting = set(conflicting)
        self.failing = set(failing)
        self.unmerged = []
        self.picked = []
        self.status_checks = 0
        self.aborts = 0
        self.continues = 0

    def cherry_pick_no_commit(self, sha):
        self.picked.append(sha)
        if sha in self.conflicting:
            self.unmerged = [f"{sha}.txt"]
            return PickAttempt(ok=False, output=f"error: could not apply {sha}")
        if sha in self.failing:
            return PickAttempt(ok=False, output="The previous cherry-pick is now empty")
        return PickAttempt(ok=True)

    def unmerged_paths(self):
        self.status_checks += 1
        return list(self.unmerged)

    def abort_cherry_pick(self):
        self.aborts += 1
        self.unmerged = []

    def continue_cherry_pick(self):
        self.continues += 1
        return PickAttempt(ok=False, output="error: no cherry-pick or revert in progress")

    def resolve(self):
        """Simulate the operator fixing every conflict."""
        self.unmerged = []


class ScriptedPrompt:
    """Operator stand-in returning scripted answers.

    Each entry is either an answer string or an (answer, action) tuple whose
    action runs first, simulating edits the operator makes before replying.
    Running out of answers fails the test.
    """

    def __init__(self, answers):
        self.answers = list(answers)
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        if isinstance(answer, tuple):
            answer, action = answer
            action()
        return answer

    @property
    def count(self):
        return len(self.messages)


@pytest.fixture
def fake_ops():
    return FakeRepoOps


@pytest.fixture
def scripted_prompt():
    return ScriptedPrompt


@pytest.fixture
def fake_history():
    return FakeHistory


@pytest.fixture
def search_error():
    return lambda query: SearchError(query, "fatal: bad revision")


AUTHOR = Actor("Test User", "test@example.com")


def commit_file(repo: Repo, name: str, content: str, message: str, when: int):
    """Write `name`, stage it and commit with a fixed committer date."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content)
    repo.index.add([name])
    # "<unix seconds> <offset>" is the raw git date format GitPython accepts
    date = f"{int((EPOCH + timedelta(minutes=when)).timestamp())} +0000"
    return repo.index.commit(
        message,
        author=AUTHOR,
        committer=AUTHOR,
        author_date=date,
        commit_date=date,
    )


@pytest.fixture
def git_repo():
    """Repository with a main line and two feature branches.

    main:   base
    feat-a: "feat-a: add a"            (a.txt)
            "feat-a: change shared"    (shared.txt, conflicts with main)
    feat-b: "feat-b: add b"            (b.txt)
            "feat-a feat-b: add both"  (both.txt, matched by both queries)
    main:   "main: change shared"      (shared.txt)
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        repo = Repo.init(temp_dir)
        with repo.config_writer() as cw:
            cw.set_value("user", "name", AUTHOR.name)
            cw.set_value("user", "email", AUTHOR.email)

        commit_file(repo, "shared.txt", "base\n", "base", 0)
        repo.git.branch("-M", "main")

        repo.git.checkout("-b", "feat-a")
        commit_file(repo, "a.txt", "a\n", "feat-a: add a", 10)
        commit_file(repo, "shared.txt", "from feat-a\n", "feat-a: change shared", 30)

        repo.git.checkout("main")
        repo.git.checkout("-b", "feat-b")
        commit_file(repo, "b.txt", "b\n", "feat-b: add b", 20)
        commit_file(repo, "both.txt", "both\n", "feat-a feat-b: add both", 40)

        repo.git.checkout("main")
        commit_file(repo, "shared.txt", "from main\n", "main: change shared", 50)

        yield repo
        repo.close()


@pytest.fixture
def interrupted_pick(git_repo):
    """git_repo with a plain `git cherry-pick` stopped on a conflict.

    Unlike a --no-commit pick this leaves CHERRY_PICK_HEAD behind.
    """
    change_shared = next(
        c for c in git_repo.iter_commits("--all") if c.summary == "feat-a: change shared"
    )
    with pytest.raises(GitCommandError):
        git_repo.git.cherry_pick(change_shared.hexsha)
    assert (Path(git_repo.git_dir) / "CHERRY_PICK_HEAD").exists()
    return git_repo


@pytest.fixture
def record():
    return make_commit
