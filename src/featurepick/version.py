"""featurepick version, from package metadata written by setuptools-scm."""

from importlib.metadata import version, PackageNotFoundError
from pathlib import Path

import git


def get_version() -> str:
    try:
        return version("featurepick")
    except PackageNotFoundError:
        return _describe_source_checkout()


def _describe_source_checkout() -> str:
    # featurepick runs inside other people's repositories, so describe the
    # checkout this file lives in rather than the current directory.
    try:
        repo = git.Repo(Path(__file__).resolve().parent, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        return "unknown"

    try:
        return repo.git.describe("--tags", "--dirty", "--always")
    except (git.GitCommandError, git.GitCommandNotFound):
        return "unknown"
    finally:
        repo.close()
