import git
import click
import logging
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape

from .commit_list import CommitListStore
from .config import FeaturepickConfig, load_config
from .driver import EventKind, PickDriver, PickEvent
from .errors import GitUnavailableError
from .models import CommitSequence, PickSession
from .repo_ops import GitRepoOps, open_repo
from .selector import select_commits

log = logging.getLogger(__name__)

EVENT_STYLES = {
    EventKind.PICKING: "bold",
    EventKind.APPLIED: "green",
    EventKind.CONFLICT: "bold red",
    EventKind.STILL_CONFLICTED: "yellow",
    EventKind.UNRECOGNIZED: "yellow",
    EventKind.RESOLVED: "green",
    EventKind.SKIPPED: "yellow",
    EventKind.ABORTED: "bold red",
}


def operator_prompt(message: str) -> str:
    """Ask the operator for one line of input.

    click raises Abort on Ctrl-C / Ctrl-D; the driver expects EOFError for
    "no more input", which it treats as a request to abort.
    """
    try:
        return click.prompt(message, default="", show_default=False, err=True)
    except click.Abort:
        click.echo(err=True)
        raise EOFError()


class AppContext:
    def __init__(self):
        self.repo: Optional[git.Repo] = None
        self.config: FeaturepickConfig = FeaturepickConfig()
        self.console = Console(highlight=False, stderr=True)
        self.prompt: Callable[[str], str] = operator_prompt

    def load(self, repo_path: str = ".", config_path: Optional[str] = None):
        self.repo = open_repo(repo_path)
        self.config = load_config(config_path)

    def get_repo(self) -> git.Repo:
        if self.repo is None:
            raise GitUnavailableError("Repository not opened")
        return self.repo

    def repo_root(self) -> Path:
        return Path(self.get_repo().working_tree_dir)

    def repo_ops(self) -> GitRepoOps:
        select = self.config.select
        return GitRepoOps(
            self.get_repo(),
            all_refs=select.all_refs,
            fixed_strings=select.fixed_strings,
            ignore_case=select.regexp_ignore_case,
        )

    def commit_list(self) -> CommitListStore:
        return CommitListStore(self.repo_root(), self.config.commit_list.path)

    def select(self, queries: List[str], save: bool = True) -> CommitSequence:
        click.echo(f"Getting commits for feature branches: {', '.join(queries)}", err=True)
        sequence = select_commits(queries, self.repo_ops())

        if save:
            store = self.commit_list()
            store.save(sequence)
            log.info(f"Wrote {len(sequence)} commits to {store.path}")

        return sequence

    def pick(self, sequence: CommitSequence) -> PickSession:
        driver = PickDriver(
            self.repo_ops(),
            self.prompt,
            config=self.config.pick,
            on_event=self.echo_event,
        )
        session = driver.run(sequence)

        if not self.config.commit_list.keep:
            self.commit_list().remove()

        return session

    def echo_event(self, event: PickEvent):
        style = EVENT_STYLES.get(event.kind, "")
        if event.kind == EventKind.PICKING:
            text = f"Cherry-picking commit: {event.commit.short_sha} {escape(event.message)}"
        else:
            text = escape(event.message)

        self.console.print(f"[{style}]{text}[/{style}]" if style else text)
        for path in event.paths:
            self.console.print(f"  [red]unmerged:[/red] {escape(path)}")
