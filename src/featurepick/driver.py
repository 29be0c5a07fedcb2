"""Cherry-pick driver.

Applies a CommitSequence one commit at a time with `cherry-pick --no-commit`
and hands control to the operator whenever a pick leaves unmerged paths.

Per commit the driver walks this state machine:

    PICKING ──► APPLIED
       │  └───► FAILED ──► SKIPPED
       ▼
    CONFLICTED ──► AWAITING_OPERATOR ──► APPLIED
                          │   ▲
                          └───┘ (still unmerged / unrecognised input)
                          │
                          └──► ABORTED  (ends the whole session)

Conflict state is always read from the repository, never inferred from the
exit status of the pick itself. The operator may edit the working tree while
the driver waits at the prompt, so status is re-read after every answer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional
import logging
import time

from .config import FailedPickPolicy, PickConfig
from .errors import Cancelled
from .models import CommitRecord, CommitSequence, PickOutcome, PickSession, SessionStatus
from .repo_ops import PickAttempt, RepoOps

log = logging.getLogger(__name__)

PromptFunc = Callable[[str], str]


class PickState(str, Enum):
    PICKING = "picking"
    CONFLICTED = "conflicted"
    AWAITING_OPERATOR = "awaiting operator"
    FAILED = "failed"
    APPLIED = "applied"
    SKIPPED = "skipped"
    ABORTED = "aborted"


TERMINAL_STATES = (PickState.APPLIED, PickState.SKIPPED, PickState.ABORTED)


class EventKind(str, Enum):
    PICKING = "picking"
    APPLIED = "applied"
    CONFLICT = "conflict"
    STILL_CONFLICTED = "still conflicted"
    UNRECOGNIZED = "unrecognized"
    RESOLVED = "resolved"
    SKIPPED = "skipped"
    ABORTED = "aborted"


@dataclass
class PickEvent:
    """Progress notification emitted by the driver.

    Attributes:
        kind: What happened.
        commit: The commit being processed.
        message: Human readable description.
        paths: Unmerged paths, for conflict related events.
    """

    kind: EventKind
    commit: CommitRecord
    message: str = ""
    paths: List[str] = field(default_factory=list)


@dataclass
class _CommitStep:
    """Mutable scratch state for one commit while it moves through the machine."""

    commit: CommitRecord
    attempt: Optional[PickAttempt] = None
    conflicted: bool = False
    prompts: int = 0
    message: str = ""


class PickDriver:
    """Runs a pick session over a CommitSequence.

    Args:
        repo_ops: Repository backend; the driver's only access to the tree.
        prompt: Blocking "ask a question, get a line" function. Raising
            EOFError is treated as an abort request.
        config: Pick configuration; defaults to PickConfig().
        on_event: Optional callback receiving PickEvents.
        sleep: Used for the settle delay after a conflict.
    """

    PROMPT = "Press Enter after resolving conflicts, or type 'abort' to cancel"
    ACKNOWLEDGE = ("", "continue")
    CANCEL = ("abort",)

    def __init__(
        self,
        repo_ops: RepoOps,
        prompt: PromptFunc,
        config: Optional[PickConfig] = None,
        on_event: Optional[Callable[[PickEvent], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.repo_ops = repo_ops
        self.prompt = prompt
        self.config = config or PickConfig()
        self.on_event = on_event
        self.sleep = sleep
        self._handlers: Dict[PickState, Callable[[_CommitStep], PickState]] = {
            PickState.PICKING: self._picking,
            PickState.FAILED: self._failed,
            PickState.CONFLICTED: self._conflicted,
            PickState.AWAITING_OPERATOR: self._awaiting_operator,
        }

    def run(self, sequence: CommitSequence) -> PickSession:
        """Pick every commit of `sequence` in order.

        Returns:
            The completed PickSession.

        Raises:
            Cancelled: If the operator aborted. The exception carries the
                session, whose last result is the aborted commit.
            GitUnavailableError: If git cannot be invoked at all.
        """
        session = PickSession(sequence=sequence)
        log.info(f"Starting pick session with {len(sequence)} commits")

        while session.index < len(sequence):
            state = self._process(session)
            if state == PickState.ABORTED:
                session.status = SessionStatus.CANCELLED
                raise Cancelled(session)
            session.index += 1

        session.status = SessionStatus.COMPLETED
        return session

    def _process(self, session: PickSession) -> PickState:
        step = _CommitStep(commit=session.current_commit)
        state = PickState.PICKING

        while state not in TERMINAL_STATES:
            log.debug(f"{step.commit.short_sha}: {state.value}")
            state = self._handlers[state](step)

        if state == PickState.APPLIED:
            outcome = PickOutcome.RESOLVED if step.conflicted else PickOutcome.APPLIED
        elif state == PickState.SKIPPED:
            outcome = PickOutcome.SKIPPED
        else:
            outcome = PickOutcome.ABORTED

        session.record(outcome, step.message)
        return state

    def _emit(self, kind: EventKind, step: _CommitStep, message: str, paths=None):
        if self.on_event is not None:
            self.on_event(PickEvent(kind, step.commit, message, list(paths or [])))

    def _picking(self, step: _CommitStep) -> PickState:
        sha = step.commit.hexsha
        log.debug(f"Cherry-picking commit: {sha}")
        self._emit(EventKind.PICKING, step, step.commit.summary)

        step.attempt = self.repo_ops.cherry_pick_no_commit(sha)

        # A pick can exit non-zero and still leave conflicts, or exit zero
        # with nothing to do; only the index tells which.
        if self.repo_ops.has_unmerged_paths():
            return PickState.CONFLICTED

        if step.attempt.ok:
            log.debug("No conflicts detected, proceeding to next commit.")
            step.message = "applied cleanly"
            self._emit(EventKind.APPLIED, step, step.message)
            return PickState.APPLIED

        return PickState.FAILED

    def _failed(self, step: _CommitStep) -> PickState:
        output = step.attempt.output if step.attempt else ""
        log.warning(f"Error during cherry-pick for commit {step.commit.hexsha}. Skipping.")
        if output:
            log.debug(output)

        if self.config.on_failed_pick == FailedPickPolicy.CONTINUE:
            result = self.repo_ops.continue_cherry_pick()
            if not result.ok:
                log.warning(f"cherry-pick --continue failed: {result.output}")

        step.message = output.splitlines()[-1] if output else "cherry-pick failed"
        self._emit(EventKind.SKIPPED, step, step.message)
        return PickState.SKIPPED

    def _conflicted(self, step: _CommitStep) -> PickState:
        step.conflicted = True
        paths = self.repo_ops.unmerged_paths()
        log.debug(f"Conflict detected in {step.commit.short_sha}: {paths}")
        self._emit(EventKind.CONFLICT, step, "Conflict detected! Please resolve it manually.", paths)

        if self.config.settle_seconds > 0:
            self.sleep(self.config.settle_seconds)
            if not self.repo_ops.has_unmerged_paths():
                step.message = "conflicts cleared before prompting"
                self._emit(EventKind.RESOLVED, step, "Conflicts resolved.")
                return PickState.APPLIED

        return PickState.AWAITING_OPERATOR

    def _awaiting_operator(self, step: _CommitStep) -> PickState:
        step.prompts += 1
        try:
            response = self.prompt(self.PROMPT)
        except EOFError:
            log.debug("End of input at conflict prompt, treating as abort")
            response = "abort"

        raw = (response or "").strip()
        answer = raw.lower()

        if answer in self.CANCEL:
            log.debug("Aborting cherry-pick process.")
            self.repo_ops.abort_cherry_pick()
            step.message = "aborted by operator"
            self._emit(EventKind.ABORTED, step, "Aborting cherry-pick process.")
            return PickState.ABORTED

        if answer not in self.ACKNOWLEDGE:
            self._emit(
                EventKind.UNRECOGNIZED,
                step,
                f"Unrecognized response '{raw}'. Press Enter or type 'abort'.",
            )
            return PickState.AWAITING_OPERATOR

        paths = self.repo_ops.unmerged_paths()
        if paths:
            self._emit(
                EventKind.STILL_CONFLICTED,
                step,
                "Conflicts still exist, resolve them first.",
                paths,
            )
            return PickState.AWAITING_OPERATOR

        step.message = f"resolved by operator after {step.prompts} prompt(s)"
        self._emit(EventKind.RESOLVED, step, "Conflicts resolved. Proceeding to next commit.")
        return PickState.APPLIED
