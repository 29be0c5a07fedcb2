"""Rendering of commit sequences and pick sessions.

Every renderer takes an OutputFormat value and returns a string; printing
(and paging) is left to the caller.
"""

import json

from .models import CommitSequence, PickSession
from .utils.output import OutputFormat
from .utils.util import format_timestamp, render_from_template


SEQUENCE_MARKDOWN_TEMPLATE = """\
# Commits to pick

{% if sequence %}
| # | Commit | Date | Summary |
|---|--------|------|---------|
{%- for commit in sequence %}
| {{ loop.index }} | `{{ commit.short_sha }}` | {{ commit.timestamp | timestamp }} | {{ commit.summary | cell }} |
{%- endfor %}

Total: {{ sequence | length | number }} commits
{%- else %}
No commits matched.
{%- endif %}
"""


SESSION_MARKDOWN_TEMPLATE = """\
# Cherry-pick Summary

- **Status:** {{ session.status.value }}
- **Commits:** {{ session.sequence | length | number }}
{%- for outcome, count in session.counts().items() if count %}
- **{{ outcome | capitalize }}:** {{ count | number }}
{%- endfor %}

{% if session.results %}
| # | Commit | Outcome | Summary |
|---|--------|---------|---------|
{%- for result in session.results %}
| {{ loop.index }} | `{{ result.commit.short_sha }}` | {{ result.outcome.value }} | {{ result.commit.summary | cell }} |
{%- endfor %}
{%- endif %}
{%- if session.cancelled %}

Cancelled by operator. Commits after `{{ session.results[-1].commit.short_sha }}` were not attempted.
{%- endif %}
"""


def sequence_to_text(sequence: CommitSequence) -> str:
    if not sequence:
        return "No commits matched.\n"

    index_width = len(str(len(sequence)))
    lines = []
    for index, commit in enumerate(sequence, start=1):
        lines.append(
            f"{index:>{index_width}}: {commit.short_sha} "
            f"{format_timestamp(commit.timestamp)} {commit.summary}"
        )
    return "\n".join(lines) + "\n"


def sequence_to_markdown(sequence: CommitSequence) -> str:
    return render_from_template(SEQUENCE_MARKDOWN_TEMPLATE, sequence=sequence)


def sequence_to_str(sequence: CommitSequence, format: str, pretty: bool = False) -> str:
    if format == OutputFormat.JSON.value:
        return json.dumps(sequence.to_dict(), indent=2 if pretty else None) + "\n"
    elif format == OutputFormat.MARKDOWN.value:
        return sequence_to_markdown(sequence) + "\n"

    return sequence_to_text(sequence)


def session_to_text(session: PickSession) -> str:
    lines = [f"Status: {session.status.value}"]
    for result in session.results:
        lines.append(f"  {result.commit.short_sha} {result.outcome.value:<24} {result.commit.summary}")

    counts = ", ".join(
        f"{count} {outcome}" for outcome, count in session.counts().items() if count
    )
    lines.append(f"Total: {len(session.sequence)} commits ({counts or 'nothing to do'})")
    return "\n".join(lines) + "\n"


def session_to_markdown(session: PickSession) -> str:
    return render_from_template(SESSION_MARKDOWN_TEMPLATE, session=session)


def session_to_str(session: PickSession, format: str, pretty: bool = False) -> str:
    if format == OutputFormat.JSON.value:
        return json.dumps(session.to_dict(), indent=2 if pretty else None) + "\n"
    elif format == OutputFormat.MARKDOWN.value:
        return session_to_markdown(session) + "\n"

    return session_to_text(session)
