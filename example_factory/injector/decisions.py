"""Conflict decisions for inject mode.

The engine asks a ``DecisionFn`` what to do with every planned destination
that already exists in the target project.  Where the answer comes from, an
interactive prompt or a scripted policy, is up to the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum

from rich.console import Console
from rich.prompt import Prompt


class Decision(str, Enum):
    """What to do with a destination that already exists."""
    SKIP = "skip"
    OVERWRITE = "overwrite"
    RENAME = "rename"


DecisionFn = Callable[[str], Decision]


def fixed_policy(decision: Decision | str) -> DecisionFn:
    """Answer every conflict with the same *decision*."""
    chosen = Decision(decision)

    def _decide(path: str) -> Decision:
        return chosen

    return _decide


def mapping_policy(
    decisions: Mapping[str, Decision | str],
    default: Decision | str = Decision.SKIP,
) -> DecisionFn:
    """Look each destination up in *decisions*, falling back to *default*."""
    table = {path: Decision(value) for path, value in decisions.items()}
    fallback = Decision(default)

    def _decide(path: str) -> Decision:
        return table.get(path, fallback)

    return _decide


def prompt_policy(console: Console | None = None) -> DecisionFn:
    """Ask the user on the terminal for every conflicting path."""
    console = console or Console()

    def _decide(path: str) -> Decision:
        answer = Prompt.ask(
            f"[yellow]{path}[/yellow] already exists. What do you want to do?",
            choices=[d.value for d in Decision],
            default=Decision.SKIP.value,
            console=console,
        )
        return Decision(answer)

    return _decide
