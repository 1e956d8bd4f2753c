"""Interactive confirmation before any branch is created."""

from __future__ import annotations

import sys
from typing import Callable, TextIO

from gl_branch.models import CONFIRM_ANSWERS

PROMPT = "Execute? Type y to confirm: "


def confirm(input_fn: Callable[[str], str] | None = None, output: TextIO | None = None) -> bool:
    """Return True only if the user typed exactly 'y' or 'yes'. EOF cancels."""
    print(file=output or sys.stdout)
    try:
        answer = (input_fn or input)(PROMPT)
    except EOFError:
        return False
    return answer.strip() in CONFIRM_ANSWERS
