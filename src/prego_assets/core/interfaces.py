"""Collaborator interfaces used by long-running and destructive operations.

The library never talks to a user directly. Operations that report progress,
can be cancelled, or need a yes/no decision take these collaborators as
parameters, and the caller decides how to provide them (a console prompt, a
GUI dialog, a test double).
"""

from enum import Enum
from typing import Callable, Protocol, runtime_checkable

# Receives integer percentages from 0 to 100
ProgressCallback = Callable[[int], None]


@runtime_checkable
class CancellationToken(Protocol):
    """Anything that can report a pending cancellation request.

    ``threading.Event`` satisfies this protocol.
    """

    def is_set(self) -> bool:
        ...


class PromptResult(Enum):
    YES = "yes"
    NO = "no"
    CANCEL = "cancel"


class Prompt(Protocol):
    """Asks the user to confirm a destructive or ambiguous operation."""

    def confirm(self, title: str, message: str, allow_cancel: bool = False) -> PromptResult:
        """Ask a yes/no (or yes/no/cancel) question.

        Args:
            title: Short caption naming the operation
            message: Full question shown to the user
            allow_cancel: Whether CANCEL is an acceptable answer

        Returns:
            The user's answer
        """
        ...


def report(progress: ProgressCallback | None, percent: int) -> None:
    """Send a percentage to an optional progress callback."""
    if progress is not None:
        progress(max(0, min(100, percent)))


def is_cancelled(cancel: CancellationToken | None) -> bool:
    return cancel is not None and cancel.is_set()
