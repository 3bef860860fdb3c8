"""Tagged results of one harness run.

The driver never exits the process itself; ``main.py`` maps the outcome
to an exit status.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Skipped:
    """Nothing was tested: no exchange id, a skip flag, or an alias."""

    reason: str
    exit_code: int = 0


@dataclass(frozen=True)
class Completed:
    finished_at: datetime
    exit_code: int = 0


@dataclass(frozen=True)
class Failed:
    """A configuration error or capability test failure ended the run."""

    error: BaseException
    exit_code: int = 1

    @property
    def reason(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


RunOutcome = Skipped | Completed | Failed
