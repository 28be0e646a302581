"""
Per-operation run state (Idle/Running) used to reject re-entrant runs.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from .exceptions import RunInProgressError

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class RunGuard:
    """
    Tracks whether an operation is running.

    Only safe within a single event loop: the check and the state change
    happen without an intervening await.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.state = RunState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state == RunState.RUNNING

    @contextmanager
    def run(self) -> Iterator[None]:
        """
        Mark the operation running for the duration of the block.

        Raises:
            RunInProgressError: If a run is already active
        """
        if self.is_running:
            logger.warning(f"Rejected {self.operation}: a run is already active")
            raise RunInProgressError(self.operation)

        self.state = RunState.RUNNING
        try:
            yield
        finally:
            self.state = RunState.IDLE
