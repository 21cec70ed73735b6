"""Explicit application state for the talent directory.

Each submission or search drives its own ``Flow`` through the transitions
below, so concurrent requests never step on each other's state machine.
Flows publish into ``DirectoryState``, the shared view of loading/error/
filter status that lives on ``app.state.directory`` and is injected into
orchestration rather than read as a module global.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Generic, TypeVar

from app.core.errors import InvalidTransitionError
from app.models.enums import SearchState, SubmissionState
from app.models.talent import Talent

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)

SUBMISSION_TRANSITIONS: dict[SubmissionState, frozenset[SubmissionState]] = {
    SubmissionState.idle: frozenset({SubmissionState.validating}),
    SubmissionState.validating: frozenset(
        {SubmissionState.invalid, SubmissionState.normalizing}
    ),
    SubmissionState.normalizing: frozenset({SubmissionState.persisting}),
    SubmissionState.persisting: frozenset(
        {SubmissionState.persisted, SubmissionState.failed}
    ),
    SubmissionState.invalid: frozenset(),
    SubmissionState.persisted: frozenset(),
    SubmissionState.failed: frozenset(),
}

SEARCH_TRANSITIONS: dict[SearchState, frozenset[SearchState]] = {
    SearchState.idle: frozenset({SearchState.query_validating}),
    SearchState.query_validating: frozenset(
        {SearchState.invalid, SearchState.querying}
    ),
    # Invalid queries recover by querying without a filter
    SearchState.invalid: frozenset({SearchState.querying}),
    SearchState.querying: frozenset({SearchState.completed}),
    SearchState.completed: frozenset(),
}


class Flow(Generic[S]):
    """One run through a state machine, starting at its ``idle`` state."""

    def __init__(self, name: str, transitions: dict[S, frozenset[S]], start: S) -> None:
        self.name = name
        self._transitions = transitions
        self.state = start
        self.history: list[S] = [start]

    @property
    def terminal(self) -> bool:
        return not self._transitions[self.state]

    def advance(self, target: S) -> S:
        if target not in self._transitions[self.state]:
            raise InvalidTransitionError(
                f"{self.name}: {self.state.value} -> {target.value}"
            )
        self.state = target
        self.history.append(target)
        logger.debug(
            "flow_state_changed",
            extra={"flow": self.name, "state": target.value},
        )
        return target


def submission_flow() -> Flow[SubmissionState]:
    return Flow("submission", SUBMISSION_TRANSITIONS, SubmissionState.idle)


def search_flow() -> Flow[SearchState]:
    return Flow("search", SEARCH_TRANSITIONS, SearchState.idle)


class DirectoryState:
    """Shared, lock-guarded view of directory activity."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._in_flight = 0
        self.submission_state = SubmissionState.idle
        self.search_state = SearchState.idle
        self.error: str | None = None
        self._error_source: str | None = None
        self.current_filter = ""
        self.talents: list[Talent] = []
        self.filtered_talents: list[Talent] = []

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def start(self, source: str) -> None:
        """Mark one request as in flight.

        Clears the previous error only when it came from the same kind of
        flow (``"submission"`` or ``"search"``), so a search never wipes a
        submission banner.
        """
        with self._lock:
            self._in_flight += 1
            if self._error_source == source:
                self.error = None
                self._error_source = None

    def finish(self) -> None:
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)

    def publish_submission(
        self,
        state: SubmissionState,
        *,
        talent: Talent | None = None,
        error: str | None = None,
    ) -> None:
        with self._lock:
            self.submission_state = state
            if error is not None:
                self.error = error
                self._error_source = "submission"
            if state is SubmissionState.persisted and talent is not None:
                self.talents = [talent, *self.talents]
                self.filtered_talents = [talent, *self.filtered_talents]

    def publish_search(
        self,
        state: SearchState,
        *,
        results: list[Talent] | None = None,
        unfiltered: bool = False,
    ) -> None:
        with self._lock:
            self.search_state = state
            if results is not None:
                self.filtered_talents = list(results)
                if unfiltered:
                    self.talents = list(results)

    def record_search_error(self, message: str) -> None:
        with self._lock:
            self.error = message
            self._error_source = "search"

    def set_filter(self, value: str) -> None:
        with self._lock:
            self.current_filter = value

    def clear_error(self) -> None:
        with self._lock:
            self.error = None
            self._error_source = None

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-friendly copy of the current state."""
        with self._lock:
            return {
                "submission_state": self.submission_state.value,
                "search_state": self.search_state.value,
                "loading": self._in_flight > 0,
                "error": self.error,
                "current_filter": self.current_filter,
                "talent_count": len(self.talents),
                "filtered_count": len(self.filtered_talents),
            }
