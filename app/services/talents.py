"""Submission and search orchestration.

Submission: validate -> normalize -> store.create.
Search: check query -> store.find_all -> match_skill.

Both flows step through their state machine (``app.services.state``) and,
when a ``DirectoryState`` is supplied, publish their progress into it.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.constants import MSG_ADD_FAILED, MSG_DUPLICATE_EMAIL, MSG_FETCH_FAILED
from app.core.errors import (
    DuplicateEmailError,
    FieldValidationError,
    InvalidQueryError,
    StoreFaultError,
)
from app.db.store import TalentStore
from app.models.enums import SearchState, SubmissionState
from app.models.talent import SearchResult, SubmissionResult
from app.services.matching import match_skill
from app.services.normalization import normalize
from app.services.state import DirectoryState, search_flow, submission_flow
from app.services.validation import require_valid_skill_query, validate

logger = logging.getLogger(__name__)


def submit(
    candidate_input: Any,
    store: TalentStore,
    state: DirectoryState | None = None,
) -> SubmissionResult:
    """Validate, normalize and persist one talent.

    Never raises for bad input, duplicate emails or store faults; the
    outcome is described by the returned ``SubmissionResult``.
    """
    flow = submission_flow()
    if state is not None:
        state.start(flow.name)

    def _move(target: SubmissionState, **kwargs: Any) -> None:
        flow.advance(target)
        if state is not None:
            state.publish_submission(target, **kwargs)

    try:
        _move(SubmissionState.validating)
        errors = validate(candidate_input)
        if errors:
            _move(SubmissionState.invalid)
            logger.info("submit_talent_invalid", extra={"fields": sorted(errors)})
            return SubmissionResult(state=flow.state, errors=errors)

        _move(SubmissionState.normalizing)
        record = normalize(candidate_input)

        _move(SubmissionState.persisting)
        try:
            talent = store.create(record)
        except DuplicateEmailError:
            _move(SubmissionState.failed, error=MSG_DUPLICATE_EMAIL)
            logger.info("submit_talent_duplicate", extra={"email": record.email})
            return SubmissionResult(
                state=flow.state, message=MSG_DUPLICATE_EMAIL, duplicate=True
            )
        except FieldValidationError as exc:
            # Store-side gate disagreed with the entry check
            _move(SubmissionState.failed, error=MSG_ADD_FAILED)
            logger.error("submit_talent_rejected_by_store", extra={"fields": sorted(exc.errors)})
            return SubmissionResult(state=flow.state, errors=exc.errors, message=MSG_ADD_FAILED)
        except StoreFaultError as exc:
            _move(SubmissionState.failed, error=MSG_ADD_FAILED)
            logger.error("submit_talent_store_fault", extra={"error_message": str(exc)})
            return SubmissionResult(state=flow.state, message=MSG_ADD_FAILED)

        _move(SubmissionState.persisted, talent=talent)
        logger.info("submit_talent_persisted", extra={"talent_id": str(talent.id)})
        return SubmissionResult(state=flow.state, talent=talent)
    finally:
        if state is not None:
            state.finish()


def search(
    query: Any,
    store: TalentStore,
    state: DirectoryState | None = None,
) -> SearchResult:
    """Return talents matching *query*, newest first.

    An invalid query is dropped and the unfiltered list is returned.
    ``StoreFaultError`` from the store propagates.
    """
    flow = search_flow()
    if state is not None:
        state.start(flow.name)

    def _move(target: SearchState, **kwargs: Any) -> None:
        flow.advance(target)
        if state is not None:
            state.publish_search(target, **kwargs)

    try:
        _move(SearchState.query_validating)
        rejected = False
        try:
            skill = require_valid_skill_query(query)
        except InvalidQueryError as exc:
            _move(SearchState.invalid)
            logger.info("search_query_rejected", extra={"query": exc.query})
            skill = ""
            rejected = True

        if state is not None:
            state.set_filter(skill)

        _move(SearchState.querying)
        try:
            talents = match_skill(store.find_all(), skill)
        except StoreFaultError as exc:
            if state is not None:
                state.record_search_error(MSG_FETCH_FAILED)
            logger.error("search_store_fault", extra={"error_message": str(exc)})
            raise

        _move(SearchState.completed, results=talents, unfiltered=not skill)
        logger.info(
            "search_completed",
            extra={"skill": skill, "count": len(talents)},
        )
        return SearchResult(talents=talents, applied_filter=skill, query_rejected=rejected)
    finally:
        if state is not None:
            state.finish()
