"""
One submit cycle: prepare → extract → write the visible fields.

The state object only needs attributes (Streamlit's session_state, a
SimpleNamespace or SkillPanelState all work). ``is_loading`` is set before the
request and cleared in ``finally`` whatever happens.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from resume_skills.preparer import UploadCandidate, UploadValidationError, prepare
from resume_skills.skill_extraction import ExtractionOutcome, Status, extract_skills

logger = logging.getLogger(__name__)

PANEL_FIELDS = ("skills", "is_loading", "error", "notice")


@dataclass
class SkillPanelState:
    skills: List[str] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None
    notice: Optional[str] = None


def init_state(state: Any) -> None:
    """Fill in any missing panel fields with their defaults."""
    defaults = SkillPanelState()
    for name in PANEL_FIELDS:
        if not hasattr(state, name):
            setattr(state, name, getattr(defaults, name))


def submit_resume(
    state: Any,
    candidate: UploadCandidate,
    *,
    extract: Callable[..., ExtractionOutcome] = extract_skills,
    on_change: Callable[[Any], None] | None = None,
    extract_kwargs: dict | None = None,
    **prepare_kwargs,
) -> ExtractionOutcome | None:
    """
    Run one cycle for *candidate* and record the result on *state*.

    Returns the ExtractionOutcome, or None when the file was rejected before
    any request was made (the reason is then in ``state.error``).
    """
    state.is_loading = True
    state.skills = []
    state.error = None
    state.notice = None
    if on_change:
        on_change(state)

    try:
        try:
            document = prepare(candidate, **prepare_kwargs)
        except UploadValidationError as e:
            logger.info("Rejected %r (%s): %s", candidate.filename, e.kind, e)
            state.error = str(e)
            return None

        outcome = extract(document, **(extract_kwargs or {}))

        if outcome.status is Status.SUCCESS:
            state.skills = list(outcome.skills)
        elif outcome.status is Status.EMPTY:
            state.notice = outcome.message
        else:
            state.error = outcome.message
        return outcome
    finally:
        state.is_loading = False
        if on_change:
            on_change(state)
