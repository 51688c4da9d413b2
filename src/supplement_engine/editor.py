"""Supplement editor: the save flow wrapped around conflict resolution.

Validate the draft, detect conflicts, let the operator resolve them, and
only then hand the supplement to the repository. A cancelled resolution
persists nothing.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Sequence

from supplement_engine import config
from supplement_engine.exceptions import SupplementValidationError
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import SupplementType
from supplement_engine.models.session import ResolutionState, SessionAction, SessionOutcome
from supplement_engine.models.supplement import MealInclusion, Supplement, SupplementValue
from supplement_engine.orchestrator import ResolutionOrchestrator, run_resolution_session
from supplement_engine.serialization.store import SupplementRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplementDraft:
    """A supplement being edited, before it has been saved."""

    name: str
    values: tuple[SupplementValue, ...] = field(default_factory=tuple)
    description: str = ""
    type: SupplementType = SupplementType.MEALPLAN
    code: str | None = None
    meal_included: MealInclusion | None = None
    id: str | None = None  # set when editing a saved supplement


@dataclass(frozen=True)
class SaveResult:
    """Result of ``SupplementEditor.save``; ``supplement`` is None when nothing was saved."""

    supplement: Supplement | None
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    outcome: SessionOutcome | None = None

    @property
    def saved(self) -> bool:
        return self.supplement is not None


def validate_draft(draft: SupplementDraft) -> None:
    """Raise SupplementValidationError when the draft cannot be saved."""
    if not draft.name.strip():
        raise SupplementValidationError("Please enter a supplement name")
    if not draft.values:
        raise SupplementValidationError("Please add at least one value")

    seen: set[str] = set()
    for value in draft.values:
        if value.id in seen:
            raise SupplementValidationError(f"Duplicate value id {value.id}")
        seen.add(value.id)
        if value.amount < 0:
            raise SupplementValidationError(f"Value {value.id} has a negative amount")
        if value.currency not in config.SUPPORTED_CURRENCIES:
            raise SupplementValidationError(
                f"Value {value.id} uses unsupported currency {value.currency}"
            )
        inverted = [r for r in value.parameters.date_ranges if not r.is_valid]
        if inverted:
            raise SupplementValidationError(
                f"Value {value.id} has a date range ending before it starts "
                f"({inverted[0].start_date} > {inverted[0].end_date})"
            )


def build_supplement(draft: SupplementDraft, values: Sequence[SupplementValue]) -> Supplement:
    return Supplement(
        id=draft.id or str(uuid.uuid4()),
        name=draft.name.strip(),
        type=draft.type,
        description=draft.description,
        code=draft.code,
        meal_included=draft.meal_included,
        values=tuple(values),
    )


class SupplementEditor:
    """Runs the save flow for supplement drafts.

    Usage:
        editor = SupplementEditor(JsonSupplementStore("supplements.json"))
        result = editor.save(draft, choose_action=ask_operator)
    """

    def __init__(
        self,
        repository: SupplementRepository,
        orchestrator: ResolutionOrchestrator | None = None,
    ) -> None:
        self.repository = repository
        self.orchestrator = orchestrator or ResolutionOrchestrator()

    def check(self, draft: SupplementDraft) -> list[Conflict]:
        """Validate the draft and report its conflicts without saving."""
        validate_draft(draft)
        return self.orchestrator.detector.detect(draft.values)

    def save(
        self,
        draft: SupplementDraft,
        choose_action: Callable[[ResolutionState], SessionAction],
    ) -> SaveResult:
        """Validate, resolve conflicts interactively, then persist."""
        conflicts = tuple(self.check(draft))
        if not conflicts:
            return SaveResult(supplement=self.persist(draft, draft.values))

        logger.info("Draft %r has %d conflict(s); starting resolution", draft.name, len(conflicts))
        outcome = run_resolution_session(
            draft.values, conflicts, choose_action, orchestrator=self.orchestrator
        )
        if outcome.cancelled or outcome.resolved_values is None:
            logger.info("Resolution cancelled; %r not saved (%s)", draft.name, outcome.reason)
            return SaveResult(supplement=None, conflicts=conflicts, outcome=outcome)

        supplement = self.persist(draft, outcome.resolved_values)
        return SaveResult(supplement=supplement, conflicts=conflicts, outcome=outcome)

    def persist(self, draft: SupplementDraft, values: Sequence[SupplementValue]) -> Supplement:
        """Build the supplement record from resolved values and save it."""
        supplement = build_supplement(draft, values)
        self.repository.save(supplement)
        return supplement
