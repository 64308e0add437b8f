"""CategoryRegistry — the closed set of care plan categories.

Each of the ten categories maps to one immutable :class:`CategoryVariant`
carrying its labels, question order and, for categories with an
algorithmic flow, the functions that score, propose and compose the note.
Dispatch on a category is a single ``registry.get(category)`` lookup.

The static tables live in ``data/categories.yaml`` and are parsed once::

    registry = CategoryRegistry()   # packaged YAML
    registry.load()

    variant = registry.get("DEHYDRATION")
    variant.question_order[0]       # "lab_ht"
    result = variant.assess(details)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, get_args

import yaml
from pydantic import BaseModel, ValidationError

from careplan_db.models.enums import CarePlanCategory
from careplan_engine.constants import REGISTRY_FILENAME
from careplan_engine.constipation import (
    determine_constipation_severity,
    generate_constipation_instructions,
    generate_constipation_proposals,
)
from careplan_engine.dehydration import (
    dehydration_risk_level,
    generate_dehydration_proposals,
    generate_instructions,
)
from careplan_engine.inflammation import (
    generate_inflammation_instructions,
    generate_inflammation_proposals,
    inflammation_follow_ups,
)
from careplan_engine.models.assessment import AssessmentResult, Proposal
from careplan_engine.models.constipation import ConstipationDetails, ConstipationQuestionId
from careplan_engine.models.dehydration import DehydrationDetails, DehydrationQuestionId
from careplan_engine.models.inflammation import InflammationDetails, InflammationQuestionId
from careplan_engine.models.pain import PainCarePlanDetails, PainQuestionId, PainVocabulary
from careplan_engine.pain import generate_pain_instructions, has_selected_sites

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parent / "data" / REGISTRY_FILENAME

RiskLevelFn = Callable[[Any], str]
ProposalFn = Callable[[Any], list[Proposal]]
# (details, risk_level, proposals) -> note text
InstructionFn = Callable[[Any, str | None, list[Proposal]], str]
StepGuard = Callable[[Any], bool]
# details -> names of the answers still missing before completion
CompletionCheck = Callable[[Any], list[str]]
FollowUpFn = Callable[[Any], list[str]]


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@dataclass(frozen=True)
class QuestionDef:
    """One wizard step as listed in the YAML."""

    id: str
    title: str
    group: str | None = None


@dataclass(frozen=True)
class CategoryVariant:
    """Everything the engine knows about one category.

    Only variants with a ``details_model`` can drive a wizard; only those
    with a ``risk_level_fn`` produce a risk level.
    """

    category: CarePlanCategory
    label: str
    description: str
    questions: tuple[QuestionDef, ...]
    details_model: type[BaseModel] | None = None
    risk_level_fn: RiskLevelFn | None = None
    proposal_fn: ProposalFn | None = None
    instruction_fn: InstructionFn | None = None
    completion_check: CompletionCheck | None = None
    follow_up_fn: FollowUpFn | None = None
    # question id -> predicate over the current details; False skips the step
    step_guards: Mapping[str, StepGuard] = field(default_factory=lambda: MappingProxyType({}))
    risk_level_labels: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def question_order(self) -> tuple[str, ...]:
        return tuple(q.id for q in self.questions)

    @property
    def has_wizard(self) -> bool:
        return self.details_model is not None

    def index_of(self, question_id: str | None) -> int | None:
        """Position of *question_id* in the step order, or None if unknown."""
        if question_id is None:
            return None
        try:
            return self.question_order.index(question_id)
        except ValueError:
            return None

    def is_step_enabled(self, question_id: str, details: Any) -> bool:
        guard = self.step_guards.get(question_id)
        return guard is None or guard(details)

    def empty_details(self) -> BaseModel:
        """The all-null answer shape used before the first save."""
        if self.details_model is None:
            raise TypeError(f"{self.category.value} has no details model")
        return self.details_model()

    def parse_details(self, raw: Any) -> BaseModel:
        """Validate a details blob; raises ``pydantic.ValidationError``.

        ``None`` parses to the empty shape.
        """
        if self.details_model is None:
            raise TypeError(f"{self.category.value} has no details model")
        if raw is None:
            return self.empty_details()
        if isinstance(raw, self.details_model):
            return raw
        return self.details_model.model_validate(raw)

    def assess(self, details: Any) -> AssessmentResult:
        """Run scoring, proposals and the instruction composer over *details*."""
        if self.instruction_fn is None:
            raise TypeError(f"{self.category.value} has no instruction composer")
        risk_level: str | None = None
        risk_label: str | None = None
        if self.risk_level_fn is not None:
            risk_level = self.risk_level_fn(details)
            risk_label = self.risk_level_labels.get(risk_level, risk_level)
        proposals = self.proposal_fn(details) if self.proposal_fn is not None else []
        return AssessmentResult(
            risk_level=risk_level,
            risk_level_label=risk_label,
            proposals=proposals,
            instructions=self.instruction_fn(details, risk_level, proposals),
            follow_up_categories=self.follow_up_fn(details) if self.follow_up_fn else [],
        )

    def missing_answers(self, details: Any) -> list[str]:
        """Answers that must be filled before the item can be completed."""
        if self.completion_check is None:
            return []
        return self.completion_check(details)


# Question ids the request schema of each wizard category accepts
_SCHEMA_QUESTION_IDS: dict[CarePlanCategory, frozenset[str]] = {
    CarePlanCategory.DEHYDRATION: frozenset(get_args(DehydrationQuestionId)),
    CarePlanCategory.PAIN: frozenset(get_args(PainQuestionId)),
    CarePlanCategory.CONSTIPATION: frozenset(get_args(ConstipationQuestionId)),
    CarePlanCategory.INFLAMMATION: frozenset(get_args(InflammationQuestionId)),
}


class CategoryRegistry:
    """Loads ``categories.yaml`` and provides typed lookup by category.

    Attributes populated after :meth:`load`:

        risk_level_labels — read-only {risk level: label} of DEHYDRATION
        pain_vocabulary   — PainVocabulary (sites, groups, check labels)
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_REGISTRY_PATH
        self._variants: dict[CarePlanCategory, CategoryVariant] = {}
        self.pain_vocabulary: PainVocabulary | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "CategoryRegistry":
        """Parse the YAML into frozen variants.  Call once at startup.

        Raises ``FileNotFoundError`` if the file is missing and
        ``ValueError`` if its tables are inconsistent.
        """
        raw = load_yaml(self._path)
        if not isinstance(raw, dict):
            raise ValueError(f"{self._path}: expected a mapping at top level")

        try:
            self.pain_vocabulary = PainVocabulary.model_validate(raw.get("pain") or {})
        except ValidationError as exc:
            raise ValueError(f"{self._path}: invalid pain vocabulary: {exc}") from exc

        variants: dict[CarePlanCategory, CategoryVariant] = {}
        for entry in raw.get("categories") or []:
            variant = self._build_variant(entry)
            if variant.category in variants:
                raise ValueError(f"Duplicate category in registry: {variant.category.value}")
            variants[variant.category] = variant

        missing = set(CarePlanCategory) - set(variants)
        if missing:
            names = ", ".join(sorted(c.value for c in missing))
            raise ValueError(f"Registry is missing categories: {names}")

        self._variants = variants
        logger.info(
            "CategoryRegistry loaded: %d categories, %d wizards, %d pain sites",
            len(self._variants),
            sum(1 for v in self._variants.values() if v.has_wizard),
            len(self.pain_vocabulary.sites),
        )
        return self

    def _build_variant(self, entry: dict) -> CategoryVariant:
        try:
            category = CarePlanCategory(entry["id"])
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown category in registry: {entry!r}") from exc

        questions = tuple(
            QuestionDef(id=q["id"], title=q["title"], group=q.get("group"))
            for q in entry.get("questions") or []
        )
        ids = [q.id for q in questions]
        if not ids:
            raise ValueError(f"{category.value}: no questions defined")
        if len(set(ids)) != len(ids):
            raise ValueError(f"{category.value}: duplicate question ids")

        expected = _SCHEMA_QUESTION_IDS.get(category)
        if expected is not None and set(ids) != expected:
            raise ValueError(
                f"{category.value}: question ids {sorted(ids)} do not match "
                f"the request schema {sorted(expected)}"
            )

        levels = MappingProxyType(dict(entry.get("levels") or {}))
        return CategoryVariant(
            category=category,
            label=entry["label"],
            description=entry.get("description", ""),
            questions=questions,
            **self._wiring(category, levels),
        )

    def _wiring(self, category: CarePlanCategory, labels: Mapping[str, str]) -> dict[str, Any]:
        """Functions attached to the categories that have a wizard.

        *labels* is the category's ``levels`` table from the YAML.
        """
        if category is CarePlanCategory.DEHYDRATION:
            def compose_dehydration(details, risk_level, proposals):
                return generate_instructions(risk_level, proposals, risk_level_labels=labels)

            return {
                "details_model": DehydrationDetails,
                "risk_level_fn": dehydration_risk_level,
                "proposal_fn": generate_dehydration_proposals,
                "instruction_fn": compose_dehydration,
                "risk_level_labels": labels,
            }

        if category is CarePlanCategory.PAIN:
            vocabulary = self.pain_vocabulary

            def compose_pain(details, risk_level, proposals):
                return generate_pain_instructions(details, vocabulary=vocabulary)

            return {
                "details_model": PainCarePlanDetails,
                "instruction_fn": compose_pain,
                "step_guards": MappingProxyType({"SITE_DETAILS": has_selected_sites}),
            }

        if category is CarePlanCategory.CONSTIPATION:
            def compose_constipation(details, severity, proposals):
                return generate_constipation_instructions(
                    severity, proposals, severity_labels=labels,
                )

            return {
                "details_model": ConstipationDetails,
                "risk_level_fn": determine_constipation_severity,
                "proposal_fn": generate_constipation_proposals,
                "instruction_fn": compose_constipation,
                "completion_check": ConstipationDetails.missing_answers,
                "risk_level_labels": labels,
            }

        if category is CarePlanCategory.INFLAMMATION:
            def compose_inflammation(details, risk_level, proposals):
                return generate_inflammation_instructions(proposals)

            return {
                "details_model": InflammationDetails,
                "proposal_fn": generate_inflammation_proposals,
                "instruction_fn": compose_inflammation,
                "follow_up_fn": inflammation_follow_ups,
            }

        return {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, category: CarePlanCategory | str) -> CategoryVariant:
        """Variant for *category*; raises ``KeyError`` if unknown."""
        try:
            key = CarePlanCategory(category)
        except ValueError:
            raise KeyError(f"Unknown care plan category: {category}") from None
        try:
            return self._variants[key]
        except KeyError:
            raise KeyError(f"Registry not loaded or missing category: {key.value}") from None

    @property
    def risk_level_labels(self) -> Mapping[str, str]:
        """Dehydration risk level labels; empty before :meth:`load`."""
        variant = self._variants.get(CarePlanCategory.DEHYDRATION)
        return variant.risk_level_labels if variant is not None else MappingProxyType({})

    @property
    def categories(self) -> tuple[CarePlanCategory, ...]:
        """Categories in display order (YAML order)."""
        return tuple(self._variants)

    def __iter__(self) -> Iterator[CategoryVariant]:
        return iter(self._variants.values())

    def __len__(self) -> int:
        return len(self._variants)


@lru_cache(maxsize=1)
def default_registry() -> CategoryRegistry:
    """Process-wide registry over the packaged YAML, loaded on first use."""
    return CategoryRegistry().load()
