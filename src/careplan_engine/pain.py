"""Pain rules: the instruction composer and site-selection helpers.

Pain has no score or risk level.  The note lists every condition answered
"yes", labelled with the site or impact name from the registry vocabulary.
"""

from __future__ import annotations

from careplan_engine.constants import NO_PAIN_REPORTED_MESSAGE
from careplan_engine.models.assessment import AssessmentResult
from careplan_engine.models.pain import (
    PainCarePlanDetails,
    PainSiteDef,
    PainSiteDetail,
    PainVocabulary,
)


def _default_vocabulary() -> PainVocabulary:
    from careplan_engine.registry import default_registry

    return default_registry().pain_vocabulary


def has_selected_sites(details: PainCarePlanDetails) -> bool:
    """Step guard: the per-site step only exists once a site is selected."""
    return bool(details.selected_site_ids)


def create_initial_pain_details() -> PainCarePlanDetails:
    return PainCarePlanDetails()


def generate_pain_instructions(
    details: PainCarePlanDetails,
    *,
    vocabulary: PainVocabulary | None = None,
) -> str:
    """Compose the pain note: one line per condition answered "yes".

    Returns ``NO_PAIN_REPORTED_MESSAGE`` when every boolean is null/false
    and no site is selected.
    """
    vocab = vocabulary if vocabulary is not None else _default_vocabulary()
    lines: list[str] = []

    if details.has_daytime_pain is True:
        lines.append(f"- {vocab.daytime_pain_line}")
    if details.has_nighttime_awakening is True:
        lines.append(f"- {vocab.nighttime_awakening_line}")

    if details.selected_site_ids:
        site_names = ", ".join(vocab.site_label(s) for s in details.selected_site_ids)
        lines.append(f"- {vocab.sites_line} {site_names}")
        for site_id in details.selected_site_ids:
            detail = details.detail_for(site_id)
            if detail is None:
                continue
            for check in vocab.site_checks:
                if getattr(detail, check.field) is True:
                    lines.append(f"- {vocab.site_label(site_id)}: {check.finding}")

    for impact in vocab.life_impacts:
        if getattr(details, impact.field) is True:
            lines.append(f"- {impact.finding}")

    return "\n".join(lines) if lines else NO_PAIN_REPORTED_MESSAGE


def assess_pain(
    details: PainCarePlanDetails,
    *,
    vocabulary: PainVocabulary | None = None,
) -> AssessmentResult:
    """Pain result: the composed note only, no risk level and no proposals."""
    return AssessmentResult(
        risk_level=None,
        risk_level_label=None,
        proposals=[],
        instructions=generate_pain_instructions(details, vocabulary=vocabulary),
    )


def toggle_pain_site(details: PainCarePlanDetails, site_id: str) -> PainCarePlanDetails:
    """Select or deselect *site_id*, keeping ``site_details`` in step.

    Selecting appends an all-null detail record; deselecting drops it.
    Returns a new model; *details* is left untouched.
    """
    if site_id in details.selected_site_ids:
        return details.model_copy(update={
            "selected_site_ids": [s for s in details.selected_site_ids if s != site_id],
            "site_details": [d for d in details.site_details if d.site_id != site_id],
        })
    return details.model_copy(update={
        "selected_site_ids": [*details.selected_site_ids, site_id],
        "site_details": [*details.site_details, PainSiteDetail(site_id=site_id)],
    })


def group_pain_sites(
    vocabulary: PainVocabulary | None = None,
) -> dict[str, list[PainSiteDef]]:
    """Sites grouped by body region, groups and sites in vocabulary order."""
    vocab = vocabulary if vocabulary is not None else _default_vocabulary()
    groups: dict[str, list[PainSiteDef]] = {group: [] for group in vocab.groups}
    for site in vocab.sites:
        groups.setdefault(site.group, []).append(site)
    return groups
