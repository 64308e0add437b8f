"""Reference data endpoints — category tables, pain sites and the stool scale.

Read-only views of the tables loaded from ``categories.yaml``.
"""

from fastapi import APIRouter, Depends

from careplan_engine.models import BRISTOL_SCALE_LABELS
from careplan_engine.pain import group_pain_sites
from careplan_engine.registry import CategoryRegistry

from careplan_server.dependencies import get_registry, get_user_id

router = APIRouter(
    prefix="/reference", tags=["reference"], dependencies=[Depends(get_user_id)],
)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/categories")
def list_categories(
    registry: CategoryRegistry = Depends(get_registry),
) -> list[dict]:
    """Return every category in display order with its question steps."""
    return [
        {
            "category": variant.category.value,
            "label": variant.label,
            "description": variant.description,
            "hasWizard": variant.has_wizard,
            "levels": dict(variant.risk_level_labels),
            "questions": [
                {"id": q.id, "title": q.title, "group": q.group}
                for q in variant.questions
            ],
        }
        for variant in registry
    ]


@router.get("/pain-sites")
def list_pain_sites(
    registry: CategoryRegistry = Depends(get_registry),
) -> list[dict]:
    """Return the pain sites grouped by body region."""
    vocabulary = registry.pain_vocabulary
    return [
        {
            "group": group,
            "label": vocabulary.groups.get(group, group),
            "sites": [{"id": site.id, "label": site.label} for site in sites],
        }
        for group, sites in group_pain_sites(vocabulary).items()
    ]


@router.get("/bristol-scale")
def list_bristol_scale() -> list[dict]:
    """Return the stool form scale used by the constipation wizard."""
    return [{"value": value, "label": label} for value, label in BRISTOL_SCALE_LABELS.items()]
