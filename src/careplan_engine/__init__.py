"""careplan_engine — care plan assessment engine.

Public API:
    CategoryRegistry  — loads the category tables; one CategoryVariant per category
    AssessmentWizard  — resumable one-question-at-a-time wizard for a category
    DehydrationWizard — wizard that also merges the latest labs and vitals
    InflammationWizard — merges CRP, WBC and the latest vitals
    PainWizard        — attaches the admission's prescriptions
    CarePlanService   — plan creation, overview and the generic status override

Pure rules:
    evaluate_lab_deviation, calculate_dehydration_risk_score,
    determine_risk_level, generate_dehydration_proposals,
    generate_instructions, assess_dehydration
    generate_pain_instructions, assess_pain, toggle_pain_site, group_pain_sites
    determine_constipation_severity, generate_constipation_proposals,
    generate_constipation_instructions
    judge_fever, judge_inflammation, generate_inflammation_proposals,
    generate_inflammation_instructions
    derive_overall_status
    next_question, previous_question, resume_point
"""

from careplan_engine.care_plan import CarePlanService
from careplan_engine.constipation import (
    calculate_constipation_score,
    determine_constipation_severity,
    generate_constipation_instructions,
    generate_constipation_proposals,
)
from careplan_engine.dehydration import (
    assess_dehydration,
    calculate_dehydration_risk_score,
    determine_risk_level,
    evaluate_lab_deviation,
    generate_dehydration_proposals,
    generate_instructions,
)
from careplan_engine.errors import (
    AlreadyExistsError,
    CarePlanError,
    InvalidCategoryError,
    InvalidInputError,
    NotFoundError,
    PersistenceError,
)
from careplan_engine.inflammation import (
    generate_inflammation_instructions,
    generate_inflammation_proposals,
    judge_fever,
    judge_inflammation,
)
from careplan_engine.interfaces import ReferenceDataSource
from careplan_engine.navigation import next_question, previous_question, resume_point
from careplan_engine.pain import (
    assess_pain,
    create_initial_pain_details,
    generate_pain_instructions,
    group_pain_sites,
    toggle_pain_site,
)
from careplan_engine.reference import DatabaseReferenceSource
from careplan_engine.registry import CategoryRegistry, CategoryVariant, default_registry
from careplan_engine.status import derive_overall_status
from careplan_engine.wizard import (
    AssessmentWizard,
    DehydrationWizard,
    InflammationWizard,
    PainWizard,
    build_wizards,
)

__all__ = [
    # Registry / orchestration
    "CategoryRegistry",
    "CategoryVariant",
    "default_registry",
    "AssessmentWizard",
    "DehydrationWizard",
    "InflammationWizard",
    "PainWizard",
    "build_wizards",
    "CarePlanService",
    "ReferenceDataSource",
    "DatabaseReferenceSource",
    # Errors
    "CarePlanError",
    "NotFoundError",
    "InvalidCategoryError",
    "InvalidInputError",
    "AlreadyExistsError",
    "PersistenceError",
    # Dehydration rules
    "evaluate_lab_deviation",
    "calculate_dehydration_risk_score",
    "determine_risk_level",
    "generate_dehydration_proposals",
    "generate_instructions",
    "assess_dehydration",
    # Pain rules
    "generate_pain_instructions",
    "assess_pain",
    "create_initial_pain_details",
    "toggle_pain_site",
    "group_pain_sites",
    # Constipation rules
    "calculate_constipation_score",
    "determine_constipation_severity",
    "generate_constipation_proposals",
    "generate_constipation_instructions",
    # Inflammation rules
    "judge_fever",
    "judge_inflammation",
    "generate_inflammation_proposals",
    "generate_inflammation_instructions",
    # Status / navigation
    "derive_overall_status",
    "next_question",
    "previous_question",
    "resume_point",
]
