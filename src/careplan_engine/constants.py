"""Care plan constants shared across the engine.

Lab item codes can be overridden via environment variables so that sites
whose EMR feed uses different codes do not need a code change.  Scoring
thresholds are deliberately *not* configurable: they are part of the
clinical rule tables in :mod:`careplan_engine.dehydration`.
"""

import os

# EMR item codes for the two dehydration lab questions.
LAB_HT_ITEM_CODE = os.getenv("LAB_HT_ITEM_CODE", "HCT")
LAB_HB_ITEM_CODE = os.getenv("LAB_HB_ITEM_CODE", "HGB")

# EMR item codes for the inflammation markers.
LAB_CRP_ITEM_CODE = os.getenv("LAB_CRP_ITEM_CODE", "CRP")
LAB_WBC_ITEM_CODE = os.getenv("LAB_WBC_ITEM_CODE", "WBC")

# Body temperature (degrees Celsius) at or above which the patient has fever.
FEVER_THRESHOLD = 37.5

# Lower bounds (inclusive) of each dehydration risk level.
# 0 -> NONE, 1-4 -> LOW, 5-9 -> MODERATE, 10+ -> HIGH
RISK_LEVEL_THRESHOLDS: list[tuple[int, str]] = [
    (10, "HIGH"),
    (5, "MODERATE"),
    (1, "LOW"),
]

# Lower bounds (inclusive) of each constipation severity above NONE.
CONSTIPATION_SEVERITY_THRESHOLDS: list[tuple[int, str]] = [
    (7, "SEVERE"),
    (4, "MODERATE"),
    (1, "MILD"),
]

# Fixed sentences written into the instructions note.
NO_ACTION_NEEDED_MESSAGE = (
    "No specific action is needed at this time. "
    "Continue to observe the patient's fluid intake."
)
NO_PAIN_REPORTED_MESSAGE = "No pain reported."
NO_INFLAMMATION_FINDINGS_MESSAGE = "No lab, temperature or pain findings recorded."

# Section headings of the dehydration and constipation notes.
DEHYDRATION_NOTE_HEADER = "[Dehydration assessment]"
CONSTIPATION_NOTE_HEADER = "[Constipation assessment]"
PROPOSALS_HEADER = "[Proposed actions]"

# Packaged YAML with the category tables (labels, question order, pain sites).
REGISTRY_FILENAME = "categories.yaml"
