"""Database-level enumerations for care plans."""

import enum


class CarePlanCategory(str, enum.Enum):
    """The fixed set of care plan categories, in display order.

    Every care plan owns exactly one item per category, created together
    with the plan and never added or removed afterwards.
    """

    MEDICATION = "MEDICATION"
    PAIN = "PAIN"
    DEHYDRATION = "DEHYDRATION"
    CONSTIPATION = "CONSTIPATION"
    INFLAMMATION = "INFLAMMATION"
    MOBILITY = "MOBILITY"
    DEMENTIA = "DEMENTIA"
    SAFETY = "SAFETY"
    SLEEP = "SLEEP"
    INFORMATION = "INFORMATION"


class CarePlanItemStatus(str, enum.Enum):
    """Lifecycle states for a single care plan item.

    Transitions driven by the assessment wizard:
        NOT_STARTED -> IN_PROGRESS  (first progress save)
        IN_PROGRESS -> COMPLETED    (assessment completed)
        COMPLETED   -> IN_PROGRESS  (progress saved again, re-opens the item)

    NOT_APPLICABLE is only reachable through the generic status override.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class PatientSex(str, enum.Enum):
    """Patient sex as recorded on the admission; selects reference ranges."""

    MALE = "MALE"
    FEMALE = "FEMALE"
