from unittest.mock import AsyncMock

import pytest

from careplan_engine.care_plan import CarePlanService
from careplan_engine.registry import CategoryRegistry
from careplan_engine.wizard import (
    AssessmentWizard,
    DehydrationWizard,
    InflammationWizard,
    PainWizard,
)

from helpers.mocks import MockCarePlanRepository, MockReferenceSource


@pytest.fixture(scope="session")
def registry():
    """Load the packaged category tables once for the entire test session."""
    return CategoryRegistry().load()


@pytest.fixture
def mock_repo():
    """Fresh MockCarePlanRepository for each test."""
    return MockCarePlanRepository()


@pytest.fixture
def reference():
    """Reference source with no labs and no vitals recorded."""
    return MockReferenceSource()


@pytest.fixture
def mock_db():
    """AsyncMock standing in for AsyncSession — flush/commit are no-ops."""
    return AsyncMock()


@pytest.fixture
def dehydration_wizard(registry, mock_repo, reference):
    wizard = DehydrationWizard(registry, reference)
    wizard._repo = mock_repo
    return wizard


@pytest.fixture
def pain_wizard(registry, mock_repo, reference):
    wizard = PainWizard(registry, reference)
    wizard._repo = mock_repo
    return wizard


@pytest.fixture
def constipation_wizard(registry, mock_repo, reference):
    wizard = AssessmentWizard(registry, "CONSTIPATION", reference)
    wizard._repo = mock_repo
    return wizard


@pytest.fixture
def inflammation_wizard(registry, mock_repo, reference):
    wizard = InflammationWizard(registry, reference)
    wizard._repo = mock_repo
    return wizard


@pytest.fixture
def service(registry, mock_repo):
    svc = CarePlanService(registry)
    svc._repo = mock_repo
    return svc
