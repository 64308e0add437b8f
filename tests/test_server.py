"""HTTP surface: status codes, error bodies and camelCase payloads.

The app is built without running its lifespan; the registry, wizards and
service are placed on ``app.state`` directly, backed by the in-memory
repository, and ``get_db`` is overridden with an AsyncMock session.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from careplan_engine.care_plan import CarePlanService
from careplan_engine.wizard import build_wizards
from careplan_server.app import create_app
from careplan_server.config import ServerSettings
from careplan_server.dependencies import get_db

HEADERS = {"X-User-ID": "nurse-01"}
API = "/api/v1"


def build_client(registry, mock_repo, reference, settings=None):
    app = create_app(settings or ServerSettings())
    wizards = build_wizards(registry, reference)
    for wizard in wizards.values():
        wizard._repo = mock_repo
    service = CarePlanService(registry)
    service._repo = mock_repo
    app.state.registry = registry
    app.state.wizards = wizards
    app.state.care_plan_service = service

    async def override_get_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def client(registry, mock_repo, reference):
    return build_client(registry, mock_repo, reference)


# =====================================================================
# Identity
# =====================================================================


class TestIdentity:

    def test_missing_user_id(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.get(f"{API}/care-plan/dehydration", params={"itemId": item.id})
        assert resp.status_code == 401

    def test_reference_requires_user_id(self, client):
        assert client.get(f"{API}/reference/categories").status_code == 401

    def test_proxy_secret_enforced(self, registry, mock_repo, reference):
        client = build_client(
            registry, mock_repo, reference, ServerSettings(trusted_proxy_secret="s3cret"),
        )
        item = mock_repo.add_item("PAIN")
        url = f"{API}/care-plan/pain/resume"

        assert client.get(url, params={"itemId": item.id}, headers=HEADERS).status_code == 403
        wrong = {**HEADERS, "X-Proxy-Secret": "nope"}
        assert client.get(url, params={"itemId": item.id}, headers=wrong).status_code == 403
        right = {**HEADERS, "X-Proxy-Secret": "s3cret"}
        assert client.get(url, params={"itemId": item.id}, headers=right).status_code == 200


# =====================================================================
# Dehydration wizard
# =====================================================================


class TestDehydrationEndpoints:

    def test_get_not_started(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.get(f"{API}/care-plan/dehydration", params={"itemId": item.id}, headers=HEADERS)

        assert resp.status_code == 200
        body = resp.json()
        assert body["itemId"] == item.id
        assert body["status"] == "NOT_STARTED"
        assert body["currentQuestionId"] is None
        assert body["assessmentResult"] is None
        assert body["details"]["labHt"]["deviationStatus"] == "NO_DATA"
        assert body["details"]["vitalPulse"] is None

    def test_save_progress(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.put(
            f"{API}/care-plan/dehydration",
            json={
                "itemId": item.id,
                "currentQuestionId": "vital_bp",
                "details": {"vitalPulse": 96, "vitalSystolicBp": 118},
            },
            headers=HEADERS,
        )

        assert resp.status_code == 200
        assert resp.json()["status"] == "IN_PROGRESS"
        assert resp.json()["currentQuestionId"] == "vital_bp"
        assert item.details["vitalSystolicBp"] == 118

    def test_out_of_range_value(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.put(
            f"{API}/care-plan/dehydration",
            json={"itemId": item.id, "currentQuestionId": "vital_pulse", "details": {"vitalPulse": 400}},
            headers=HEADERS,
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "INVALID_INPUT"
        assert body["errors"]
        assert mock_repo.calls == []

    def test_unknown_question_id(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.put(
            f"{API}/care-plan/dehydration",
            json={"itemId": item.id, "currentQuestionId": "SITE_DETAILS", "details": {}},
            headers=HEADERS,
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_INPUT"

    def test_non_positive_item_id(self, client):
        resp = client.get(f"{API}/care-plan/dehydration", params={"itemId": 0}, headers=HEADERS)
        assert resp.status_code == 400

    def test_unknown_item(self, client):
        resp = client.get(f"{API}/care-plan/dehydration", params={"itemId": 999}, headers=HEADERS)
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    def test_item_of_another_category(self, client, mock_repo):
        item = mock_repo.add_item("SLEEP")
        resp = client.get(f"{API}/care-plan/dehydration", params={"itemId": item.id}, headers=HEADERS)
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_CATEGORY"

    def test_store_failure(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        mock_repo.fail_on.add("complete_item")
        resp = client.post(
            f"{API}/care-plan/dehydration",
            json={"itemId": item.id, "details": {}},
            headers=HEADERS,
        )

        assert resp.status_code == 500
        assert resp.json()["code"] == "PERSISTENCE_ERROR"
        assert "boom" not in resp.text

    def test_complete(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION", status="IN_PROGRESS")
        resp = client.post(
            f"{API}/care-plan/dehydration",
            json={
                "itemId": item.id,
                "details": {"visualSkin": "SEVERE", "intakeFrequency": "RARE", "intakeAmount": 400},
            },
            headers=HEADERS,
        )

        assert resp.status_code == 200
        result = resp.json()["assessmentResult"]
        assert result["riskLevel"] == "MODERATE"
        assert result["riskLevelLabel"] == "Moderate dehydration risk"
        assert result["proposals"][0] == {
            "id": "dehydration_visual_severe",
            "category": "dehydration",
            "message": result["proposals"][0]["message"],
            "priority": 1,
        }
        assert result["instructions"] == item.instructions

    def test_advance(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION")
        resp = client.post(
            f"{API}/care-plan/dehydration/advance",
            json={"itemId": item.id, "currentQuestionId": "visual_urine", "details": {"visualUrine": "MILD"}},
            headers=HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json()["currentQuestionId"] == "intake_frequency"

    def test_previous_at_first_step(self, client, mock_repo):
        resp = client.post(
            f"{API}/care-plan/dehydration/previous",
            json={"currentQuestionId": "lab_ht", "details": {}},
            headers=HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json() == {"currentQuestionId": None}
        assert mock_repo.calls == []

    def test_resume(self, client, mock_repo):
        item = mock_repo.add_item("DEHYDRATION", status="IN_PROGRESS", current_question_id="visual_oral")
        resp = client.get(f"{API}/care-plan/dehydration/resume", params={"itemId": item.id}, headers=HEADERS)

        assert resp.json() == {"view": "question", "questionId": "visual_oral", "stepIndex": 5, "totalSteps": 10}


# =====================================================================
# Pain wizard
# =====================================================================


class TestPainEndpoints:

    def test_get_initial_shape(self, client, mock_repo):
        item = mock_repo.add_item("PAIN")
        resp = client.get(f"{API}/care-plan/pain", params={"itemId": item.id}, headers=HEADERS)

        details = resp.json()["details"]
        assert details["selectedSiteIds"] == []
        assert details["siteDetails"] == []
        assert details["hasDaytimePain"] is None

    def test_unknown_site(self, client, mock_repo):
        item = mock_repo.add_item("PAIN")
        resp = client.put(
            f"{API}/care-plan/pain",
            json={"itemId": item.id, "currentQuestionId": "PAIN_SITES", "details": {"selectedSiteIds": ["TAIL"]}},
            headers=HEADERS,
        )
        assert resp.status_code == 400

    def test_advance_skips_site_details(self, client, mock_repo):
        item = mock_repo.add_item("PAIN")
        resp = client.post(
            f"{API}/care-plan/pain/advance",
            json={"itemId": item.id, "currentQuestionId": "PAIN_SITES", "details": {}},
            headers=HEADERS,
        )
        assert resp.json()["currentQuestionId"] == "LIFE_IMPACT"

    def test_previous_enters_site_details(self, client):
        resp = client.post(
            f"{API}/care-plan/pain/previous",
            json={"currentQuestionId": "LIFE_IMPACT", "details": {"selectedSiteIds": ["CHEST"]}},
            headers=HEADERS,
        )
        assert resp.json() == {"currentQuestionId": "SITE_DETAILS"}

    def test_complete(self, client, mock_repo):
        item = mock_repo.add_item("PAIN")
        resp = client.post(
            f"{API}/care-plan/pain",
            json={
                "itemId": item.id,
                "details": {
                    "selectedSiteIds": ["LOWER_BACK"],
                    "siteDetails": [{"siteId": "LOWER_BACK", "movementPain": True}],
                },
            },
            headers=HEADERS,
        )

        result = resp.json()["assessmentResult"]
        assert result["riskLevel"] is None
        assert result["proposals"] == []
        assert result["instructions"] == "- Pain sites: Lower back\n- Lower back: pain on movement"

    def test_get_lists_prescriptions(self, client, mock_repo):
        item = mock_repo.add_item("PAIN")
        resp = client.get(f"{API}/care-plan/pain", params={"itemId": item.id}, headers=HEADERS)
        assert resp.json()["medications"] == []

    def test_resume_after_sites_were_cleared(self, client, mock_repo):
        item = mock_repo.add_item(
            "PAIN", status="IN_PROGRESS", current_question_id="SITE_DETAILS",
            details={"selectedSiteIds": []},
        )
        resp = client.get(f"{API}/care-plan/pain/resume", params={"itemId": item.id}, headers=HEADERS)
        assert resp.json()["questionId"] == "LIFE_IMPACT"


# =====================================================================
# Constipation and inflammation wizards
# =====================================================================


class TestConstipationEndpoints:

    COMPLETE_ANSWERS = {
        "daysWithoutBowelMovement": 3,
        "bristolScale": 2,
        "hasNausea": False,
        "hasAbdominalDistension": True,
        "hasAppetite": True,
        "mealAmount": "SMALL",
        "hasBowelSounds": True,
        "hasIntestinalGas": False,
        "hasFecalMass": False,
    }

    def test_save_partial_answers(self, client, mock_repo):
        item = mock_repo.add_item("CONSTIPATION")
        resp = client.put(
            f"{API}/care-plan/constipation",
            json={"itemId": item.id, "currentQuestionId": "bristolScale", "details": {"bristolScale": 6}},
            headers=HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json()["details"]["bristolScale"] == 6

    def test_bristol_scale_out_of_range(self, client, mock_repo):
        item = mock_repo.add_item("CONSTIPATION")
        resp = client.put(
            f"{API}/care-plan/constipation",
            json={"itemId": item.id, "currentQuestionId": "bristolScale", "details": {"bristolScale": 8}},
            headers=HEADERS,
        )
        assert resp.status_code == 400

    def test_complete_with_missing_answers(self, client, mock_repo):
        item = mock_repo.add_item("CONSTIPATION")
        resp = client.post(
            f"{API}/care-plan/constipation",
            json={"itemId": item.id, "details": {"daysWithoutBowelMovement": 3}},
            headers=HEADERS,
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_INPUT"
        assert item.status == "NOT_STARTED"

    def test_complete(self, client, mock_repo):
        item = mock_repo.add_item("CONSTIPATION")
        resp = client.post(
            f"{API}/care-plan/constipation",
            json={"itemId": item.id, "details": self.COMPLETE_ANSWERS},
            headers=HEADERS,
        )

        # 3 days (2) + hard stool (2) + distension (1) = 5 -> MODERATE
        result = resp.json()["assessmentResult"]
        assert result["riskLevel"] == "MODERATE"
        assert result["riskLevelLabel"] == "Moderate constipation"
        assert result["followUpCategories"] == []
        assert result["instructions"] == item.instructions


class TestInflammationEndpoints:

    def test_complete_with_pain(self, client, mock_repo):
        item = mock_repo.add_item("INFLAMMATION")
        resp = client.post(
            f"{API}/care-plan/inflammation",
            json={"itemId": item.id, "details": {"hasPain": True}},
            headers=HEADERS,
        )

        assert resp.status_code == 200
        result = resp.json()["assessmentResult"]
        assert result["riskLevel"] is None
        assert result["followUpCategories"] == ["PAIN"]

    def test_unknown_question(self, client, mock_repo):
        item = mock_repo.add_item("INFLAMMATION")
        resp = client.post(
            f"{API}/care-plan/inflammation/advance",
            json={"itemId": item.id, "currentQuestionId": "lab_ht", "details": {}},
            headers=HEADERS,
        )
        assert resp.status_code == 400

    def test_advance(self, client, mock_repo):
        item = mock_repo.add_item("INFLAMMATION")
        resp = client.post(
            f"{API}/care-plan/inflammation/advance",
            json={"itemId": item.id, "currentQuestionId": "vital_signs", "details": {}},
            headers=HEADERS,
        )
        assert resp.json()["currentQuestionId"] == "pain_check"


# =====================================================================
# Care plans
# =====================================================================


class TestCarePlanEndpoints:

    def test_create_then_conflict(self, client, mock_repo):
        mock_repo.admissions.add(100)
        resp = client.post(f"{API}/care-plans", json={"admissionId": 100}, headers=HEADERS)
        assert resp.status_code == 201
        assert resp.json() == {"carePlanId": 1, "itemCount": 10}
        assert mock_repo.plans[100].created_by == "nurse-01"

        resp = client.post(f"{API}/care-plans", json={"admissionId": 100}, headers=HEADERS)
        assert resp.status_code == 409
        assert resp.json()["code"] == "ALREADY_EXISTS"

    def test_create_for_unknown_admission(self, client):
        resp = client.post(f"{API}/care-plans", json={"admissionId": 7}, headers=HEADERS)
        assert resp.status_code == 404

    def test_overview(self, client, mock_repo):
        mock_repo.admissions.add(100)
        client.post(f"{API}/care-plans", json={"admissionId": 100}, headers=HEADERS)

        resp = client.get(f"{API}/care-plans/100", headers=HEADERS)
        body = resp.json()
        assert resp.status_code == 200
        assert body["overallStatus"] == "NOT_STARTED"
        assert [i["category"] for i in body["items"]][:3] == ["MEDICATION", "PAIN", "DEHYDRATION"]

    def test_missing_overview(self, client):
        assert client.get(f"{API}/care-plans/100", headers=HEADERS).status_code == 404

    def test_status_override(self, client, mock_repo):
        mock_repo.admissions.add(100)
        client.post(f"{API}/care-plans", json={"admissionId": 100}, headers=HEADERS)
        item = mock_repo.plans[100].items[0]

        resp = client.patch(
            f"{API}/care-plan-items/{item.id}/status", json={"status": "NOT_APPLICABLE"}, headers=HEADERS,
        )

        assert resp.status_code == 200
        assert resp.json()["items"][0]["status"] == "NOT_APPLICABLE"
        assert resp.json()["overallStatus"] == "NOT_STARTED"

    def test_invalid_status(self, client, mock_repo):
        item = mock_repo.add_item("SLEEP")
        resp = client.patch(
            f"{API}/care-plan-items/{item.id}/status", json={"status": "SKIPPED"}, headers=HEADERS,
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_INPUT"


# =====================================================================
# Reference tables
# =====================================================================


class TestReferenceEndpoints:

    def test_categories(self, client):
        body = client.get(f"{API}/reference/categories", headers=HEADERS).json()

        assert len(body) == 10
        dehydration = next(c for c in body if c["category"] == "DEHYDRATION")
        assert dehydration["hasWizard"] is True
        assert dehydration["questions"][0] == {"id": "lab_ht", "title": "Hematocrit (Ht)", "group": "lab"}

    def test_category_levels(self, client):
        body = client.get(f"{API}/reference/categories", headers=HEADERS).json()
        levels = {c["category"]: c["levels"] for c in body}

        assert levels["CONSTIPATION"]["SEVERE"] == "Severe constipation"
        assert levels["DEHYDRATION"]["NONE"] == "No dehydration risk"
        assert levels["PAIN"] == {}

    def test_bristol_scale(self, client):
        body = client.get(f"{API}/reference/bristol-scale", headers=HEADERS).json()

        assert [entry["value"] for entry in body] == [1, 2, 3, 4, 5, 6, 7]
        assert body[3]["label"] == "Smooth, soft sausage"

    def test_pain_sites(self, client):
        body = client.get(f"{API}/reference/pain-sites", headers=HEADERS).json()

        assert [g["group"] for g in body] == ["HEAD_NECK", "TRUNK", "UPPER_LIMB", "LOWER_LIMB"]
        assert body[0]["sites"] == [{"id": "HEAD", "label": "Head"}, {"id": "NECK", "label": "Neck"}]
