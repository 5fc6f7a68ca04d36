# tests/test_api.py

"""
API Endpoint Tests - status codes and error bodies for all FastAPI endpoints
"""

import pytest
from fastapi import status

from conftest import make_evaluation, make_final_score, make_scores, scores_payload
from review_engine.models.enumerations import EngineerLevel

API = "/api/v1"
JUSTIFICATION = "Committee agreed impact was under-credited"


@pytest.fixture
def submitted_lead(repos, cycle_id, lead_id, manager_id):
    """Submitted LEAD evaluation eval-lead with scores 4/3/3/3/2."""
    repos.evaluations._store.put(
        make_evaluation("eval-lead", cycle_id, lead_id, manager_id, make_scores(4, 3, 3, 3, 2))
    )


def submit_payload(employee_id="emp-lead", manager_id="mgr-1", **overrides):
    payload = {
        "cycle_id": "cycle-2025",
        "employee_id": employee_id,
        "manager_id": manager_id,
        "scores": scores_payload(4, 3, 3, 3, 2),
        "narrative": "Strong year",
    }
    payload.update(overrides)
    return payload


def assert_error(response, status_code, error_code):
    assert response.status_code == status_code
    body = response.json()
    assert body["error_code"] == error_code
    assert body["message"]
    assert "timestamp" in body
    return body


# ROOT AND HEALTH


class TestRootAndHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["weighting_profiles"] == "5 levels"


# MANAGER EVALUATIONS


class TestManagerEvaluationEndpoints:

    def test_submit(self, client):
        response = client.post(f"{API}/manager-evaluations", json=submit_payload())
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "SUBMITTED"
        assert data["scores"] == scores_payload(4, 3, 3, 3, 2)
        assert data["narrative"] == "Strong year"

    def test_submit_twice_conflicts(self, client):
        client.post(f"{API}/manager-evaluations", json=submit_payload())
        response = client.post(f"{API}/manager-evaluations", json=submit_payload())
        assert_error(response, status.HTTP_409_CONFLICT, "STATE_CONFLICT")

    def test_not_direct_report_forbidden(self, client):
        response = client.post(f"{API}/manager-evaluations", json=submit_payload(manager_id="mgr-2"))
        assert_error(response, status.HTTP_403_FORBIDDEN, "FORBIDDEN")

    def test_unknown_cycle_not_found(self, client):
        response = client.post(f"{API}/manager-evaluations", json=submit_payload(cycle_id="nope"))
        body = assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")
        assert body["details"] == {"entity_type": "ReviewCycle", "entity_id": "nope"}

    @pytest.mark.parametrize("bad_scores", [
        {**scores_payload(2, 2, 2, 2, 2), "direction": 5},
        {**scores_payload(2, 2, 2, 2, 2), "direction": 2.5},
        {k: v for k, v in scores_payload(2, 2, 2, 2, 2).items() if k != "people_impact"},
    ])
    def test_invalid_scores(self, client, bad_scores):
        response = client.post(f"{API}/manager-evaluations", json=submit_payload(scores=bad_scores))
        assert_error(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")

    def test_malformed_json(self, client):
        response = client.post(
            f"{API}/manager-evaluations",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert_error(response, status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST")

    def test_get_and_patch_draft(self, client, repos, cycle_id, junior_id, manager_id):
        repos.evaluations._store.put(
            make_evaluation("eval-draft", cycle_id, junior_id, manager_id, make_scores(1, 1, 1, 1, 1), submitted=False)
        )

        response = client.patch(
            f"{API}/manager-evaluations/eval-draft",
            json={"manager_id": "mgr-1", "scores": scores_payload(2, 2, 2, 2, 2)},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "DRAFT"

        response = client.get(f"{API}/manager-evaluations/eval-draft")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["scores"]["direction"] == 2

    def test_get_missing(self, client):
        response = client.get(f"{API}/manager-evaluations/missing")
        assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")


# CALIBRATION


class TestCalibrationEndpoints:

    def create_session(self, client, **overrides):
        payload = {
            "cycle_id": "cycle-2025",
            "name": "Platform calibration",
            "facilitator_id": "hr-1",
            "scheduled_at": "2025-10-15T09:00:00Z",
            "participant_ids": ["mgr-1"],
        }
        payload.update(overrides)
        response = client.post(f"{API}/calibration-sessions", json=payload)
        assert response.status_code == status.HTTP_201_CREATED
        return response.json()

    def test_create_and_get(self, client):
        created = self.create_session(client)
        assert created["status"] == "SCHEDULED"
        assert created["participant_count"] == 1

        response = client.get(f"{API}/calibration-sessions/{created['id']}")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["department"] == ""
        assert data["notes"] == ""
        assert data["locked_by"] == "hr-1"
        assert data["participants"] == [{"user_id": "mgr-1", "user_name": "", "role": ""}]

    def test_get_missing(self, client):
        response = client.get(f"{API}/calibration-sessions/missing")
        assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")

    def test_naive_scheduled_at_rejected(self, client):
        response = client.post(
            f"{API}/calibration-sessions",
            json={
                "cycle_id": "cycle-2025",
                "name": "Platform calibration",
                "facilitator_id": "hr-1",
                "scheduled_at": "2025-10-15T09:00:00",
            },
        )
        body = assert_error(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")
        assert body["details"]["field"] == "scheduled_at"

    def test_dashboard(self, client, submitted_lead):
        response = client.get(f"{API}/calibration-sessions/dashboard", params={"cycle_id": "cycle-2025"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["summary"]["total_evaluations"] == 1
        assert data["summary"]["by_bonus_tier"] == {"BELOW": 0, "MEETS": 1, "EXCEEDS": 0}
        assert data["summary"]["by_department"] == {"Platform": {"BELOW": 0, "MEETS": 1, "EXCEEDS": 0}}
        assert data["evaluations"][0]["calibration_status"] == "PENDING"
        assert data["evaluations"][0]["weighted_score"] == pytest.approx(3.2)

        response = client.get(
            f"{API}/calibration-sessions/dashboard", params={"cycle_id": "cycle-2025", "department": "Mobile"}
        )
        assert response.json()["summary"]["total_evaluations"] == 0

    def test_dashboard_unknown_cycle(self, client):
        response = client.get(f"{API}/calibration-sessions/dashboard", params={"cycle_id": "missing"})
        assert_error(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")

    def test_lifecycle(self, client):
        session_id = self.create_session(client)["id"]

        response = client.post(f"{API}/calibration-sessions/{session_id}/start")
        assert response.json()["status"] == "IN_PROGRESS"

        response = client.post(f"{API}/calibration-sessions/{session_id}/start")
        assert_error(response, status.HTTP_409_CONFLICT, "STATE_CONFLICT")

        response = client.post(f"{API}/calibration-sessions/{session_id}/lock", json={"locked_by": "hr-1"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "COMPLETED"
        assert response.json()["locked_at"] is not None

        response = client.put(f"{API}/calibration-sessions/{session_id}/notes", json={"notes": "Wrap-up"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["notes"] == "Wrap-up"

    def test_list_by_cycle_and_department(self, client):
        self.create_session(client, department="Platform")
        self.create_session(client, department="Mobile")

        response = client.get(f"{API}/calibration-sessions", params={"cycle_id": "cycle-2025"})
        assert len(response.json()) == 2

        response = client.get(
            f"{API}/calibration-sessions", params={"cycle_id": "cycle-2025", "department": "Mobile"}
        )
        assert [s["department"] for s in response.json()] == ["Mobile"]

    def test_apply_adjustment(self, client, submitted_lead):
        session_id = self.create_session(client)["id"]

        response = client.post(
            f"{API}/calibration-sessions/{session_id}/adjustments",
            json={
                "evaluation_id": "eval-lead",
                "adjusted_scores": scores_payload(4, 4, 4, 4, 4),
                "justification": JUSTIFICATION,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["old_weighted_score"] == pytest.approx(3.2)
        assert data["new_weighted_score"] == pytest.approx(4.0)
        assert data["old_bonus_tier"] == "MEETS"
        assert data["new_bonus_tier"] == "EXCEEDS"

    def test_short_justification(self, client, submitted_lead):
        session_id = self.create_session(client)["id"]
        response = client.post(
            f"{API}/calibration-sessions/{session_id}/adjustments",
            json={
                "evaluation_id": "eval-lead",
                "adjusted_scores": scores_payload(4, 4, 4, 4, 4),
                "justification": "because",
            },
        )
        assert_error(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")


# FINAL SCORES AND SCORE ADJUSTMENTS


class TestFinalScoreEndpoints:

    def test_calculate_lock_and_read(self, client, submitted_lead):
        response = client.post(f"{API}/final-scores/cycles/cycle-2025/calculate")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["scores_created"] == 1

        response = client.get(f"{API}/final-scores/cycles/cycle-2025/me", params={"user_id": "emp-lead"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["weighted_score"] == pytest.approx(3.2)
        assert data["percentage_score"] == pytest.approx(80.0)
        assert data["bonus_tier"] == "MEETS"

        response = client.post(f"{API}/final-scores/cycles/cycle-2025/lock")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total_scores_locked"] == 1

        response = client.get(f"{API}/final-scores/cycles/cycle-2025/tiers/MEETS")
        assert [s["employee_id"] for s in response.json()] == ["emp-lead"]

    def test_team_view(self, client):
        response = client.get(f"{API}/final-scores/cycles/cycle-2025/team", params={"manager_id": "mgr-1"})
        assert response.status_code == status.HTTP_200_OK
        rows = response.json()["team_scores"]
        assert len(rows) == 3
        assert all(row["bonus_tier"] == "BELOW" and row["weighted_score"] == 0 for row in rows)

    def test_deliver_feedback(self, client, repos, cycle_id, lead_id):
        repos.final_scores._store.put(
            make_final_score("fs-lead", cycle_id, lead_id, make_scores(3, 3, 3, 3, 3), EngineerLevel.LEAD)
        )
        response = client.post(f"{API}/final-scores/fs-lead/deliver", json={"delivered_by": "mgr-1"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["feedback_delivered"] is True

        response = client.post(
            f"{API}/final-scores/cycles/cycle-2025/employees/emp-lead/feedback-delivered",
            json={"manager_id": "mgr-2"},
        )
        assert_error(response, status.HTTP_403_FORBIDDEN, "FORBIDDEN")

    def test_deliver_on_locked_score(self, client, repos, cycle_id, lead_id):
        repos.final_scores._store.put(
            make_final_score("fs-lead", cycle_id, lead_id, make_scores(3, 3, 3, 3, 3), EngineerLevel.LEAD, locked=True)
        )
        response = client.post(f"{API}/final-scores/fs-lead/deliver", json={"delivered_by": "mgr-1"})
        assert_error(response, status.HTTP_409_CONFLICT, "FINAL_SCORE_LOCKED")

    def test_unknown_bonus_tier(self, client):
        response = client.get(f"{API}/final-scores/cycles/cycle-2025/tiers/PLATINUM")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestScoreAdjustmentEndpoints:

    def request_payload(self, **overrides):
        payload = {
            "cycle_id": "cycle-2025",
            "employee_id": "emp-lead",
            "manager_id": "mgr-1",
            "proposed_scores": scores_payload(4, 4, 4, 4, 4),
            "reason": "Launch impact surfaced after lock",
        }
        payload.update(overrides)
        return payload

    def test_request_before_lock_conflicts(self, client, repos, cycle_id, lead_id):
        repos.final_scores._store.put(
            make_final_score("fs-lead", cycle_id, lead_id, make_scores(3, 3, 3, 3, 3), EngineerLevel.LEAD)
        )
        response = client.post(f"{API}/score-adjustments", json=self.request_payload())
        assert_error(response, status.HTTP_409_CONFLICT, "STATE_CONFLICT")

    def test_request_and_review(self, client, repos, cycle_id, lead_id, submitted_lead):
        repos.final_scores._store.put(
            make_final_score("fs-lead", cycle_id, lead_id, make_scores(4, 3, 3, 3, 2), EngineerLevel.LEAD, locked=True)
        )

        response = client.post(f"{API}/score-adjustments", json=self.request_payload())
        assert response.status_code == status.HTTP_201_CREATED
        request_id = response.json()["id"]

        response = client.get(f"{API}/score-adjustments/pending", params={"cycle_id": "cycle-2025"})
        assert [r["id"] for r in response.json()] == [request_id]

        response = client.post(
            f"{API}/score-adjustments/{request_id}/review",
            json={"approver_id": "hr-1", "action": "REJECTED"},
        )
        assert_error(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")

        response = client.post(
            f"{API}/score-adjustments/{request_id}/review",
            json={"approver_id": "hr-1", "action": "APPROVED"},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "APPROVED"
        assert response.json()["approved_by"] == "hr-1"

        response = client.post(
            f"{API}/score-adjustments/{request_id}/review",
            json={"approver_id": "hr-1", "action": "APPROVED"},
        )
        body = assert_error(response, status.HTTP_409_CONFLICT, "STATE_CONFLICT")
        assert "already been reviewed" in body["message"]

        response = client.get(f"{API}/score-adjustments/employees/emp-lead")
        assert [r["status"] for r in response.json()] == ["APPROVED"]
