from datetime import date, timedelta
from io import BytesIO

from openpyxl import load_workbook  # type: ignore
from sqlalchemy.exc import OperationalError

from conftest import PASSWORD, auth_headers, make_period, score_payload
from teacher_eval.models import ActivityLog, ActivityType
from teacher_eval.services import report_service

API = "/api/v1"


def submit_body(seed, subject, teacher, values=(2, 4, 3, 5), **kwargs):
    body = {
        "teacher_id": teacher.teacher_id,
        "subject_id": subject.subject_id,
        "is_anonymous": True,
        "comment": "Great class",
        "scores": score_payload(seed.question_ids, values),
    }
    body.update(kwargs)
    return body


def test_read_main(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Teacher Evaluation API! Visit /docs for API documentation."}


def test_login_rejects_bad_password(client, seed):
    response = client.post(f"{API}/auth/login", json={"username": "juan", "password": "wrong"})
    assert response.status_code == 401


def test_login_me_logout_round_trip(client, db, seed):
    response = client.post(f"{API}/auth/login", json={"username": "juan", "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get(f"{API}/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["username"] == "juan"
    assert me.json()["roles"] == ["student"]

    logout = client.post(f"{API}/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["session_closed"] is True

    db.expire_all()
    login_row = db.query(ActivityLog).filter(ActivityLog.activity_type == ActivityType.Login).one()
    assert login_row.time_out is not None
    assert login_row.duration is not None


def test_routes_require_authentication(client, seed):
    response = client.get(f"{API}/evaluation-periods/current")
    assert response.status_code == 401


def test_students_cannot_manage_periods(client, seed):
    today = date.today()
    response = client.post(
        f"{API}/evaluation-periods/",
        json={
            "period_name": "Sneaky", "academic_year": "2025-2026", "semester": "First Semester",
            "start_date": str(today), "end_date": str(today + timedelta(days=5)),
        },
        headers=auth_headers(seed.student1),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized"
    assert response.json()["success"] is False


def test_period_lifecycle_over_http(client, seed):
    headers = auth_headers(seed.admin)
    body = {
        "period_name": "Sem1 2025", "academic_year": "2024-2025", "semester": "First Semester",
        "start_date": "2025-03-01", "end_date": "2025-06-01", "is_current": True,
    }
    created = client.post(f"{API}/evaluation-periods/", json=body, headers=headers)
    assert created.status_code == 201
    period_id = created.json()["evaluation_period_id"]
    assert created.json()["created_by"] == "admin"

    overlap = client.post(
        f"{API}/evaluation-periods/",
        json={**body, "period_name": "Summer", "start_date": "2025-05-01", "end_date": "2025-08-01", "is_current": False},
        headers=headers,
    )
    assert overlap.status_code == 409
    assert overlap.json()["error"] == "OverlappingPeriod"

    bad_range = client.post(
        f"{API}/evaluation-periods/",
        json={**body, "start_date": "2025-09-01", "end_date": "2025-08-01"},
        headers=headers,
    )
    assert bad_range.status_code == 400
    assert bad_range.json()["error"] == "InvalidRange"

    overposted = client.post(f"{API}/evaluation-periods/", json={**body, "evaluation_period_id": 99}, headers=headers)
    assert overposted.status_code == 422

    toggled = client.post(f"{API}/evaluation-periods/{period_id}/toggle-active", headers=headers)
    assert toggled.status_code == 200
    assert toggled.json()["period"]["is_active"] is False
    assert toggled.json()["period"]["is_current"] is False

    current = client.get(f"{API}/evaluation-periods/current", headers=headers)
    assert current.json()["found"] is False

    missing = client.post(f"{API}/evaluation-periods/999/set-current", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "NotFound"

    deleted = client.delete(f"{API}/evaluation-periods/{period_id}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json()["deleted_id"] == period_id


def test_current_period_endpoint(client, seed, open_period):
    response = client.get(f"{API}/evaluation-periods/current", headers=auth_headers(seed.student1))
    payload = response.json()
    assert payload["found"] is True
    assert payload["period"]["evaluation_period_id"] == open_period.evaluation_period_id
    assert payload["period"]["status"] == "Active"
    assert payload["period"]["is_valid_for_evaluation"] is True


def test_eligibility_without_period(client, seed):
    response = client.get(f"{API}/evaluations/eligibility", headers=auth_headers(seed.student1))
    assert response.status_code == 200
    assert response.json()["status"] == "no_active_period"


def test_submit_and_resubmit_over_http(client, seed, open_period):
    headers = auth_headers(seed.student1)

    eligibility = client.get(f"{API}/evaluations/eligibility", headers=headers).json()
    assert eligibility["status"] == "pending"
    assert len(eligibility["candidates"]) == 2

    first = client.post(f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=headers)
    assert first.status_code == 201
    assert first.json()["period_name"] == "Current Term"

    second = client.post(f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=headers)
    assert second.status_code == 409
    assert second.json()["error"] == "AlreadyEvaluated"

    remaining = client.get(f"{API}/evaluations/eligibility", headers=headers).json()
    assert [c["subject_code"] for c in remaining["candidates"]] == ["IT102"]


def test_submit_rejections_over_http(client, seed, open_period):
    not_enrolled = client.post(
        f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=auth_headers(seed.student2)
    )
    assert not_enrolled.status_code == 400
    assert not_enrolled.json()["error"] == "NotEnrolled"

    out_of_range = client.post(
        f"{API}/evaluations/",
        json=submit_body(seed, seed.it101, seed.santos, values=(0, 4, 3, 6)),
        headers=auth_headers(seed.student1),
    )
    assert out_of_range.status_code == 422


def test_submit_after_period_end_over_http(client, db, seed):
    today = date.today()
    make_period(db, "Past Term", today - timedelta(days=60), today - timedelta(days=1), current=True)

    response = client.post(
        f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=auth_headers(seed.student1)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "PeriodNotActive"


def test_view_and_delete_evaluation(client, seed, open_period):
    created = client.post(
        f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=auth_headers(seed.student1)
    )
    evaluation_id = created.json()["evaluation_id"]

    other = client.get(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.student2))
    assert other.status_code == 403

    own = client.get(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.student1))
    assert own.status_code == 200
    assert own.json()["student_name"] == "Anonymous"
    assert own.json()["overall_average"] == 3.5

    as_admin = client.get(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.admin))
    assert as_admin.json()["student_name"] == "Juan Dela Cruz"

    forbidden = client.delete(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.student1))
    assert forbidden.status_code == 403

    deleted = client.delete(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.admin))
    assert deleted.status_code == 200
    assert deleted.json()["removed_activity_logs"] == 1

    gone = client.get(f"{API}/evaluations/{evaluation_id}", headers=auth_headers(seed.admin))
    assert gone.status_code == 404


def test_statistics_and_export(client, seed, open_period):
    client.post(f"{API}/evaluations/", json=submit_body(seed, seed.it101, seed.santos), headers=auth_headers(seed.student1))
    headers = auth_headers(seed.admin)
    period_id = open_period.evaluation_period_id

    stats = client.get(f"{API}/evaluation-periods/{period_id}/statistics", headers=headers)
    assert stats.status_code == 200
    assert stats.json()["total_evaluations"] == 1
    assert stats.json()["top_rated_teachers"][0]["teacher_name"] == "Maria Santos"

    export = client.get(f"{API}/evaluation-periods/{period_id}/statistics/export", headers=headers)
    assert export.status_code == 200
    assert "attachment" in export.headers["content-disposition"]
    sheet = load_workbook(BytesIO(export.content)).active
    assert sheet["A1"].value == "Evaluation period: Current Term"
    assert sheet["B3"].value == 1


def test_enrollment_endpoints(client, seed):
    headers = auth_headers(seed.admin)

    enrolled = client.post(
        f"{API}/enrollments/",
        json={"student_id": seed.student2.user_id, "subject_ids": [seed.it101.subject_id]},
        headers=headers,
    )
    assert enrolled.status_code == 201
    assert enrolled.json()["enrolled_count"] == 1

    invalid = client.post(
        f"{API}/enrollments/",
        json={"student_id": seed.student2.user_id, "subject_ids": [seed.it104.subject_id]},
        headers=headers,
    )
    assert invalid.status_code == 400
    assert invalid.json()["error"] == "InvalidEnrollment"

    placement = client.put(
        f"{API}/enrollments/students/{seed.student2.user_id}/placement",
        json={"level_id": seed.college.level_id, "section_id": seed.sec_a.section_id},
        headers=headers,
    )
    assert placement.status_code == 200
    assert placement.json()["auto_enrolled_count"] == 2

    own = client.get(f"{API}/enrollments/", headers=auth_headers(seed.student2))
    assert len(own.json()) == 3


def test_criteria_endpoints(client, seed):
    listed = client.get(f"{API}/criteria/", headers=auth_headers(seed.student1))
    assert [c["name"] for c in listed.json()] == ["Teaching Competence", "Classroom Management"]

    replaced = client.put(
        f"{API}/criteria/{seed.management.criteria_id}/questions",
        json={"descriptions": ["Is punctual"]},
        headers=auth_headers(seed.admin),
    )
    assert replaced.status_code == 200
    assert [q["description"] for q in replaced.json()["questions"]] == ["Is punctual"]

    blank = client.put(
        f"{API}/criteria/{seed.management.criteria_id}/questions",
        json={"descriptions": ["   "]},
        headers=auth_headers(seed.admin),
    )
    assert blank.status_code == 422


def test_activity_logs_and_dashboard(client, seed, open_period):
    client.post(f"{API}/auth/login", json={"username": "juan", "password": PASSWORD})
    headers = auth_headers(seed.admin)

    page = client.get(f"{API}/activity-logs/", params={"activity_type": "Login"}, headers=headers)
    assert page.status_code == 200
    assert page.json()["total_count"] == 1
    log_id = page.json()["items"][0]["activity_log_id"]
    assert client.get(f"{API}/activity-logs/{log_id}", headers=headers).json()["username"] == "juan"

    dashboard = client.get(f"{API}/reports/dashboard", headers=headers)
    assert dashboard.status_code == 200
    assert dashboard.json()["current_period"]["period_name"] == "Current Term"
    assert dashboard.json()["total_possible_evaluations"] == 3


def test_storage_outage_is_reported_unavailable(client, seed, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("could not connect to server"))

    monkeypatch.setattr(report_service, "dashboard_summary", broken)

    response = client.get(f"{API}/reports/dashboard", headers=auth_headers(seed.admin))
    assert response.status_code == 503
    assert response.json()["error"] == "Unavailable"
