from datetime import datetime, timedelta

import pytest
import requests
from sqlalchemy import select

from teacher_eval.exceptions import NotFoundError
from teacher_eval.models import ActivityLog, ActivityType
from teacher_eval.services import activity_service

T1 = datetime(2025, 4, 1, 8, 0, 0)
T2 = datetime(2025, 4, 1, 9, 15, 30)


def logs(db, activity_type):
    db.expire_all()
    return db.execute(
        select(ActivityLog).where(ActivityLog.activity_type == activity_type).order_by(ActivityLog.activity_log_id)
    ).scalars().all()


def test_login_then_logout_closes_the_session(db, seed):
    login = activity_service.record_login(db, seed.student1_principal, "127.0.0.1", "pytest", now=T1)
    assert login.session_token

    closed = activity_service.record_logout(
        db, seed.student1_principal, "127.0.0.1", session_token=login.session_token, now=T2
    )

    assert closed.activity_log_id == login.activity_log_id
    assert closed.time_in == T1
    assert closed.time_out == T2
    assert closed.duration == T2 - T1
    logout_rows = logs(db, ActivityType.Logout)
    assert len(logout_rows) == 1
    assert logout_rows[0].session_token == login.session_token


def test_logout_without_login_still_recorded(db, seed):
    closed = activity_service.record_logout(db, seed.student1_principal, "127.0.0.1", now=T2)

    assert closed is None
    assert len(logs(db, ActivityType.Logout)) == 1
    assert logs(db, ActivityType.Login) == []


def test_session_token_picks_the_right_open_login(db, seed):
    first = activity_service.record_login(db, seed.student1_principal, now=T1)
    second = activity_service.record_login(db, seed.student1_principal, now=T1 + timedelta(minutes=5))

    closed = activity_service.record_logout(db, seed.student1_principal, session_token=first.session_token, now=T2)

    assert closed.activity_log_id == first.activity_log_id
    db.refresh(second)
    assert second.time_out is None


def test_fallback_to_most_recent_open_login_when_no_token(db, seed):
    activity_service.record_login(db, seed.student1_principal, now=T1)
    latest = activity_service.record_login(db, seed.student1_principal, now=T1 + timedelta(minutes=5))
    activity_service.record_login(db, seed.student2_principal, now=T1 + timedelta(minutes=6))

    closed = activity_service.record_logout(db, seed.student1_principal, now=T2)

    assert closed.activity_log_id == latest.activity_log_id
    assert closed.duration == T2 - (T1 + timedelta(minutes=5))


def test_unknown_token_does_not_close_another_session(db, seed):
    other = activity_service.record_login(db, seed.student1_principal, now=T1)

    closed = activity_service.record_logout(db, seed.student1_principal, session_token="stale-token", now=T2)

    assert closed is None
    db.refresh(other)
    assert other.time_out is None
    assert other.duration is None
    assert len(logs(db, ActivityType.Logout)) == 1


def test_second_logout_with_same_token_leaves_other_session_open(db, seed):
    first = activity_service.record_login(db, seed.student1_principal, now=T1)
    second = activity_service.record_login(db, seed.student1_principal, now=T1 + timedelta(minutes=5))

    closed = activity_service.record_logout(db, seed.student1_principal, session_token=first.session_token, now=T2)
    again = activity_service.record_logout(
        db, seed.student1_principal, session_token=first.session_token, now=T2 + timedelta(minutes=1)
    )

    assert closed.activity_log_id == first.activity_log_id
    assert again is None
    db.refresh(second)
    assert second.time_out is None
    assert len(logs(db, ActivityType.Logout)) == 2


def test_geolocation_maps_loopback_to_local():
    assert activity_service.lookup_location("127.0.0.1") == {"city": "Local", "region": "Local", "country": "Local"}
    assert activity_service.lookup_location(None)["country"] == "Local"


def test_geolocation_failure_maps_to_unknown(monkeypatch):
    def unreachable(*args, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(activity_service, "IP_GEOLOCATION_ENABLED", True)
    monkeypatch.setattr(activity_service.requests, "get", unreachable)

    assert activity_service.lookup_location("8.8.8.8") == {
        "city": "Unknown", "region": "Unknown", "country": "Unknown",
    }


def test_geolocation_success(monkeypatch):
    class FakeResponse:
        def raise_for_status(self):
            return None

        def json(self):
            return {"status": "success", "city": "Manila", "regionName": "Metro Manila", "country": "Philippines"}

    monkeypatch.setattr(activity_service, "IP_GEOLOCATION_ENABLED", True)
    monkeypatch.setattr(activity_service.requests, "get", lambda *args, **kwargs: FakeResponse())

    assert activity_service.lookup_location("203.177.0.1") == {
        "city": "Manila", "region": "Metro Manila", "country": "Philippines",
    }


def test_search_logs_filters_and_paginates(db, seed):
    for minute in range(25):
        activity_service.record_login(db, seed.student1_principal, now=T1 + timedelta(minutes=minute))
    activity_service.record_login(db, seed.admin_principal, now=T2)

    page = activity_service.search_logs(db, username="jua", activity_type=ActivityType.Login)
    assert page.total_count == 25
    assert page.total_pages == 2
    assert len(page.items) == 20

    second = activity_service.search_logs(db, username="jua", page=2)
    assert len(second.items) == 5

    admin_only = activity_service.search_logs(db, date_from=T2 - timedelta(seconds=1))
    assert [item.username for item in admin_only.items] == ["admin"]


def test_get_unknown_log(db, seed):
    with pytest.raises(NotFoundError):
        activity_service.get_log(db, 31337)
