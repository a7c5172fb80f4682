"""Tests for API routes."""

from uuid import UUID, uuid4

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from upevents.gamification import ledger
from upevents.models import Event, Participant, Registration


class TestHealthEndpoint:
    def test_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAwardAttendance:
    def test_award(self, client: TestClient, participant: Participant, checked_in: Registration):
        response = client.post(
            "/api/gamification/award-attendance",
            json={"participant_id": str(participant.id), "registration_id": str(checked_in.id)},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["points"] == 50
        assert data["newTotal"] == 50
        assert data["level"]["level"] == 2
        assert data["level"]["minPoints"] == 50
        assert data["newBadges"] == ["perfect_attendance"]

    def test_unknown_participant(self, client: TestClient, checked_in: Registration):
        response = client.post(
            "/api/gamification/award-attendance",
            json={"participant_id": str(uuid4()), "registration_id": str(checked_in.id)},
        )
        assert response.status_code == 404

    def test_missing_fields(self, client: TestClient, participant: Participant):
        response = client.post(
            "/api/gamification/award-attendance",
            json={"participant_id": str(participant.id)},
        )
        assert response.status_code == 422

    def test_database_error_maps_to_500(
        self, client: TestClient, participant: Participant, checked_in: Registration,
        session: Session, monkeypatch,
    ):
        def failing_grant(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(ledger, "grant_badge", failing_grant)

        response = client.post(
            "/api/gamification/award-attendance",
            json={"participant_id": str(participant.id), "registration_id": str(checked_in.id)},
        )
        assert response.status_code == 500
        assert response.json() == {"detail": "Database error"}

        session.refresh(participant)
        assert participant.total_points == 0


class TestParticipantRoutes:
    def test_participant_with_level_info(self, client: TestClient, participant: Participant):
        response = client.get(f"/api/gamification/participant/{participant.email}")
        assert response.status_code == 200

        data = response.json()
        assert data["email"] == participant.email
        assert data["total_points"] == 0
        assert data["levelInfo"]["current"]["name"] == "Débutant"
        assert data["levelInfo"]["next"]["minPoints"] == 50
        assert data["levelInfo"]["progress"] == 0

    def test_participant_not_found(self, client: TestClient):
        response = client.get("/api/gamification/participant/nobody@example.com")
        assert response.status_code == 404

    def test_badges(self, client: TestClient, session: Session):
        participant = ledger.get_or_create_participant(session, "b@example.com", "B", "C")

        response = client.get(f"/api/gamification/badges/{participant.id}")
        assert response.status_code == 200
        badges = response.json()
        assert [b["badge_type"] for b in badges] == ["first_event"]
        assert badges[0]["badge_name"] == "Premier Pas"

    def test_leaderboard(self, client: TestClient, session: Session):
        for email, points in [("a@x.com", 300), ("b@x.com", 500), ("c@x.com", 150)]:
            session.add(Participant(email=email, first_name="F", last_name="L", total_points=points))
        session.commit()

        response = client.get("/api/gamification/leaderboard?limit=3")
        assert response.status_code == 200
        assert [p["total_points"] for p in response.json()] == [500, 300, 150]

    def test_leaderboard_rejects_bad_limit(self, client: TestClient):
        assert client.get("/api/gamification/leaderboard?limit=0").status_code == 422

    def test_config(self, client: TestClient):
        response = client.get("/api/gamification/config")
        assert response.status_code == 200

        data = response.json()
        assert data["points"] == {
            "REGISTRATION": 10,
            "ATTENDANCE": 50,
            "EARLY_BIRD": 20,
            "STREAK_BONUS": 30,
        }
        assert [level["minPoints"] for level in data["levels"]] == [0, 50, 150, 300, 500, 800]
        assert len(data["badges"]) == 7
        assert data["badges"][0]["type"] == "first_event"


class TestStatisticsRoutes:
    def test_event_statistics_empty(self, client: TestClient):
        response = client.get("/api/statistics/events")
        assert response.status_code == 200
        assert response.json() == {
            "totalEvents": 0,
            "registrations": {"max": 0, "min": 0, "average": 0},
            "attendance": {"max": 0, "min": 0, "average": 0},
        }

    def test_participant_statistics(self, client: TestClient, checked_in: Registration):
        response = client.get("/api/statistics/participants")
        assert response.status_code == 200

        [entry] = response.json()
        assert entry["email"] == checked_in.email
        assert entry["totalRegistrations"] == 1
        assert entry["totalAttendances"] == 1
        assert entry["attendanceRate"] == 100

    def test_participant_detail(self, client: TestClient, checked_in: Registration):
        response = client.get(f"/api/statistics/participants/{checked_in.email}")
        assert response.status_code == 200

        data = response.json()
        assert data["firstName"] == "Ada"
        assert data["events"][0]["eventTitle"] == "Meetup"
        assert data["events"][0]["attended"] is True

    def test_participant_detail_not_found(self, client: TestClient):
        response = client.get("/api/statistics/participants/nobody@example.com")
        assert response.status_code == 404


class TestEventRoutes:
    def test_lookup_by_registration_code(self, client: TestClient, sample_event: Event):
        response = client.get("/api/events/by-registration-code/reg_sample")
        assert response.status_code == 200
        assert response.json()["id"] == str(sample_event.id)

    def test_lookup_by_attendance_code(self, client: TestClient, sample_event: Event):
        response = client.get("/api/events/by-attendance-code/att_sample")
        assert response.status_code == 200
        assert response.json()["title"] == "Meetup"

    def test_unknown_codes(self, client: TestClient, sample_event: Event):
        assert client.get("/api/events/by-registration-code/att_sample").status_code == 404
        assert client.get("/api/events/by-attendance-code/nope").status_code == 404

    def test_get_unknown_event(self, client: TestClient):
        assert client.get(f"/api/events/{uuid4()}").status_code == 404

    def test_toggle_status(self, client: TestClient, sample_event: Event):
        response = client.patch(f"/api/events/{sample_event.id}/toggle-status")
        assert response.status_code == 200
        assert response.json()["is_active"] is True

        response = client.patch(f"/api/events/{sample_event.id}/toggle-status")
        assert response.json()["is_active"] is False

    def test_close_hides_event(self, client: TestClient, sample_event: Event):
        response = client.patch(f"/api/events/{sample_event.id}/close")
        assert response.status_code == 200
        assert response.json()["is_closed"] is True

        assert client.get("/api/events").json() == []
        titles = [e["title"] for e in client.get("/api/events?include_closed=true").json()]
        assert titles == ["Meetup"]

    def test_patch_unknown_event(self, client: TestClient):
        assert client.patch(f"/api/events/{uuid4()}/toggle-status").status_code == 404
        assert client.patch(f"/api/events/{uuid4()}/close").status_code == 404


class TestRegistrationRoutes:
    def test_lookup_by_qr(self, client: TestClient, sample_event: Event, registration_factory):
        registration = registration_factory(sample_event, "scan@example.com")

        response = client.get(f"/api/registrations/by-qr/{registration.qr_code}")
        assert response.status_code == 200
        assert response.json()["id"] == str(registration.id)
        assert response.json()["email"] == "scan@example.com"

    def test_unknown_qr(self, client: TestClient):
        assert client.get("/api/registrations/by-qr/missing").status_code == 404

    def test_registration_has_participant(
        self, client: TestClient, session: Session, sample_event: Event
    ):
        response = client.post(
            "/api/registrations",
            json={
                "event_id": str(sample_event.id),
                "first_name": "Alan",
                "last_name": "Turing",
                "email": "alan@example.com",
            },
        )
        assert response.status_code == 201

        participant = ledger.get_participant_by_email(session, "alan@example.com")
        assert participant is not None
        assert participant.total_points == 10
        assert session.get(Registration, UUID(response.json()["id"])) is not None

    def test_failed_participant_creation_stores_no_registration(
        self, client: TestClient, session: Session, sample_event: Event, monkeypatch
    ):
        def failing_grant(*args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        monkeypatch.setattr(ledger, "grant_badge", failing_grant)

        response = client.post(
            "/api/registrations",
            json={
                "event_id": str(sample_event.id),
                "first_name": "Alan",
                "last_name": "Turing",
                "email": "alan@example.com",
            },
        )
        assert response.status_code == 500

        assert ledger.get_participant_by_email(session, "alan@example.com") is None
        assert session.exec(select(Registration)).all() == []


class TestCheckInFlow:
    def test_register_check_in_and_award(self, client: TestClient, session: Session):
        response = client.post(
            "/api/events",
            json={"title": "Launch Party", "event_date": "2026-11-20T18:00:00Z"},
        )
        assert response.status_code == 201
        event = response.json()
        assert event["is_active"] is False
        assert len(event["registration_code"]) == 10

        response = client.post(
            "/api/registrations",
            json={
                "event_id": event["id"],
                "first_name": "Grace",
                "last_name": "Hopper",
                "email": "grace@example.com",
            },
        )
        assert response.status_code == 201
        registration = response.json()
        assert registration["qr_code"]

        participant = client.get("/api/gamification/participant/grace@example.com").json()
        assert participant["total_points"] == 10

        response = client.post("/api/attendance", json={"registration_id": registration["id"]})
        assert response.status_code == 201

        response = client.post("/api/attendance", json={"registration_id": registration["id"]})
        assert response.status_code == 400

        response = client.post(
            "/api/gamification/award-attendance",
            json={"participant_id": participant["id"], "registration_id": registration["id"]},
        )
        assert response.status_code == 200
        assert response.json()["newTotal"] == 60

        attendance = client.get(f"/api/attendance/by-registration/{registration['id']}").json()
        assert attendance["points_awarded"] == 50

    def test_second_registration_keeps_participant(
        self, client: TestClient, session: Session, sample_event: Event, participant: Participant
    ):
        response = client.post(
            "/api/registrations",
            json={
                "event_id": str(sample_event.id),
                "first_name": "Someone",
                "last_name": "Else",
                "email": participant.email,
            },
        )
        assert response.status_code == 201

        session.refresh(participant)
        assert participant.first_name == "Ada"
        assert participant.total_points == 0

    def test_register_unknown_event(self, client: TestClient):
        response = client.post(
            "/api/registrations",
            json={"event_id": str(uuid4()), "first_name": "A", "last_name": "B", "email": "a@b.c"},
        )
        assert response.status_code == 404

    def test_cancel_registration(
        self, client: TestClient, session: Session, checked_in: Registration
    ):
        response = client.patch(f"/api/registrations/{checked_in.id}/cancel")
        assert response.status_code == 200
        assert response.json()["cancelled"] is True

        response = client.get("/api/statistics/participants")
        assert response.json() == []

    def test_check_in_unknown_registration(self, client: TestClient):
        response = client.post("/api/attendance", json={"registration_id": str(uuid4())})
        assert response.status_code == 404

    def test_attendance_not_recorded(self, client: TestClient, sample_event: Event, registration_factory):
        registration = registration_factory(sample_event, "late@example.com")
        response = client.get(f"/api/attendance/by-registration/{registration.id}")
        assert response.status_code == 200
        assert response.json() is None

    def test_list_events_hides_closed(self, client: TestClient, session: Session, sample_event: Event):
        closed = Event(
            title="Closed", event_date=sample_event.event_date,
            registration_code="closed_r", attendance_code="closed_a", is_closed=True,
        )
        session.add(closed)
        session.commit()

        titles = [e["title"] for e in client.get("/api/events").json()]
        assert titles == ["Meetup"]
        titles = [e["title"] for e in client.get("/api/events?include_closed=true").json()]
        assert sorted(titles) == ["Closed", "Meetup"]

        registrations = client.get(f"/api/registrations/by-event/{sample_event.id}").json()
        assert registrations == []
