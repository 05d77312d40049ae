"""Integration tests for volunteer applications."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from services.volunteer_service.app.main import app
from services.volunteer_service.models import ApplicationStatus, OpportunityStatus
from tests.conftest import make_user, override_auth
from tests.factories import (
    ClubFactory,
    VolunteerApplicationFactory,
    VolunteerOpportunityFactory,
    VolunteerProfileFactory,
)

CLUB_OWNER_EMAIL = "owner@example.com"


@pytest.fixture
def club_owner():
    return make_user(user_id="owner-1", email=CLUB_OWNER_EMAIL)


@pytest_asyncio.fixture
async def setup(db_session, member_user):
    """An approved club with one active opportunity and the member's profile."""
    club = ClubFactory.approved(contact_email=CLUB_OWNER_EMAIL)
    db_session.add(club)
    await db_session.flush()
    opportunity = VolunteerOpportunityFactory.create(club.id, title="Timekeeper")
    profile = VolunteerProfileFactory.create(
        user_id=member_user.user_id, first_name="Jordan", last_name="Reed"
    )
    db_session.add_all([opportunity, profile])
    await db_session.commit()
    return club, opportunity, profile


# ---------------------------------------------------------------------------
# Volunteer side
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_apply_to_opportunity(volunteer_client, setup):
    _, opportunity, profile = setup

    response = await volunteer_client.post(
        "/applications",
        json={"opportunity_id": str(opportunity.id), "message": "Keen to help"},
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["status"] == "pending"
    assert data["volunteer_id"] == str(profile.id)

    has_applied = await volunteer_client.get(f"/applications/has-applied/{opportunity.id}")
    assert has_applied.json()["has_applied"] is True
    assert has_applied.json()["status"] == "pending"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_application_conflicts(volunteer_client, setup):
    _, opportunity, _ = setup
    payload = {"opportunity_id": str(opportunity.id)}

    assert (await volunteer_client.post("/applications", json=payload)).status_code == 201
    assert (await volunteer_client.post("/applications", json=payload)).status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_apply_to_inactive_opportunity(volunteer_client, db_session, setup):
    club, _, _ = setup
    closed = VolunteerOpportunityFactory.create(club.id, status=OpportunityStatus.FILLED)
    db_session.add(closed)
    await db_session.commit()

    response = await volunteer_client.post(
        "/applications", json={"opportunity_id": str(closed.id)}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_apply_requires_profile(volunteer_client, setup):
    _, opportunity, _ = setup
    with override_auth(app, make_user()):
        response = await volunteer_client.post(
            "/applications", json={"opportunity_id": str(opportunity.id)}
        )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_withdraw_and_reapply(volunteer_client, setup):
    _, opportunity, _ = setup
    created = await volunteer_client.post(
        "/applications", json={"opportunity_id": str(opportunity.id)}
    )
    app_id = created.json()["id"]

    withdrawn = await volunteer_client.post(f"/applications/{app_id}/withdraw")
    assert withdrawn.json()["status"] == "withdrawn"

    again = await volunteer_client.post(f"/applications/{app_id}/withdraw")
    assert again.status_code == 400

    has_applied = await volunteer_client.get(f"/applications/has-applied/{opportunity.id}")
    assert has_applied.json()["has_applied"] is False

    reapplied = await volunteer_client.post(
        "/applications", json={"opportunity_id": str(opportunity.id)}
    )
    assert reapplied.status_code == 201
    assert reapplied.json()["id"] == app_id
    assert reapplied.json()["status"] == "pending"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reapply_moves_application_to_top(volunteer_client, db_session, setup):
    club, opportunity, profile = setup
    other = VolunteerOpportunityFactory.create(club.id, title="Scorer")
    db_session.add(other)
    await db_session.flush()
    db_session.add_all(
        [
            VolunteerApplicationFactory.create(
                opportunity.id,
                profile.id,
                status=ApplicationStatus.WITHDRAWN,
                applied_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            ),
            VolunteerApplicationFactory.create(
                other.id,
                profile.id,
                applied_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
            ),
        ]
    )
    await db_session.commit()

    before = await volunteer_client.get("/applications/me")
    assert [a["opportunity_title"] for a in before.json()] == ["Scorer", "Timekeeper"]

    reapplied = await volunteer_client.post(
        "/applications", json={"opportunity_id": str(opportunity.id)}
    )
    assert reapplied.status_code == 201
    assert not reapplied.json()["applied_at"].startswith("2025-01-01")

    after = await volunteer_client.get("/applications/me")
    assert [a["opportunity_title"] for a in after.json()] == ["Timekeeper", "Scorer"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_my_applications_and_stats(volunteer_client, db_session, setup):
    club, opportunity, profile = setup
    other = VolunteerOpportunityFactory.create(club.id, title="Scorer")
    db_session.add(other)
    await db_session.flush()
    db_session.add_all(
        [
            VolunteerApplicationFactory.create(opportunity.id, profile.id),
            VolunteerApplicationFactory.create(
                other.id, profile.id, status=ApplicationStatus.ACCEPTED
            ),
        ]
    )
    await db_session.commit()

    mine = await volunteer_client.get("/applications/me")
    accepted = await volunteer_client.get(
        "/applications/me", params={"status": "accepted"}
    )
    stats = await volunteer_client.get("/applications/me/stats")

    assert {a["opportunity_title"] for a in mine.json()} == {"Timekeeper", "Scorer"}
    assert [a["opportunity_title"] for a in accepted.json()] == ["Scorer"]
    assert stats.json() == {
        "total": 2,
        "pending": 1,
        "accepted": 1,
        "rejected": 0,
        "withdrawn": 0,
    }


# ---------------------------------------------------------------------------
# Club side
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_club_owner_reviews_applications(volunteer_client, db_session, setup, club_owner):
    club, opportunity, profile = setup
    application = VolunteerApplicationFactory.create(opportunity.id, profile.id)
    db_session.add(application)
    await db_session.commit()

    # The applicant cannot review their own application
    forbidden = await volunteer_client.patch(
        f"/applications/{application.id}/status", json={"status": "accepted"}
    )
    assert forbidden.status_code == 403

    with override_auth(app, club_owner):
        listed = await volunteer_client.get(f"/applications/opportunity/{opportunity.id}")
        by_club = await volunteer_client.get(f"/applications/club/{club.id}")
        accepted = await volunteer_client.patch(
            f"/applications/{application.id}/status", json={"status": "accepted"}
        )
        again = await volunteer_client.patch(
            f"/applications/{application.id}/status", json={"status": "rejected"}
        )
        stats = await volunteer_client.get(f"/applications/club/{club.id}/stats")

    assert listed.status_code == 200
    assert listed.json()[0]["volunteer_name"] == "Jordan Reed"
    assert len(by_club.json()) == 1
    assert accepted.json()["status"] == "accepted"
    assert again.status_code == 400
    assert stats.json()["accepted"] == 1
    assert stats.json()["total"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_review_status_must_be_decision(volunteer_client, db_session, setup, club_owner):
    _, opportunity, profile = setup
    application = VolunteerApplicationFactory.create(opportunity.id, profile.id)
    db_session.add(application)
    await db_session.commit()

    with override_auth(app, club_owner):
        response = await volunteer_client.patch(
            f"/applications/{application.id}/status", json={"status": "withdrawn"}
        )
    assert response.status_code == 422
