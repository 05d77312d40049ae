"""Integration tests for volunteer opportunities."""

import uuid

import pytest
import pytest_asyncio
from services.volunteer_service.app.main import app
from services.volunteer_service.models import OpportunityStatus
from tests.conftest import MEMBER_EMAIL, make_admin_user, make_user, override_auth
from tests.factories import ClubFactory, VolunteerOpportunityFactory


def opportunity_payload(club_id, **overrides):
    payload = {
        "club_id": str(club_id),
        "title": "Regatta marshal",
        "description": "Marshal the course on race day",
        "required_skills": ["first aid"],
        "time_commitment": "One day",
        "location": "Riverside",
        "start_date": "2026-06-01",
        "end_date": "2026-06-01",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def my_club(db_session):
    club = ClubFactory.approved(name="My Club", contact_email=MEMBER_EMAIL)
    db_session.add(club)
    await db_session.commit()
    return club


# ---------------------------------------------------------------------------
# Management
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_club_owner_creates_opportunity(volunteer_client, my_club):
    response = await volunteer_client.post(
        "/opportunities", json=opportunity_payload(my_club.id)
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["status"] == "active"
    assert data["club_name"] == "My Club"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pending_club_cannot_post(volunteer_client, db_session):
    club = ClubFactory.create(contact_email=MEMBER_EMAIL)
    db_session.add(club)
    await db_session.commit()

    response = await volunteer_client.post(
        "/opportunities", json=opportunity_payload(club.id)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_non_owner_cannot_post(volunteer_client, db_session):
    club = ClubFactory.approved()
    db_session.add(club)
    await db_session.commit()

    response = await volunteer_client.post(
        "/opportunities", json=opportunity_payload(club.id)
    )
    assert response.status_code == 403

    missing = await volunteer_client.post(
        "/opportunities", json=opportunity_payload(uuid.uuid4())
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_end_date_before_start_rejected(volunteer_client, my_club):
    response = await volunteer_client.post(
        "/opportunities",
        json=opportunity_payload(my_club.id, start_date="2026-06-02", end_date="2026-06-01"),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_status_and_delete(volunteer_client, my_club):
    created = await volunteer_client.post(
        "/opportunities", json=opportunity_payload(my_club.id)
    )
    opp_id = created.json()["id"]

    updated = await volunteer_client.patch(
        f"/opportunities/{opp_id}", json={"title": "Chief marshal"}
    )
    assert updated.json()["title"] == "Chief marshal"

    bad_dates = await volunteer_client.patch(
        f"/opportunities/{opp_id}", json={"end_date": "2026-05-01"}
    )
    assert bad_dates.status_code == 400

    filled = await volunteer_client.patch(
        f"/opportunities/{opp_id}/status", json={"status": "filled"}
    )
    assert filled.json()["status"] == "filled"

    with override_auth(app, make_user()):
        forbidden = await volunteer_client.delete(f"/opportunities/{opp_id}")
    assert forbidden.status_code == 403

    deleted = await volunteer_client.delete(f"/opportunities/{opp_id}")
    assert deleted.status_code == 204
    assert (await volunteer_client.get(f"/opportunities/{opp_id}")).status_code == 404


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_browse_shows_active_opportunities_of_approved_clubs(
    volunteer_client, db_session
):
    approved = ClubFactory.approved(name="Approved")
    pending = ClubFactory.create(name="Pending")
    db_session.add_all([approved, pending])
    await db_session.flush()
    db_session.add_all(
        [
            VolunteerOpportunityFactory.create(approved.id, title="Visible helper"),
            VolunteerOpportunityFactory.create(
                approved.id,
                title="Photographer needed",
                required_skills=["photography"],
                is_recurring=False,
            ),
            VolunteerOpportunityFactory.create(
                approved.id, title="Filled role", status=OpportunityStatus.FILLED
            ),
            VolunteerOpportunityFactory.create(pending.id, title="Pending club role"),
        ]
    )
    await db_session.commit()

    everything = await volunteer_client.get("/opportunities")
    photography = await volunteer_client.get(
        "/opportunities", params={"skills": "Photography"}
    )
    recurring = await volunteer_client.get("/opportunities", params={"is_recurring": True})
    searched = await volunteer_client.get("/opportunities", params={"search": "photo"})
    recent = await volunteer_client.get("/opportunities/recent", params={"limit": 1})
    count = await volunteer_client.get("/opportunities/count")

    assert everything.json()["total"] == 2
    assert {o["club_name"] for o in everything.json()["opportunities"]} == {"Approved"}
    assert [o["title"] for o in photography.json()["opportunities"]] == [
        "Photographer needed"
    ]
    assert [o["title"] for o in recurring.json()["opportunities"]] == ["Visible helper"]
    assert searched.json()["total"] == 1
    assert len(recent.json()) == 1
    assert count.json() == {"count": 2}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inactive_opportunity_only_visible_to_managers(volunteer_client, db_session):
    club = ClubFactory.approved(contact_email=MEMBER_EMAIL)
    db_session.add(club)
    await db_session.flush()
    opp = VolunteerOpportunityFactory.create(club.id, status=OpportunityStatus.CANCELLED)
    db_session.add(opp)
    await db_session.commit()

    own = await volunteer_client.get(f"/opportunities/{opp.id}")
    mine = await volunteer_client.get("/opportunities/mine")
    with override_auth(app, make_user()):
        stranger = await volunteer_client.get(f"/opportunities/{opp.id}")
    with override_auth(app, make_admin_user()):
        admin = await volunteer_client.get(f"/opportunities/{opp.id}")

    assert own.status_code == 200
    assert [o["id"] for o in mine.json()] == [str(opp.id)]
    assert stranger.status_code == 404
    assert admin.status_code == 200
