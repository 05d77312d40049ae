"""
Contract tests for the clubs data the volunteer service reads.

The volunteer service has no foreign key to clubs. It declares a lightweight
view of the clubs table and filters on the stored status string. If these
tests break, opportunity browsing and club ownership checks break too.
"""

import pytest
from services.clubs_service.models import ApplicationStatus, Club
from services.volunteer_service.services import (
    CLUB_APPROVED,
    clubs_table,
    get_club_summary,
    owned_club_ids,
)
from tests.conftest import make_user
from tests.factories import ClubFactory, VolunteerOpportunityFactory


@pytest.mark.contract
def test_club_columns_read_by_volunteer_service_exist():
    club_columns = set(Club.__table__.columns.keys())
    for name in clubs_table.columns.keys():
        assert name in club_columns, (
            f"Column '{name}' is read by the volunteer service but missing from clubs."
        )


@pytest.mark.contract
def test_approved_status_value_matches():
    assert ApplicationStatus.APPROVED.value == CLUB_APPROVED


@pytest.mark.asyncio
@pytest.mark.contract
async def test_club_summary_reads_stored_status(db_session):
    club = ClubFactory.approved(name="Harbour Sailing", contact_email="Skipper@Example.com")
    db_session.add(club)
    await db_session.commit()

    summary = await get_club_summary(db_session, club.id)
    owned = await owned_club_ids(db_session, make_user(email="skipper@example.com"))

    assert summary.name == "Harbour Sailing"
    assert summary.application_status == CLUB_APPROVED
    assert owned == [club.id]


@pytest.mark.asyncio
@pytest.mark.contract
async def test_opportunity_response_contract(volunteer_client, db_session):
    """GET /opportunities/{id} carries the club name for display."""
    club = ClubFactory.approved(name="Harbour Sailing")
    db_session.add(club)
    await db_session.flush()

    opportunity = VolunteerOpportunityFactory.create(club.id)
    db_session.add(opportunity)
    await db_session.commit()

    response = await volunteer_client.get(f"/opportunities/{opportunity.id}")
    assert response.status_code == 200
    data = response.json()

    for field in ["id", "club_id", "club_name", "title", "status", "required_skills"]:
        assert field in data, f"Missing contract field '{field}' in opportunity response"
    assert data["club_name"] == "Harbour Sailing"
    assert isinstance(data["required_skills"], list)
