"""Integration tests for volunteer profiles, listing and search."""

import pytest
from services.volunteer_service.app.main import app
from tests.conftest import MEMBER_EMAIL, make_admin_user, make_user, override_auth
from tests.factories import VolunteerProfileFactory


def profile_payload(**overrides):
    payload = {
        "first_name": "Jordan",
        "last_name": "Reed",
        "location": "Riverside",
        "bio": "Former swimmer, now coaching juniors",
        "skills": ["coaching", "first aid"],
        "availability": ["weekends"],
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_and_get_profile(volunteer_client):
    """POST /volunteers/profile/me: email defaults to the account email."""
    response = await volunteer_client.post("/volunteers/profile/me", json=profile_payload())

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["email"] == MEMBER_EMAIL
    assert data["user_id"] == "member-1"
    assert data["is_visible"] is True

    me = await volunteer_client.get("/volunteers/profile/me")
    assert me.status_code == 200
    assert me.json()["id"] == data["id"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_profile_is_unique_per_user(volunteer_client):
    await volunteer_client.post("/volunteers/profile/me", json=profile_payload())
    response = await volunteer_client.post("/volunteers/profile/me", json=profile_payload())
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_missing_profile(volunteer_client):
    response = await volunteer_client.get("/volunteers/profile/me")
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_visibility_and_delete(volunteer_client):
    await volunteer_client.post("/volunteers/profile/me", json=profile_payload())

    updated = await volunteer_client.patch(
        "/volunteers/profile/me", json={"bio": "<p>Weekend helper</p>"}
    )
    assert updated.json()["bio"] == "Weekend helper"

    hidden = await volunteer_client.patch(
        "/volunteers/profile/me/visibility", json={"is_visible": False}
    )
    assert hidden.json()["is_visible"] is False

    deleted = await volunteer_client.delete("/volunteers/profile/me")
    assert deleted.status_code == 204
    assert (await volunteer_client.get("/volunteers/profile/me")).status_code == 404


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_volunteers_filters(volunteer_client, db_session):
    db_session.add_all(
        [
            VolunteerProfileFactory.create(
                first_name="Ava", skills=["Coaching"], availability=["weekends"]
            ),
            VolunteerProfileFactory.create(
                first_name="Ben",
                location="Hilltop",
                skills=["photography"],
                availability=["evenings"],
            ),
            VolunteerProfileFactory.create(first_name="Hidden", is_visible=False),
        ]
    )
    await db_session.commit()

    everyone = await volunteer_client.get("/volunteers")
    coaches = await volunteer_client.get("/volunteers", params={"skills": "coaching"})
    evenings = await volunteer_client.get(
        "/volunteers", params={"availability": ["evenings", "mornings"]}
    )
    hilltop = await volunteer_client.get("/volunteers", params={"location": "hill"})
    count = await volunteer_client.get("/volunteers/count")

    assert everyone.json()["total"] == 2
    assert [v["first_name"] for v in coaches.json()["volunteers"]] == ["Ava"]
    assert [v["first_name"] for v in evenings.json()["volunteers"]] == ["Ben"]
    assert [v["first_name"] for v in hilltop.json()["volunteers"]] == ["Ben"]
    assert count.json() == {"count": 2}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_hidden_profile_visibility(volunteer_client, db_session):
    owner = make_user()
    hidden = VolunteerProfileFactory.create(user_id=owner.user_id, is_visible=False)
    db_session.add(hidden)
    await db_session.commit()

    stranger = await volunteer_client.get(f"/volunteers/{hidden.id}")
    with override_auth(app, owner):
        own = await volunteer_client.get(f"/volunteers/{hidden.id}")
    with override_auth(app, make_admin_user()):
        admin = await volunteer_client.get(f"/volunteers/{hidden.id}")

    assert stranger.status_code == 404
    assert own.status_code == 200
    assert admin.status_code == 200


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_ranks_by_relevance(volunteer_client, db_session):
    db_session.add_all(
        [
            VolunteerProfileFactory.create(
                first_name="Alex", bio="Met a coach called Morgan once"
            ),
            VolunteerProfileFactory.create(first_name="Morgan", last_name="Hill"),
            VolunteerProfileFactory.create(
                first_name="Morgan", last_name="Hidden", is_visible=False
            ),
        ]
    )
    await db_session.commit()

    response = await volunteer_client.get("/volunteers/search", params={"q": "morgan"})

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total"] == 2
    assert [r["first_name"] for r in data["results"]] == ["Morgan", "Alex"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_matches_every_keyword(volunteer_client, db_session):
    db_session.add_all(
        [
            VolunteerProfileFactory.create(first_name="Ava", location="Riverside"),
            VolunteerProfileFactory.create(first_name="Ava", location="Hilltop"),
        ]
    )
    await db_session.commit()

    response = await volunteer_client.get(
        "/volunteers/search", params={"q": "ava hilltop"}
    )
    assert [r["location"] for r in response.json()["results"]] == ["Hilltop"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_repeated_search_is_served_from_cache(
    volunteer_client, db_session, volunteer_search
):
    db_session.add(VolunteerProfileFactory.create(first_name="Casey"))
    await db_session.commit()

    first = await volunteer_client.get("/volunteers/search", params={"q": "Casey"})
    second = await volunteer_client.get("/volunteers/search", params={"q": "casey "})

    assert first.json()["total"] == second.json()["total"] == 1
    assert volunteer_search.profiles.cache_size == 1
    assert volunteer_search.profiles.metrics.cache_hit_rate == pytest.approx(50.0)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_profile_changes_refresh_search_results(volunteer_client, volunteer_search):
    async def search_total(q):
        response = await volunteer_client.get("/volunteers/search", params={"q": q})
        assert response.status_code == 200, response.text
        return response.json()["total"]

    assert await search_total("zelda") == 0

    await volunteer_client.post(
        "/volunteers/profile/me", json=profile_payload(first_name="Zelda")
    )
    assert await search_total("zelda") == 1

    await volunteer_client.patch("/volunteers/profile/me", json={"first_name": "Quinn"})
    assert await search_total("zelda") == 0
    assert await search_total("quinn") == 1

    await volunteer_client.patch(
        "/volunteers/profile/me/visibility", json={"is_visible": False}
    )
    assert await search_total("quinn") == 0

    await volunteer_client.patch(
        "/volunteers/profile/me/visibility", json={"is_visible": True}
    )
    assert await search_total("quinn") == 1

    await volunteer_client.delete("/volunteers/profile/me")
    assert await search_total("quinn") == 0

    # Invalidation drops cached results but keeps the running metrics
    assert volunteer_search.profiles.metrics.search_count == 7


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blank_search_returns_nothing(volunteer_client, volunteer_search):
    response = await volunteer_client.get("/volunteers/search", params={"q": "  "})
    assert response.status_code == 200
    assert response.json()["total"] == 0
    assert volunteer_search.profiles.metrics.search_count == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_suggestions(volunteer_client, db_session):
    db_session.add_all(
        [
            VolunteerProfileFactory.create(
                skills=["Swimming coach", "First aid"], location="Swindon"
            ),
            VolunteerProfileFactory.create(skills=["Swimming coach"], location="Bath"),
        ]
    )
    await db_session.commit()

    short = await volunteer_client.get(
        "/volunteers/search/suggestions", params={"q": "s"}
    )
    response = await volunteer_client.get(
        "/volunteers/search/suggestions", params={"q": "swi"}
    )

    assert short.json()["suggestions"] == []
    assert response.json()["suggestions"] == ["Swimming coach", "Swindon"]
