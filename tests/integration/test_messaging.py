"""Integration tests for the messaging service."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from services.messaging_service.app.main import app
from tests.conftest import make_user, override_auth
from tests.factories import MessageFactory

ME = "member-1"
ALEX = "user-alex"
SAM = "user-sam"


def _at(minutes: int) -> datetime:
    return datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes)


# ---------------------------------------------------------------------------
# Sending
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_send_message(messaging_client):
    response = await messaging_client.post(
        "/messages",
        json={
            "recipient_id": ALEX,
            "subject": "Saturday",
            "content": "<b>Can you cover</b> the gala?",
        },
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["sender_id"] == ME
    assert data["recipient_id"] == ALEX
    assert data["content"] == "Can you cover the gala?"
    assert data["read"] is False

    sent = await messaging_client.get("/messages/sent")
    assert sent.json()["total"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cannot_message_yourself(messaging_client):
    response = await messaging_client.post(
        "/messages", json={"recipient_id": ME, "content": "Note to self"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blank_content_rejected(messaging_client):
    response = await messaging_client.post(
        "/messages", json={"recipient_id": ALEX, "content": "<p></p>"}
    )
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_inbox_and_unread_count(messaging_client, db_session):
    db_session.add_all(
        [
            MessageFactory.create(ALEX, ME, created_at=_at(0), read=True),
            MessageFactory.create(SAM, ME, created_at=_at(5)),
            MessageFactory.create(ALEX, ME, created_at=_at(10)),
            MessageFactory.create(ALEX, SAM, created_at=_at(15)),
        ]
    )
    await db_session.commit()

    inbox = await messaging_client.get("/messages/inbox")
    unread = await messaging_client.get("/messages/inbox", params={"unread_only": True})
    count = await messaging_client.get("/messages/unread-count")
    paged = await messaging_client.get("/messages/inbox", params={"skip": 1, "limit": 1})

    assert inbox.json()["total"] == 3
    assert [m["sender_id"] for m in inbox.json()["messages"]] == [ALEX, SAM, ALEX]
    assert unread.json()["total"] == 2
    assert count.json() == {"unread_count": 2}
    assert paged.json()["messages"][0]["sender_id"] == SAM
    assert paged.json()["total"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_conversations_summary(messaging_client, db_session):
    db_session.add_all(
        [
            MessageFactory.create(ALEX, ME, created_at=_at(0), content="first"),
            MessageFactory.create(ME, ALEX, created_at=_at(1), content="reply"),
            MessageFactory.create(ALEX, ME, created_at=_at(2), content="latest"),
            MessageFactory.create(SAM, ME, created_at=_at(3), content="hi", read=True),
        ]
    )
    await db_session.commit()

    response = await messaging_client.get("/messages/conversations")

    assert response.status_code == 200
    summaries = response.json()
    assert [s["user_id"] for s in summaries] == [SAM, ALEX]
    alex = summaries[1]
    assert alex["last_message"]["content"] == "latest"
    assert alex["unread_count"] == 2
    assert summaries[0]["unread_count"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_conversation_is_chronological(messaging_client, db_session):
    db_session.add_all(
        [
            MessageFactory.create(ME, ALEX, created_at=_at(2), content="second"),
            MessageFactory.create(ALEX, ME, created_at=_at(1), content="first"),
            MessageFactory.create(SAM, ME, created_at=_at(0), content="other"),
        ]
    )
    await db_session.commit()

    response = await messaging_client.get(f"/messages/conversation/{ALEX}")

    assert [m["content"] for m in response.json()] == ["first", "second"]


# ---------------------------------------------------------------------------
# Reading and deleting
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_message_detail_limited_to_participants(messaging_client, db_session):
    message = MessageFactory.create(ALEX, SAM)
    db_session.add(message)
    await db_session.commit()

    hidden = await messaging_client.get(f"/messages/{message.id}")
    missing = await messaging_client.get(f"/messages/{uuid.uuid4()}")
    with override_auth(app, make_user(user_id=SAM)):
        visible = await messaging_client.get(f"/messages/{message.id}")

    assert hidden.status_code == 404
    assert missing.status_code == 404
    assert visible.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_only_recipient_marks_read(messaging_client, db_session):
    message = MessageFactory.create(ME, ALEX)
    db_session.add(message)
    await db_session.commit()

    forbidden = await messaging_client.patch(f"/messages/{message.id}/read")
    with override_auth(app, make_user(user_id=ALEX)):
        marked = await messaging_client.patch(f"/messages/{message.id}/read")

    assert forbidden.status_code == 403
    assert marked.status_code == 200
    assert marked.json()["read"] is True
    assert marked.json()["read_at"] is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_bulk_mark_read(messaging_client, db_session):
    mine = [MessageFactory.create(ALEX, ME) for _ in range(2)]
    already_read = MessageFactory.create(SAM, ME, read=True)
    not_mine = MessageFactory.create(ALEX, SAM)
    db_session.add_all([*mine, already_read, not_mine])
    await db_session.commit()

    ids = [str(m.id) for m in [*mine, already_read, not_mine]]
    response = await messaging_client.post("/messages/read", json={"message_ids": ids})

    assert response.status_code == 200
    assert response.json() == {"updated": 2}
    count = await messaging_client.get("/messages/unread-count")
    assert count.json()["unread_count"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_message(messaging_client, db_session):
    message = MessageFactory.create(ALEX, ME)
    db_session.add(message)
    await db_session.commit()

    with override_auth(app, make_user(user_id=SAM)):
        outsider = await messaging_client.delete(f"/messages/{message.id}")
    deleted = await messaging_client.delete(f"/messages/{message.id}")
    gone = await messaging_client.get(f"/messages/{message.id}")

    assert outsider.status_code == 404
    assert deleted.status_code == 204
    assert gone.status_code == 404
