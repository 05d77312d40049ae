"""Direct messaging between users."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.messaging_service.models import Message
from services.messaging_service.schemas import (
    BulkReadRequest,
    BulkReadResponse,
    ConversationSummary,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    UnreadCountResponse,
)
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/messages", tags=["messaging"])


async def _get_message_for(
    db: AsyncSession, message_id: uuid.UUID, user: AuthUser
) -> Message:
    message = (
        await db.execute(select(Message).where(Message.id == message_id))
    ).scalar_one_or_none()
    # Non-participants get the same answer as for a missing message
    if not message or not message.involves(user.user_id):
        raise HTTPException(status_code=404, detail="Message not found")
    return message


async def _paged(db: AsyncSession, condition, skip: int, limit: int) -> MessageListResponse:
    total = await db.scalar(select(func.count(Message.id)).where(condition))
    rows = await db.execute(
        select(Message)
        .where(condition)
        .order_by(Message.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return MessageListResponse(
        messages=rows.scalars().all(), total=total or 0, skip=skip, limit=limit
    )


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    data: MessageCreate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    if data.recipient_id == user.user_id:
        raise HTTPException(status_code=400, detail="Cannot send a message to yourself")
    message = Message(sender_id=user.user_id, **data.model_dump())
    db.add(message)
    await db.commit()
    await db.refresh(message)
    logger.info(f"Message {message.id} sent to {data.recipient_id}")
    return message


@router.get("/inbox", response_model=MessageListResponse)
async def inbox(
    user: Annotated[AuthUser, Depends(get_current_user)],
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    condition = Message.recipient_id == user.user_id
    if unread_only:
        condition = and_(condition, Message.read.is_(False))
    return await _paged(db, condition, skip, limit)


@router.get("/sent", response_model=MessageListResponse)
async def sent(
    user: Annotated[AuthUser, Depends(get_current_user)],
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    return await _paged(db, Message.sender_id == user.user_id, skip, limit)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    count = await db.scalar(
        select(func.count(Message.id)).where(
            Message.recipient_id == user.user_id, Message.read.is_(False)
        )
    )
    return UnreadCountResponse(unread_count=count or 0)


@router.get("/conversations", response_model=list[ConversationSummary])
async def conversations(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """One entry per correspondent, most recent conversation first."""
    rows = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == user.user_id, Message.recipient_id == user.user_id))
        .order_by(Message.created_at.desc())
    )
    summaries: dict[str, ConversationSummary] = {}
    for message in rows.scalars():
        other = message.other_party(user.user_id)
        summary = summaries.get(other)
        if summary is None:
            summary = summaries[other] = ConversationSummary(
                user_id=other,
                last_message=MessageResponse.model_validate(message),
                unread_count=0,
            )
        if message.recipient_id == user.user_id and not message.read:
            summary.unread_count += 1
    return list(summaries.values())


@router.get("/conversation/{other_user_id}", response_model=list[MessageResponse])
async def conversation(
    other_user_id: str,
    user: Annotated[AuthUser, Depends(get_current_user)],
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_async_db),
):
    """Messages exchanged with one user, oldest first."""
    rows = await db.execute(
        select(Message)
        .where(
            or_(
                and_(
                    Message.sender_id == user.user_id,
                    Message.recipient_id == other_user_id,
                ),
                and_(
                    Message.sender_id == other_user_id,
                    Message.recipient_id == user.user_id,
                ),
            )
        )
        .order_by(Message.created_at.asc())
        .limit(limit)
    )
    return rows.scalars().all()


@router.post("/read", response_model=BulkReadResponse)
async def mark_many_read(
    data: BulkReadRequest,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Mark the caller's unread messages among `message_ids` as read."""
    result = await db.execute(
        update(Message)
        .where(
            Message.id.in_(data.message_ids),
            Message.recipient_id == user.user_id,
            Message.read.is_(False),
        )
        .values(read=True, read_at=utc_now())
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()
    return BulkReadResponse(updated=result.rowcount or 0)


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    return await _get_message_for(db, message_id, user)


@router.patch("/{message_id}/read", response_model=MessageResponse)
async def mark_read(
    message_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    message = await _get_message_for(db, message_id, user)
    if message.recipient_id != user.user_id:
        raise HTTPException(
            status_code=403, detail="Only the recipient can mark a message read"
        )
    if not message.read:
        message.read = True
        message.read_at = utc_now()
        await db.commit()
        await db.refresh(message)
    return message


@router.delete("/{message_id}", status_code=204)
async def delete_message(
    message_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    message = await _get_message_for(db, message_id, user)
    await db.delete(message)
    await db.commit()
