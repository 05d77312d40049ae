#!/usr/bin/env python3
"""
Seed demo clubs, volunteer profiles and opportunities.

Creates two approved clubs with open opportunities and a handful of visible
volunteer profiles so search, suggestions and applications have data to work
with locally. Rows are matched by contact email / user id, so re-running the
script skips what already exists.

Usage:
    python scripts/seed/volunteers.py
"""

import asyncio
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from libs.db.config import AsyncSessionLocal  # noqa: E402
from services.clubs_service.models import (  # noqa: E402
    ApplicationStatus,
    Club,
    ClubApplicationHistory,
)
from services.volunteer_service.models import (  # noqa: E402
    OpportunityStatus,
    VolunteerOpportunity,
    VolunteerProfile,
)
from sqlalchemy import select  # noqa: E402

SEED_CLUBS = [
    {
        "name": "Riverside Rowing Club",
        "description": "Community rowing for juniors and masters.",
        "location": "Riverside",
        "contact_email": "captain@riverside-rowing.example.org",
        "sport_types": ["rowing"],
        "opportunities": [
            {
                "title": "Regatta marshal",
                "description": "Keep the bank clear and crews moving on race day.",
                "required_skills": ["event marshalling", "first aid"],
                "time_commitment": "One Saturday per month",
                "is_recurring": True,
            },
            {
                "title": "Junior squad helper",
                "description": "Support coaches during Sunday junior sessions.",
                "required_skills": ["coaching"],
                "time_commitment": "2 hours per week",
                "is_recurring": True,
            },
        ],
    },
    {
        "name": "Northside Netball",
        "description": "Leagues and development squads for all ages.",
        "location": "Northside",
        "contact_email": "secretary@northside-netball.example.org",
        "sport_types": ["netball"],
        "opportunities": [
            {
                "title": "Match day scorer",
                "description": "Keep score and timings for league fixtures.",
                "required_skills": ["scoring"],
                "time_commitment": "Saturday mornings",
                "is_recurring": True,
            },
        ],
    },
]

SEED_VOLUNTEERS = [
    {
        "user_id": "seed-volunteer-1",
        "first_name": "Priya",
        "last_name": "Shah",
        "location": "Riverside",
        "bio": "Qualified first aider, happy to marshal events.",
        "skills": ["first aid", "event marshalling"],
        "availability": ["weekends"],
    },
    {
        "user_id": "seed-volunteer-2",
        "first_name": "Tom",
        "last_name": "Okafor",
        "location": "Northside",
        "bio": "Former league player, level 1 coach.",
        "skills": ["coaching", "scoring"],
        "availability": ["weekday evenings", "weekends"],
    },
    {
        "user_id": "seed-volunteer-3",
        "first_name": "Mei",
        "last_name": "Lin",
        "location": "Riverside",
        "bio": "Photographer looking to help with club media.",
        "skills": ["photography", "social media"],
        "availability": ["weekends"],
    },
]


async def seed_clubs(session) -> tuple[int, int]:
    created = skipped = 0
    now = datetime.now(timezone.utc)

    for club_data in SEED_CLUBS:
        data = dict(club_data)
        opportunities = data.pop("opportunities")

        existing = (
            await session.execute(
                select(Club).where(Club.contact_email == data["contact_email"])
            )
        ).scalar_one_or_none()
        if existing:
            print(f"  Skipping (exists): {data['name']}")
            skipped += 1
            continue

        club = Club(
            id=uuid.uuid4(),
            verified=True,
            application_status=ApplicationStatus.APPROVED,
            reviewed_by="seed",
            reviewed_at=now,
            created_at=now,
            updated_at=now,
            **data,
        )
        session.add(club)
        session.add(
            ClubApplicationHistory(
                club_id=club.id,
                admin_id="seed",
                action=ApplicationStatus.APPROVED,
                notes="Seeded as approved",
            )
        )
        for opportunity in opportunities:
            session.add(
                VolunteerOpportunity(
                    club_id=club.id,
                    location=club.location,
                    status=OpportunityStatus.ACTIVE,
                    **opportunity,
                )
            )
        created += 1
        print(f"  Created: {data['name']} ({len(opportunities)} opportunities)")

    return created, skipped


async def seed_volunteers(session) -> tuple[int, int]:
    result = await session.execute(select(VolunteerProfile.user_id))
    existing = set(result.scalars())
    created = skipped = 0

    for profile_data in SEED_VOLUNTEERS:
        if profile_data["user_id"] in existing:
            print(f"  Skipping (exists): {profile_data['first_name']}")
            skipped += 1
            continue
        session.add(
            VolunteerProfile(
                email=f"{profile_data['user_id']}@volunteers.example.org",
                is_visible=True,
                **profile_data,
            )
        )
        created += 1
        print(f"  Created: {profile_data['first_name']} {profile_data['last_name']}")

    return created, skipped


async def seed_demo_data():
    """Insert demo clubs, opportunities and volunteers."""
    async with AsyncSessionLocal() as session:
        clubs = await seed_clubs(session)
        volunteers = await seed_volunteers(session)
        await session.commit()

    print("\nSeeding complete:")
    print(f"  Clubs created: {clubs[0]}, skipped: {clubs[1]}")
    print(f"  Volunteers created: {volunteers[0]}, skipped: {volunteers[1]}")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
