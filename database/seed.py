"""Demo fixture data loaded at startup.

The API serves a single demo golfer; this module creates that user along
with a handful of rounds, activities and practice resources.
"""

import logging
from datetime import datetime
from decimal import Decimal

from models import ActivityType, ResourceType, User
from database.db_manager import DatabaseManager

logger = logging.getLogger(__name__)

DEMO_USER_ID = 1

DEMO_USER = {
    "username": "mike.johnson",
    "password": "password123",
    "name": "Mike Johnson",
    "handicap": Decimal("12.4"),
}

DEMO_ROUNDS = [
    {
        "date": datetime(2024, 12, 15, 8, 0),
        "course_name": "Pebble Beach Golf Links",
        "total_score": 82,
        "course_rating": Decimal("72.1"),
        "slope_rating": 131,
        "fairways_hit": 10,
        "greens_in_regulation": 12,
        "total_putts": 29,
        "penalties": 1,
    },
    {
        "date": datetime(2024, 12, 8, 9, 30),
        "course_name": "Torrey Pines South",
        "total_score": 88,
        "course_rating": Decimal("75.3"),
        "slope_rating": 138,
        "fairways_hit": 6,
        "greens_in_regulation": 7,
        "total_putts": 33,
        "penalties": 2,
    },
    {
        "date": datetime(2024, 12, 1, 7, 45),
        "course_name": "Riverside Municipal",
        "total_score": 84,
        "course_rating": Decimal("70.4"),
        "slope_rating": 124,
        "fairways_hit": 8,
        "greens_in_regulation": 9,
        "total_putts": 32,
        "penalties": 0,
    },
    {
        "date": datetime(2024, 11, 23, 13, 15),
        "course_name": "Riverside Municipal",
        "total_score": 86,
        "course_rating": Decimal("70.4"),
        "slope_rating": 124,
        "fairways_hit": 7,
        "greens_in_regulation": 8,
        "total_putts": 34,
        "penalties": 1,
    },
]

DEMO_ACTIVITIES = [
    {
        "date": datetime(2024, 12, 15),
        "activity_type": ActivityType.ON_COURSE,
        "sub_type": "playing-18-holes-walking",
        "start_time": datetime(2024, 12, 15, 8, 0),
        "end_time": datetime(2024, 12, 15, 12, 30),
        "comment": "Beautiful morning round at Pebble Beach. Shot 82, felt great about my putting today.",
        "metadata": {
            "course": "Pebble Beach Golf Links",
            "score": 82,
            "fairwaysHit": 10,
            "greensInRegulation": 12,
            "putts": 29,
        },
    },
    {
        "date": datetime(2024, 12, 14),
        "activity_type": ActivityType.PRACTICE_AREA,
        "sub_type": "driving-range",
        "start_time": datetime(2024, 12, 14, 17, 0),
        "end_time": datetime(2024, 12, 14, 18, 0),
        "comment": "Worked on my driver swing. Hit about 80 balls, focusing on tempo.",
        "metadata": {"bucketSize": "large", "ballsHit": 80, "focusArea": "driver-swing"},
    },
    {
        "date": datetime(2024, 12, 13),
        "activity_type": ActivityType.OFF_COURSE,
        "sub_type": "golf-strength-training",
        "start_time": datetime(2024, 12, 13, 6, 30),
        "end_time": datetime(2024, 12, 13, 7, 30),
        "comment": "Core and rotational strength workout. Felt really good today.",
        "metadata": {"workoutType": "core-and-rotation", "intensity": "moderate"},
    },
]

DEMO_RESOURCES = [
    {
        "type": ResourceType.FACILITY,
        "name": "Riverside Driving Range",
        "description": "Grass tees and target greens",
        "location": "2 miles from home",
        "hours": "6am - 9pm",
        "cost": "$12 per large bucket",
    },
    {
        "type": ResourceType.FACILITY,
        "name": "Riverside Putting Green",
        "description": "Practice green with chipping area",
        "location": "Riverside Municipal",
        "hours": "Dawn to dusk",
        "cost": "Free",
    },
    {
        "type": ResourceType.EQUIPMENT,
        "name": "Indoor Putting Mat",
        "description": "9 ft mat with return",
        "location": "Home",
    },
]


async def seed_demo_data(db: DatabaseManager) -> User:
    """Create the demo user and fixture data. No-op if the user already exists."""
    existing = await db.users.get_user_by_username(DEMO_USER["username"])
    if existing:
        return existing

    user = await db.users.create_user(User(**DEMO_USER))
    for data in DEMO_ROUNDS:
        await db.rounds.create_round(user.id, data)
    for data in DEMO_ACTIVITIES:
        await db.activities.create_activity(user.id, data)
    for data in DEMO_RESOURCES:
        await db.resources.create_resource(user.id, data)

    logger.info(
        "Seeded demo user %s: %d rounds, %d activities, %d resources",
        user.username, len(DEMO_ROUNDS), len(DEMO_ACTIVITIES), len(DEMO_RESOURCES),
    )
    return user
