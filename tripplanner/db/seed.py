"""Reference-data seeding - cities, activities and an optional admin account.

Idempotent: rows that already exist (matched by natural key) are left alone.

Usage:
    python -m tripplanner.db.seed
"""

import asyncio
import logging
from decimal import Decimal

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tripplanner.config import Settings, get_settings
from tripplanner.db.engine import create_async_engine_from_settings, create_session_factory
from tripplanner.db.models import Activity, City, User
from tripplanner.db.users import get_user_by_email, normalize_email
from tripplanner.security import hash_password
from tripplanner.utils.logging import configure_logging

logger = logging.getLogger(__name__)

# (name, country, region, cost_index, popularity_score, description)
CITIES: list[tuple[str, str, str, str, int, str]] = [
    ("Paris", "France", "Europe", "85.00", 98, "Art, cafés and the Seine."),
    ("Tokyo", "Japan", "Asia", "80.00", 96, "Neon districts and quiet shrines."),
    ("New York", "United States", "North America", "90.00", 95, "The city that never sleeps."),
    ("Barcelona", "Spain", "Europe", "70.00", 90, "Gaudí, beaches and tapas."),
    ("Bangkok", "Thailand", "Asia", "40.00", 88, "Temples, markets and street food."),
    ("Cape Town", "South Africa", "Africa", "50.00", 80, "Table Mountain over two oceans."),
]

# (city name, activity name, category, cost, duration minutes, rating, description)
ACTIVITIES: list[tuple[str, str, str, str, int, str, str]] = [
    ("Paris", "Louvre Museum", "Culture", "22.00", 180, "4.8", "World-famous art museum."),
    ("Paris", "Seine River Cruise", "Sightseeing", "15.00", 60, "4.5", "Evening boat tour."),
    ("Paris", "Pastry Workshop", "Food", "95.00", 150, "4.7", "Hands-on croissant class."),
    ("Tokyo", "Tsukiji Food Tour", "Food", "80.00", 180, "4.8", "Market tasting walk."),
    ("Tokyo", "Meiji Shrine Visit", "Culture", "0.00", 90, "4.6", "Forest shrine in Shibuya."),
    ("New York", "Broadway Show", "Entertainment", "150.00", 165, "4.9", "Evening musical."),
    ("New York", "Central Park Bike Tour", "Outdoor", "45.00", 120, "4.5", "Guided ride."),
    ("Barcelona", "Sagrada Família", "Culture", "33.00", 120, "4.9", "Gaudí's basilica."),
    ("Barcelona", "Tapas Crawl", "Food", "65.00", 180, "4.6", "Gothic Quarter bars."),
    ("Bangkok", "Grand Palace", "Culture", "15.00", 150, "4.7", "Royal complex."),
    ("Bangkok", "Floating Market Trip", "Sightseeing", "35.00", 300, "4.3", "Canal market."),
    ("Cape Town", "Table Mountain Hike", "Outdoor", "0.00", 240, "4.8", "Platteklip Gorge."),
    ("Cape Town", "Winelands Day Trip", "Food", "120.00", 480, "4.7", "Stellenbosch tastings."),
]


async def seed_cities(session: AsyncSession) -> dict[str, City]:
    """Insert missing cities, returning all seeded cities by name."""
    existing = {
        (city.name, city.country): city
        for city in (await session.execute(select(City))).scalars().all()
    }

    cities: dict[str, City] = {}
    for name, country, region, cost_index, popularity, description in CITIES:
        city = existing.get((name, country))
        if city is None:
            city = City(
                name=name,
                country=country,
                region=region,
                cost_index=Decimal(cost_index),
                popularity_score=popularity,
                description=description,
            )
            session.add(city)
        cities[name] = city

    await session.flush()
    return cities


async def seed_activities(session: AsyncSession, cities: dict[str, City]) -> int:
    """Insert missing activities. Returns the number inserted."""
    existing = {
        (activity.city_id, activity.name)
        for activity in (await session.execute(select(Activity))).scalars().all()
    }

    created = 0
    for city_name, name, category, cost, duration, rating, description in ACTIVITIES:
        city = cities[city_name]
        if (city.id, name) in existing:
            continue
        session.add(
            Activity(
                city_id=city.id,
                name=name,
                category=category,
                cost=Decimal(cost),
                duration=duration,
                rating=Decimal(rating),
                description=description,
            )
        )
        created += 1

    await session.flush()
    return created


async def seed_admin(session: AsyncSession, settings: Settings) -> User | None:
    """Create the admin account named in settings if it does not exist yet."""
    if not settings.seed_admin_email or not settings.seed_admin_password:
        return None

    user = await get_user_by_email(session, settings.seed_admin_email)
    if user is None:
        user = User(
            email=normalize_email(settings.seed_admin_email),
            password_hash=await run_in_threadpool(
                hash_password, settings.seed_admin_password, settings.password_hash_iterations
            ),
            first_name="Admin",
            last_name="User",
            is_admin=True,
        )
        session.add(user)
        await session.flush()
        logger.info("Admin account created", extra={"structured": {"user_id": user.id}})
    return user


async def seed_reference_data(session: AsyncSession, settings: Settings) -> None:
    """Seed everything and commit."""
    cities = await seed_cities(session)
    created = await seed_activities(session, cities)
    await seed_admin(session, settings)
    await session.commit()

    logger.info(
        "Seeding complete",
        extra={"structured": {"cities": len(cities), "activities_created": created}},
    )


async def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    engine = create_async_engine_from_settings(settings)
    try:
        async with create_session_factory(engine)() as session:
            await seed_reference_data(session, settings)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
