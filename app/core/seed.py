import logging
from datetime import timedelta

from app.core.datetime_utils import utcnow
from app.models.attendance_model import AttendanceStatus
from app.schemas.auth_schemas import AuthProvider
from app.schemas.match_schemas import MatchCreate
from app.services import auth_service
from app.storage.base import Storage

logger = logging.getLogger(__name__)

DEMO_FIXTURES = [
    # (days from today, kick-off, opponent, location, details)
    (-7, "18:30", "Riverside Rovers", "Central Park Field 2", "League match, bring both kits"),
    (3, "19:30", "Northside United", "Memorial Stadium", None),
    (10, "10:00", "Harbor City FC", "Harbor Sports Complex", "Cup quarter-final"),
    (17, "19:00", "Valley Athletic", "Central Park Field 1", None),
]


def seed_demo_data(storage: Storage) -> None:
    """Populates an empty store with the two demo users and a few fixtures."""
    if storage.count_users() > 0:
        logger.info("Store already has users, skipping demo data")
        return

    admin = auth_service.login_mock_user(storage, AuthProvider.GOOGLE)
    member = auth_service.login_mock_user(storage, AuthProvider.MICROSOFT)

    today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    for days, kick_off, opponent, location, details in DEMO_FIXTURES:
        hour, minute = (int(part) for part in kick_off.split(":"))
        storage.create_match(
            MatchCreate(
                date=today + timedelta(days=days, hours=hour, minutes=minute),
                time=kick_off,
                opponent=opponent,
                location=location,
                details=details,
                created_by=admin.id,
            )
        )

    matches = storage.get_all_matches()
    storage.update_attendance(admin.id, matches[0].id, AttendanceStatus.ATTENDING)
    storage.update_attendance(member.id, matches[0].id, AttendanceStatus.NOT_ATTENDING)
    storage.update_attendance(admin.id, matches[1].id, AttendanceStatus.ATTENDING)
    storage.update_attendance(member.id, matches[1].id, AttendanceStatus.PENDING)

    logger.info(f"Seeded {storage.count_users()} users and {len(matches)} matches")
