from datetime import timedelta

import pytest

from app.core.datetime_utils import utcnow
from app.models.attendance_model import AttendanceStatus
from app.models.player_model import PlayerStatus
from app.schemas.attendance_schemas import AttendanceCreate
from app.schemas.match_schemas import MatchCreate
from app.schemas.player_schemas import PlayerCreate
from app.schemas.user_schemas import UserCreate
from app.storage.memory import MemStorage
from app.storage.sequence import IdSequence


class TestIdSequence:

    def test_starts_at_one_by_default(self):
        seq = IdSequence()
        assert [seq.next_id(), seq.next_id(), seq.next_id()] == [1, 2, 3]

    def test_custom_start(self):
        seq = IdSequence(start=500)
        assert seq.next_id() == 500
        assert seq.next_id() == 501


class TestMemStorage:

    def test_ids_are_per_entity(self, storage: MemStorage, make_user, make_match):
        user = make_user(storage)
        match = make_match(storage, created_by=user.id)
        player = storage.create_player(PlayerCreate(user_id=user.id))

        assert user.id == 1
        assert match.id == 1
        assert player.id == 1

    def test_injected_sequence_factory(self, make_user):
        store = MemStorage(sequence_factory=lambda: IdSequence(start=100))
        first = make_user(store)
        second = make_user(store)
        assert (first.id, second.id) == (100, 101)

    def test_create_user_defaults(self, storage: MemStorage):
        user = storage.create_user(
            UserCreate(email="new@example.com", name="New", provider="google", provider_id="google-new")
        )
        assert user.picture is None
        assert user.is_admin is False

    def test_create_user_duplicate_email(self, storage: MemStorage, make_user):
        existing = make_user(storage)
        with pytest.raises(ValueError, match=f"User with email {existing.email} already exists."):
            storage.create_user(
                UserCreate(email=existing.email, name="Dup", provider="google", provider_id="google-other")
            )

    def test_create_user_duplicate_provider_id(self, storage: MemStorage, make_user):
        existing = make_user(storage)
        with pytest.raises(ValueError, match=f"User with google ID {existing.provider_id} already exists."):
            storage.create_user(
                UserCreate(email="other@example.com", name="Dup", provider="google", provider_id=existing.provider_id)
            )

    def test_user_lookups_return_none_when_missing(self, storage: MemStorage):
        assert storage.get_user(42) is None
        assert storage.get_user_by_email("nobody@example.com") is None
        assert storage.get_user_by_provider_id("google-nobody") is None

    def test_set_user_admin(self, storage: MemStorage, make_user):
        user = make_user(storage)
        updated = storage.set_user_admin(user.id, True)
        assert updated.is_admin is True
        assert storage.get_user(user.id).is_admin is True
        assert storage.set_user_admin(999, True) is None

    def test_create_match_details_default_to_none(self, storage: MemStorage, make_match):
        match = make_match(storage)
        assert match.details is None

    def test_update_match_merges_fields(self, storage: MemStorage, make_match):
        match = make_match(storage, opponent="Old Opponent")
        updated = storage.update_match(match.id, {"opponent": "New Opponent", "details": "Bring water"})

        assert updated.opponent == "New Opponent"
        assert updated.details == "Bring water"
        assert updated.location == match.location
        assert updated.id == match.id
        assert storage.get_match(match.id).opponent == "New Opponent"

    def test_update_match_ignores_id(self, storage: MemStorage, make_match):
        match = make_match(storage)
        updated = storage.update_match(match.id, {"id": 77})
        assert updated.id == match.id
        assert storage.get_match(77) is None

    def test_update_match_not_found(self, storage: MemStorage):
        assert storage.update_match(12, {"opponent": "Ghosts"}) is None

    def test_delete_match_removes_its_attendances(self, storage: MemStorage, make_user, make_match):
        user = make_user(storage)
        doomed = make_match(storage)
        kept = make_match(storage)
        storage.update_attendance(user.id, doomed.id, AttendanceStatus.ATTENDING)
        storage.update_attendance(user.id, kept.id, AttendanceStatus.ATTENDING)

        assert storage.delete_match(doomed.id) is True
        assert storage.get_match(doomed.id) is None
        assert storage.get_attendance(user.id, doomed.id) is None
        assert storage.get_attendance(user.id, kept.id) is not None

    def test_create_attendance_is_keyed_by_pair(self, storage: MemStorage):
        storage.create_attendance(AttendanceCreate(user_id=1, match_id=2, status=AttendanceStatus.PENDING))
        assert storage.get_attendance(1, 2).status == AttendanceStatus.PENDING
        assert storage.get_attendance(2, 1) is None

    def test_attendances_by_user_and_match(self, storage: MemStorage):
        storage.update_attendance(1, 10, AttendanceStatus.ATTENDING)
        storage.update_attendance(1, 11, AttendanceStatus.NOT_ATTENDING)
        storage.update_attendance(2, 10, AttendanceStatus.PENDING)

        assert {a.match_id for a in storage.get_attendances_by_user(1)} == {10, 11}
        assert {a.user_id for a in storage.get_attendances_by_match(10)} == {1, 2}
        assert storage.get_attendances_by_match(99) == []

    def test_create_player_defaults_to_active(self, storage: MemStorage, make_user):
        user = make_user(storage)
        player = storage.create_player(PlayerCreate(user_id=user.id))
        assert player.status == PlayerStatus.ACTIVE
        assert player.position is None
        assert storage.get_player_by_user_id(user.id) == player

    def test_one_player_per_user(self, storage: MemStorage, make_user):
        user = make_user(storage)
        storage.create_player(PlayerCreate(user_id=user.id))
        with pytest.raises(ValueError, match="already has a player record"):
            storage.create_player(PlayerCreate(user_id=user.id, position="Goalkeeper"))

    def test_update_player(self, storage: MemStorage, make_user):
        user = make_user(storage)
        player = storage.create_player(PlayerCreate(user_id=user.id))

        updated = storage.update_player(player.id, {"position": "Defender", "status": "Injured"})
        assert updated.position == "Defender"
        assert updated.status == PlayerStatus.INJURED
        assert updated.user_id == user.id
        assert storage.update_player(999, {"position": "Striker"}) is None

    def test_update_player_rejects_unknown_status(self, storage: MemStorage, make_user):
        user = make_user(storage)
        player = storage.create_player(PlayerCreate(user_id=user.id))
        with pytest.raises(ValueError):
            storage.update_player(player.id, {"status": "Retired"})
        assert storage.get_player(player.id).status == PlayerStatus.ACTIVE

    def test_upcoming_without_limit_returns_all_future(self, storage: MemStorage):
        now = utcnow()
        for days in (4, -2, 1):
            storage.create_match(
                MatchCreate(date=now + timedelta(days=days), time="18:00", opponent=f"Team {days}",
                            location="Away", created_by=1)
            )
        upcoming = storage.get_upcoming_matches(now=now)
        assert [m.opponent for m in upcoming] == ["Team 1", "Team 4"]
