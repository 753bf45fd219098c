from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.core.datetime_utils import utcnow
from app.models.attendance_model import AttendanceModel, AttendanceStatus
from app.models.match_model import MatchModel
from app.models.player_model import PlayerModel
from app.models.user_model import UserModel
from app.schemas.attendance_schemas import AttendanceCreate
from app.schemas.match_schemas import MatchCreate
from app.schemas.player_schemas import PlayerCreate
from app.schemas.user_schemas import UserCreate
from app.storage.base import Storage
from app.storage.sequence import IdSequence


class MemStorage(Storage):
    """Keeps every entity in process memory for the lifetime of the store object.

    Each entity type draws ids from its own sequence, built by
    `sequence_factory`. Attendances are keyed by (user_id, match_id).
    """

    def __init__(self, sequence_factory: Callable[[], IdSequence] = IdSequence):
        self.users: Dict[int, UserModel] = {}
        self.matches: Dict[int, MatchModel] = {}
        self.attendances: Dict[Tuple[int, int], AttendanceModel] = {}
        self.players: Dict[int, PlayerModel] = {}
        self._user_ids = sequence_factory()
        self._match_ids = sequence_factory()
        self._attendance_ids = sequence_factory()
        self._player_ids = sequence_factory()

    # --- User operations ---

    def get_user(self, user_id: int) -> Optional[UserModel]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_user_by_provider_id(self, provider_id: str) -> Optional[UserModel]:
        return next((u for u in self.users.values() if u.provider_id == provider_id), None)

    def get_all_users(self) -> List[UserModel]:
        return list(self.users.values())

    def count_users(self) -> int:
        return len(self.users)

    def create_user(self, user_in: UserCreate) -> UserModel:
        if self.get_user_by_email(user_in.email):
            raise ValueError(f"User with email {user_in.email} already exists.")
        if self.get_user_by_provider_id(user_in.provider_id):
            raise ValueError(f"User with {user_in.provider} ID {user_in.provider_id} already exists.")

        user = UserModel(id=self._user_ids.next_id(), **user_in.model_dump())
        self.users[user.id] = user
        return user

    def set_user_admin(self, user_id: int, is_admin: bool) -> Optional[UserModel]:
        user = self.users.get(user_id)
        if not user:
            return None
        updated_user = user.model_copy(update={"is_admin": is_admin})
        self.users[user_id] = updated_user
        return updated_user

    # --- Match operations ---

    def get_match(self, match_id: int) -> Optional[MatchModel]:
        return self.matches.get(match_id)

    def get_all_matches(self) -> List[MatchModel]:
        return list(self.matches.values())

    def get_upcoming_matches(self, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[MatchModel]:
        now = now or utcnow()
        upcoming = sorted((m for m in self.matches.values() if m.date >= now), key=lambda m: m.date)
        return upcoming[:limit] if limit and limit > 0 else upcoming

    def create_match(self, match_in: MatchCreate) -> MatchModel:
        match = MatchModel(id=self._match_ids.next_id(), **match_in.model_dump())
        self.matches[match.id] = match
        return match

    def update_match(self, match_id: int, fields: Dict[str, Any]) -> Optional[MatchModel]:
        match = self.matches.get(match_id)
        if not match:
            return None
        fields = {k: v for k, v in fields.items() if k != "id"}
        # Re-validate so a bad partial update can't leave a broken record behind
        updated_match = MatchModel.model_validate({**match.model_dump(), **fields})
        self.matches[match_id] = updated_match
        return updated_match

    def delete_match(self, match_id: int) -> bool:
        if match_id not in self.matches:
            return False
        del self.matches[match_id]
        for key in [k for k in self.attendances if k[1] == match_id]:
            del self.attendances[key]
        return True

    # --- Attendance operations ---

    def get_attendance(self, user_id: int, match_id: int) -> Optional[AttendanceModel]:
        return self.attendances.get((user_id, match_id))

    def get_attendances_by_match(self, match_id: int) -> List[AttendanceModel]:
        return [a for a in self.attendances.values() if a.match_id == match_id]

    def get_attendances_by_user(self, user_id: int) -> List[AttendanceModel]:
        return [a for a in self.attendances.values() if a.user_id == user_id]

    def create_attendance(self, attendance_in: AttendanceCreate) -> AttendanceModel:
        if (attendance_in.user_id, attendance_in.match_id) in self.attendances:
            raise ValueError(f"User {attendance_in.user_id} already has an attendance record for match {attendance_in.match_id}.")
        attendance = AttendanceModel(id=self._attendance_ids.next_id(), **attendance_in.model_dump())
        self.attendances[(attendance.user_id, attendance.match_id)] = attendance
        return attendance

    def update_attendance(self, user_id: int, match_id: int, status: AttendanceStatus) -> AttendanceModel:
        key = (user_id, match_id)
        attendance = self.attendances.get(key)
        if attendance:
            updated_attendance = attendance.model_copy(update={"status": AttendanceStatus(status)})
            self.attendances[key] = updated_attendance
            return updated_attendance
        return self.create_attendance(AttendanceCreate(user_id=user_id, match_id=match_id, status=status))

    # --- Player operations ---

    def get_player(self, player_id: int) -> Optional[PlayerModel]:
        return self.players.get(player_id)

    def get_player_by_user_id(self, user_id: int) -> Optional[PlayerModel]:
        return next((p for p in self.players.values() if p.user_id == user_id), None)

    def get_all_players(self) -> List[PlayerModel]:
        return list(self.players.values())

    def create_player(self, player_in: PlayerCreate) -> PlayerModel:
        if self.get_player_by_user_id(player_in.user_id):
            raise ValueError(f"User {player_in.user_id} already has a player record.")
        player = PlayerModel(id=self._player_ids.next_id(), **player_in.model_dump())
        self.players[player.id] = player
        return player

    def update_player(self, player_id: int, fields: Dict[str, Any]) -> Optional[PlayerModel]:
        player = self.players.get(player_id)
        if not player:
            return None
        fields = {k: v for k, v in fields.items() if k not in ("id", "user_id")}
        updated_player = PlayerModel.model_validate({**player.model_dump(), **fields})
        self.players[player_id] = updated_player
        return updated_player
