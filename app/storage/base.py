import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.models.attendance_model import AttendanceModel, AttendanceStatus
from app.models.match_model import MatchModel
from app.models.player_model import PlayerModel
from app.models.user_model import UserModel
from app.schemas.attendance_schemas import AttendanceCreate, AttendanceWithUser
from app.schemas.match_schemas import AttendanceCount, MatchCreate, MatchWithAttendance
from app.schemas.player_schemas import PlayerCreate, PlayerWithStats
from app.schemas.user_schemas import UserCreate

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Entity store for users, matches, attendances and players.

    Read operations return None (or an empty list) when nothing matches and
    never raise. Writes raise ValueError when they would break a uniqueness
    rule. The combined operations at the bottom are built purely on the
    primitive operations, so every backend shares them.
    """

    # --- User operations ---

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserModel]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserModel]: ...

    @abstractmethod
    def get_user_by_provider_id(self, provider_id: str) -> Optional[UserModel]: ...

    @abstractmethod
    def get_all_users(self) -> List[UserModel]: ...

    @abstractmethod
    def count_users(self) -> int: ...

    @abstractmethod
    def create_user(self, user_in: UserCreate) -> UserModel: ...

    @abstractmethod
    def set_user_admin(self, user_id: int, is_admin: bool) -> Optional[UserModel]: ...

    # --- Match operations ---

    @abstractmethod
    def get_match(self, match_id: int) -> Optional[MatchModel]: ...

    @abstractmethod
    def get_all_matches(self) -> List[MatchModel]: ...

    @abstractmethod
    def get_upcoming_matches(self, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[MatchModel]:
        """Matches dated at or after `now`, earliest first, truncated to `limit` after sorting.

        A missing or non-positive `limit` returns every upcoming match.
        """

    @abstractmethod
    def create_match(self, match_in: MatchCreate) -> MatchModel: ...

    @abstractmethod
    def update_match(self, match_id: int, fields: Dict[str, Any]) -> Optional[MatchModel]: ...

    @abstractmethod
    def delete_match(self, match_id: int) -> bool: ...

    # --- Attendance operations ---

    @abstractmethod
    def get_attendance(self, user_id: int, match_id: int) -> Optional[AttendanceModel]: ...

    @abstractmethod
    def get_attendances_by_match(self, match_id: int) -> List[AttendanceModel]: ...

    @abstractmethod
    def get_attendances_by_user(self, user_id: int) -> List[AttendanceModel]: ...

    @abstractmethod
    def create_attendance(self, attendance_in: AttendanceCreate) -> AttendanceModel:
        """Insert a new record; raises ValueError if the (user, match) pair already has one."""

    @abstractmethod
    def update_attendance(self, user_id: int, match_id: int, status: AttendanceStatus) -> AttendanceModel:
        """Set the status for a (user, match) pair, creating the record if it is missing."""

    # --- Player operations ---

    @abstractmethod
    def get_player(self, player_id: int) -> Optional[PlayerModel]: ...

    @abstractmethod
    def get_player_by_user_id(self, user_id: int) -> Optional[PlayerModel]: ...

    @abstractmethod
    def get_all_players(self) -> List[PlayerModel]: ...

    @abstractmethod
    def create_player(self, player_in: PlayerCreate) -> PlayerModel: ...

    @abstractmethod
    def update_player(self, player_id: int, fields: Dict[str, Any]) -> Optional[PlayerModel]: ...

    # --- Combined operations ---

    def get_match_with_attendance(self, match_id: int, user_id: Optional[int] = None) -> Optional[MatchWithAttendance]:
        match = self.get_match(match_id)
        if not match:
            return None

        attendees: List[UserModel] = []
        for attendance in self.get_attendances_by_match(match_id):
            if attendance.status != AttendanceStatus.ATTENDING:
                continue
            user = self.get_user(attendance.user_id)
            if user:
                attendees.append(user)

        user_attendance = None
        if user_id is not None:
            user_attendance = self.get_attendance(user_id, match_id)

        # "total" is every registered user, not every player on the roster
        return MatchWithAttendance(
            **match.model_dump(),
            user_attendance=user_attendance,
            attendees=attendees,
            attendance_count=AttendanceCount(attending=len(attendees), total=self.count_users()),
        )

    def get_all_matches_with_attendance(self, user_id: Optional[int] = None) -> List[MatchWithAttendance]:
        results = [self.get_match_with_attendance(match.id, user_id) for match in self.get_all_matches()]
        return sorted((m for m in results if m is not None), key=lambda m: m.date)

    def get_upcoming_matches_with_attendance(
        self, user_id: Optional[int] = None, limit: Optional[int] = None
    ) -> List[MatchWithAttendance]:
        results = [self.get_match_with_attendance(match.id, user_id) for match in self.get_upcoming_matches(limit)]
        return [m for m in results if m is not None]

    def get_attendances_with_users(self, match_id: int) -> List[AttendanceWithUser]:
        return [
            AttendanceWithUser(**attendance.model_dump(), user=self.get_user(attendance.user_id))
            for attendance in self.get_attendances_by_match(match_id)
        ]

    def get_player_with_stats(self, player_id: int) -> Optional[PlayerWithStats]:
        player = self.get_player(player_id)
        if not player:
            return None
        return self._player_stats(player, len(self.get_all_matches()))

    def get_players_with_stats(self) -> List[PlayerWithStats]:
        total_matches = len(self.get_all_matches())
        return [self._player_stats(player, total_matches) for player in self.get_all_players()]

    def _player_stats(self, player: PlayerModel, total_matches: int) -> PlayerWithStats:
        attended_matches = sum(
            1 for a in self.get_attendances_by_user(player.user_id) if a.status == AttendanceStatus.ATTENDING
        )
        # Denominator is every match in the store, including ones before the player joined
        attendance_rate = (attended_matches / total_matches) * 100 if total_matches > 0 else 0.0
        user = self.get_user(player.user_id)
        if user is None:
            logger.warning(f"Player {player.id} references missing user {player.user_id}")
        return PlayerWithStats(
            **player.model_dump(),
            user=user,
            attendance_rate=attendance_rate,
            attended_matches=attended_matches,
            total_matches=total_matches,
        )
