import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import Base, create_session_factory
from app.core.datetime_utils import utcnow
from app.models import attendance as attendance_table
from app.models import match as match_table
from app.models import player as player_table
from app.models import user as user_table
from app.models.attendance_model import AttendanceModel, AttendanceStatus
from app.models.match_model import MatchModel
from app.models.player_model import PlayerModel
from app.models.user_model import UserModel
from app.schemas.attendance_schemas import AttendanceCreate
from app.schemas.match_schemas import MatchCreate
from app.schemas.player_schemas import PlayerCreate
from app.schemas.user_schemas import UserCreate
from app.storage.base import Storage

logger = logging.getLogger(__name__)


def _columns(model, exclude=()) -> Dict[str, Any]:
    # Enums go into String columns as their plain values
    return {
        k: v.value if isinstance(v, Enum) else v
        for k, v in model.model_dump().items()
        if k not in exclude
    }


class SqlStorage(Storage):
    """SQLAlchemy-backed store. Every operation runs in its own session and commits on success."""

    def __init__(self, database_url: str):
        self.engine, self.SessionLocal = create_session_factory(database_url)
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"SQL storage ready at {self.engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # --- User operations ---

    def get_user(self, user_id: int) -> Optional[UserModel]:
        with self._session() as db:
            user = db.get(user_table.User, user_id)
            return UserModel.model_validate(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        with self._session() as db:
            user = db.query(user_table.User).filter(user_table.User.email == email).first()
            return UserModel.model_validate(user) if user else None

    def get_user_by_provider_id(self, provider_id: str) -> Optional[UserModel]:
        with self._session() as db:
            user = db.query(user_table.User).filter(user_table.User.provider_id == provider_id).first()
            return UserModel.model_validate(user) if user else None

    def get_all_users(self) -> List[UserModel]:
        with self._session() as db:
            users = db.query(user_table.User).order_by(user_table.User.id).all()
            return [UserModel.model_validate(u) for u in users]

    def count_users(self) -> int:
        with self._session() as db:
            return db.query(func.count(user_table.User.id)).scalar()

    def create_user(self, user_in: UserCreate) -> UserModel:
        with self._session() as db:
            if db.query(user_table.User).filter(user_table.User.email == user_in.email).first():
                raise ValueError(f"User with email {user_in.email} already exists.")
            if db.query(user_table.User).filter(user_table.User.provider_id == user_in.provider_id).first():
                raise ValueError(f"User with {user_in.provider} ID {user_in.provider_id} already exists.")

            db_user = user_table.User(**_columns(user_in))
            db.add(db_user)
            db.flush()
            return UserModel.model_validate(db_user)

    def set_user_admin(self, user_id: int, is_admin: bool) -> Optional[UserModel]:
        with self._session() as db:
            db_user = db.get(user_table.User, user_id)
            if not db_user:
                return None
            db_user.is_admin = is_admin
            db.flush()
            return UserModel.model_validate(db_user)

    # --- Match operations ---

    def get_match(self, match_id: int) -> Optional[MatchModel]:
        with self._session() as db:
            match = db.get(match_table.Match, match_id)
            return MatchModel.model_validate(match) if match else None

    def get_all_matches(self) -> List[MatchModel]:
        with self._session() as db:
            matches = db.query(match_table.Match).order_by(match_table.Match.id).all()
            return [MatchModel.model_validate(m) for m in matches]

    def get_upcoming_matches(self, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[MatchModel]:
        now = now or utcnow()
        with self._session() as db:
            query = (
                db.query(match_table.Match)
                .filter(match_table.Match.date >= now)
                .order_by(match_table.Match.date, match_table.Match.id)
            )
            if limit and limit > 0:
                query = query.limit(limit)
            return [MatchModel.model_validate(m) for m in query.all()]

    def create_match(self, match_in: MatchCreate) -> MatchModel:
        with self._session() as db:
            db_match = match_table.Match(**_columns(match_in))
            db.add(db_match)
            db.flush()
            return MatchModel.model_validate(db_match)

    def update_match(self, match_id: int, fields: Dict[str, Any]) -> Optional[MatchModel]:
        with self._session() as db:
            db_match = db.get(match_table.Match, match_id)
            if not db_match:
                return None
            current = MatchModel.model_validate(db_match)
            fields = {k: v for k, v in fields.items() if k != "id"}
            # Validate the merged record before touching the row
            updated = MatchModel.model_validate({**current.model_dump(), **fields})
            for key, value in _columns(updated, exclude=("id",)).items():
                setattr(db_match, key, value)
            db.flush()
            return MatchModel.model_validate(db_match)

    def delete_match(self, match_id: int) -> bool:
        with self._session() as db:
            db_match = db.get(match_table.Match, match_id)
            if not db_match:
                return False
            db.delete(db_match)
            return True

    # --- Attendance operations ---

    def _find_attendance(self, db: Session, user_id: int, match_id: int):
        return (
            db.query(attendance_table.Attendance)
            .filter(
                attendance_table.Attendance.user_id == user_id,
                attendance_table.Attendance.match_id == match_id,
            )
            .first()
        )

    def get_attendance(self, user_id: int, match_id: int) -> Optional[AttendanceModel]:
        with self._session() as db:
            attendance = self._find_attendance(db, user_id, match_id)
            return AttendanceModel.model_validate(attendance) if attendance else None

    def get_attendances_by_match(self, match_id: int) -> List[AttendanceModel]:
        with self._session() as db:
            rows = (
                db.query(attendance_table.Attendance)
                .filter(attendance_table.Attendance.match_id == match_id)
                .order_by(attendance_table.Attendance.id)
                .all()
            )
            return [AttendanceModel.model_validate(a) for a in rows]

    def get_attendances_by_user(self, user_id: int) -> List[AttendanceModel]:
        with self._session() as db:
            rows = (
                db.query(attendance_table.Attendance)
                .filter(attendance_table.Attendance.user_id == user_id)
                .order_by(attendance_table.Attendance.id)
                .all()
            )
            return [AttendanceModel.model_validate(a) for a in rows]

    def create_attendance(self, attendance_in: AttendanceCreate) -> AttendanceModel:
        with self._session() as db:
            if self._find_attendance(db, attendance_in.user_id, attendance_in.match_id):
                raise ValueError(f"User {attendance_in.user_id} already has an attendance record for match {attendance_in.match_id}.")
            db_attendance = attendance_table.Attendance(**_columns(attendance_in))
            db.add(db_attendance)
            db.flush()
            return AttendanceModel.model_validate(db_attendance)

    def update_attendance(self, user_id: int, match_id: int, status: AttendanceStatus) -> AttendanceModel:
        status = AttendanceStatus(status)
        with self._session() as db:
            db_attendance = self._find_attendance(db, user_id, match_id)
            if db_attendance:
                db_attendance.status = status.value
            else:
                db_attendance = attendance_table.Attendance(user_id=user_id, match_id=match_id, status=status.value)
                db.add(db_attendance)
            db.flush()
            return AttendanceModel.model_validate(db_attendance)

    # --- Player operations ---

    def get_player(self, player_id: int) -> Optional[PlayerModel]:
        with self._session() as db:
            player = db.get(player_table.Player, player_id)
            return PlayerModel.model_validate(player) if player else None

    def get_player_by_user_id(self, user_id: int) -> Optional[PlayerModel]:
        with self._session() as db:
            player = db.query(player_table.Player).filter(player_table.Player.user_id == user_id).first()
            return PlayerModel.model_validate(player) if player else None

    def get_all_players(self) -> List[PlayerModel]:
        with self._session() as db:
            players = db.query(player_table.Player).order_by(player_table.Player.id).all()
            return [PlayerModel.model_validate(p) for p in players]

    def create_player(self, player_in: PlayerCreate) -> PlayerModel:
        with self._session() as db:
            if db.query(player_table.Player).filter(player_table.Player.user_id == player_in.user_id).first():
                raise ValueError(f"User {player_in.user_id} already has a player record.")
            db_player = player_table.Player(**_columns(player_in))
            db.add(db_player)
            db.flush()
            return PlayerModel.model_validate(db_player)

    def update_player(self, player_id: int, fields: Dict[str, Any]) -> Optional[PlayerModel]:
        with self._session() as db:
            db_player = db.get(player_table.Player, player_id)
            if not db_player:
                return None
            current = PlayerModel.model_validate(db_player)
            fields = {k: v for k, v in fields.items() if k not in ("id", "user_id")}
            updated = PlayerModel.model_validate({**current.model_dump(), **fields})
            db_player.position = updated.position
            db_player.status = updated.status.value
            db.flush()
            return PlayerModel.model_validate(db_player)
