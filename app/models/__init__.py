from app.core.database import Base

# Import all ORM models here so they are registered with Base before
# SqlStorage calls Base.metadata.create_all().
from .user import User
from .match import Match
from .attendance import Attendance
from .player import Player
