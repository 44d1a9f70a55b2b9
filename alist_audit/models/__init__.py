from .watch_record import WatchRecordRow
from .user_settings import UserSettings

__all__ = [
    "WatchRecordRow",
    "UserSettings",
]
