"""Database domain mixins package."""

from .db_users import UserDbMixin
from .db_teams import TeamDbMixin
from .db_events import EventDbMixin
from .db_registrations import RegistrationDbMixin
from .db_notifications import NotificationDbMixin
from .db_family import FamilyDbMixin
from .db_site import SiteDbMixin

__all__ = [
    "UserDbMixin",
    "TeamDbMixin",
    "EventDbMixin",
    "RegistrationDbMixin",
    "NotificationDbMixin",
    "FamilyDbMixin",
    "SiteDbMixin",
]
