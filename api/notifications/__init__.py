from flask import Blueprint

notifications_bp = Blueprint('notifications', __name__)

from . import (
    get_my_notifications,
    mark_notification_read,
)

__all__ = ['notifications_bp']
