from flask import Blueprint
import logging

from models import UserRole


apartments_bp = Blueprint('apartments', __name__)

logger = logging.getLogger(__name__)

ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)

from . import (
    apartments,
)

__all__ = ['apartments_bp']
