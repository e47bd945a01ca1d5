from flask import Blueprint

from models import UserRole


advertisements_bp = Blueprint('advertisements', __name__)

# 维护广告允许的角色
ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)

from . import (
    get_advertisements,
    manage_advertisement,
)

__all__ = ['advertisements_bp']
