from flask import Blueprint
import logging

from models import UserRole


admin_bp = Blueprint('admin', __name__)

logger = logging.getLogger(__name__)

# 管理后台接口允许的角色
ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)

# 每个具体路由实现在本包下的独立模块中
from . import (
    players,
    admins,
    transactions,
    dashboard_stats,
    news,
    brackets,
    settings,
)

__all__ = ['admin_bp']
