from flask import Blueprint
import logging


auth_bp = Blueprint('auth', __name__)

logger = logging.getLogger(__name__)

# 每个具体路由实现在本包下的独立模块中
from . import (
    send_otp,
    register,
    login,
    get_profile,
    step_up,
)

__all__ = ['auth_bp']
