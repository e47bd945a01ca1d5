#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - API接口模块
"""

from .auth import auth_bp
from .player import player_bp
from .payment import payment_bp
from .admin import admin_bp
from .teams import teams_bp
from .events import events_bp
from .notifications import notifications_bp
from .advertisements import advertisements_bp
from .apartments import apartments_bp
from .public import public_bp

__version__ = '1.0.0'

# 导出所有蓝图
__all__ = [
    'auth_bp',
    'player_bp',
    'payment_bp',
    'admin_bp',
    'teams_bp',
    'events_bp',
    'notifications_bp',
    'advertisements_bp',
    'apartments_bp',
    'public_bp',
]
