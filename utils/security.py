#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 令牌与角色校验

会话令牌和二次验证令牌均使用 itsdangerous 签名，
两者使用不同的 salt，互相不能替代。
"""

import time
import logging
from datetime import timedelta

from itsdangerous import URLSafeTimedSerializer, BadData

from models import UserRole, VerificationStatus
from utils.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

SESSION_SALT = 'session-token'
STEP_UP_SALT = 'step-up-verification'


class SessionPrincipal:
    """已认证的调用者"""

    def __init__(self, user_id, role, issued_at=None):
        self.user_id = user_id
        self.role = role if isinstance(role, UserRole) else UserRole(role)
        self.issued_at = issued_at

    @property
    def is_superadmin(self):
        return self.role == UserRole.SUPERADMIN

    def __repr__(self):
        return f'<SessionPrincipal {self.user_id} {self.role.value}>'


def _seconds(value):
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class TokenService:
    """会话令牌与二次验证令牌的签发和校验"""

    def __init__(self, secret_key, player_ttl=timedelta(days=7), admin_ttl=timedelta(hours=12),
                 step_up_ttl=timedelta(minutes=5)):
        if not secret_key:
            raise ValueError('SECRET_KEY is required to sign tokens')
        self._session = URLSafeTimedSerializer(secret_key, salt=SESSION_SALT)
        self._step_up = URLSafeTimedSerializer(secret_key, salt=STEP_UP_SALT)
        self.player_ttl = _seconds(player_ttl)
        self.admin_ttl = _seconds(admin_ttl)
        self.step_up_ttl = _seconds(step_up_ttl)

    @classmethod
    def from_config(cls, config):
        return cls(
            config['SECRET_KEY'],
            player_ttl=config.get('PLAYER_TOKEN_TTL', timedelta(days=7)),
            admin_ttl=config.get('ADMIN_TOKEN_TTL', timedelta(hours=12)),
            step_up_ttl=config.get('STEP_UP_TOKEN_TTL', timedelta(minutes=5)),
        )

    def session_ttl(self, role):
        role = role if isinstance(role, UserRole) else UserRole(role)
        if role == UserRole.PLAYER:
            return self.player_ttl
        if role in (UserRole.ADMIN, UserRole.SUPERADMIN):
            return self.admin_ttl
        raise ValueError(f'unknown role: {role}')

    def issue_session(self, user):
        """签发会话令牌（运动员 7 天，管理员 12 小时）"""
        return self._session.dumps({'sub': user.id, 'role': user.role.value})

    def authenticate(self, token, now=None):
        """校验会话令牌，返回 SessionPrincipal"""
        if not token:
            raise AuthenticationError('Authentication required', kind='missing')

        payload, issued_at = self._load(self._session, token)
        try:
            principal = SessionPrincipal(payload['sub'], payload['role'], issued_at)
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError('Invalid token', kind='invalid')

        if self._age(issued_at, now) > self.session_ttl(principal.role):
            raise AuthenticationError('Token expired, please log in again', kind='expired')
        return principal

    def issue_step_up(self, user_id):
        """签发二次验证令牌（修改手机号、邮箱或密码前使用）"""
        return self._step_up.dumps({'sub': user_id, 'type': 'verification'})

    def verify_step_up(self, token, user_id, now=None):
        """校验二次验证令牌并确认属于当前用户"""
        if not token:
            raise AuthenticationError('Verification required', kind='missing', code='VERIFICATION_REQUIRED')

        payload, issued_at = self._load(self._step_up, token)
        if not isinstance(payload, dict) or payload.get('type') != 'verification':
            raise AuthenticationError('Invalid verification token', kind='invalid')
        if self._age(issued_at, now) > self.step_up_ttl:
            raise AuthenticationError('Verification expired, please verify again', kind='expired')
        if payload.get('sub') != user_id:
            raise AuthorizationError('Verification token does not belong to this account',
                                     code='VERIFICATION_MISMATCH')
        return True

    @staticmethod
    def _load(serializer, token):
        try:
            return serializer.loads(token, return_timestamp=True)
        except BadData:
            raise AuthenticationError('Invalid token', kind='invalid')

    @staticmethod
    def _age(issued_at, now):
        now = time.time() if now is None else now
        return now - issued_at.timestamp()


def authorize_role(principal, required_roles):
    """严格的角色成员判断"""
    required = set()
    for role in required_roles:
        if not isinstance(role, UserRole):
            raise ValueError(f'not a role: {role!r}')
        required.add(role)
    return principal is not None and principal.role in required


def require_role(principal, *required_roles):
    if not authorize_role(principal, required_roles):
        allowed = ', '.join(r.value for r in required_roles)
        raise AuthorizationError(f'Access denied. Requires role: {allowed}')
    return principal


def ensure_admin_approved(user):
    """管理员未审核通过时拒绝；超级管理员与运动员不受此限制"""
    if user.is_player or user.has_admin_privileges():
        return user
    if user.verification == VerificationStatus.PENDING:
        raise AuthorizationError('Your admin account is pending approval',
                                 code='ADMIN_PENDING_APPROVAL')
    if user.verification == VerificationStatus.REJECTED:
        raise AuthorizationError('Your admin application was rejected',
                                 code='ADMIN_REJECTED')
    raise ValueError(f'unknown role/verification: {user.role}/{user.verification}')
