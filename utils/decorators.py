#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 装饰器（认证、权限、日志、错误处理）

路由上的推荐顺序:
    @bp.route(...)
    @handle_errors
    @auth_required(UserRole.ADMIN, UserRole.SUPERADMIN)
    @log_action('...')
"""

import time
import logging
from functools import wraps

from flask import g, jsonify, request

from extensions import get_services
from utils.errors import AppError, ValidationError
from utils.security import require_role

logger = logging.getLogger(__name__)

VERIFICATION_HEADER = 'X-Verification-Token'


def _bearer_token():
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        return header[7:].strip() or None
    return None


def auth_required(*roles):
    """令牌认证 + 角色校验装饰器

    Args:
        roles: 允许的 UserRole，留空表示任意已登录用户
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            services = get_services()
            principal = services.tokens.authenticate(_bearer_token())
            if roles:
                require_role(principal, *roles)
            g.principal = principal
            g.current_user = services.users.resolve_principal(principal)
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def verification_token():
    """二次验证令牌（修改邮箱、手机号、密码时携带）"""
    return request.headers.get(VERIFICATION_HEADER)


def validate_json(required_fields=None):
    """JSON数据验证装饰器

    Args:
        required_fields: 必需的字段列表
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                raise ValidationError('Request body must be a JSON object')

            if required_fields:
                missing_fields = [
                    field for field in required_fields
                    if field not in data or data[field] is None or data[field] == ''
                ]
                if missing_fields:
                    raise ValidationError(f'Missing required fields: {", ".join(missing_fields)}',
                                          field=missing_fields[0])

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def log_action(action_name):
    """操作日志装饰器

    Args:
        action_name: 操作名称
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = g.get('current_user')
            user_id = user.id if user else None
            user_name = (user.name or user.email) if user else 'Anonymous'

            # 记录操作开始
            start_time = time.perf_counter()
            logger.info(f"用户 {user_name}(ID:{user_id}) 开始执行操作: {action_name}")

            try:
                result = f(*args, **kwargs)

                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.info(
                    f"用户 {user_name}(ID:{user_id}) 成功完成操作: {action_name}, 耗时: {duration_ms:.1f} ms"
                )
                return result

            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"用户 {user_name}(ID:{user_id}) 执行操作失败: {action_name}, 耗时: {duration_ms:.1f} ms, 错误: {str(e)}"
                )
                raise

        return decorated_function
    return decorator


def handle_errors(f):
    """业务异常转换为 JSON 响应，未预期的异常记录堆栈并返回 500"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AppError as e:
            if e.status_code >= 500:
                logger.error(f"{request.method} {request.path} 依赖服务失败: {e.message}")
            return jsonify(e.to_dict()), e.status_code
        except Exception:
            logger.exception(f"{request.method} {request.path} 处理失败")
            return jsonify({
                'success': False,
                'message': 'Internal server error',
                'code': 'INTERNAL_ERROR'
            }), 500

    return decorated_function
