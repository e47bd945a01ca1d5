#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 业务异常定义

所有业务异常继承 AppError，携带 HTTP 状态码，由 handle_errors 装饰器
和应用级错误处理器统一转换为 JSON 响应。
"""


class AppError(Exception):
    """业务异常基类"""
    status_code = 500
    default_code = 'APP_ERROR'

    def __init__(self, message, code=None, field=None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.field = field

    def to_dict(self):
        data = {'success': False, 'message': self.message, 'code': self.code}
        if self.field:
            data['field'] = self.field
        return data


class ValidationError(AppError):
    """请求参数缺失或格式错误"""
    status_code = 400
    default_code = 'VALIDATION_ERROR'


class AuthenticationError(AppError):
    """凭证缺失、无效或过期

    kind 取值: missing / invalid / expired
    """
    status_code = 401
    default_code = 'AUTH_REQUIRED'

    KIND_CODES = {
        'missing': 'AUTH_REQUIRED',
        'invalid': 'TOKEN_INVALID',
        'expired': 'TOKEN_EXPIRED',
    }

    def __init__(self, message, kind='invalid', code=None, field=None):
        if kind not in self.KIND_CODES:
            raise ValueError(f'unknown authentication failure kind: {kind}')
        super().__init__(message, code=code or self.KIND_CODES[kind], field=field)
        self.kind = kind


class AuthorizationError(AppError):
    """角色不符、非资源所有者或管理员未获批准"""
    status_code = 403
    default_code = 'FORBIDDEN'


class NotFoundError(AppError):
    status_code = 404
    default_code = 'NOT_FOUND'


class ConflictError(AppError):
    """唯一字段冲突（手机号、邮箱、证件号、报名编号）"""
    status_code = 409
    default_code = 'CONFLICT'


class DependencyFailure(AppError):
    """关键路径上的外部依赖失败（文件存储、验证码服务）"""
    status_code = 502
    default_code = 'DEPENDENCY_FAILURE'
