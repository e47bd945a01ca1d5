#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 配置文件
"""

import os
from datetime import timedelta
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

class Config:
    """应用配置类"""

    # Flask 基础配置
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # 数据库配置
    DB_HOST = os.environ.get('DB_HOST') or 'localhost'
    DB_PORT = int(os.environ.get('DB_PORT') or 3306)
    DB_USER = os.environ.get('DB_USER') or 'sports'
    DB_PASSWORD = os.environ.get('DB_PASSWORD') or ''
    DB_NAME = os.environ.get('DB_NAME') or 'sports_events'
    # 数据库连接池配置
    DB_POOL_NAME = os.environ.get('DB_POOL_NAME') or 'sports_pool'
    DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE') or 10)
    # 慢查询阈值（毫秒）
    SLOW_QUERY_THRESHOLD_MS = float(os.environ.get('SLOW_QUERY_THRESHOLD_MS') or 200)

    # 服务器配置
    HOST = os.environ.get('HOST') or '0.0.0.0'
    PORT = int(os.environ.get('PORT') or 5000)
    DEBUG = os.environ.get('DEBUG', 'False').lower() == 'true'

    # 令牌有效期
    PLAYER_TOKEN_TTL = timedelta(days=7)
    ADMIN_TOKEN_TTL = timedelta(hours=12)
    STEP_UP_TOKEN_TTL = timedelta(minutes=5)

    # 文件上传配置
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(
        os.path.dirname(os.path.abspath(__file__)), 'uploads')
    UPLOAD_URL_PREFIX = os.environ.get('UPLOAD_URL_PREFIX') or '/uploads'
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

    # 邮件配置（Flask-Mail）
    MAIL_SERVER = os.environ.get('MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('MAIL_PORT') or 587)
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'true').lower() in ['true', 'on', '1']
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER') or MAIL_USERNAME
    MAIL_SUPPRESS_SEND = os.environ.get('MAIL_SUPPRESS_SEND', 'false').lower() in ['true', 'on', '1']

    # 验证码服务配置
    OTP_PROVIDER = os.environ.get('OTP_PROVIDER') or 'demo'
    TWO_FACTOR_API_KEY = os.environ.get('TWO_FACTOR_API_KEY')
    REDIS_URL = os.environ.get('REDIS_URL')

    # 后台任务配置（background / inline）
    DISPATCH_MODE = os.environ.get('DISPATCH_MODE') or 'background'
    DISPATCH_WORKERS = int(os.environ.get('DISPATCH_WORKERS') or 4)

    # 运动员默认邮箱域名（未填写邮箱时使用 手机号@域名）
    PLAYER_EMAIL_DOMAIN = os.environ.get('PLAYER_EMAIL_DOMAIN') or 'merasports.com'

    # 初始超级管理员
    SUPERADMIN_EMAIL = os.environ.get('SUPERADMIN_EMAIL')
    SUPERADMIN_PASSWORD = os.environ.get('SUPERADMIN_PASSWORD')

    # 日志配置
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_FILE = os.environ.get('LOG_FILE') or 'sports_events.log'

    # 系统配置
    SYSTEM_NAME = '体育赛事报名平台'
    SYSTEM_VERSION = '1.0.0'

    @classmethod
    def init_app(cls, app):
        """初始化应用配置"""
        # 确保上传目录存在
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

        # 设置日志
        import logging
        handlers = [logging.StreamHandler()]
        if cls.LOG_FILE:
            handlers.append(logging.FileHandler(cls.LOG_FILE, encoding='utf-8'))
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'sports-events-dev-secret-key'
    DB_NAME = os.environ.get('DB_NAME') or 'sports_events_dev'

class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # 生产环境数据库配置（从环境变量获取）
    DB_HOST = os.environ.get('PROD_DB_HOST') or 'localhost'
    DB_USER = os.environ.get('PROD_DB_USER') or 'sports_user'
    DB_PASSWORD = os.environ.get('PROD_DB_PASSWORD') or ''
    DB_NAME = os.environ.get('PROD_DB_NAME') or 'sports_events_prod'

class TestingConfig(Config):
    """测试环境配置"""
    TESTING = True
    SECRET_KEY = 'sports-events-test-secret-key'
    DB_NAME = 'sports_events_test'
    DISPATCH_MODE = 'inline'
    OTP_PROVIDER = 'demo'
    REDIS_URL = None
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = 'noreply@example.com'
    LOG_FILE = None

# 配置映射
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
