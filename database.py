#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 数据库连接和操作
"""

import mysql.connector
from mysql.connector import Error, pooling
from contextlib import contextmanager
import logging
import time

from config import Config
from models import DATABASE_SCHEMA
from storage import Store
from utils.helpers import generate_password_hash
from db_modules.db_users import UserDbMixin
from db_modules.db_teams import TeamDbMixin
from db_modules.db_events import EventDbMixin
from db_modules.db_registrations import RegistrationDbMixin
from db_modules.db_notifications import NotificationDbMixin
from db_modules.db_family import FamilyDbMixin
from db_modules.db_site import SiteDbMixin

logger = logging.getLogger(__name__)


class TimedCursorWrapper:
    def __init__(self, cursor, slow_threshold_ms=50):
        self._cursor = cursor
        self._slow_threshold_ms = slow_threshold_ms

    def execute(self, operation, params=None, multi=False):
        start = time.perf_counter()
        try:
            return self._cursor.execute(operation, params, multi)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if duration_ms >= self._slow_threshold_ms:
                logger.warning(
                    "Slow query took %.1f ms: %s; params=%s",
                    duration_ms,
                    operation,
                    params,
                )

    def executemany(self, operation, seq_params):
        start = time.perf_counter()
        try:
            return self._cursor.executemany(operation, seq_params)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if duration_ms >= self._slow_threshold_ms:
                logger.warning(
                    "Slow query (executemany) took %.1f ms: %s; params_count=%d",
                    duration_ms,
                    operation,
                    len(seq_params) if seq_params is not None else 0,
                )

    def __getattr__(self, item):
        return getattr(self._cursor, item)


_connection_pools = {}

def _get_connection_pool(config):
    """获取（按池名共享的）数据库连接池"""
    pool_config = config.copy()
    # 移除连接池配置参数，避免传递给连接池构造函数
    pool_size = pool_config.pop('pool_size', 5)
    pool_name = pool_config.pop('pool_name', 'sports_pool')
    if pool_name not in _connection_pools:
        try:
            _connection_pools[pool_name] = pooling.MySQLConnectionPool(
                pool_name=pool_name,
                pool_size=pool_size,
                **pool_config
            )
            logger.info(f"数据库连接池创建成功，池大小: {pool_size}")
        except Error as e:
            logger.error(f"创建数据库连接池失败，将回退到直连模式: {e}")
            return None
    return _connection_pools[pool_name]

class DatabaseManager(
    UserDbMixin,
    TeamDbMixin,
    EventDbMixin,
    RegistrationDbMixin,
    NotificationDbMixin,
    FamilyDbMixin,
    SiteDbMixin,
    Store,
):
    """数据库管理器（Store 的 MySQL 实现）"""

    def __init__(self, app_config=None):
        app_config = app_config or {}

        def setting(key):
            return app_config.get(key, getattr(Config, key))

        self.config = {
            'host': setting('DB_HOST'),
            'port': setting('DB_PORT'),
            'user': setting('DB_USER'),
            'password': setting('DB_PASSWORD'),
            'database': setting('DB_NAME'),
            'charset': 'utf8mb4',
            'collation': 'utf8mb4_unicode_ci',
            'autocommit': False,
            'raise_on_warnings': False,
            'pool_name': setting('DB_POOL_NAME'),
            'pool_size': setting('DB_POOL_SIZE'),
            'pool_reset_session': True,
            'connection_timeout': 30
        }
        self.slow_threshold_ms = setting('SLOW_QUERY_THRESHOLD_MS')
        self.superadmin_email = setting('SUPERADMIN_EMAIL')
        self.superadmin_password = setting('SUPERADMIN_PASSWORD')
        self.pool = _get_connection_pool(self.config)

    def _connect_config(self):
        cfg = self.config.copy()
        cfg.pop('pool_name', None)
        cfg.pop('pool_size', None)
        cfg.pop('pool_reset_session', None)
        return cfg

    @contextmanager
    def get_connection(self):
        """获取数据库连接的上下文管理器"""
        connection = None
        try:
            if self.pool:
                connection = self.pool.get_connection()
            else:
                connection = mysql.connector.connect(**self._connect_config())

            original_cursor = connection.cursor
            slow_threshold_ms = self.slow_threshold_ms

            def timed_cursor(*args, **kwargs):
                base_cursor = original_cursor(*args, **kwargs)
                return TimedCursorWrapper(base_cursor, slow_threshold_ms=slow_threshold_ms)

            connection.cursor = timed_cursor

            yield connection
        except Error as e:
            logger.error(f"数据库连接错误: {e}")
            if connection:
                connection.rollback()
            raise
        finally:
            if connection and connection.is_connected():
                connection.close()

    def init_database(self, force_recreate=False):
        """初始化数据库和表

        Args:
            force_recreate (bool): 是否强制重建表（删除现有表）
        """
        try:
            # 首先连接到MySQL服务器（不指定数据库）
            temp_config = self._connect_config()
            temp_config.pop('database', None)

            with mysql.connector.connect(**temp_config) as connection:
                cursor = connection.cursor()
                try:
                    cursor.execute(
                        f"CREATE DATABASE IF NOT EXISTS {self.config['database']} "
                        f"CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
                    )
                except Error as e:
                    # 忽略错误码1007（数据库已存在）
                    if '1007' not in str(e):
                        logger.warning(f"创建数据库时出现警告: {e}")

            with self.get_connection() as connection:
                cursor = connection.cursor()

                if force_recreate:
                    logger.info("强制重建模式：删除现有表...")
                    for table_name in reversed(list(DATABASE_SCHEMA.keys())):
                        cursor.execute(f"DROP TABLE IF EXISTS {table_name}")
                        logger.info(f"删除表 {table_name}")

                # 按依赖顺序创建所有表
                for table_name, schema in DATABASE_SCHEMA.items():
                    try:
                        cursor.execute(schema)
                    except Error as e:
                        logger.error(f"创建表 {table_name} 失败: {e}")
                        raise

                connection.commit()

                # 创建默认超级管理员账户
                self._create_default_superadmin(cursor)
                connection.commit()

        except Error as e:
            logger.error(f"数据库初始化失败: {e}")
            raise

    def _create_default_superadmin(self, cursor):
        """根据环境变量创建默认超级管理员账户"""
        if not self.superadmin_email or not self.superadmin_password:
            logger.info("未配置 SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD，跳过超级管理员初始化")
            return
        try:
            cursor.execute("SELECT COUNT(*) FROM users WHERE role = 'superadmin'")
            count = cursor.fetchone()[0]

            if count == 0:
                cursor.execute("""
                    INSERT INTO users (role, verification, name, email, password_hash)
                    VALUES (%s, %s, %s, %s, %s)
                """, ('superadmin', 'verified', 'Super Admin', self.superadmin_email,
                      generate_password_hash(self.superadmin_password)))
                logger.info(f"默认超级管理员账户创建成功 (邮箱: {self.superadmin_email})")

        except Error as e:
            logger.error(f"创建默认超级管理员失败: {e}")


if __name__ == '__main__':
    # 测试数据库连接和初始化
    db_manager = DatabaseManager()
    try:
        db_manager.init_database()
        print("数据库初始化成功！")
    except Exception as e:
        print(f"数据库初始化失败: {e}")
