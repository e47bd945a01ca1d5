import logging

from mysql.connector import Error, IntegrityError

from models import User
from utils.errors import ConflictError


logger = logging.getLogger(__name__)

USER_COLUMNS = (
    'role', 'verification', 'player_id', 'first_name', 'last_name', 'name',
    'mobile', 'email', 'aadhaar', 'dob', 'age', 'apartment', 'street', 'city',
    'state', 'pincode', 'country', 'photos', 'password_hash',
)

# 允许通过 update_user 修改的列（player_id、role 不可修改）
UPDATABLE_USER_COLUMNS = set(USER_COLUMNS) - {'role', 'player_id'}


def _enum_value(value):
    return getattr(value, 'value', value)


def row_to_user(row):
    if not row:
        return None
    return User(**{k: row.get(k) for k in ('id', 'created_at', 'updated_at') + USER_COLUMNS})


class UserDbMixin:
    """用户相关数据库操作 mixin。

    依赖宿主类提供:
    - self.get_connection(): 返回数据库连接的上下文管理器
    """

    # ==================== 用户相关操作 ====================

    def create_user(self, user):
        """创建用户"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                values = [_enum_value(getattr(user, col)) for col in USER_COLUMNS]
                placeholders = ', '.join(['%s'] * len(USER_COLUMNS))
                cursor.execute(
                    f"INSERT INTO users ({', '.join(USER_COLUMNS)}) VALUES ({placeholders})",
                    values
                )
                user.id = cursor.lastrowid
                conn.commit()
                return user

        except IntegrityError as e:
            logger.warning(f"创建用户唯一键冲突: {e}")
            raise ConflictError('User with this mobile, email or aadhaar already exists')
        except Error as e:
            logger.error(f"创建用户失败: {e}")
            raise

    def _fetch_user(self, where, params):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(f"SELECT * FROM users WHERE {where} LIMIT 1", params)
                return row_to_user(cursor.fetchone())
        except Error as e:
            logger.error(f"获取用户失败: {e}")
            raise

    def get_user_by_id(self, user_id):
        """根据用户ID获取用户"""
        return self._fetch_user("id = %s", (user_id,))

    def get_user_by_email(self, email):
        return self._fetch_user("email = %s", (email,))

    def get_player_by_player_id(self, player_id):
        """按运动员编号查找（不区分大小写）"""
        return self._fetch_user(
            "role = 'player' AND UPPER(player_id) = UPPER(%s)", (player_id,)
        )

    def find_player_for_login(self, identifier):
        """登录支持手机号、证件号或运动员编号"""
        return self._fetch_user(
            "mobile = %s OR aadhaar = %s OR UPPER(player_id) = UPPER(%s)",
            (identifier, identifier, identifier)
        )

    def get_users_by_ids(self, user_ids):
        user_ids = [uid for uid in set(user_ids) if uid is not None]
        if not user_ids:
            return {}
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                placeholders = ', '.join(['%s'] * len(user_ids))
                cursor.execute(f"SELECT * FROM users WHERE id IN ({placeholders})", user_ids)
                return {row['id']: row_to_user(row) for row in cursor.fetchall()}
        except Error as e:
            logger.error(f"批量获取用户失败: {e}")
            raise

    def find_user_conflict(self, mobile=None, email=None, aadhaar=None, exclude_user_id=None):
        """检查唯一字段是否已被其他用户占用"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                for column, value in (('mobile', mobile), ('email', email), ('aadhaar', aadhaar)):
                    if not value:
                        continue
                    sql = f"SELECT id FROM users WHERE {column} = %s"
                    params = [value]
                    if exclude_user_id is not None:
                        sql += " AND id <> %s"
                        params.append(exclude_user_id)
                    cursor.execute(sql + " LIMIT 1", params)
                    if cursor.fetchone():
                        return column
                return None
        except Error as e:
            logger.error(f"检查用户唯一字段失败: {e}")
            raise

    def next_player_number(self):
        """通过自增序列表分配运动员序号"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("INSERT INTO player_sequence () VALUES ()")
                seq = cursor.lastrowid
                conn.commit()
                return seq
        except Error as e:
            logger.error(f"分配运动员编号失败: {e}")
            raise

    def update_user(self, user_id, fields):
        """更新用户字段"""
        columns = [c for c in fields if c in UPDATABLE_USER_COLUMNS]
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    params = [_enum_value(fields[c]) for c in columns] + [user_id]
                    cursor.execute(f"UPDATE users SET {assignments} WHERE id = %s", params)
                    conn.commit()
            except IntegrityError as e:
                logger.warning(f"更新用户唯一键冲突: {e}")
                raise ConflictError('Mobile, email or aadhaar already in use')
            except Error as e:
                logger.error(f"更新用户失败: {e}")
                raise
        return self.get_user_by_id(user_id)

    def list_users(self, role=None, verification=None):
        """获取用户列表"""
        conditions, params = [], []
        if role is not None:
            conditions.append("role = %s")
            params.append(_enum_value(role))
        if verification is not None:
            conditions.append("verification = %s")
            params.append(_enum_value(verification))
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ''
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(f"SELECT * FROM users {where} ORDER BY created_at DESC", params)
                return [row_to_user(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取用户列表失败: {e}")
            raise

    def count_users_by_verification(self, role):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT verification, COUNT(*) FROM users WHERE role = %s GROUP BY verification",
                    (_enum_value(role),)
                )
                return {status: count for status, count in cursor.fetchall()}
        except Error as e:
            logger.error(f"统计用户失败: {e}")
            raise

    def delete_player_account(self, user_id):
        """删除运动员账号（级联删除报名、付款、队伍、家庭成员、通知）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT transaction_id FROM event_registrations "
                    "WHERE player_id = %s AND transaction_id IS NOT NULL",
                    (user_id,)
                )
                transaction_ids = [row[0] for row in cursor.fetchall()]
                cursor.execute("DELETE FROM event_registrations WHERE player_id = %s", (user_id,))
                cursor.execute("DELETE FROM transactions WHERE user_id = %s", (user_id,))
                if transaction_ids:
                    placeholders = ', '.join(['%s'] * len(transaction_ids))
                    cursor.execute(f"DELETE FROM transactions WHERE id IN ({placeholders})", transaction_ids)
                cursor.execute("DELETE FROM player_teams WHERE captain_id = %s", (user_id,))
                cursor.execute("DELETE FROM family_members WHERE user_id = %s", (user_id,))
                cursor.execute("DELETE FROM notifications WHERE user_id = %s", (user_id,))
                cursor.execute("DELETE FROM users WHERE id = %s AND role = 'player'", (user_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除运动员账号失败: {e}")
            raise

    def delete_admin_account(self, admin_id, successor_id):
        """删除管理员，名下赛事在同一事务中转给 successor_id"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("UPDATE events SET created_by = %s WHERE created_by = %s", (successor_id, admin_id))
                cursor.execute("UPDATE events SET assigned_to = %s WHERE assigned_to = %s", (successor_id, admin_id))
                cursor.execute("DELETE FROM notifications WHERE user_id = %s", (admin_id,))
                cursor.execute("DELETE FROM users WHERE id = %s AND role = 'admin'", (admin_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除管理员失败: {e}")
            raise
