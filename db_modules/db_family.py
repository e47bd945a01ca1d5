import logging

from mysql.connector import Error

from models import FamilyMember


logger = logging.getLogger(__name__)

FAMILY_COLUMNS = ('name', 'relation', 'age', 'gender')


def row_to_family_member(row):
    if not row:
        return None
    return FamilyMember(**row)


class FamilyDbMixin:
    """运动员家庭成员数据库操作 mixin"""

    def create_family_member(self, member):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO family_members (user_id, name, relation, age, gender)
                    VALUES (%s, %s, %s, %s, %s)
                """, (member.user_id, member.name, member.relation, member.age, member.gender))
                member.id = cursor.lastrowid
                conn.commit()
                return member
        except Error as e:
            logger.error(f"添加家庭成员失败: {e}")
            raise

    def get_family_member(self, member_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM family_members WHERE id = %s", (member_id,))
                return row_to_family_member(cursor.fetchone())
        except Error as e:
            logger.error(f"获取家庭成员失败: {e}")
            raise

    def update_family_member(self, member_id, fields):
        columns = [c for c in fields if c in FAMILY_COLUMNS]
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    cursor.execute(
                        f"UPDATE family_members SET {assignments} WHERE id = %s",
                        [fields[c] for c in columns] + [member_id]
                    )
                    conn.commit()
            except Error as e:
                logger.error(f"更新家庭成员失败: {e}")
                raise
        return self.get_family_member(member_id)

    def delete_family_member(self, member_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM family_members WHERE id = %s", (member_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除家庭成员失败: {e}")
            raise

    def list_family_members(self, user_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    "SELECT * FROM family_members WHERE user_id = %s ORDER BY created_at, id",
                    (user_id,)
                )
                return [FamilyMember(**row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取家庭成员列表失败: {e}")
            raise
