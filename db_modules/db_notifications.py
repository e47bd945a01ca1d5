import logging

from mysql.connector import Error

from models import Notification


logger = logging.getLogger(__name__)


class NotificationDbMixin:
    """站内通知数据库操作 mixin"""

    def create_notification(self, notification):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO notifications (user_id, title, message, type, link, is_read)
                    VALUES (%s, %s, %s, %s, %s, %s)
                """, (notification.user_id, notification.title, notification.message,
                      notification.type.value, notification.link, notification.is_read))
                notification.id = cursor.lastrowid
                conn.commit()
                return notification
        except Error as e:
            logger.error(f"创建通知失败: {e}")
            raise

    def list_notifications(self, user_id, limit=50):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("""
                    SELECT * FROM notifications WHERE user_id = %s
                    ORDER BY created_at DESC, id DESC LIMIT %s
                """, (user_id, limit))
                return [Notification(**row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取通知列表失败: {e}")
            raise

    def count_unread_notifications(self, user_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT COUNT(*) FROM notifications WHERE user_id = %s AND is_read = FALSE",
                    (user_id,)
                )
                return cursor.fetchone()[0]
        except Error as e:
            logger.error(f"统计未读通知失败: {e}")
            raise

    def mark_notification_read(self, user_id, notification_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                # 已读的通知 UPDATE 影响行数为 0，先确认归属
                cursor.execute(
                    "SELECT id FROM notifications WHERE id = %s AND user_id = %s",
                    (notification_id, user_id)
                )
                if cursor.fetchone() is None:
                    return False
                cursor.execute("UPDATE notifications SET is_read = TRUE WHERE id = %s", (notification_id,))
                conn.commit()
                return True
        except Error as e:
            logger.error(f"标记通知已读失败: {e}")
            raise

    def mark_all_notifications_read(self, user_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "UPDATE notifications SET is_read = TRUE WHERE user_id = %s AND is_read = FALSE",
                    (user_id,)
                )
                updated = cursor.rowcount
                conn.commit()
                return updated
        except Error as e:
            logger.error(f"标记全部通知已读失败: {e}")
            raise
