import json
import logging

from mysql.connector import Error

from models import Event, EventNews, EventBracket


logger = logging.getLogger(__name__)

EVENT_COLUMNS = (
    'name', 'sport', 'location', 'venue', 'start_date', 'end_date', 'start_time',
    'categories', 'banner_url', 'document_url', 'document_description',
    'document_required', 'payment_qr_image', 'sponsors', 'created_by',
    'assigned_to', 'status',
)
JSON_EVENT_COLUMNS = {'categories', 'sponsors'}


def _column_value(column, value):
    if column in JSON_EVENT_COLUMNS and not isinstance(value, str):
        return json.dumps(value if value is not None else [], ensure_ascii=False)
    return value


def row_to_event(row):
    if not row:
        return None
    return Event(**{k: row.get(k) for k in ('id', 'created_at', 'updated_at') + EVENT_COLUMNS})


def row_to_news(row):
    if not row:
        return None
    return EventNews(**row)


def row_to_bracket(row):
    if not row:
        return None
    return EventBracket(**row)


class EventDbMixin:
    """赛事、新闻、对阵相关数据库操作 mixin"""

    # ==================== 赛事 ====================

    def create_event(self, event):
        """创建赛事"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                values = [_column_value(c, getattr(event, c)) for c in EVENT_COLUMNS]
                placeholders = ', '.join(['%s'] * len(EVENT_COLUMNS))
                cursor.execute(
                    f"INSERT INTO events ({', '.join(EVENT_COLUMNS)}) VALUES ({placeholders})",
                    values
                )
                event.id = cursor.lastrowid
                conn.commit()
                logger.info(f"赛事创建成功: {event.name} (ID: {event.id})")
                return event
        except Error as e:
            logger.error(f"创建赛事失败: {e}")
            raise

    def get_event(self, event_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM events WHERE id = %s", (event_id,))
                return row_to_event(cursor.fetchone())
        except Error as e:
            logger.error(f"获取赛事失败: {e}")
            raise

    def update_event(self, event_id, fields):
        """更新赛事"""
        columns = [c for c in fields if c in EVENT_COLUMNS and c != 'created_by']
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    params = [_column_value(c, fields[c]) for c in columns] + [event_id]
                    cursor.execute(f"UPDATE events SET {assignments} WHERE id = %s", params)
                    conn.commit()
            except Error as e:
                logger.error(f"更新赛事失败: {e}")
                raise
        return self.get_event(event_id)

    def delete_event(self, event_id):
        """删除赛事（级联删除报名、付款、新闻、对阵）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT transaction_id FROM event_registrations "
                    "WHERE event_id = %s AND transaction_id IS NOT NULL",
                    (event_id,)
                )
                transaction_ids = [row[0] for row in cursor.fetchall()]
                cursor.execute("DELETE FROM event_registrations WHERE event_id = %s", (event_id,))
                if transaction_ids:
                    placeholders = ', '.join(['%s'] * len(transaction_ids))
                    cursor.execute(f"DELETE FROM transactions WHERE id IN ({placeholders})", transaction_ids)
                cursor.execute("DELETE FROM event_news WHERE event_id = %s", (event_id,))
                cursor.execute("DELETE FROM event_brackets WHERE event_id = %s", (event_id,))
                cursor.execute("DELETE FROM events WHERE id = %s", (event_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除赛事失败: {e}")
            raise

    def list_events(self, created_by=None, admin_id=None):
        """获取赛事列表"""
        conditions, params = [], []
        if created_by is not None:
            conditions.append("created_by = %s")
            params.append(created_by)
        if admin_id is not None:
            conditions.append("(created_by = %s OR assigned_to = %s)")
            params.extend([admin_id, admin_id])
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ''
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(f"SELECT * FROM events {where} ORDER BY start_date ASC", params)
                return [row_to_event(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取赛事列表失败: {e}")
            raise

    def get_event_names(self, event_ids):
        event_ids = [eid for eid in set(event_ids) if eid is not None]
        if not event_ids:
            return {}
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                placeholders = ', '.join(['%s'] * len(event_ids))
                cursor.execute(f"SELECT id, name FROM events WHERE id IN ({placeholders})", event_ids)
                return {event_id: name for event_id, name in cursor.fetchall()}
        except Error as e:
            logger.error(f"获取赛事名称失败: {e}")
            raise

    # ==================== 新闻 ====================

    def create_news(self, news):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO event_news (event_id, title, content, image_url, is_highlight)
                    VALUES (%s, %s, %s, %s, %s)
                """, (news.event_id, news.title, news.content, news.image_url, news.is_highlight))
                news.id = cursor.lastrowid
                conn.commit()
                return news
        except Error as e:
            logger.error(f"创建新闻失败: {e}")
            raise

    def get_news(self, news_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM event_news WHERE id = %s", (news_id,))
                return row_to_news(cursor.fetchone())
        except Error as e:
            logger.error(f"获取新闻失败: {e}")
            raise

    def update_news(self, news_id, fields):
        allowed = ('title', 'content', 'image_url', 'is_highlight')
        columns = [c for c in fields if c in allowed]
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    cursor.execute(
                        f"UPDATE event_news SET {assignments} WHERE id = %s",
                        [fields[c] for c in columns] + [news_id]
                    )
                    conn.commit()
            except Error as e:
                logger.error(f"更新新闻失败: {e}")
                raise
        return self.get_news(news_id)

    def delete_news(self, news_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM event_news WHERE id = %s", (news_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除新闻失败: {e}")
            raise

    def list_news(self, event_id=None):
        where, params = ('WHERE event_id = %s', (event_id,)) if event_id is not None else ('', ())
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(f"SELECT * FROM event_news {where} ORDER BY created_at DESC", params)
                return [row_to_news(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取新闻列表失败: {e}")
            raise

    # ==================== 对阵 ====================

    def save_bracket(self, bracket):
        """同一 赛事+组别+轮次 已存在时更新"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("""
                    INSERT INTO event_brackets (event_id, category, round_name, draw_type, draw_data)
                    VALUES (%s, %s, %s, %s, %s)
                    ON DUPLICATE KEY UPDATE draw_type = VALUES(draw_type), draw_data = VALUES(draw_data)
                """, (bracket.event_id, bracket.category, bracket.round_name, bracket.draw_type,
                      json.dumps(bracket.draw_data, ensure_ascii=False)))
                conn.commit()
                cursor.execute("""
                    SELECT * FROM event_brackets
                    WHERE event_id = %s AND category = %s AND round_name = %s
                """, (bracket.event_id, bracket.category, bracket.round_name))
                return row_to_bracket(cursor.fetchone())
        except Error as e:
            logger.error(f"保存对阵失败: {e}")
            raise

    def list_brackets(self, event_id, category=None):
        sql = "SELECT * FROM event_brackets WHERE event_id = %s"
        params = [event_id]
        if category:
            sql += " AND category = %s"
            params.append(category)
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(sql + " ORDER BY created_at ASC", params)
                return [row_to_bracket(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取对阵失败: {e}")
            raise

    def delete_bracket(self, bracket_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM event_brackets WHERE id = %s", (bracket_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除对阵失败: {e}")
            raise
