import logging

from mysql.connector import Error, IntegrityError

from models import EventRegistration, Transaction
from utils.errors import ConflictError


logger = logging.getLogger(__name__)

REGISTRATION_SELECT = """
    SELECT r.*, e.name AS event_name
    FROM event_registrations r
    LEFT JOIN events e ON e.id = r.event_id
"""


def row_to_registration(row):
    if not row:
        return None
    return EventRegistration(**row)


def row_to_transaction(row):
    if not row:
        return None
    return Transaction(**row)


def _status_value(status):
    return getattr(status, 'value', status)


class RegistrationDbMixin:
    """报名与付款记录数据库操作 mixin"""

    # ==================== 付款记录 ====================

    def create_transaction(self, transaction):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO transactions
                        (user_id, order_id, manual_transaction_id, payment_mode, screenshot_url, amount, currency, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """, (transaction.user_id, transaction.order_id, transaction.manual_transaction_id,
                      transaction.payment_mode, transaction.screenshot_url, transaction.amount,
                      transaction.currency, transaction.status))
                transaction.id = cursor.lastrowid
                conn.commit()
                return transaction
        except Error as e:
            logger.error(f"创建付款记录失败: {e}")
            raise

    def delete_transaction(self, transaction_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM transactions WHERE id = %s", (transaction_id,))
                conn.commit()
        except Error as e:
            logger.error(f"删除付款记录失败: {e}")
            raise

    def get_transactions_by_ids(self, transaction_ids):
        transaction_ids = [tid for tid in set(transaction_ids) if tid is not None]
        if not transaction_ids:
            return {}
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                placeholders = ', '.join(['%s'] * len(transaction_ids))
                cursor.execute(f"SELECT * FROM transactions WHERE id IN ({placeholders})", transaction_ids)
                return {row['id']: row_to_transaction(row) for row in cursor.fetchall()}
        except Error as e:
            logger.error(f"获取付款记录失败: {e}")
            raise

    # ==================== 报名 ====================

    def create_registration(self, registration):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO event_registrations
                        (event_id, player_id, team_id, registration_no, categories,
                         amount_paid, transaction_id, document_url, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """, (registration.event_id, registration.player_id, registration.team_id,
                      registration.registration_no, registration.categories_json(),
                      registration.amount_paid, registration.transaction_id,
                      registration.document_url, registration.status.value))
                registration.id = cursor.lastrowid
                conn.commit()
                return registration
        except IntegrityError as e:
            logger.warning(f"报名记录唯一键冲突: {e}")
            raise ConflictError('Registration number collision, please retry')
        except Error as e:
            logger.error(f"创建报名记录失败: {e}")
            raise

    def get_registration(self, registration_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(REGISTRATION_SELECT + " WHERE r.id = %s", (registration_id,))
                return row_to_registration(cursor.fetchone())
        except Error as e:
            logger.error(f"获取报名记录失败: {e}")
            raise

    def get_registrations_by_ids(self, registration_ids):
        ids = list(dict.fromkeys(registration_ids))
        if not ids:
            return []
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(REGISTRATION_SELECT + f" WHERE r.id IN ({', '.join(['%s'] * len(ids))})", ids)
                return [row_to_registration(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"批量获取报名记录失败: {e}")
            raise

    def set_registration_status(self, registration_id, status):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "UPDATE event_registrations SET status = %s WHERE id = %s",
                    (_status_value(status), registration_id)
                )
                conn.commit()
        except Error as e:
            logger.error(f"更新报名状态失败: {e}")
            raise
        return self.get_registration(registration_id)

    def bulk_set_registration_status(self, registration_ids, status):
        """单条 UPDATE ... WHERE id IN (...)，一次提交"""
        ids = list(dict.fromkeys(registration_ids))
        placeholders = ', '.join(['%s'] * len(ids))
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    f"UPDATE event_registrations SET status = %s WHERE id IN ({placeholders})",
                    [_status_value(status)] + ids
                )
                conn.commit()
                cursor.execute(REGISTRATION_SELECT + f" WHERE r.id IN ({placeholders})", ids)
                return [row_to_registration(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"批量更新报名状态失败: {e}")
            raise

    def list_registrations(self, event_id=None, event_ids=None):
        conditions, params = [], []
        if event_id is not None:
            conditions.append("r.event_id = %s")
            params.append(event_id)
        if event_ids is not None:
            if not event_ids:
                return []
            conditions.append(f"r.event_id IN ({', '.join(['%s'] * len(event_ids))})")
            params.extend(event_ids)
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ''
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(REGISTRATION_SELECT + where + " ORDER BY r.created_at DESC", params)
                return [row_to_registration(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取报名列表失败: {e}")
            raise

    def list_registrations_for_player(self, user_id, team_ids):
        conditions = ["r.player_id = %s"]
        params = [user_id]
        team_ids = list(team_ids or [])
        if team_ids:
            conditions.append(f"r.team_id IN ({', '.join(['%s'] * len(team_ids))})")
            params.extend(team_ids)
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(
                    REGISTRATION_SELECT + f" WHERE {' OR '.join(conditions)} ORDER BY r.created_at DESC",
                    params
                )
                return [row_to_registration(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取运动员报名失败: {e}")
            raise

    def registration_totals(self):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT status, COUNT(*), COALESCE(SUM(amount_paid), 0) "
                    "FROM event_registrations GROUP BY status"
                )
                return {
                    status: {'count': count, 'amount': float(amount)}
                    for status, count, amount in cursor.fetchall()
                }
        except Error as e:
            logger.error(f"统计报名数据失败: {e}")
            raise
