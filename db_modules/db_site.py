import logging

from mysql.connector import Error

from models import Advertisement, PlatformSettings, Apartment


logger = logging.getLogger(__name__)

AD_COLUMNS = ('title', 'image_url', 'link_url', 'placement', 'is_active')
APARTMENT_COLUMNS = ('name', 'pincode', 'locality', 'zone')
SETTINGS_ID = 1


def row_to_advertisement(row):
    if not row:
        return None
    return Advertisement(**row)


def row_to_apartment(row):
    if not row:
        return None
    return Apartment(**row)


class SiteDbMixin:
    """广告、平台设置、小区目录数据库操作 mixin"""

    # ==================== 广告 ====================

    def create_advertisement(self, advertisement):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO advertisements (user_id, title, image_url, link_url, placement, is_active)
                    VALUES (%s, %s, %s, %s, %s, %s)
                """, (advertisement.user_id, advertisement.title, advertisement.image_url,
                      advertisement.link_url, advertisement.placement, advertisement.is_active))
                advertisement.id = cursor.lastrowid
                conn.commit()
                return advertisement
        except Error as e:
            logger.error(f"创建广告失败: {e}")
            raise

    def get_advertisement(self, advertisement_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM advertisements WHERE id = %s", (advertisement_id,))
                return row_to_advertisement(cursor.fetchone())
        except Error as e:
            logger.error(f"获取广告失败: {e}")
            raise

    def update_advertisement(self, advertisement_id, fields):
        columns = [c for c in fields if c in AD_COLUMNS]
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    cursor.execute(
                        f"UPDATE advertisements SET {assignments} WHERE id = %s",
                        [fields[c] for c in columns] + [advertisement_id]
                    )
                    conn.commit()
            except Error as e:
                logger.error(f"更新广告失败: {e}")
                raise
        return self.get_advertisement(advertisement_id)

    def delete_advertisement(self, advertisement_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM advertisements WHERE id = %s", (advertisement_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除广告失败: {e}")
            raise

    def list_advertisements(self):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM advertisements ORDER BY created_at DESC, id DESC")
                return [Advertisement(**row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取广告列表失败: {e}")
            raise

    # ==================== 平台设置 ====================

    def get_platform_settings(self):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM platform_settings WHERE id = %s", (SETTINGS_ID,))
                row = cursor.fetchone()
                return PlatformSettings(**row) if row else None
        except Error as e:
            logger.error(f"获取平台设置失败: {e}")
            raise

    def save_platform_settings(self, settings):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO platform_settings
                        (id, platform_name, support_email, support_phone, logo_url, logo_size)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    ON DUPLICATE KEY UPDATE
                        platform_name = VALUES(platform_name),
                        support_email = VALUES(support_email),
                        support_phone = VALUES(support_phone),
                        logo_url = VALUES(logo_url),
                        logo_size = VALUES(logo_size),
                        updated_at = CURRENT_TIMESTAMP
                """, (SETTINGS_ID, settings.platform_name, settings.support_email,
                      settings.support_phone, settings.logo_url, settings.logo_size))
                conn.commit()
        except Error as e:
            logger.error(f"保存平台设置失败: {e}")
            raise
        return self.get_platform_settings()

    # ==================== 小区目录 ====================

    def create_apartment(self, apartment):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO apartments (name, pincode, locality, zone)
                    VALUES (%s, %s, %s, %s)
                """, (apartment.name, apartment.pincode, apartment.locality, apartment.zone))
                apartment.id = cursor.lastrowid
                conn.commit()
                return apartment
        except Error as e:
            logger.error(f"添加小区失败: {e}")
            raise

    def get_apartment(self, apartment_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM apartments WHERE id = %s", (apartment_id,))
                return row_to_apartment(cursor.fetchone())
        except Error as e:
            logger.error(f"获取小区失败: {e}")
            raise

    def find_apartment_by_name(self, name):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM apartments WHERE LOWER(name) = LOWER(%s) LIMIT 1", (name,))
                return row_to_apartment(cursor.fetchone())
        except Error as e:
            logger.error(f"查找小区失败: {e}")
            raise

    def update_apartment(self, apartment_id, fields):
        columns = [c for c in fields if c in APARTMENT_COLUMNS]
        if columns:
            try:
                with self.get_connection() as conn:
                    cursor = conn.cursor()
                    assignments = ', '.join(f"{c} = %s" for c in columns)
                    cursor.execute(
                        f"UPDATE apartments SET {assignments} WHERE id = %s",
                        [fields[c] for c in columns] + [apartment_id]
                    )
                    conn.commit()
            except Error as e:
                logger.error(f"更新小区失败: {e}")
                raise
        return self.get_apartment(apartment_id)

    def delete_apartment(self, apartment_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM apartments WHERE id = %s", (apartment_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除小区失败: {e}")
            raise

    def list_apartments(self):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM apartments ORDER BY created_at DESC, id DESC")
                return [Apartment(**row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"获取小区列表失败: {e}")
            raise
