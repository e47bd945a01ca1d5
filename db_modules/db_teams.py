import logging

from mysql.connector import Error

from models import Team


logger = logging.getLogger(__name__)

TEAM_FIELDS = ('id', 'team_name', 'sport', 'captain_id', 'captain_name',
               'captain_mobile', 'members', 'created_at', 'updated_at')


def row_to_team(row):
    if not row:
        return None
    return Team(**{k: row.get(k) for k in TEAM_FIELDS})


class TeamDbMixin:
    """队伍相关数据库操作 mixin"""

    def create_team(self, team):
        """创建队伍"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO player_teams (team_name, sport, captain_id, captain_name, captain_mobile, members)
                    VALUES (%s, %s, %s, %s, %s, %s)
                """, (team.team_name, team.sport, team.captain_id, team.captain_name,
                      team.captain_mobile, team.members_json()))
                team.id = cursor.lastrowid
                conn.commit()
                return team
        except Error as e:
            logger.error(f"创建队伍失败: {e}")
            raise

    def get_team(self, team_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute("SELECT * FROM player_teams WHERE id = %s", (team_id,))
                return row_to_team(cursor.fetchone())
        except Error as e:
            logger.error(f"获取队伍失败: {e}")
            raise

    def update_team(self, team):
        """更新队伍（队长不可变更）"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    UPDATE player_teams
                    SET team_name = %s, sport = %s, captain_name = %s, captain_mobile = %s, members = %s
                    WHERE id = %s
                """, (team.team_name, team.sport, team.captain_name, team.captain_mobile,
                      team.members_json(), team.id))
                conn.commit()
            return self.get_team(team.id)
        except Error as e:
            logger.error(f"更新队伍失败: {e}")
            raise

    def delete_team(self, team_id):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM player_teams WHERE id = %s", (team_id,))
                deleted = cursor.rowcount
                conn.commit()
                return deleted > 0
        except Error as e:
            logger.error(f"删除队伍失败: {e}")
            raise

    def _query_teams(self, where='', params=()):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor(dictionary=True)
                cursor.execute(f"SELECT * FROM player_teams {where} ORDER BY created_at DESC", params)
                return [row_to_team(row) for row in cursor.fetchall()]
        except Error as e:
            logger.error(f"查询队伍失败: {e}")
            raise

    def list_teams_by_captain(self, captain_id):
        return self._query_teams("WHERE captain_id = %s", (captain_id,))

    def list_all_teams(self):
        return self._query_teams()
