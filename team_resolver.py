#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 队伍成员解析

判断某个运动员与哪些队伍相关：担任队长的队伍，以及成员名单中
能按手机号或运动员编号匹配到本人的队伍。成员名单没有统一结构，
只有姓名的成员无法匹配。
"""

import logging

logger = logging.getLogger(__name__)


class TeamMembershipResolver:
    """队伍成员关系解析"""

    def __init__(self, store):
        self.store = store

    def teams_owned_by(self, user_id):
        """担任队长的队伍ID"""
        return {team.id for team in self.store.list_teams_by_captain(user_id)}

    def teams_containing_member(self, mobile=None, player_id=None):
        """成员名单中包含该手机号或运动员编号的队伍ID（全表扫描）"""
        if not mobile and not player_id:
            return set()
        return {
            team.id for team in self.store.list_all_teams()
            if team.has_member(mobile=mobile, player_id=player_id)
        }

    def visible_team_ids(self, user):
        team_ids = self.teams_owned_by(user.id) | self.teams_containing_member(
            mobile=user.mobile, player_id=user.player_id
        )
        logger.debug(f"用户 {user.id} 关联队伍: {sorted(team_ids)}")
        return team_ids
