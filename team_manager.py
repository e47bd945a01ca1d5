#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 队伍管理模块

队伍由运动员（队长）创建和维护，只有队长本人可以修改或删除。
"""

import logging

from models import Team, MemberRef, UserRole
from utils.errors import ValidationError, AuthorizationError, NotFoundError
from utils.helpers import calculate_age
from utils.security import require_role

logger = logging.getLogger(__name__)


def _parse_members(raw_members):
    if raw_members is None:
        return []
    if not isinstance(raw_members, list):
        raise ValidationError('Members must be a list', field='members')
    return [MemberRef.from_raw(m) for m in raw_members]


class TeamManager:
    """队伍增删改查"""

    def __init__(self, store):
        self.store = store

    def my_teams(self, principal):
        """担任队长的队伍"""
        require_role(principal, UserRole.PLAYER)
        return self.store.list_teams_by_captain(principal.user_id)

    def lookup_player(self, player_id):
        """按运动员编号查找（组队时使用，不区分大小写）"""
        player_id = (player_id or '').strip()
        player = self.store.get_player_by_player_id(player_id) if player_id else None
        if player is None:
            raise NotFoundError('Player ID not found')
        age = calculate_age(player.dob)
        return {
            'id': player.id,
            'player_id': player.player_id,
            'name': player.name,
            'age': str(age) if age is not None else '',
            'mobile': player.mobile,
            'aadhaar': player.aadhaar,
        }

    def create_team(self, principal, data):
        require_role(principal, UserRole.PLAYER)
        team_name = (data.get('team_name') or '').strip()
        if not team_name:
            raise ValidationError('Team name is required', field='team_name')

        captain = self.store.get_user_by_id(principal.user_id)
        team = Team(
            team_name=team_name,
            sport=data.get('sport'),
            captain_id=principal.user_id,
            captain_name=captain.name if captain else 'Unknown',
            captain_mobile=captain.mobile if captain else '',
            members=_parse_members(data.get('members')),
        )
        team = self.store.create_team(team)
        logger.info(f"运动员 {principal.user_id} 创建队伍: {team.team_name} (ID: {team.id})")
        return team

    def update_team(self, principal, team_id, data):
        team = self._owned_team(principal, team_id, 'edit')
        if 'team_name' in data:
            team_name = (data.get('team_name') or '').strip()
            if not team_name:
                raise ValidationError('Team name is required', field='team_name')
            team.team_name = team_name
        if 'sport' in data:
            team.sport = data.get('sport')
        team.members = _parse_members(data.get('members'))
        updated = self.store.update_team(team)
        logger.info(f"队伍 {team_id} 已更新，成员数: {len(updated.members)}")
        return updated

    def delete_team(self, principal, team_id):
        self._owned_team(principal, team_id, 'delete')
        self.store.delete_team(team_id)
        logger.info(f"运动员 {principal.user_id} 删除队伍 {team_id}")

    def _owned_team(self, principal, team_id, action):
        require_role(principal, UserRole.PLAYER)
        team = self.store.get_team(team_id)
        if team is None:
            raise NotFoundError('Team not found')
        if team.captain_id != principal.user_id:
            logger.warning(f"用户 {principal.user_id} 无权操作队伍 {team_id} ({action})")
            raise AuthorizationError(f'You are not authorized to {action} this team', code='NOT_TEAM_CAPTAIN')
        return team
