from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import teams_bp


@teams_bp.route('/create', methods=['POST'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json(['team_name'])
@log_action('创建队伍')
def create_team():
    team = get_services().teams.create_team(g.principal, request.get_json())
    return jsonify({'success': True, 'team': team.to_dict()}), 201


@teams_bp.route('/<int:team_id>', methods=['PUT'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json()
@log_action('更新队伍')
def update_team(team_id):
    """更新队伍（仅队长）"""
    team = get_services().teams.update_team(g.principal, team_id, request.get_json())
    return jsonify({'success': True, 'team': team.to_dict()})


@teams_bp.route('/<int:team_id>', methods=['DELETE'])
@handle_errors
@auth_required(UserRole.PLAYER)
@log_action('删除队伍')
def delete_team(team_id):
    """删除队伍（仅队长）"""
    get_services().teams.delete_team(g.principal, team_id)
    return jsonify({'success': True, 'message': 'Team deleted successfully'})
