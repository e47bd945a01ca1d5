from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/players', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_players():
    """运动员列表，可按审核状态过滤"""
    players = get_services().users.list_players(request.args.get('verification'))
    return jsonify({'success': True, 'players': [p.to_dict() for p in players]})


@admin_bp.route('/players/<int:user_id>', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def get_player(user_id):
    """运动员详情（含参赛记录）"""
    return jsonify({'success': True, 'player': get_services().users.player_detail(user_id)})


@admin_bp.route('/players/<int:user_id>/verification', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['status'])
@log_action('审核运动员')
def set_player_verification(user_id):
    user = get_services().users.set_verification(g.principal, user_id, request.get_json()['status'])
    return jsonify({'success': True, 'player': user.to_dict(), 'message': 'Verification updated'})
