from flask import jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, log_action, handle_errors

from . import player_bp


@player_bp.route('/delete-account', methods=['DELETE'])
@handle_errors
@auth_required(UserRole.PLAYER)
@log_action('注销账号')
def delete_account():
    """永久删除账号及其报名、付款记录、队伍和通知"""
    get_services().users.delete_player_account(g.principal)
    return jsonify({'success': True, 'message': 'Account deleted permanently'})
