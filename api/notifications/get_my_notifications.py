from flask import jsonify, g

from extensions import get_services
from utils.decorators import auth_required, handle_errors

from . import notifications_bp


@notifications_bp.route('', methods=['GET'])
@notifications_bp.route('/', methods=['GET'])
@handle_errors
@auth_required()
def get_my_notifications():
    """最近 50 条通知及未读数"""
    notifications, unread = get_services().notifications.inbox(g.principal.user_id)
    return jsonify({'success': True, 'notifications': notifications, 'unreadCount': unread})
