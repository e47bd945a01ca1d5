from flask import jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, log_action, handle_errors

from . import events_bp


@events_bp.route('/<int:event_id>', methods=['DELETE'])
@handle_errors
@auth_required(UserRole.ADMIN, UserRole.SUPERADMIN)
@log_action('删除赛事')
def delete_event(event_id):
    """删除赛事及其报名、付款记录、新闻和对阵"""
    get_services().events.delete_event(g.principal, event_id)
    return jsonify({'success': True, 'message': 'Event deleted successfully'})
