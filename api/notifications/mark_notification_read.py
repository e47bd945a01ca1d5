from flask import request, jsonify, g

from extensions import get_services
from registration_workflow import parse_id
from utils.decorators import auth_required, validate_json, handle_errors

from . import notifications_bp


@notifications_bp.route('/mark-read', methods=['POST'])
@handle_errors
@auth_required()
@validate_json()
def mark_notification_read():
    """标记单条（notificationId）或全部（markAll）为已读"""
    data = request.get_json()
    notification_id = data.get('notificationId')
    if notification_id is not None:
        notification_id = parse_id(notification_id, 'notificationId')
    get_services().notifications.mark_read(
        g.principal.user_id, notification_id=notification_id, mark_all=bool(data.get('markAll'))
    )
    return jsonify({'success': True})
