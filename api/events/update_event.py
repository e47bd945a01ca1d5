from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import events_bp


@events_bp.route('/<int:event_id>', methods=['PUT'])
@handle_errors
@auth_required(UserRole.ADMIN, UserRole.SUPERADMIN)
@validate_json()
@log_action('更新赛事')
def update_event(event_id):
    event = get_services().events.update_event(g.principal, event_id, request.get_json())
    return jsonify({'success': True, 'event': event.to_dict()})
