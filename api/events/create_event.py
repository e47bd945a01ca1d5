from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import events_bp, logger


@events_bp.route('/create', methods=['POST'])
@handle_errors
@auth_required(UserRole.ADMIN, UserRole.SUPERADMIN)
@validate_json(['name', 'sport', 'start_date'])
@log_action('创建赛事')
def create_event():
    """创建赛事（海报、文件、收款码以 data URL 提交）"""
    event = get_services().events.create_event(g.principal, request.get_json())
    logger.info(f"赛事已创建: {event.name} (ID: {event.id})")
    return jsonify({'success': True, 'event': event.to_dict()}), 201
