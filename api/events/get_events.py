from flask import request, jsonify

from extensions import get_services
from utils.decorators import handle_errors

from . import events_bp


@events_bp.route('/list', methods=['GET'])
@handle_errors
def get_events():
    """赛事列表（公开），可按创建者或管理员过滤"""
    events = get_services().events.list_events(
        created_by=request.args.get('created_by'),
        admin_id=request.args.get('admin_id'),
    )
    return jsonify({'success': True, 'events': [e.to_dict() for e in events]})
