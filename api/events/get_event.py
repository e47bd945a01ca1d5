from flask import jsonify

from extensions import get_services
from utils.decorators import handle_errors

from . import events_bp


@events_bp.route('/<int:event_id>', methods=['GET'])
@handle_errors
def get_event(event_id):
    """赛事详情（公开，附带新闻）"""
    return jsonify({'success': True, 'event': get_services().events.event_detail(event_id)})


@events_bp.route('/<int:event_id>/brackets', methods=['GET'])
@handle_errors
def get_event_brackets(event_id):
    brackets = get_services().events.list_brackets(event_id)
    return jsonify({'success': True, 'brackets': [b.to_dict() for b in brackets]})


@events_bp.route('/<int:event_id>/sponsors', methods=['GET'])
@handle_errors
def get_event_sponsors(event_id):
    event = get_services().events.get_event(event_id)
    return jsonify({'success': True, 'sponsors': event.sponsors or []})
