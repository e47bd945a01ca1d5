from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/brackets', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_brackets():
    brackets = get_services().events.list_brackets(request.args.get('eventId'), request.args.get('category'))
    return jsonify({'success': True, 'brackets': [b.to_dict() for b in brackets]})


@admin_bp.route('/brackets', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['eventId', 'category', 'roundName'])
@log_action('保存对阵')
def save_bracket():
    """新增或覆盖一轮对阵"""
    bracket = get_services().events.save_bracket(g.principal, request.get_json())
    return jsonify({'success': True, 'bracket': bracket.to_dict(), 'message': 'Bracket/Draw saved successfully'})


@admin_bp.route('/brackets/<int:bracket_id>', methods=['DELETE'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('删除对阵')
def delete_bracket(bracket_id):
    get_services().events.delete_bracket(g.principal, bracket_id)
    return jsonify({'success': True, 'message': 'Bracket deleted successfully'})
