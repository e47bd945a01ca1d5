from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/settings', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def get_settings():
    return jsonify({'success': True, 'settings': get_services().site.get_settings().to_dict()})


@admin_bp.route('/settings', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json()
@log_action('更新平台设置')
def update_settings():
    """更新平台名称、客服邮箱 / 电话、logo"""
    settings = get_services().site.update_settings(g.principal, request.get_json())
    return jsonify({'success': True, 'settings': settings.to_dict(), 'message': 'Settings updated successfully'})
