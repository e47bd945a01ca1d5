from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/list-admins', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_admins():
    admins = get_services().users.list_admins()
    return jsonify({'success': True, 'admins': [a.to_dict() for a in admins]})


@admin_bp.route('/admins/<int:admin_id>/verification', methods=['POST'])
@handle_errors
@auth_required(UserRole.SUPERADMIN)
@validate_json(['status'])
@log_action('审核管理员')
def set_admin_verification(admin_id):
    """审核管理员申请（仅超级管理员）"""
    user = get_services().users.set_verification(g.principal, admin_id, request.get_json()['status'])
    return jsonify({'success': True, 'admin': user.to_dict(), 'message': 'Verification updated'})


@admin_bp.route('/admins/<int:admin_id>', methods=['DELETE'])
@handle_errors
@auth_required(UserRole.SUPERADMIN)
@log_action('删除管理员')
def delete_admin(admin_id):
    """删除管理员，名下赛事转给当前超级管理员"""
    get_services().users.delete_admin(g.principal, admin_id)
    return jsonify({'success': True, 'message': 'Admin deleted successfully'})
