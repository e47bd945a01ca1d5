from flask import request, jsonify

from extensions import get_services
from utils.decorators import validate_json, log_action, handle_errors

from . import auth_bp, logger


@auth_bp.route('/register-player', methods=['POST'])
@handle_errors
@validate_json(['firstName', 'lastName', 'mobile', 'dob'])
@log_action('运动员注册')
def register_player():
    """运动员自助注册，注册成功即登录"""
    user, token = get_services().users.register_player(request.get_json())

    return jsonify({
        'success': True,
        'token': token,
        'playerId': user.player_id,
        'user': {
            'id': user.id,
            'firstName': user.first_name,
            'lastName': user.last_name,
            'role': user.role.value,
            'verification': user.verification.value,
            'photos': user.photos,
            'age': user.age,
        },
    }), 201


@auth_bp.route('/register-admin', methods=['POST'])
@handle_errors
@validate_json(['name', 'email', 'password'])
@log_action('管理员申请')
def register_admin():
    """提交管理员申请，等待超级管理员审核"""
    user = get_services().users.register_admin(request.get_json())
    logger.info(f"新的管理员申请: {user.email}")

    return jsonify({
        'success': True,
        'message': 'Application submitted. Please wait for superadmin approval.',
        'user': {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role.value,
            'verification': user.verification.value,
        },
    }), 201
