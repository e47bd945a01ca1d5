from flask import request, jsonify

from extensions import get_services
from utils.decorators import validate_json, log_action, handle_errors

from . import auth_bp


@auth_bp.route('/login', methods=['POST'])
@handle_errors
@validate_json(['identifier', 'password'])
@log_action('运动员登录')
def login():
    """运动员登录（手机号 / 证件号 / 运动员编号）"""
    data = request.get_json()
    user, token = get_services().users.login_player(data['identifier'], data['password'])

    return jsonify({
        'success': True,
        'token': token,
        'user': {
            'id': user.id,
            'playerId': user.player_id,
            'firstName': user.first_name,
            'lastName': user.last_name,
            'role': user.role.value,
            'photos': user.photos,
            'age': user.age,
        },
    })


@auth_bp.route('/login-admin', methods=['POST'])
@handle_errors
@validate_json(['email', 'password'])
@log_action('管理员登录')
def login_admin():
    """管理员 / 超级管理员登录"""
    data = request.get_json()
    user, token = get_services().users.login_admin(data['email'], data['password'])

    return jsonify({
        'success': True,
        'token': token,
        'user': {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role.value,
            'avatar': user.photos,
        },
    })
