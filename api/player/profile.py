from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors, verification_token

from . import player_bp, logger


@player_bp.route('/check-conflict', methods=['POST'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json()
def check_conflict():
    """检查邮箱 / 手机号是否已被其他账号使用"""
    data = request.get_json()
    field = get_services().users.check_conflict(g.principal, email=data.get('email'), mobile=data.get('mobile'))
    if field:
        return jsonify({
            'success': False,
            'conflict': True,
            'field': field,
            'message': f'{field.capitalize()} already taken',
            'code': 'CONFLICT',
        }), 409
    return jsonify({'success': True, 'conflict': False})


@player_bp.route('/check-password', methods=['POST'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json()
def check_password():
    data = request.get_json()
    if not get_services().users.check_password(g.principal, data.get('currentPassword')):
        return jsonify({'success': False, 'correct': False, 'message': 'Incorrect password'}), 401
    return jsonify({'success': True, 'correct': True})


@player_bp.route('/update-profile', methods=['PUT'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json()
@log_action('更新个人资料')
def update_profile():
    """更新资料；修改邮箱或手机号需携带 X-Verification-Token"""
    user = get_services().users.update_profile(g.principal, request.get_json(), verification_token())
    return jsonify({'success': True, 'player': user.to_dict(), 'message': 'Profile updated successfully'})


@player_bp.route('/change-password', methods=['PUT'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json(['currentPassword', 'newPassword'])
@log_action('修改密码')
def change_password():
    data = request.get_json()
    get_services().users.change_password(
        g.principal, data['currentPassword'], data['newPassword'], verification_token()
    )
    logger.info(f"用户 {g.principal.user_id} 密码已更新")
    return jsonify({'success': True, 'message': 'Password updated successfully'})
