from flask import jsonify, g

from utils.decorators import auth_required, handle_errors

from . import auth_bp


@auth_bp.route('/me', methods=['GET'])
@handle_errors
@auth_required()
def get_profile():
    """获取当前登录用户"""
    user = g.current_user
    return jsonify({
        'success': True,
        'user': {
            'id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role.value,
            'verification': user.verification.value,
            'playerId': user.player_id,
            'avatar': user.photos,
        },
    })
