from flask import jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, log_action, handle_errors

from . import player_bp


@player_bp.route('/dashboard', methods=['GET'])
@handle_errors
@auth_required(UserRole.PLAYER)
@log_action('运动员首页')
def get_dashboard():
    """运动员首页：个人资料 + 可见报名（本人及所在队伍）+ 家庭成员"""
    user = g.current_user
    services = get_services()
    registrations = services.workflow.visible_registrations(user)
    family = services.users.list_family_members(g.principal)
    return jsonify({
        'success': True,
        'player': user.to_dict(),
        'registrations': registrations,
        'familyMembers': [m.to_dict() for m in family],
    })


@player_bp.route('/registrations', methods=['GET'])
@handle_errors
@auth_required(UserRole.PLAYER)
def get_registrations():
    registrations = get_services().workflow.visible_registrations(g.current_user)
    return jsonify({'success': True, 'registrations': registrations})
