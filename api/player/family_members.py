from flask import request, jsonify, g

from extensions import get_services
from models import UserRole
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import player_bp


@player_bp.route('/add-family-member', methods=['POST'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json(['name', 'relation'])
@log_action('添加家庭成员')
def add_family_member():
    member = get_services().users.add_family_member(g.principal, request.get_json())
    return jsonify({'success': True, 'member': member.to_dict(), 'message': 'Family member added'}), 201


@player_bp.route('/update-family-member/<int:member_id>', methods=['PUT'])
@handle_errors
@auth_required(UserRole.PLAYER)
@validate_json()
@log_action('更新家庭成员')
def update_family_member(member_id):
    member = get_services().users.update_family_member(g.principal, member_id, request.get_json())
    return jsonify({'success': True, 'member': member.to_dict(), 'message': 'Family member updated'})


@player_bp.route('/delete-family-member/<int:member_id>', methods=['DELETE'])
@handle_errors
@auth_required(UserRole.PLAYER)
@log_action('删除家庭成员')
def delete_family_member(member_id):
    get_services().users.delete_family_member(g.principal, member_id)
    return jsonify({'success': True, 'message': 'Family member deleted'})
