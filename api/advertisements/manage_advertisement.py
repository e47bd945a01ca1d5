from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import advertisements_bp, ADMIN_ROLES


@advertisements_bp.route('', methods=['POST'])
@advertisements_bp.route('/', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['title', 'image'])
@log_action('新增广告')
def create_advertisement():
    advertisement = get_services().site.create_advertisement(g.principal, request.get_json())
    return jsonify({'success': True, 'advertisement': advertisement.to_dict()}), 201


@advertisements_bp.route('/<int:advertisement_id>', methods=['PUT'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['title'])
@log_action('更新广告')
def update_advertisement(advertisement_id):
    advertisement = get_services().site.update_advertisement(g.principal, advertisement_id, request.get_json())
    return jsonify({'success': True, 'advertisement': advertisement.to_dict()})


@advertisements_bp.route('/<int:advertisement_id>', methods=['DELETE'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('删除广告')
def delete_advertisement(advertisement_id):
    get_services().site.delete_advertisement(g.principal, advertisement_id)
    return jsonify({'success': True, 'message': 'Advertisement deleted'})


@advertisements_bp.route('/<int:advertisement_id>/toggle', methods=['PATCH'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['isActive'])
@log_action('切换广告状态')
def toggle_advertisement(advertisement_id):
    """启用 / 停用广告"""
    advertisement = get_services().site.toggle_advertisement(
        g.principal, advertisement_id, request.get_json()['isActive']
    )
    return jsonify({'success': True, 'advertisement': advertisement.to_dict()})
