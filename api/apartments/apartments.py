from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import apartments_bp, ADMIN_ROLES, logger


@apartments_bp.route('', methods=['GET'])
@apartments_bp.route('/', methods=['GET'])
@handle_errors
def list_apartments():
    """小区目录（公开，注册表单使用）"""
    apartments = get_services().site.list_apartments()
    return jsonify({'success': True, 'apartments': [a.to_dict() for a in apartments]})


@apartments_bp.route('', methods=['POST'])
@apartments_bp.route('/', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json(['name'])
@log_action('添加小区')
def add_apartment():
    apartment, created = get_services().site.add_apartment(g.principal, request.get_json())
    if not created:
        logger.info(f"小区已存在，未重复添加: {apartment.name}")
        return jsonify({'success': True, 'message': 'Apartment already exists', 'apartment': apartment.to_dict()})
    return jsonify({
        'success': True,
        'message': 'Apartment added successfully',
        'apartment': apartment.to_dict(),
    }), 201


@apartments_bp.route('/<int:apartment_id>', methods=['PUT'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json()
@log_action('更新小区')
def update_apartment(apartment_id):
    apartment = get_services().site.update_apartment(g.principal, apartment_id, request.get_json())
    return jsonify({
        'success': True,
        'message': 'Apartment updated successfully',
        'apartment': apartment.to_dict(),
    })


@apartments_bp.route('/<int:apartment_id>', methods=['DELETE'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('删除小区')
def delete_apartment(apartment_id):
    get_services().site.delete_apartment(g.principal, apartment_id)
    return jsonify({'success': True, 'message': 'Apartment deleted successfully'})
