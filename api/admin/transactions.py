from flask import request, jsonify, g

from extensions import get_services
from registration_workflow import parse_id
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import admin_bp, ADMIN_ROLES, logger


def _optional_query_id(name):
    value = request.args.get(name)
    return parse_id(value, name) if value else None


@admin_bp.route('/registrations', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_registrations():
    """报名列表（可按赛事过滤）"""
    registrations = get_services().workflow.list_registrations(event_id=_optional_query_id('eventId'))
    return jsonify({'success': True, 'registrations': registrations})


@admin_bp.route('/transactions', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def list_transactions():
    """付款记录（按赛事，或按管理员创建 / 负责的赛事过滤）"""
    transactions = get_services().workflow.list_transactions(
        event_id=_optional_query_id('eventId'),
        admin_id=_optional_query_id('admin_id'),
    )
    return jsonify({'success': True, 'transactions': transactions})


@admin_bp.route('/transactions/<int:registration_id>/verify', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('核验报名付款')
def verify_transaction(registration_id):
    registration = get_services().workflow.verify(g.principal, registration_id)
    return jsonify({
        'success': True,
        'message': 'Registration verified',
        'registration': registration.to_dict(),
    })


@admin_bp.route('/transactions/<int:registration_id>/reject', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@log_action('驳回报名付款')
def reject_transaction(registration_id):
    registration = get_services().workflow.reject(g.principal, registration_id)
    return jsonify({
        'success': True,
        'message': 'Registration rejected',
        'registration': registration.to_dict(),
    })


@admin_bp.route('/transactions/bulk-update', methods=['POST'])
@handle_errors
@auth_required(*ADMIN_ROLES)
@validate_json()
@log_action('批量审核报名')
def bulk_update_transactions():
    """批量核验 / 驳回"""
    data = request.get_json()
    updated = get_services().workflow.bulk_update(g.principal, data.get('ids'), data.get('status'))
    logger.info(f"批量审核完成，共 {len(updated)} 条")
    return jsonify({
        'success': True,
        'message': f'Successfully updated {len(updated)} registrations',
        'updated': len(updated),
    })
