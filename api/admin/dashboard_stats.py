from flask import jsonify

from extensions import get_services
from utils.decorators import auth_required, handle_errors

from . import admin_bp, ADMIN_ROLES


@admin_bp.route('/dashboard-stats', methods=['GET'])
@handle_errors
@auth_required(*ADMIN_ROLES)
def dashboard_stats():
    """后台首页统计"""
    return jsonify({'success': True, **get_services().workflow.dashboard_stats()})
