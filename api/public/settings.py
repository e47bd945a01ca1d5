from flask import jsonify

from extensions import get_services
from utils.decorators import handle_errors

from . import public_bp


@public_bp.route('/settings', methods=['GET'])
@handle_errors
def get_public_settings():
    """平台名称与 logo（公开，未登录页面使用）"""
    settings = get_services().site.get_settings()
    return jsonify({'success': True, 'settings': settings.to_public_dict()})
