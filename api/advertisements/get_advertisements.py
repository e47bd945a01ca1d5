from flask import jsonify

from extensions import get_services
from utils.decorators import handle_errors

from . import advertisements_bp


@advertisements_bp.route('', methods=['GET'])
@advertisements_bp.route('/', methods=['GET'])
@handle_errors
def get_advertisements():
    """广告列表（公开），最新的在前"""
    advertisements = get_services().site.list_advertisements()
    return jsonify({'success': True, 'advertisements': [a.to_dict() for a in advertisements]})
