from flask import request, jsonify

from extensions import get_services
from utils.decorators import validate_json, log_action, handle_errors

from . import auth_bp, logger


@auth_bp.route('/send-otp', methods=['POST'])
@handle_errors
@validate_json(['mobile'])
@log_action('发送注册验证码')
def send_otp():
    """注册前发送手机验证码"""
    data = request.get_json()
    session_id = get_services().users.send_registration_otp(data['mobile'])
    logger.info(f"注册验证码已发送: {data['mobile']}")
    return jsonify({'success': True, 'sessionId': session_id})
