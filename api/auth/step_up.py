from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, validate_json, log_action, handle_errors

from . import auth_bp


@auth_bp.route('/step-up/send', methods=['POST'])
@handle_errors
@auth_required()
@validate_json(['channel'])
@log_action('发送二次验证码')
def send_step_up_code():
    """修改邮箱、手机号或密码前，向邮箱或手机发送验证码"""
    data = request.get_json()
    session_id = get_services().users.start_step_up(
        g.principal, data['channel'], destination=data.get('destination')
    )
    return jsonify({'success': True, 'sessionId': session_id})


@auth_bp.route('/step-up/verify', methods=['POST'])
@handle_errors
@auth_required()
@validate_json(['sessionId', 'code'])
@log_action('二次验证')
def verify_step_up_code():
    """校验验证码，返回 5 分钟有效的二次验证令牌"""
    data = request.get_json()
    services = get_services()
    token = services.users.finish_step_up(g.principal, data['sessionId'], data['code'])
    return jsonify({'success': True, 'verificationToken': token, 'expiresIn': int(services.tokens.step_up_ttl)})
