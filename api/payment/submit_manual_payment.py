from flask import request, jsonify, g

from extensions import get_services
from utils.decorators import auth_required, log_action, handle_errors

from . import payment_bp, logger


@payment_bp.route('/submit-manual-payment', methods=['POST'])
@handle_errors
@auth_required()
@log_action('提交手动付款')
def submit_manual_payment():
    """提交付款截图和交易号，生成待核验的报名记录

    任意已登录用户都能调用，管理员在业务层被拒绝。
    """
    result = get_services().workflow.submit_manual_payment(g.principal, request.get_json(silent=True))
    logger.info(f"报名 {result['registrationNo']} 已提交，等待核验")

    return jsonify({
        'success': True,
        'message': 'Payment submitted for verification',
        **result,
    }), 201
