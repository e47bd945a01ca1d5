#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 邮件发送
"""

import logging

from flask_mail import Mail, Message

logger = logging.getLogger(__name__)


class Mailer:
    """Flask-Mail 封装

    可能在后台线程中调用，因此发送时自行推入应用上下文。
    """

    def __init__(self, app):
        self.app = app
        self.mail = Mail(app)

    def send(self, to_email, subject, body, html_body=None):
        if not to_email:
            logger.warning(f"邮件未发送（无收件人）: {subject}")
            return False

        with self.app.app_context():
            msg = Message(
                subject=subject,
                recipients=[to_email],
                body=body,
                html=html_body,
                sender=self.app.config.get('MAIL_DEFAULT_SENDER'),
            )
            self.mail.send(msg)
        logger.info(f"邮件已发送: {subject} -> {to_email}")
        return True


def registration_confirmation_email(user, event_name, registration_no, amount):
    """报名提交确认邮件内容"""
    subject = f"Registration received: {event_name}"
    body = (
        f"Hello {user.name or 'Player'},\n\n"
        f"We have received your registration for {event_name}.\n"
        f"Registration number: {registration_no}\n"
        f"Amount paid: INR {amount}\n\n"
        "Your payment proof is now awaiting verification by the organisers. "
        "You will be notified once it has been reviewed.\n"
    )
    return subject, body


def verification_code_email(code, ttl_minutes):
    subject = "Your verification code"
    body = (
        f"Your verification code is {code}.\n"
        f"It expires in {ttl_minutes} minutes. Do not share it with anyone.\n"
    )
    return subject, body
