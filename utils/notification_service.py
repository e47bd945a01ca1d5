#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
通知服务工具类
用于封装站内通知和邮件的发送逻辑
"""

import logging

from models import Notification, NotificationType
from utils.errors import ValidationError, NotFoundError

logger = logging.getLogger(__name__)

INBOX_LIMIT = 50


class NotificationService:
    """通知服务类

    notify / send_email 均为“发出即不管”：任务提交到派发器后立即返回，
    失败只记录日志，不影响调用方。
    """

    def __init__(self, store, dispatcher, mailer=None):
        self.store = store
        self.dispatcher = dispatcher
        self.mailer = mailer

    def notify(self, user_id, title, message, severity=NotificationType.INFO, link=None):
        """
        创建站内通知

        Args:
            user_id: 接收用户ID
            title: 通知标题
            message: 通知内容
            severity: 通知级别（info / success / warning / error）
            link: 可选的跳转链接
        """
        severity = severity if isinstance(severity, NotificationType) else NotificationType(severity)
        notification = Notification(user_id=user_id, title=title, message=message,
                                    type=severity, link=link)
        self.dispatcher.submit(f"notify user {user_id}: {title}",
                               self.store.create_notification, notification)

    def send_email(self, to_email, subject, body, html_body=None):
        """后台发送邮件"""
        if self.mailer is None:
            logger.warning(f"邮件服务未配置，跳过邮件: {subject}")
            return
        self.dispatcher.submit(f"email {to_email}: {subject}",
                               self.mailer.send, to_email, subject, body, html_body)

    def inbox(self, user_id):
        """最近 50 条通知及未读数"""
        notifications = self.store.list_notifications(user_id, limit=INBOX_LIMIT)
        unread = self.store.count_unread_notifications(user_id)
        return [n.to_dict() for n in notifications], unread

    def mark_read(self, user_id, notification_id=None, mark_all=False):
        """标记已读（单条或全部），只作用于本人的通知"""
        if mark_all:
            count = self.store.mark_all_notifications_read(user_id)
            logger.info(f"用户 {user_id} 标记全部通知已读 ({count} 条)")
            return count
        if notification_id is None:
            raise ValidationError('notificationId or markAll is required', field='notificationId')
        if not self.store.mark_notification_read(user_id, notification_id):
            raise NotFoundError('Notification not found')
        return 1
