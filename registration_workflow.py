#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 报名审核流程

报名状态: pending_verification -> verified | rejected

- 运动员提交手动付款（付款截图 + 自报交易号）生成报名记录
- 管理员单条或批量核验 / 驳回，并逐条通知报名运动员
- 运动员可见的报名 = 本人提交的报名 + 相关队伍的报名
"""

import logging
from decimal import Decimal, InvalidOperation

from models import (
    EventRegistration, Transaction, RegistrationStatus, NotificationType,
    UserRole, TERMINAL_REGISTRATION_STATUSES,
)
from utils.errors import AppError, ValidationError, AuthorizationError, NotFoundError, DependencyFailure
from utils.helpers import generate_registration_number, generate_order_id
from utils.mailer import registration_confirmation_email
from utils.security import require_role

logger = logging.getLogger(__name__)

FALLBACK_EVENT_NAME = 'the event'

STATUS_NOTIFICATIONS = {
    RegistrationStatus.VERIFIED: (
        'Registration Verified', NotificationType.SUCCESS,
        'Your registration {registration_no} for {event_name} has been verified.',
    ),
    RegistrationStatus.REJECTED: (
        'Registration Rejected', NotificationType.ERROR,
        'Your registration {registration_no} for {event_name} has been rejected. '
        'Please contact the organisers for details.',
    ),
}


def parse_id(value, field):
    """把请求中的ID转换为整数"""
    if isinstance(value, bool):
        raise ValidationError(f'Invalid {field}', field=field)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field}', field=field)
    if parsed <= 0:
        raise ValidationError(f'Invalid {field}', field=field)
    return parsed


def parse_amount(value):
    if value is None or value == '' or isinstance(value, bool):
        raise ValidationError('Amount is required', field='amount')
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError('Amount must be a number', field='amount')
    if not amount.is_finite() or amount <= 0:
        raise ValidationError('Amount must be greater than zero', field='amount')
    return amount.quantize(Decimal('0.01'))


def parse_target_status(value):
    """批量 / 单条审核的目标状态只能是 verified 或 rejected"""
    try:
        status = RegistrationStatus(value)
    except ValueError:
        raise ValidationError('Invalid status', field='status')
    if status not in TERMINAL_REGISTRATION_STATUSES:
        raise ValidationError('Invalid status', field='status')
    return status


class RegistrationWorkflow:
    """报名提交与审核"""

    def __init__(self, store, blob_store, notifications, resolver):
        self.store = store
        self.blob_store = blob_store
        self.notifications = notifications
        self.resolver = resolver

    # ==================== 提交 ====================

    def submit_manual_payment(self, principal, data):
        """
        运动员提交手动付款

        Args:
            principal: 当前调用者
            data: eventId, amount, categories, screenshot, 可选 transactionId / teamId / document

        Returns:
            dict: registrationNo, registrationId, transactionId
        """
        # 管理员一律不能报名（先于参数校验）
        if principal.role == UserRole.PLAYER:
            pass
        elif principal.role in (UserRole.ADMIN, UserRole.SUPERADMIN):
            raise AuthorizationError('Admins cannot register for events.', code='ADMIN_CANNOT_REGISTER')
        else:
            raise ValueError(f'unknown role: {principal.role}')

        data = data if isinstance(data, dict) else {}
        if not data.get('eventId'):
            raise ValidationError('Event is required', field='eventId')
        event_id = parse_id(data.get('eventId'), 'eventId')
        amount = parse_amount(data.get('amount'))

        categories = data.get('categories')
        if not isinstance(categories, list) or not categories:
            raise ValidationError('Select at least one category', field='categories')
        if not data.get('screenshot'):
            raise ValidationError('Payment screenshot is required', field='screenshot')

        event = self.store.get_event(event_id)
        if event is None:
            raise NotFoundError('Event not found')

        team_id = None
        if data.get('teamId'):
            team_id = parse_id(data.get('teamId'), 'teamId')
            if self.store.get_team(team_id) is None:
                raise NotFoundError('Team not found')

        if event.document_required and not data.get('document'):
            raise ValidationError('This event requires a supporting document', field='document')

        manual_reference = (str(data.get('transactionId')).strip() or None) if data.get('transactionId') else None

        # 1. 保存付款截图（失败则整个提交失败）
        screenshot_url = self._store_file(data['screenshot'], f'payment-proofs/{event_id}', 'screenshot')
        document_url = None
        if data.get('document'):
            document_url = self._store_file(data['document'], f'registration-documents/{event_id}', 'document')

        # 2. 付款记录
        transaction = self.store.create_transaction(Transaction(
            user_id=principal.user_id,
            order_id=generate_order_id(),
            manual_transaction_id=manual_reference,
            payment_mode='manual',
            screenshot_url=screenshot_url,
            amount=amount,
            currency='INR',
            status=RegistrationStatus.PENDING_VERIFICATION.value,
        ))

        # 3-4. 报名记录；失败时删除刚创建的付款记录
        registration = EventRegistration(
            event_id=event_id,
            player_id=principal.user_id,
            team_id=team_id,
            registration_no=generate_registration_number(),
            categories=categories,
            amount_paid=amount,
            transaction_id=transaction.id,
            document_url=document_url,
            status=RegistrationStatus.PENDING_VERIFICATION,
        )
        try:
            registration = self.store.create_registration(registration)
        except Exception:
            self._discard_transaction(transaction.id)
            raise

        logger.info(f"报名提交成功: {registration.registration_no} (用户ID: {principal.user_id}, 赛事ID: {event_id})")

        # 5. 确认邮件（后台发送，失败只记录日志）
        self._send_confirmation(principal.user_id, event.name, registration.registration_no, amount)

        return {
            'registrationNo': registration.registration_no,
            'registrationId': registration.id,
            'transactionId': transaction.id,
        }

    def _store_file(self, data_url, location_hint, field):
        try:
            return self.blob_store.store_data_url(data_url, location_hint, field=field)
        except AppError:
            raise
        except Exception as e:
            logger.error(f"文件存储失败 ({field}): {e}")
            raise DependencyFailure('Failed to upload file', field=field)

    def _discard_transaction(self, transaction_id):
        """补偿删除：清理失败不覆盖原始错误"""
        try:
            self.store.delete_transaction(transaction_id)
            logger.warning(f"报名记录创建失败，已删除付款记录 {transaction_id}")
        except Exception as e:
            logger.error(f"删除孤立付款记录 {transaction_id} 失败: {e}")

    def _send_confirmation(self, user_id, event_name, registration_no, amount):
        try:
            user = self.store.get_user_by_id(user_id)
            if user is None or not user.email:
                return
            subject, body = registration_confirmation_email(user, event_name, registration_no, amount)
            self.notifications.send_email(user.email, subject, body)
        except Exception as e:
            logger.error(f"报名确认邮件派发失败 ({registration_no}): {e}")

    # ==================== 审核 ====================

    def verify(self, principal, registration_id):
        return self.set_status(principal, registration_id, RegistrationStatus.VERIFIED)

    def reject(self, principal, registration_id):
        return self.set_status(principal, registration_id, RegistrationStatus.REJECTED)

    def set_status(self, principal, registration_id, status):
        """单条核验 / 驳回"""
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        status = parse_target_status(status.value if isinstance(status, RegistrationStatus) else status)

        current = self.store.get_registration(registration_id)
        if current is None:
            raise NotFoundError('Registration not found')
        self._warn_overwrite(principal, current, status)

        updated = self.store.set_registration_status(registration_id, status)
        logger.info(f"管理员 {principal.user_id} 将报名 {current.registration_no} 设为 {status.value}")

        event_names = self.store.get_event_names([updated.event_id])
        self._notify_status(updated, status, event_names)
        return updated

    def bulk_update(self, principal, ids, status):
        """批量核验 / 驳回：单条语句更新，逐条通知"""
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not isinstance(ids, list) or not ids:
            raise ValidationError('Invalid IDs provided', field='ids')
        registration_ids = [parse_id(i, 'ids') for i in ids]
        target = parse_target_status(status)

        for current in self.store.get_registrations_by_ids(registration_ids):
            self._warn_overwrite(principal, current, target)

        updated = self.store.bulk_set_registration_status(registration_ids, target)
        logger.info(f"管理员 {principal.user_id} 批量将 {len(updated)} 条报名设为 {target.value}")

        event_names = self.store.get_event_names([r.event_id for r in updated])
        for registration in updated:
            self._notify_status(registration, target, event_names)
        return updated

    @staticmethod
    def _warn_overwrite(principal, registration, target):
        if registration.status in TERMINAL_REGISTRATION_STATUSES:
            logger.warning(
                f"报名 {registration.registration_no} 已是终态 {registration.status.value}，"
                f"管理员 {principal.user_id} 改为 {target.value}"
            )

    def _notify_status(self, registration, status, event_names):
        title, severity, template = STATUS_NOTIFICATIONS[status]
        event_name = event_names.get(registration.event_id) or FALLBACK_EVENT_NAME
        message = template.format(registration_no=registration.registration_no, event_name=event_name)
        try:
            self.notifications.notify(registration.player_id, title, message, severity, link='/dashboard')
        except Exception as e:
            logger.error(f"报名状态通知派发失败 ({registration.registration_no}): {e}")

    # ==================== 查询 ====================

    def visible_registrations(self, user):
        """运动员可见的报名（本人 + 担任队长或成员的队伍）

        成员按手机号或运动员编号精确匹配，名单中缺少这两项的成员无法关联。
        付款详情只附在本人提交的报名上。
        """
        team_ids = self.resolver.visible_team_ids(user)
        registrations = self.store.list_registrations_for_player(user.id, team_ids)

        own_tx_ids = [r.transaction_id for r in registrations if r.player_id == user.id]
        transactions = self.store.get_transactions_by_ids(own_tx_ids)

        teams = {}
        results = []
        for registration in registrations:
            item = registration.to_dict()
            tx = transactions.get(registration.transaction_id) if registration.player_id == user.id else None
            item['transaction'] = tx.to_dict() if tx else None
            if registration.team_id:
                if registration.team_id not in teams:
                    teams[registration.team_id] = self.store.get_team(registration.team_id)
                team = teams[registration.team_id]
                item['team_details'] = team.to_dict() if team else None
            else:
                item['team_details'] = None
            results.append(item)
        return results

    def list_registrations(self, event_id=None):
        """管理员查看报名列表"""
        registrations = self.store.list_registrations(event_id=event_id)
        players = self.store.get_users_by_ids([r.player_id for r in registrations])
        results = []
        for registration in registrations:
            item = registration.to_dict()
            player = players.get(registration.player_id)
            item['player'] = _player_summary(player)
            results.append(item)
        return results

    def list_transactions(self, event_id=None, admin_id=None):
        """管理员查看付款记录；admin_id 过滤由该管理员创建或被指派的赛事"""
        event_ids = None
        if admin_id is not None:
            event_ids = [e.id for e in self.store.list_events(admin_id=admin_id)]
        registrations = self.store.list_registrations(event_id=event_id, event_ids=event_ids)
        transactions = self.store.get_transactions_by_ids([r.transaction_id for r in registrations])
        players = self.store.get_users_by_ids([r.player_id for r in registrations])

        results = []
        for registration in registrations:
            item = registration.to_dict()
            tx = transactions.get(registration.transaction_id)
            item['transaction'] = tx.to_dict() if tx else None
            item['player'] = _player_summary(players.get(registration.player_id))
            results.append(item)
        return results

    def dashboard_stats(self):
        """管理后台统计"""
        counts = self.store.count_users_by_verification(UserRole.PLAYER)
        totals = self.store.registration_totals()
        verified_totals = totals.get(RegistrationStatus.VERIFIED.value, {'count': 0, 'amount': 0})

        players = self.store.list_users(role=UserRole.PLAYER)
        rejected_players = [p for p in players if p.verification.value == 'rejected']
        rejected_registrations = [
            r for r in self.store.list_registrations()
            if r.status == RegistrationStatus.REJECTED
        ]

        return {
            'stats': {
                'totalPlayers': sum(counts.values()),
                'verifiedPlayers': counts.get('verified', 0),
                'pendingPlayers': counts.get('pending', 0),
                'rejectedPlayers': counts.get('rejected', 0),
                'totalRevenue': float(verified_totals['amount']),
                'totalTransactionsCount': verified_totals['count'],
            },
            'recentPlayers': [p.to_dict() for p in players[:6]],
            'rejectedPlayersList': [p.to_dict() for p in rejected_players[:5]],
            'rejectedTransactions': [r.to_dict() for r in rejected_registrations[:5]],
        }


def _player_summary(player):
    if player is None:
        return None
    return {
        'id': player.id,
        'first_name': player.first_name,
        'last_name': player.last_name,
        'name': player.name,
        'player_id': player.player_id,
        'email': player.email,
        'mobile': player.mobile,
    }
