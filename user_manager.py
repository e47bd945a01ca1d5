#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 用户管理模块
"""

import logging

from models import (
    User, FamilyMember, UserRole, VerificationStatus, NotificationType, RegistrationStatus,
)
from utils.errors import (
    ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError,
)
from utils.helpers import (
    generate_password_hash, verify_password, validate_email, validate_phone, validate_aadhaar,
    parse_date, calculate_age, default_player_password, format_player_id,
)
from utils.security import require_role, ensure_admin_approved

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

ADDRESS_FIELDS = ('apartment', 'street', 'city', 'state', 'pincode', 'country')

VERIFICATION_NOTIFICATIONS = {
    VerificationStatus.VERIFIED: ('Account Verified', NotificationType.SUCCESS,
                                  'Your account has been verified.'),
    VerificationStatus.REJECTED: ('Account Rejected', NotificationType.ERROR,
                                  'Your account verification was rejected. Please contact support.'),
    VerificationStatus.PENDING: ('Account Under Review', NotificationType.INFO,
                                 'Your account has been moved back to review.'),
}

PAYMENT_STATUS_LABELS = {
    RegistrationStatus.VERIFIED: 'paid',
    RegistrationStatus.REJECTED: 'failed',
    RegistrationStatus.PENDING_VERIFICATION: 'pending',
}


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _password(value, field):
    """密码只接受字符串，空值返回 None"""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValidationError('Password must be a string', field=field)
    return value


def _family_age(value):
    if value is None or value == '':
        return None
    try:
        age = int(value)
    except (TypeError, ValueError):
        age = -1
    if isinstance(value, bool) or age < 0:
        raise ValidationError('Age must be a number', field='age')
    return age


class UserManager:
    """用户管理器：注册、登录、资料维护、审核与注销"""

    def __init__(self, store, tokens, blob_store, notifications, challenges, player_email_domain='merasports.com'):
        self.store = store
        self.tokens = tokens
        self.blob_store = blob_store
        self.notifications = notifications
        self.challenges = challenges
        self.player_email_domain = player_email_domain

    # ==================== 注册 ====================

    def send_registration_otp(self, mobile):
        """注册前验证手机号，返回挑战句柄"""
        mobile = _clean(mobile)
        if not validate_phone(mobile):
            raise ValidationError('Enter a valid 10 digit mobile number', field='mobile')
        return self.challenges.start('mobile', mobile, subject=f'mobile:{mobile}')

    def register_player(self, data):
        """
        运动员自助注册

        Returns:
            tuple: (User, 会话令牌)
        """
        data = data or {}
        for field in ('firstName', 'lastName', 'mobile', 'dob'):
            if not _clean(data.get(field)):
                raise ValidationError('Missing required fields', field=field)

        mobile = _clean(data['mobile'])
        if not validate_phone(mobile):
            raise ValidationError('Enter a valid 10 digit mobile number', field='mobile')
        dob = parse_date(data['dob'])
        if dob is None:
            raise ValidationError('Invalid date of birth', field='dob')

        aadhaar = _clean(data.get('aadhaar'))
        if aadhaar and not validate_aadhaar(aadhaar):
            raise ValidationError('Aadhaar must be 12 digits', field='aadhaar')

        email = _clean(data.get('email'))
        if email:
            if not validate_email(email):
                raise ValidationError('Invalid email address', field='email')
            email = email.lower()
        else:
            email = f"{mobile}@{self.player_email_domain}"

        password = _password(data.get('password'), 'password') or default_player_password(dob)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', field='password')

        conflict = self.store.find_user_conflict(mobile=mobile, email=email, aadhaar=aadhaar)
        if conflict:
            raise ConflictError(f'User with this {conflict} already exists', field=conflict)

        verification = VerificationStatus.PENDING
        if data.get('otpSessionId') or data.get('otp'):
            if not self.challenges.verify(data.get('otpSessionId'), data.get('otp'), subject=f'mobile:{mobile}'):
                raise ValidationError('Invalid or expired OTP', field='otp', code='INVALID_OTP')
            verification = VerificationStatus.VERIFIED

        photo_url = self._store_photo(data.get('photos'))

        user = User(
            role=UserRole.PLAYER,
            verification=verification,
            player_id=format_player_id(self.store.next_player_number()),
            first_name=_clean(data['firstName']),
            last_name=_clean(data['lastName']),
            mobile=mobile,
            email=email,
            aadhaar=aadhaar,
            dob=dob,
            age=calculate_age(dob),
            photos=photo_url,
            password_hash=generate_password_hash(password),
            **{f: _clean(data.get(f)) for f in ADDRESS_FIELDS}
        )
        user = self.store.create_user(user)
        logger.info(f"运动员注册成功: {user.name} (ID: {user.id}, 编号: {user.player_id})")
        return user, self.tokens.issue_session(user)

    def register_admin(self, data):
        """管理员申请（待超级管理员审核）"""
        data = data or {}
        name = _clean(data.get('name'))
        email = _clean(data.get('email'))
        password = _password(data.get('password'), 'password') or ''
        mobile = _clean(data.get('mobile'))

        if not name:
            raise ValidationError('Name is required', field='name')
        if not validate_email(email):
            raise ValidationError('Invalid email address', field='email')
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', field='password')
        if mobile and not validate_phone(mobile):
            raise ValidationError('Enter a valid 10 digit mobile number', field='mobile')
        email = email.lower()

        conflict = self.store.find_user_conflict(mobile=mobile, email=email)
        if conflict:
            raise ConflictError(f'User with this {conflict} already exists', field=conflict)

        user = self.store.create_user(User(
            role=UserRole.ADMIN,
            verification=VerificationStatus.PENDING,
            name=name,
            email=email,
            mobile=mobile,
            password_hash=generate_password_hash(password),
        ))
        logger.info(f"管理员申请已提交: {email} (ID: {user.id})")

        for superadmin in self.store.list_users(role=UserRole.SUPERADMIN):
            self.notifications.notify(superadmin.id, 'New Admin Application',
                                      f'{name} ({email}) has applied for admin access.',
                                      NotificationType.INFO, link='/admin/admins')
        return user

    # ==================== 登录 ====================

    def login_player(self, identifier, password):
        """运动员登录（手机号 / 证件号 / 运动员编号）"""
        identifier = _clean(identifier)
        password = _password(password, 'password')
        if not identifier or not password:
            raise ValidationError('Missing credentials')

        user = self.store.find_player_for_login(identifier)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"运动员登录失败: {identifier}")
            raise AuthenticationError('Invalid credentials', kind='invalid', code='INVALID_CREDENTIALS')

        if user.role == UserRole.PLAYER:
            pass
        elif user.role in (UserRole.ADMIN, UserRole.SUPERADMIN):
            raise AuthorizationError('This account is an Administrator. Please use the Admin Dashboard.',
                                     code='WRONG_LOGIN_PORTAL')
        else:
            raise ValueError(f'unknown role: {user.role}')

        logger.info(f"运动员登录成功: {user.player_id} (ID: {user.id})")
        return user, self.tokens.issue_session(user)

    def login_admin(self, email, password):
        """管理员 / 超级管理员登录（邮箱）"""
        email = _clean(email)
        password = _password(password, 'password')
        if not email or not password:
            raise ValidationError('Missing credentials')

        user = self.store.get_user_by_email(email.lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"管理员登录失败: {email}")
            raise AuthenticationError('Invalid credentials', kind='invalid', code='INVALID_CREDENTIALS')

        if user.role == UserRole.PLAYER:
            raise AuthorizationError('Access Denied. This login is for Administrators only.',
                                     code='WRONG_LOGIN_PORTAL')
        elif user.role in (UserRole.ADMIN, UserRole.SUPERADMIN):
            ensure_admin_approved(user)
        else:
            raise ValueError(f'unknown role: {user.role}')

        logger.info(f"管理员登录成功: {user.email} ({user.role.value})")
        return user, self.tokens.issue_session(user)

    def resolve_principal(self, principal):
        """加载令牌对应的用户，并校验管理员仍处于已批准状态"""
        user = self.store.get_user_by_id(principal.user_id)
        if user is None:
            raise AuthenticationError('Account no longer exists', kind='invalid')
        if user.role != principal.role:
            raise AuthenticationError('Session role is out of date, please log in again', kind='invalid')
        return ensure_admin_approved(user)

    def current_user(self, principal):
        return self.resolve_principal(principal)

    # ==================== 二次验证 ====================

    def start_step_up(self, principal, channel, destination=None):
        """向邮箱或手机发送二次验证码"""
        user = self.resolve_principal(principal)
        if channel == 'email':
            destination = _clean(destination) or user.email
            if destination and not validate_email(destination):
                raise ValidationError('Invalid email address', field='destination')
        elif channel == 'mobile':
            destination = _clean(destination) or user.mobile
            if destination and not validate_phone(destination):
                raise ValidationError('Enter a valid 10 digit mobile number', field='destination')
        else:
            raise ValidationError(f'Unsupported channel: {channel}', field='channel')
        return self.challenges.start(channel, destination, subject=f'user:{user.id}')

    def finish_step_up(self, principal, handle, code):
        """校验验证码并签发 5 分钟有效的二次验证令牌"""
        if not handle or not code:
            raise ValidationError('Session ID and code are required')
        if not self.challenges.verify(handle, code, subject=f'user:{principal.user_id}'):
            raise ValidationError('Invalid or expired code', field='code', code='INVALID_OTP')
        logger.info(f"用户 {principal.user_id} 二次验证通过")
        return self.tokens.issue_step_up(principal.user_id)

    # ==================== 资料维护（运动员） ====================

    def check_conflict(self, principal, email=None, mobile=None):
        """返回已被其他账号占用的字段名，无冲突返回 None"""
        return self.store.find_user_conflict(
            mobile=_clean(mobile), email=(_clean(email) or '').lower() or None,
            exclude_user_id=principal.user_id,
        )

    def check_password(self, principal, current_password):
        current_password = _password(current_password, 'currentPassword')
        if not current_password:
            raise ValidationError('Password required', field='currentPassword')
        user = self.resolve_principal(principal)
        return verify_password(current_password, user.password_hash)

    def update_profile(self, principal, data, verification_token=None):
        """更新资料；修改邮箱或手机号需要二次验证令牌"""
        user = self.resolve_principal(principal)
        data = data or {}

        email = _clean(data.get('email'))
        email = email.lower() if email else None
        mobile = _clean(data.get('mobile'))
        email_changed = bool(email) and email != (user.email or '').lower()
        mobile_changed = bool(mobile) and mobile != user.mobile

        if email_changed or mobile_changed:
            self.tokens.verify_step_up(verification_token, user.id)
        if email_changed and not validate_email(email):
            raise ValidationError('Invalid email address', field='email')
        if mobile_changed and not validate_phone(mobile):
            raise ValidationError('Enter a valid 10 digit mobile number', field='mobile')

        conflict = self.store.find_user_conflict(
            mobile=mobile if mobile_changed else None,
            email=email if email_changed else None,
            exclude_user_id=user.id,
        )
        if conflict:
            raise ConflictError(f'{conflict.capitalize()} is already in use.', field=conflict)

        fields = {}
        if email_changed:
            fields['email'] = email
        if mobile_changed:
            fields['mobile'] = mobile
        for field in ADDRESS_FIELDS:
            if field in data:
                fields[field] = _clean(data.get(field))
        if data.get('photos'):
            fields['photos'] = self._store_photo(data['photos']) or user.photos

        updated = self.store.update_user(user.id, fields)
        logger.info(f"用户 {user.id} 更新资料: {sorted(fields)}")
        return updated

    def change_password(self, principal, current_password, new_password, verification_token=None):
        current_password = _password(current_password, 'currentPassword')
        new_password = _password(new_password, 'newPassword')
        if not current_password or not new_password:
            raise ValidationError('All fields are required')
        user = self.resolve_principal(principal)
        self.tokens.verify_step_up(verification_token, user.id)

        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError('Incorrect current password', kind='invalid', code='INVALID_CREDENTIALS')
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', field='newPassword')

        self.store.update_user(user.id, {'password_hash': generate_password_hash(new_password)})
        logger.info(f"用户 {user.id} 修改密码成功")

    def delete_player_account(self, principal):
        """运动员注销账号"""
        require_role(principal, UserRole.PLAYER)
        logger.warning(f"用户 {principal.user_id} 申请注销账号")
        if not self.store.delete_player_account(principal.user_id):
            raise NotFoundError('User not found')
        logger.info(f"用户 {principal.user_id} 已注销")

    def _store_photo(self, photo):
        if not photo or not isinstance(photo, str):
            return None
        if photo.startswith('http://') or photo.startswith('https://') or photo.startswith('/'):
            return photo
        return self.blob_store.store_data_url(photo, 'player-photos', field='photos')

    # ==================== 家庭成员 ====================

    def list_family_members(self, principal):
        return self.store.list_family_members(principal.user_id)

    def add_family_member(self, principal, data):
        require_role(principal, UserRole.PLAYER)
        data = data or {}
        name = _clean(data.get('name'))
        relation = _clean(data.get('relation'))
        if not name or not relation:
            raise ValidationError('Name and relation are required', field='name' if not name else 'relation')

        member = self.store.create_family_member(FamilyMember(
            user_id=principal.user_id,
            name=name,
            relation=relation,
            age=_family_age(data.get('age')),
            gender=_clean(data.get('gender')),
        ))
        logger.info(f"用户 {principal.user_id} 添加家庭成员: {name} (ID: {member.id})")
        return member

    def update_family_member(self, principal, member_id, data):
        """只能修改本人名下的家庭成员"""
        require_role(principal, UserRole.PLAYER)
        self._own_family_member(principal, member_id)
        data = data or {}

        fields = {}
        for field in ('name', 'relation'):
            if field in data:
                value = _clean(data[field])
                if not value:
                    raise ValidationError(f'{field.capitalize()} cannot be empty', field=field)
                fields[field] = value
        if 'age' in data:
            fields['age'] = _family_age(data['age'])
        if 'gender' in data:
            fields['gender'] = _clean(data['gender'])
        return self.store.update_family_member(member_id, fields)

    def delete_family_member(self, principal, member_id):
        require_role(principal, UserRole.PLAYER)
        self._own_family_member(principal, member_id)
        self.store.delete_family_member(member_id)
        logger.info(f"用户 {principal.user_id} 删除家庭成员 {member_id}")

    def _own_family_member(self, principal, member_id):
        member = self.store.get_family_member(member_id)
        # 他人名下的成员同样视为不存在
        if member is None or member.user_id != principal.user_id:
            raise NotFoundError('Family member not found')
        return member

    # ==================== 管理员操作 ====================

    def set_verification(self, principal, user_id, status):
        """
        审核用户

        管理员可审核运动员；管理员账号只能由超级管理员审核。
        """
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        try:
            status = VerificationStatus(status)
        except ValueError:
            raise ValidationError('Invalid verification status', field='status')

        target = self.store.get_user_by_id(user_id)
        if target is None:
            raise NotFoundError('User not found')

        if target.role == UserRole.PLAYER:
            pass
        elif target.role == UserRole.ADMIN:
            if not principal.is_superadmin:
                raise AuthorizationError('Only a superadmin can approve admins')
        elif target.role == UserRole.SUPERADMIN:
            raise AuthorizationError('Superadmin verification cannot be changed')
        else:
            raise ValueError(f'unknown role: {target.role}')

        updated = self.store.update_user(target.id, {'verification': status})
        logger.info(f"用户 {principal.user_id} 将用户 {target.id} ({target.role.value}) 审核状态设为 {status.value}")

        title, severity, message = VERIFICATION_NOTIFICATIONS[status]
        self.notifications.notify(target.id, title, message, severity)
        return updated

    def delete_admin(self, principal, admin_id):
        """删除管理员，名下赛事转给当前超级管理员"""
        require_role(principal, UserRole.SUPERADMIN)
        target = self.store.get_user_by_id(admin_id)
        if target is None or target.role != UserRole.ADMIN:
            raise NotFoundError('Admin not found')
        self.store.delete_admin_account(target.id, principal.user_id)
        logger.warning(f"超级管理员 {principal.user_id} 删除管理员 {target.email} (ID: {target.id})")

    def list_players(self, verification=None):
        if verification:
            try:
                verification = VerificationStatus(verification)
            except ValueError:
                raise ValidationError('Invalid verification status', field='verification')
        return self.store.list_users(role=UserRole.PLAYER, verification=verification)

    def list_admins(self):
        return self.store.list_users(role=UserRole.ADMIN)

    def player_detail(self, user_id):
        """运动员详情（含参赛记录）"""
        player = self.store.get_user_by_id(user_id)
        if player is None or player.role != UserRole.PLAYER:
            raise NotFoundError('Player not found')

        registrations = self.store.list_registrations_for_player(player.id, [])
        events = {}
        participated = []
        for reg in registrations:
            if reg.player_id != player.id:
                continue
            if reg.event_id not in events:
                events[reg.event_id] = self.store.get_event(reg.event_id)
            event = events[reg.event_id]
            participated.append({
                'eventId': reg.event_id,
                'eventName': event.name if event else reg.event_name,
                'sport': event.sport if event else None,
                'categories': reg.categories,
                'registrationId': reg.registration_no,
                'paymentStatus': PAYMENT_STATUS_LABELS[reg.status],
                'playerStatus': reg.status.value,
                'eventDate': event.to_dict()['start_date'] if event else None,
                'eventLocation': event.location if event else None,
                'eventVenue': event.venue if event else None,
                'amountPaid': float(reg.amount_paid or 0),
            })

        data = player.to_dict()
        data['eventsParticipated'] = participated
        return data
