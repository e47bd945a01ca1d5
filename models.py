#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 数据模型定义
"""

import json
from datetime import datetime, date
from enum import Enum


class UserRole(Enum):
    """用户角色枚举"""
    SUPERADMIN = 'superadmin'    # 超级管理员
    ADMIN = 'admin'              # 管理员
    PLAYER = 'player'            # 运动员


class VerificationStatus(Enum):
    """用户审核状态枚举"""
    PENDING = 'pending'          # 待审核
    VERIFIED = 'verified'        # 已通过
    REJECTED = 'rejected'        # 已拒绝


class RegistrationStatus(Enum):
    """报名状态枚举"""
    PENDING_VERIFICATION = 'pending_verification'  # 待核验付款
    VERIFIED = 'verified'                          # 已核验
    REJECTED = 'rejected'                          # 已驳回


class NotificationType(Enum):
    """通知级别枚举"""
    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'


class MemberRefKind(Enum):
    """队员标识类型"""
    MOBILE = 'mobile'            # 仅手机号
    PLAYER_ID = 'player_id'      # 仅运动员编号
    BOTH = 'both'                # 两者都有
    NONE = 'none'                # 仅姓名，无法匹配


# 审核终态（报名核验、批量核验共用）
TERMINAL_REGISTRATION_STATUSES = (RegistrationStatus.VERIFIED, RegistrationStatus.REJECTED)


def _iso(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _load_json(value, default):
    """MySQL JSON 列在 mysql-connector 中以字符串返回，这里统一解析"""
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode('utf-8')
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return default
    return value


class User:
    """用户模型（运动员 / 管理员 / 超级管理员）"""
    def __init__(self, id=None, role=UserRole.PLAYER, verification=VerificationStatus.PENDING,
                 player_id=None, first_name=None, last_name=None, name=None,
                 mobile=None, email=None, aadhaar=None, dob=None, age=None,
                 apartment=None, street=None, city=None, state=None, pincode=None, country=None,
                 photos=None, password_hash=None, created_at=None, updated_at=None):
        self.id = id
        self.role = role if isinstance(role, UserRole) else UserRole(role)
        self.verification = (verification if isinstance(verification, VerificationStatus)
                             else VerificationStatus(verification or 'pending'))
        self.player_id = player_id  # 运动员编号，如 P100001，分配后不可修改
        self.first_name = first_name
        self.last_name = last_name
        self.name = name or ' '.join(p for p in (first_name, last_name) if p) or None
        self.mobile = mobile
        self.email = email
        self.aadhaar = aadhaar
        self.dob = dob
        self.age = age
        self.apartment = apartment
        self.street = street
        self.city = city
        self.state = state
        self.pincode = pincode
        self.country = country
        self.photos = photos
        self.password_hash = password_hash
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or datetime.now()

    @property
    def is_player(self):
        return self.role == UserRole.PLAYER

    def has_admin_privileges(self):
        """管理员需审核通过才拥有管理权限，超级管理员不受限制"""
        if self.role == UserRole.SUPERADMIN:
            return True
        if self.role == UserRole.ADMIN:
            return self.verification == VerificationStatus.VERIFIED
        if self.role == UserRole.PLAYER:
            return False
        raise ValueError(f'unknown role: {self.role}')

    def to_dict(self):
        """转换为字典（不包含密码哈希）"""
        return {
            'id': self.id,
            'role': self.role.value,
            'verification': self.verification.value,
            'player_id': self.player_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'name': self.name,
            'mobile': self.mobile,
            'email': self.email,
            'aadhaar': self.aadhaar,
            'dob': _iso(self.dob),
            'age': self.age,
            'apartment': self.apartment,
            'street': self.street,
            'city': self.city,
            'state': self.state,
            'pincode': self.pincode,
            'country': self.country,
            'photos': self.photos,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class MemberRef:
    """队员描述

    队伍成员列表是松散结构：可能只有手机号、只有运动员编号，或两者都有。
    解析时确定 kind，匹配时按 kind 分支处理。
    """
    def __init__(self, name=None, mobile=None, player_id=None, age=None):
        self.name = name
        self.mobile = (str(mobile).strip() or None) if mobile else None
        self.player_id = (str(player_id).strip() or None) if player_id else None
        self.age = age

    @classmethod
    def from_raw(cls, raw):
        """从任意形状的成员记录解析（兼容 player_id / playerId / player_number 等写法）"""
        if isinstance(raw, MemberRef):
            return raw
        if not isinstance(raw, dict):
            return cls(name=str(raw) if raw else None)
        return cls(
            name=raw.get('name'),
            mobile=raw.get('mobile') or raw.get('phone'),
            player_id=raw.get('player_id') or raw.get('playerId') or raw.get('player_number'),
            age=raw.get('age'),
        )

    @property
    def kind(self):
        if self.mobile and self.player_id:
            return MemberRefKind.BOTH
        if self.mobile:
            return MemberRefKind.MOBILE
        if self.player_id:
            return MemberRefKind.PLAYER_ID
        return MemberRefKind.NONE

    def matches(self, mobile=None, player_id=None):
        """按手机号或运动员编号精确匹配"""
        kind = self.kind
        if kind == MemberRefKind.BOTH:
            return (bool(mobile) and self.mobile == mobile) or \
                   (bool(player_id) and self.player_id == player_id)
        if kind == MemberRefKind.MOBILE:
            return bool(mobile) and self.mobile == mobile
        if kind == MemberRefKind.PLAYER_ID:
            return bool(player_id) and self.player_id == player_id
        if kind == MemberRefKind.NONE:
            return False
        raise ValueError(f'unknown member kind: {kind}')

    def to_dict(self):
        data = {'name': self.name}
        if self.mobile:
            data['mobile'] = self.mobile
        if self.player_id:
            data['player_id'] = self.player_id
        if self.age is not None:
            data['age'] = self.age
        return data


class Team:
    """队伍模型（队长为运动员）"""
    def __init__(self, id=None, team_name=None, sport=None, captain_id=None,
                 captain_name=None, captain_mobile=None, members=None,
                 created_at=None, updated_at=None):
        self.id = id
        self.team_name = team_name
        self.sport = sport
        self.captain_id = captain_id
        self.captain_name = captain_name
        self.captain_mobile = captain_mobile
        self.members = [MemberRef.from_raw(m) for m in (_load_json(members, []) or [])]
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or datetime.now()

    def has_member(self, mobile=None, player_id=None):
        return any(m.matches(mobile=mobile, player_id=player_id) for m in self.members)

    def members_json(self):
        return json.dumps([m.to_dict() for m in self.members], ensure_ascii=False)

    def to_dict(self):
        return {
            'id': self.id,
            'team_name': self.team_name,
            'sport': self.sport,
            'captain_id': self.captain_id,
            'captain_name': self.captain_name,
            'captain_mobile': self.captain_mobile,
            'members': [m.to_dict() for m in self.members],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Event:
    """赛事模型"""
    def __init__(self, id=None, name=None, sport=None, location=None, venue=None,
                 start_date=None, end_date=None, start_time=None, categories=None,
                 banner_url=None, document_url=None, document_description=None,
                 document_required=False, payment_qr_image=None, sponsors=None,
                 created_by=None, assigned_to=None, status='upcoming',
                 created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.sport = sport
        self.location = location
        self.venue = venue
        self.start_date = start_date
        self.end_date = end_date
        self.start_time = start_time
        self.categories = _load_json(categories, [])
        self.banner_url = banner_url
        self.document_url = document_url
        self.document_description = document_description
        self.document_required = bool(document_required)
        self.payment_qr_image = payment_qr_image
        self.sponsors = _load_json(sponsors, [])
        self.created_by = created_by
        self.assigned_to = assigned_to
        self.status = status
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'sport': self.sport,
            'location': self.location,
            'venue': self.venue,
            'start_date': _iso(self.start_date),
            'end_date': _iso(self.end_date),
            'registration_deadline': _iso(self.end_date),
            'start_time': _iso(self.start_time),
            'categories': self.categories,
            'banner_url': self.banner_url,
            'document_url': self.document_url,
            'document_description': self.document_description,
            'document_required': self.document_required,
            'payment_qr_image': self.payment_qr_image,
            'sponsors': self.sponsors,
            'created_by': self.created_by,
            'assigned_to': self.assigned_to,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class EventNews:
    """赛事新闻 / 集锦"""
    def __init__(self, id=None, event_id=None, title=None, content=None,
                 image_url=None, is_highlight=False, created_at=None):
        self.id = id
        self.event_id = event_id
        self.title = title
        self.content = content
        self.image_url = image_url
        self.is_highlight = bool(is_highlight)
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'title': self.title,
            'content': self.content,
            'image_url': self.image_url,
            'is_highlight': self.is_highlight,
            'created_at': _iso(self.created_at),
        }


class EventBracket:
    """赛事对阵 / 抽签（同一赛事+组别+轮次唯一）"""
    def __init__(self, id=None, event_id=None, category=None, round_name=None,
                 draw_type=None, draw_data=None, created_at=None):
        self.id = id
        self.event_id = event_id
        self.category = category
        self.round_name = round_name
        self.draw_type = draw_type
        self.draw_data = _load_json(draw_data, {})
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'category': self.category,
            'round_name': self.round_name,
            'draw_type': self.draw_type,
            'draw_data': self.draw_data,
            'created_at': _iso(self.created_at),
        }


class Transaction:
    """手动付款记录（由报名记录独占）"""
    def __init__(self, id=None, user_id=None, order_id=None, manual_transaction_id=None,
                 payment_mode='manual', screenshot_url=None, amount=0, currency='INR',
                 status=RegistrationStatus.PENDING_VERIFICATION.value, created_at=None):
        self.id = id
        self.user_id = user_id
        self.order_id = order_id
        self.manual_transaction_id = manual_transaction_id
        self.payment_mode = payment_mode
        self.screenshot_url = screenshot_url
        self.amount = amount
        self.currency = currency
        self.status = status
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'order_id': self.order_id,
            'manual_transaction_id': self.manual_transaction_id,
            'payment_mode': self.payment_mode,
            'screenshot_url': self.screenshot_url,
            'amount': float(self.amount or 0),
            'currency': self.currency,
            'status': self.status,
            'created_at': _iso(self.created_at),
        }


class EventRegistration:
    """赛事报名模型"""
    def __init__(self, id=None, event_id=None, player_id=None, team_id=None,
                 registration_no=None, categories=None, amount_paid=0,
                 transaction_id=None, document_url=None,
                 status=RegistrationStatus.PENDING_VERIFICATION,
                 created_at=None, updated_at=None, event_name=None):
        self.id = id
        self.event_id = event_id
        self.player_id = player_id  # 提交报名（付款）的运动员用户ID
        self.team_id = team_id
        self.registration_no = registration_no
        self.categories = _load_json(categories, [])
        self.amount_paid = amount_paid
        self.transaction_id = transaction_id
        self.document_url = document_url
        self.status = status if isinstance(status, RegistrationStatus) else RegistrationStatus(status)
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or datetime.now()
        self.event_name = event_name  # 关联查询得到，非表字段

    def categories_json(self):
        return json.dumps(self.categories, ensure_ascii=False)

    def to_dict(self):
        return {
            'id': self.id,
            'event_id': self.event_id,
            'event_name': self.event_name,
            'player_id': self.player_id,
            'team_id': self.team_id,
            'registration_no': self.registration_no,
            'categories': self.categories,
            'amount_paid': float(self.amount_paid or 0),
            'transaction_id': self.transaction_id,
            'document_url': self.document_url,
            'status': self.status.value,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Notification:
    """站内通知模型"""
    def __init__(self, id=None, user_id=None, title=None, message=None,
                 type=NotificationType.INFO, link=None, is_read=False, created_at=None):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.message = message
        self.type = type if isinstance(type, NotificationType) else NotificationType(type)
        self.link = link
        self.is_read = bool(is_read)
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'message': self.message,
            'type': self.type.value,
            'link': self.link,
            'is_read': self.is_read,
            'created_at': _iso(self.created_at),
        }


class FamilyMember:
    """运动员家庭成员"""
    def __init__(self, id=None, user_id=None, name=None, relation=None,
                 age=None, gender=None, created_at=None):
        self.id = id
        self.user_id = user_id
        self.name = name
        self.relation = relation
        self.age = age
        self.gender = gender
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'relation': self.relation,
            'age': self.age,
            'gender': self.gender,
            'created_at': _iso(self.created_at),
        }


class Advertisement:
    """首页广告位"""
    def __init__(self, id=None, user_id=None, title=None, image_url=None, link_url=None,
                 placement='general', is_active=True, created_at=None, updated_at=None):
        self.id = id
        self.user_id = user_id  # 创建广告的管理员
        self.title = title
        self.image_url = image_url
        self.link_url = link_url
        self.placement = placement or 'general'
        self.is_active = bool(is_active)
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'image_url': self.image_url,
            'link_url': self.link_url,
            'placement': self.placement,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class PlatformSettings:
    """平台设置（单行，id 固定为 1）"""
    DEFAULT_PLATFORM_NAME = 'Sports Paramount'

    def __init__(self, id=1, platform_name=None, support_email=None, support_phone=None,
                 logo_url=None, logo_size=None, updated_at=None):
        self.id = id
        self.platform_name = platform_name or self.DEFAULT_PLATFORM_NAME
        self.support_email = support_email or ''
        self.support_phone = support_phone or ''
        self.logo_url = logo_url or ''
        self.logo_size = logo_size
        self.updated_at = updated_at

    def to_dict(self):
        return {
            'platform_name': self.platform_name,
            'support_email': self.support_email,
            'support_phone': self.support_phone,
            'logo_url': self.logo_url,
            'logo_size': self.logo_size,
            'updated_at': _iso(self.updated_at),
        }

    def to_public_dict(self):
        """公开接口只返回品牌信息"""
        return {
            'platform_name': self.platform_name,
            'logo_url': self.logo_url,
            'support_email': self.support_email,
            'logo_size': self.logo_size,
        }


class Apartment:
    """小区目录（注册表单地址字段使用）"""
    def __init__(self, id=None, name=None, pincode='', locality='', zone='', created_at=None):
        self.id = id
        self.name = name
        self.pincode = pincode or ''
        self.locality = locality or ''
        self.zone = zone or ''
        self.created_at = created_at or datetime.now()

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'pincode': self.pincode,
            'locality': self.locality,
            'zone': self.zone,
            'created_at': _iso(self.created_at),
        }


# 数据库表结构定义
DATABASE_SCHEMA = {
    'users': '''
        CREATE TABLE IF NOT EXISTS users (
            id INT AUTO_INCREMENT PRIMARY KEY,
            role ENUM('player', 'admin', 'superadmin') NOT NULL DEFAULT 'player',
            verification ENUM('pending', 'verified', 'rejected') NOT NULL DEFAULT 'pending',
            player_id VARCHAR(20) UNIQUE,
            first_name VARCHAR(100),
            last_name VARCHAR(100),
            name VARCHAR(200),
            mobile VARCHAR(20) UNIQUE,
            email VARCHAR(150) UNIQUE,
            aadhaar VARCHAR(20) UNIQUE,
            dob DATE,
            age INT,
            apartment VARCHAR(200),
            street VARCHAR(200),
            city VARCHAR(100),
            state VARCHAR(100),
            pincode VARCHAR(12),
            country VARCHAR(100),
            photos VARCHAR(500),
            password_hash VARCHAR(256) NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_role_verification (role, verification)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'player_sequence': '''
        CREATE TABLE IF NOT EXISTS player_sequence (
            seq INT AUTO_INCREMENT PRIMARY KEY,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'player_teams': '''
        CREATE TABLE IF NOT EXISTS player_teams (
            id INT AUTO_INCREMENT PRIMARY KEY,
            team_name VARCHAR(200) NOT NULL,
            sport VARCHAR(100),
            captain_id INT NOT NULL,
            captain_name VARCHAR(200),
            captain_mobile VARCHAR(20),
            members JSON,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_captain (captain_id),
            FOREIGN KEY (captain_id) REFERENCES users(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'events': '''
        CREATE TABLE IF NOT EXISTS events (
            id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(200) NOT NULL,
            sport VARCHAR(100) NOT NULL,
            location VARCHAR(200),
            venue VARCHAR(200),
            start_date DATE NOT NULL,
            end_date DATE,
            start_time VARCHAR(20),
            categories JSON,
            banner_url VARCHAR(500),
            document_url VARCHAR(500),
            document_description TEXT,
            document_required BOOLEAN DEFAULT FALSE,
            payment_qr_image VARCHAR(500),
            sponsors JSON,
            created_by INT,
            assigned_to INT,
            status VARCHAR(30) DEFAULT 'upcoming',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_start_date (start_date),
            INDEX idx_owner (created_by, assigned_to)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'event_news': '''
        CREATE TABLE IF NOT EXISTS event_news (
            id INT AUTO_INCREMENT PRIMARY KEY,
            event_id INT NOT NULL,
            title VARCHAR(200) NOT NULL,
            content TEXT,
            image_url VARCHAR(500),
            is_highlight BOOLEAN DEFAULT FALSE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_event (event_id),
            FOREIGN KEY (event_id) REFERENCES events(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'event_brackets': '''
        CREATE TABLE IF NOT EXISTS event_brackets (
            id INT AUTO_INCREMENT PRIMARY KEY,
            event_id INT NOT NULL,
            category VARCHAR(100) NOT NULL,
            round_name VARCHAR(100) NOT NULL,
            draw_type VARCHAR(30),
            draw_data JSON,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE KEY uniq_event_category_round (event_id, category, round_name),
            FOREIGN KEY (event_id) REFERENCES events(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'transactions': '''
        CREATE TABLE IF NOT EXISTS transactions (
            id INT AUTO_INCREMENT PRIMARY KEY,
            user_id INT NOT NULL,
            order_id VARCHAR(50),
            manual_transaction_id VARCHAR(100),
            payment_mode VARCHAR(20) DEFAULT 'manual',
            screenshot_url VARCHAR(500),
            amount DECIMAL(10,2) NOT NULL,
            currency VARCHAR(10) DEFAULT 'INR',
            status VARCHAR(30) DEFAULT 'pending_verification',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_user (user_id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'event_registrations': '''
        CREATE TABLE IF NOT EXISTS event_registrations (
            id INT AUTO_INCREMENT PRIMARY KEY,
            event_id INT NOT NULL,
            player_id INT NOT NULL,
            team_id INT NULL,
            registration_no VARCHAR(40) NOT NULL UNIQUE,
            categories JSON NOT NULL,
            amount_paid DECIMAL(10,2) NOT NULL,
            transaction_id INT,
            document_url VARCHAR(500),
            status ENUM('pending_verification', 'verified', 'rejected') DEFAULT 'pending_verification',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_player (player_id),
            INDEX idx_team (team_id),
            INDEX idx_event_status (event_id, status),
            FOREIGN KEY (event_id) REFERENCES events(id) ON DELETE CASCADE,
            FOREIGN KEY (transaction_id) REFERENCES transactions(id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'notifications': '''
        CREATE TABLE IF NOT EXISTS notifications (
            id INT AUTO_INCREMENT PRIMARY KEY,
            user_id INT NOT NULL,
            title VARCHAR(200) NOT NULL,
            message TEXT,
            type ENUM('info', 'success', 'warning', 'error') DEFAULT 'info',
            link VARCHAR(500),
            is_read BOOLEAN DEFAULT FALSE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_user_read (user_id, is_read),
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'family_members': '''
        CREATE TABLE IF NOT EXISTS family_members (
            id INT AUTO_INCREMENT PRIMARY KEY,
            user_id INT NOT NULL,
            name VARCHAR(200) NOT NULL,
            relation VARCHAR(50) NOT NULL,
            age INT NULL,
            gender VARCHAR(20),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            INDEX idx_user (user_id),
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'advertisements': '''
        CREATE TABLE IF NOT EXISTS advertisements (
            id INT AUTO_INCREMENT PRIMARY KEY,
            user_id INT,
            title VARCHAR(200) NOT NULL,
            image_url VARCHAR(500) NOT NULL,
            link_url VARCHAR(500),
            placement VARCHAR(50) DEFAULT 'general',
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
            INDEX idx_active (is_active)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'platform_settings': '''
        CREATE TABLE IF NOT EXISTS platform_settings (
            id INT PRIMARY KEY,
            platform_name VARCHAR(200),
            support_email VARCHAR(150),
            support_phone VARCHAR(20),
            logo_url VARCHAR(500),
            logo_size VARCHAR(20),
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
    'apartments': '''
        CREATE TABLE IF NOT EXISTS apartments (
            id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(200) NOT NULL UNIQUE,
            pincode VARCHAR(12) DEFAULT '',
            locality VARCHAR(200) DEFAULT '',
            zone VARCHAR(100) DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    ''',
}
