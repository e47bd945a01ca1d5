#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 站点内容管理模块

首页广告、平台设置（名称、客服联系方式、logo）和小区目录。
读接口公开，写接口仅限管理员。
"""

import logging

from models import Advertisement, PlatformSettings, Apartment, UserRole
from utils.errors import ValidationError, NotFoundError, ConflictError
from utils.helpers import validate_email
from utils.security import require_role

logger = logging.getLogger(__name__)

DEFAULT_PLACEMENT = 'general'
APARTMENT_FIELDS = ('pincode', 'locality', 'zone')


def _is_data_url(value):
    return isinstance(value, str) and value.startswith('data:')


def _text(value):
    if value is None:
        return None
    return str(value).strip() or None


def _flag(value, field):
    if not isinstance(value, bool):
        raise ValidationError(f'{field} must be true or false', field=field)
    return value


class SiteManager:
    """站点内容管理器"""

    def __init__(self, store, blob_store):
        self.store = store
        self.blob_store = blob_store

    # ==================== 广告 ====================

    def list_advertisements(self):
        return self.store.list_advertisements()

    def get_advertisement(self, advertisement_id):
        advertisement = self.store.get_advertisement(advertisement_id)
        if advertisement is None:
            raise NotFoundError('Advertisement not found')
        return advertisement

    def create_advertisement(self, principal, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        title = _text(data.get('title'))
        if not title:
            raise ValidationError('Title is required', field='title')
        if not data.get('image'):
            raise ValidationError('Image is required', field='image')
        is_active = _flag(data['isActive'], 'isActive') if 'isActive' in data else True

        advertisement = self.store.create_advertisement(Advertisement(
            user_id=principal.user_id,
            title=title,
            image_url=self._upload(data['image'], 'ads', 'image'),
            link_url=_text(data.get('linkUrl')),
            placement=_text(data.get('placement')) or DEFAULT_PLACEMENT,
            is_active=is_active,
        ))
        logger.info(f"管理员 {principal.user_id} 创建广告: {title} (ID: {advertisement.id})")
        return advertisement

    def update_advertisement(self, principal, advertisement_id, data):
        """更新广告；只有提交新的 data URL 时才替换图片"""
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        self.get_advertisement(advertisement_id)
        title = _text(data.get('title'))
        if not title:
            raise ValidationError('Title is required', field='title')

        fields = {'title': title}
        if _is_data_url(data.get('image')):
            fields['image_url'] = self._upload(data['image'], 'ads', 'image')
        if 'linkUrl' in data:
            fields['link_url'] = _text(data['linkUrl'])
        if 'placement' in data:
            fields['placement'] = _text(data['placement']) or DEFAULT_PLACEMENT
        if 'isActive' in data:
            fields['is_active'] = _flag(data['isActive'], 'isActive')

        updated = self.store.update_advertisement(advertisement_id, fields)
        logger.info(f"管理员 {principal.user_id} 更新广告 {advertisement_id}: {sorted(fields)}")
        return updated

    def toggle_advertisement(self, principal, advertisement_id, is_active):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        self.get_advertisement(advertisement_id)
        updated = self.store.update_advertisement(
            advertisement_id, {'is_active': _flag(is_active, 'isActive')}
        )
        logger.info(f"管理员 {principal.user_id} 将广告 {advertisement_id} 设为 "
                    f"{'启用' if updated.is_active else '停用'}")
        return updated

    def delete_advertisement(self, principal, advertisement_id):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not self.store.delete_advertisement(advertisement_id):
            raise NotFoundError('Advertisement not found')
        logger.info(f"管理员 {principal.user_id} 删除广告 {advertisement_id}")

    # ==================== 平台设置 ====================

    def get_settings(self):
        """未初始化时返回默认设置"""
        return self.store.get_platform_settings() or PlatformSettings()

    def update_settings(self, principal, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        current = self.get_settings()

        platform_name = current.platform_name
        if 'platformName' in data:
            platform_name = _text(data['platformName'])
            if not platform_name:
                raise ValidationError('Platform name cannot be empty', field='platformName')

        support_email = current.support_email
        if 'supportEmail' in data:
            support_email = (_text(data['supportEmail']) or '').lower()
            if support_email and not validate_email(support_email):
                raise ValidationError('Invalid email address', field='supportEmail')

        logo_url = current.logo_url
        if 'logoUrl' in data:
            logo_url = self._upload(data['logoUrl'], 'branding', 'logoUrl') or ''

        settings = PlatformSettings(
            platform_name=platform_name,
            support_email=support_email,
            support_phone=_text(data['supportPhone']) if 'supportPhone' in data else current.support_phone,
            logo_url=logo_url,
            logo_size=_text(data['logoSize']) if 'logoSize' in data else current.logo_size,
        )
        saved = self.store.save_platform_settings(settings)
        logger.info(f"管理员 {principal.user_id} 更新平台设置")
        return saved

    # ==================== 小区目录 ====================

    def list_apartments(self):
        return self.store.list_apartments()

    def add_apartment(self, principal, data):
        """
        添加小区

        Returns:
            tuple: (Apartment, 是否新建)；同名小区已存在时返回已有记录
        """
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('Invalid name', field='name')
        name = name.strip()

        existing = self.store.find_apartment_by_name(name)
        if existing is not None:
            return existing, False

        apartment = self.store.create_apartment(Apartment(
            name=name, **{f: _text(data.get(f)) or '' for f in APARTMENT_FIELDS}
        ))
        logger.info(f"管理员 {principal.user_id} 添加小区: {name} (ID: {apartment.id})")
        return apartment, True

    def update_apartment(self, principal, apartment_id, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if self.store.get_apartment(apartment_id) is None:
            raise NotFoundError('Apartment not found')

        fields = {f: _text(data[f]) or '' for f in APARTMENT_FIELDS if f in data}
        name = _text(data.get('name'))
        if name:
            existing = self.store.find_apartment_by_name(name)
            if existing is not None and existing.id != apartment_id:
                raise ConflictError('Apartment already exists', field='name')
            fields['name'] = name
        return self.store.update_apartment(apartment_id, fields)

    def delete_apartment(self, principal, apartment_id):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not self.store.delete_apartment(apartment_id):
            raise NotFoundError('Apartment not found')
        logger.info(f"管理员 {principal.user_id} 删除小区 {apartment_id}")

    def _upload(self, value, location_hint, field):
        """data URL 上传后返回 URL；已经是 URL 的原样保留"""
        if not value:
            return None
        if not isinstance(value, str):
            raise ValidationError(f'Invalid {field}', field=field)
        if _is_data_url(value):
            return self.blob_store.store_data_url(value, location_hint, field=field)
        return value
