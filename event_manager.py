#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 赛事管理模块

赛事、赛事新闻和对阵（抽签）的维护。海报、证明文件、收款二维码、
赞助商 logo 以 data URL 提交，保存到文件存储后只记录 URL。
"""

import logging

from models import Event, EventNews, EventBracket, UserRole
from utils.errors import ValidationError, NotFoundError
from utils.helpers import parse_date
from utils.security import require_role

logger = logging.getLogger(__name__)

# 允许通过更新接口修改的赛事字段
EDITABLE_EVENT_FIELDS = (
    'name', 'sport', 'location', 'venue', 'start_date', 'end_date', 'start_time',
    'categories', 'document_description', 'document_required', 'assigned_to', 'status',
)
DATE_FIELDS = ('start_date', 'end_date')


def _is_data_url(value):
    return isinstance(value, str) and value.startswith('data:')


def _optional_id(value, field):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field}', field=field)


def _parse_event_date(data, field, required=False):
    value = data.get(field)
    if value in (None, ''):
        if required:
            raise ValidationError('Missing required fields (name, sport, date)', field=field)
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f'Invalid date: {field}', field=field)
    return parsed


class EventManager:
    """赛事管理器"""

    def __init__(self, store, blob_store):
        self.store = store
        self.blob_store = blob_store

    # ==================== 公开查询 ====================

    def list_events(self, created_by=None, admin_id=None):
        return self.store.list_events(
            created_by=_optional_id(created_by, 'created_by'),
            admin_id=_optional_id(admin_id, 'admin_id'),
        )

    def get_event(self, event_id):
        event = self.store.get_event(event_id)
        if event is None:
            raise NotFoundError('Event not found')
        return event

    def event_detail(self, event_id):
        """赛事详情（附带新闻和负责人）"""
        event = self.get_event(event_id)
        data = event.to_dict()
        if event.assigned_to:
            assigned = self.store.get_user_by_id(event.assigned_to)
            if assigned:
                data['assigned_user'] = {'id': assigned.id, 'name': assigned.name, 'email': assigned.email}
        data['news'] = [n.to_dict() for n in self.store.list_news(event.id)]
        return data

    def list_brackets(self, event_id, category=None):
        if event_id in (None, ''):
            raise ValidationError('Event ID is required', field='eventId')
        return self.store.list_brackets(_optional_id(event_id, 'eventId'), category=category)

    # ==================== 赛事维护 ====================

    def create_event(self, principal, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        name = (data.get('name') or '').strip()
        sport = (data.get('sport') or '').strip()
        if not name or not sport:
            raise ValidationError('Missing required fields (name, sport, date)',
                                  field='name' if not name else 'sport')
        start_date = _parse_event_date(data, 'start_date', required=True)

        categories = data.get('categories') or []
        if not isinstance(categories, list):
            raise ValidationError('Categories must be a list', field='categories')

        event = Event(
            name=name,
            sport=sport,
            location=data.get('location'),
            venue=data.get('venue'),
            start_date=start_date,
            end_date=_parse_event_date(data, 'end_date'),
            start_time=data.get('start_time'),
            categories=categories,
            banner_url=self._upload(data.get('banner_image'), 'event-assets/banners', 'banner_image'),
            document_url=self._upload(data.get('document_url'), 'event-documents', 'document_url'),
            document_description=data.get('document_description'),
            document_required=bool(data.get('document_required')),
            payment_qr_image=self._upload(data.get('payment_qr_image'), 'event-assets/payment-qrs',
                                          'payment_qr_image'),
            sponsors=self._process_sponsors(data.get('sponsors')),
            created_by=principal.user_id,
            assigned_to=_optional_id(data.get('assigned_to'), 'assigned_to'),
            status='upcoming',
        )
        event = self.store.create_event(event)
        logger.info(f"管理员 {principal.user_id} 创建赛事: {event.name} (ID: {event.id})")
        return event

    def update_event(self, principal, event_id, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        self.get_event(event_id)

        fields = {k: data[k] for k in EDITABLE_EVENT_FIELDS if k in data}
        for field in DATE_FIELDS:
            if field in fields:
                fields[field] = _parse_event_date(data, field, required=(field == 'start_date'))
        if 'registration_deadline' in data:
            fields['end_date'] = _parse_event_date(data, 'registration_deadline')
        if 'assigned_to' in fields:
            fields['assigned_to'] = _optional_id(fields['assigned_to'], 'assigned_to')
        if 'document_required' in fields:
            fields['document_required'] = bool(fields['document_required'])

        if data.get('banner_image'):
            fields['banner_url'] = self._upload(data['banner_image'], 'event-assets/banners', 'banner_image')
        if _is_data_url(data.get('payment_qr_image')):
            fields['payment_qr_image'] = self._upload(data['payment_qr_image'], 'event-assets/payment-qrs',
                                                      'payment_qr_image')
        if data.get('document_file'):
            fields['document_url'] = self._upload(data['document_file'], 'event-documents', 'document_file')
        if isinstance(data.get('sponsors'), list):
            fields['sponsors'] = self._process_sponsors(data['sponsors'])

        updated = self.store.update_event(event_id, fields)
        logger.info(f"管理员 {principal.user_id} 更新赛事 {event_id}: {sorted(fields)}")
        return updated

    def delete_event(self, principal, event_id):
        """删除赛事（报名、付款记录、新闻、对阵一并删除）"""
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not self.store.delete_event(event_id):
            raise NotFoundError('Event not found')
        logger.warning(f"管理员 {principal.user_id} 删除赛事 {event_id}")

    def _upload(self, value, location_hint, field):
        """data URL 上传后返回 URL；已经是 URL 的原样保留"""
        if not value:
            return None
        if _is_data_url(value):
            return self.blob_store.store_data_url(value, location_hint, field=field)
        return value

    def _process_sponsors(self, sponsors):
        if not sponsors:
            return []
        if not isinstance(sponsors, list):
            raise ValidationError('Sponsors must be a list', field='sponsors')
        processed = []
        for sponsor in sponsors:
            if not isinstance(sponsor, dict):
                continue
            item = dict(sponsor)
            item['logo'] = self._upload(sponsor.get('logo'), 'event-assets/sponsors', 'sponsors')
            item['mediaItems'] = [
                dict(media, url=self._upload(media.get('url'), 'event-assets/sponsor-media', 'sponsors'))
                for media in (sponsor.get('mediaItems') or []) if isinstance(media, dict)
            ]
            processed.append(item)
        return processed

    # ==================== 新闻 ====================

    def list_news(self, event_id):
        if event_id in (None, ''):
            raise ValidationError('Event ID is required', field='eventId')
        return self.store.list_news(_optional_id(event_id, 'eventId'))

    def create_news(self, principal, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        event_id = _optional_id(data.get('eventId'), 'eventId')
        if event_id is None:
            raise ValidationError('Event ID is required', field='eventId')
        title = (data.get('title') or '').strip()
        if not title:
            raise ValidationError('Title is required', field='title')
        self.get_event(event_id)

        news = self.store.create_news(EventNews(
            event_id=event_id,
            title=title,
            content=data.get('content'),
            image_url=self._upload(data.get('imageUrl'), f'event-assets/news/{event_id}', 'imageUrl'),
            is_highlight=bool(data.get('isHighlight')),
        ))
        logger.info(f"赛事 {event_id} 新增新闻: {title}")
        return news

    def update_news(self, principal, news_id, data):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        news = self.store.get_news(news_id)
        if news is None:
            raise NotFoundError('News not found')
        fields = {}
        if 'title' in data:
            fields['title'] = data['title']
        if 'content' in data:
            fields['content'] = data['content']
        if 'imageUrl' in data:
            fields['image_url'] = self._upload(data['imageUrl'], f'event-assets/news/{news.event_id}', 'imageUrl')
        if 'isHighlight' in data:
            fields['is_highlight'] = bool(data['isHighlight'])
        return self.store.update_news(news_id, fields)

    def delete_news(self, principal, news_id):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not self.store.delete_news(news_id):
            raise NotFoundError('News not found')
        logger.info(f"管理员 {principal.user_id} 删除新闻 {news_id}")

    # ==================== 对阵 ====================

    def save_bracket(self, principal, data):
        """保存一轮对阵；同一赛事+组别+轮次已存在时覆盖"""
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        event_id = _optional_id(data.get('eventId'), 'eventId')
        category = (data.get('category') or '').strip()
        round_name = (data.get('roundName') or '').strip()
        if event_id is None or not category or not round_name:
            raise ValidationError('eventId, category and roundName are required')
        self.get_event(event_id)

        draw_type = data.get('drawType')
        draw_data = data.get('drawData') or {}
        if draw_type == 'image' and isinstance(draw_data, dict) and _is_data_url(draw_data.get('url')):
            draw_data = dict(draw_data, url=self._upload(draw_data['url'], 'event-assets/draws', 'drawData'))

        bracket = self.store.save_bracket(EventBracket(
            event_id=event_id,
            category=category,
            round_name=round_name,
            draw_type=draw_type,
            draw_data=draw_data,
        ))
        logger.info(f"赛事 {event_id} 保存对阵: {category} / {round_name}")
        return bracket

    def delete_bracket(self, principal, bracket_id):
        require_role(principal, UserRole.ADMIN, UserRole.SUPERADMIN)
        if not self.store.delete_bracket(bracket_id):
            raise NotFoundError('Bracket not found')
        logger.info(f"管理员 {principal.user_id} 删除对阵 {bracket_id}")
