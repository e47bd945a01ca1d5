#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 数据存储接口

业务服务只依赖这里定义的接口，由应用工厂注入具体实现：
生产环境为 database.DatabaseManager（MySQL），测试使用内存实现。
"""

from abc import ABC, abstractmethod


class Store(ABC):
    """数据存储抽象接口"""

    # ==================== 用户 ====================

    @abstractmethod
    def create_user(self, user):
        """保存新用户并回填 user.id"""

    @abstractmethod
    def get_user_by_id(self, user_id):
        """按ID获取用户，不存在返回 None"""

    @abstractmethod
    def get_users_by_ids(self, user_ids):
        """批量获取用户，返回 {id: User}"""

    @abstractmethod
    def get_user_by_email(self, email):
        pass

    @abstractmethod
    def get_player_by_player_id(self, player_id):
        """按运动员编号查找运动员（不区分大小写）"""

    @abstractmethod
    def find_player_for_login(self, identifier):
        """按手机号、证件号或运动员编号查找登录账号"""

    @abstractmethod
    def find_user_conflict(self, mobile=None, email=None, aadhaar=None, exclude_user_id=None):
        """返回第一个已被其他用户占用的字段名（mobile/email/aadhaar），无冲突返回 None"""

    @abstractmethod
    def next_player_number(self):
        """分配下一个运动员序号（单调递增，不重复）"""

    @abstractmethod
    def update_user(self, user_id, fields):
        """更新用户字段，返回更新后的 User"""

    @abstractmethod
    def list_users(self, role=None, verification=None):
        pass

    @abstractmethod
    def count_users_by_verification(self, role):
        """返回 {verification: count}"""

    @abstractmethod
    def delete_player_account(self, user_id):
        """删除运动员及其报名、付款记录、担任队长的队伍、家庭成员和通知"""

    @abstractmethod
    def delete_admin_account(self, admin_id, successor_id):
        """在同一事务中把管理员名下赛事转给 successor_id 并删除管理员"""

    # ==================== 队伍 ====================

    @abstractmethod
    def create_team(self, team):
        pass

    @abstractmethod
    def get_team(self, team_id):
        pass

    @abstractmethod
    def update_team(self, team):
        pass

    @abstractmethod
    def delete_team(self, team_id):
        pass

    @abstractmethod
    def list_teams_by_captain(self, captain_id):
        pass

    @abstractmethod
    def list_all_teams(self):
        """全部队伍（成员匹配需要全表扫描）"""

    # ==================== 赛事 ====================

    @abstractmethod
    def create_event(self, event):
        pass

    @abstractmethod
    def get_event(self, event_id):
        pass

    @abstractmethod
    def update_event(self, event_id, fields):
        pass

    @abstractmethod
    def delete_event(self, event_id):
        """删除赛事及其报名、付款记录、新闻和对阵"""

    @abstractmethod
    def list_events(self, created_by=None, admin_id=None):
        """admin_id 过滤由该管理员创建或被指派的赛事"""

    @abstractmethod
    def get_event_names(self, event_ids):
        """返回 {event_id: name}"""

    @abstractmethod
    def create_news(self, news):
        pass

    @abstractmethod
    def get_news(self, news_id):
        pass

    @abstractmethod
    def update_news(self, news_id, fields):
        pass

    @abstractmethod
    def delete_news(self, news_id):
        pass

    @abstractmethod
    def list_news(self, event_id=None):
        pass

    @abstractmethod
    def save_bracket(self, bracket):
        """按 赛事+组别+轮次 插入或更新对阵"""

    @abstractmethod
    def list_brackets(self, event_id, category=None):
        pass

    @abstractmethod
    def delete_bracket(self, bracket_id):
        pass

    # ==================== 报名与付款 ====================

    @abstractmethod
    def create_transaction(self, transaction):
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id):
        pass

    @abstractmethod
    def get_transactions_by_ids(self, transaction_ids):
        """返回 {id: Transaction}"""

    @abstractmethod
    def create_registration(self, registration):
        """报名编号重复时抛出 ConflictError"""

    @abstractmethod
    def get_registration(self, registration_id):
        pass

    @abstractmethod
    def get_registrations_by_ids(self, registration_ids):
        pass

    @abstractmethod
    def set_registration_status(self, registration_id, status):
        """更新单条报名状态，返回更新后的记录；不存在返回 None"""

    @abstractmethod
    def bulk_set_registration_status(self, registration_ids, status):
        """单条语句批量更新状态（全部成功或全部失败），返回被更新的记录"""

    @abstractmethod
    def list_registrations(self, event_id=None, event_ids=None):
        pass

    @abstractmethod
    def list_registrations_for_player(self, user_id, team_ids):
        """本人提交的报名与指定队伍的报名的并集"""

    @abstractmethod
    def registration_totals(self):
        """返回 {status: {'count': n, 'amount': total}}"""

    # ==================== 通知 ====================

    @abstractmethod
    def create_notification(self, notification):
        pass

    @abstractmethod
    def list_notifications(self, user_id, limit=50):
        pass

    @abstractmethod
    def count_unread_notifications(self, user_id):
        pass

    @abstractmethod
    def mark_notification_read(self, user_id, notification_id):
        """只能标记本人的通知，返回是否命中"""

    @abstractmethod
    def mark_all_notifications_read(self, user_id):
        pass

    # ==================== 家庭成员 ====================

    @abstractmethod
    def create_family_member(self, member):
        pass

    @abstractmethod
    def get_family_member(self, member_id):
        pass

    @abstractmethod
    def update_family_member(self, member_id, fields):
        pass

    @abstractmethod
    def delete_family_member(self, member_id):
        pass

    @abstractmethod
    def list_family_members(self, user_id):
        pass

    # ==================== 站点内容 ====================

    @abstractmethod
    def create_advertisement(self, advertisement):
        pass

    @abstractmethod
    def get_advertisement(self, advertisement_id):
        pass

    @abstractmethod
    def update_advertisement(self, advertisement_id, fields):
        """更新广告字段，返回更新后的记录；不存在返回 None"""

    @abstractmethod
    def delete_advertisement(self, advertisement_id):
        pass

    @abstractmethod
    def list_advertisements(self):
        """全部广告，按创建时间倒序"""

    @abstractmethod
    def get_platform_settings(self):
        """读取平台设置（id = 1），未初始化返回 None"""

    @abstractmethod
    def save_platform_settings(self, settings):
        """插入或覆盖平台设置"""

    @abstractmethod
    def create_apartment(self, apartment):
        pass

    @abstractmethod
    def get_apartment(self, apartment_id):
        pass

    @abstractmethod
    def find_apartment_by_name(self, name):
        """按名称查找小区（不区分大小写）"""

    @abstractmethod
    def update_apartment(self, apartment_id, fields):
        pass

    @abstractmethod
    def delete_apartment(self, apartment_id):
        pass

    @abstractmethod
    def list_apartments(self):
        pass
