#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 服务注册

应用工厂创建各业务服务并挂到 app.extensions 上，路由通过 get_services() 获取。
"""

from flask import current_app

EXTENSION_KEY = 'sports_events'


class Services:
    """应用内共享的业务服务"""

    def __init__(self, store, tokens, blob_store, dispatcher, notifications, challenges,
                 resolver, workflow, users, teams, events, site, mailer=None):
        self.store = store
        self.tokens = tokens
        self.blob_store = blob_store
        self.dispatcher = dispatcher
        self.notifications = notifications
        self.challenges = challenges
        self.resolver = resolver
        self.workflow = workflow
        self.users = users
        self.teams = teams
        self.events = events
        self.site = site
        self.mailer = mailer


def init_services(app, services):
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services():
    return current_app.extensions[EXTENSION_KEY]
