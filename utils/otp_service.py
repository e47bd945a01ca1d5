#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
验证码服务模块 - 二次验证挑战（邮箱 / 手机）

支持多个发送渠道：
- demo: 演示模式，只记录日志（开发测试）
- 2factor: 2factor.in 短信接口
- email: 通过邮件发送验证码
"""

import json
import time
import uuid
import random
import string
import logging
import threading

import redis
import requests

from utils.errors import ValidationError, DependencyFailure
from utils.mailer import verification_code_email

logger = logging.getLogger(__name__)

CHANNELS = ('email', 'mobile')


class CodeStore:
    """验证码存储：配置 REDIS_URL 时使用 Redis，否则使用进程内存"""

    def __init__(self, redis_url=None):
        self.redis_client = redis.from_url(redis_url, decode_responses=True) if redis_url else None
        self._memory = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(name):
        return f"otp:{name}"

    def put(self, name, record, expire_seconds):
        if self.redis_client is not None:
            self.redis_client.setex(self._key(name), int(expire_seconds),
                                    json.dumps(record, ensure_ascii=False))
            return
        with self._lock:
            self._memory[name] = (time.time() + expire_seconds, record)

    def get(self, name):
        if self.redis_client is not None:
            raw = self.redis_client.get(self._key(name))
            return json.loads(raw) if raw else None
        with self._lock:
            entry = self._memory.get(name)
            if entry is None:
                return None
            expires_at, record = entry
            if expires_at <= time.time():
                del self._memory[name]
                return None
            return record

    def delete(self, name):
        if self.redis_client is not None:
            self.redis_client.delete(self._key(name))
            return
        with self._lock:
            self._memory.pop(name, None)


class DemoOTPProvider:
    """
    演示用发送渠道（开发测试用）
    不实际发送，只记录日志，发送记录保存在 outbox 中
    """

    def __init__(self):
        self.outbox = []

    def deliver(self, destination, code, ttl_minutes):
        self.outbox.append((destination, code))
        logger.info(f"【演示模式】发送验证码到 {destination}: {code}")
        return None


class TwoFactorOTPProvider:
    """
    2factor.in 短信验证码
    文档: https://2factor.in/API/V1/
    """

    BASE_URL = 'https://2factor.in/API/V1'

    def __init__(self, api_key, timeout=10):
        self.api_key = api_key
        self.timeout = timeout

    def deliver(self, destination, code, ttl_minutes):
        url = f"{self.BASE_URL}/{self.api_key}/SMS/{destination}/{code}"
        try:
            response = requests.get(url, timeout=self.timeout)
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"2factor 短信发送失败: {e}")
            raise DependencyFailure('Failed to send OTP')

        if result.get('Status') != 'Success':
            logger.error(f"2factor 短信发送失败: {result}")
            raise DependencyFailure(result.get('Details') or 'Failed to send OTP')

        logger.info(f"2factor 短信发送成功: {destination}")
        return result.get('Details')


class EmailOTPProvider:
    """通过邮件发送验证码（同步发送，失败即视为挑战失败）"""

    def __init__(self, mailer):
        self.mailer = mailer

    def deliver(self, destination, code, ttl_minutes):
        subject, body = verification_code_email(code, ttl_minutes)
        try:
            self.mailer.send(destination, subject, body)
        except Exception as e:
            logger.error(f"验证码邮件发送失败 ({destination}): {e}")
            raise DependencyFailure('Failed to send verification email')
        return None


class ChallengeIssuer:
    """二次验证挑战：发送验证码并校验（一次性，默认 5 分钟有效）"""

    def __init__(self, code_store, providers, expire_seconds=300, resend_interval=30):
        self.code_store = code_store
        self.providers = providers
        self.expire_seconds = expire_seconds
        self.resend_interval = resend_interval

    @staticmethod
    def generate_code(length=6):
        """生成随机验证码"""
        return ''.join(random.choices(string.digits, k=length))

    def start(self, channel, destination, subject=None):
        """
        发送验证码

        Returns:
            str: 挑战句柄，校验时使用
        """
        if channel not in CHANNELS:
            raise ValidationError(f'Unsupported channel: {channel}', field='channel')
        if not destination:
            raise ValidationError(f'No {channel} on file for this account', field='channel')

        throttle_key = f"last:{channel}:{destination}"
        if self.code_store.get(throttle_key):
            raise ValidationError(f'Please wait {self.resend_interval} seconds before requesting another code',
                                  code='RESEND_TOO_SOON')

        code = self.generate_code()
        provider_ref = self.providers[channel].deliver(destination, code, self.expire_seconds // 60)

        handle = uuid.uuid4().hex
        self.code_store.put(handle, {
            'code': code,
            'channel': channel,
            'destination': destination,
            'subject': subject,
            'provider_ref': provider_ref,
        }, self.expire_seconds)
        self.code_store.put(throttle_key, {'sent': True}, self.resend_interval)
        logger.info(f"验证码已发送 - 渠道: {channel}, 目标: {destination}")
        return handle

    def verify(self, handle, code, subject=None):
        """校验验证码，成功后立即作废"""
        if not handle or not code:
            return False
        record = self.code_store.get(handle)
        if not record:
            return False
        if subject is not None and record.get('subject') != subject:
            return False
        if record.get('code') != str(code).strip():
            return False
        self.code_store.delete(handle)
        return True


def get_challenge_issuer(config, mailer=None):
    """
    根据配置创建挑战服务

    OTP_PROVIDER:
    - demo: 演示模式（开发测试），邮箱和手机都只记录日志
    - 2factor: 手机验证码走 2factor.in，邮箱验证码走邮件
    """
    code_store = CodeStore(config.get('REDIS_URL'))
    provider_type = (config.get('OTP_PROVIDER') or 'demo').lower()

    if provider_type == '2factor':
        api_key = config.get('TWO_FACTOR_API_KEY')
        if not api_key:
            raise ValueError('TWO_FACTOR_API_KEY is required when OTP_PROVIDER=2factor')
        if mailer is None:
            raise ValueError('Mail settings are required when OTP_PROVIDER=2factor')
        providers = {'mobile': TwoFactorOTPProvider(api_key), 'email': EmailOTPProvider(mailer)}
    elif provider_type == 'demo':
        demo = DemoOTPProvider()
        providers = {'mobile': demo, 'email': demo}
    else:
        raise ValueError(f'unknown OTP_PROVIDER: {provider_type}')

    return ChallengeIssuer(code_store, providers)
