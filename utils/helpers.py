#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 辅助函数
"""

import os
import re
import uuid
import hmac
import random
import hashlib
import time
from datetime import datetime, date

# 运动员编号起始值：第 1 位运动员为 P100001
PLAYER_ID_BASE = 100000


def generate_unique_filename(filename):
    """生成唯一的文件名"""
    if filename:
        # 获取文件扩展名
        ext = os.path.splitext(filename)[1]
        # 生成唯一标识符
        unique_id = str(uuid.uuid4())
        # 生成时间戳
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"{timestamp}_{unique_id}{ext}"
    return None

def current_millis():
    return int(time.time() * 1000)

def generate_registration_number(now_ms=None):
    """生成报名编号

    格式: REG-<毫秒时间戳><3位随机数>，同一毫秒内的并发提交也不易重复，
    最终唯一性由数据库唯一索引保证。
    """
    now_ms = current_millis() if now_ms is None else now_ms
    return f"REG-{now_ms}{random.randint(0, 999):03d}"

def generate_order_id(now_ms=None):
    """生成手动付款订单号"""
    now_ms = current_millis() if now_ms is None else now_ms
    return f"MANUAL_{now_ms}"

def format_player_id(sequence):
    """将序号格式化为运动员编号，如 1 -> P100001"""
    return f"P{PLAYER_ID_BASE + int(sequence)}"

def parse_date(value):
    """解析日期（支持 YYYY-MM-DD、DD-MM-YYYY、DD/MM/YYYY 及 ISO 时间）"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in ('%Y-%m-%d', '%d-%m-%Y', '%d/%m/%Y', '%Y/%m/%d'):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(text.replace('Z', '')).date()
    except ValueError:
        return None

def calculate_age(birth_date):
    """计算年龄"""
    if not birth_date:
        return None

    today = datetime.now().date()
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()

    age = today.year - birth_date.year
    if today.month < birth_date.month or (today.month == birth_date.month and today.day < birth_date.day):
        age -= 1

    return age

def default_player_password(dob):
    """运动员未设置密码时，默认密码为出生日期 DDMMYYYY"""
    return dob.strftime('%d%m%Y')

def validate_email(email):
    """验证邮箱格式"""
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return re.match(pattern, email) is not None

def validate_phone(phone):
    """验证手机号格式（印度 10 位手机号）"""
    if not phone:
        return False

    pattern = r'^[6-9]\d{9}$'
    return re.match(pattern, str(phone)) is not None

def validate_aadhaar(aadhaar):
    """验证 Aadhaar 证件号（12 位数字）"""
    if not aadhaar:
        return False
    return re.match(r'^\d{12}$', str(aadhaar)) is not None

def generate_password_hash(password, salt_length=16):
    """生成密码哈希

    返回 salt+hash 的十六进制字符串（仅包含 ASCII 字符），以避免在 utf8mb4 连接下
    向 MySQL 发送任意二进制数据。
    """
    # 生成随机盐
    salt = os.urandom(salt_length)
    # 使用 PBKDF2 算法生成哈希
    password_hash = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, 100000)
    # 拼接盐和哈希后以十六进制字符串形式返回
    data = salt + password_hash
    return data.hex()

def verify_password(password, password_hash):
    """验证密码（salt+hash 的十六进制字符串）"""
    if not password or not password_hash:
        return False

    if isinstance(password_hash, (bytes, bytearray)):
        try:
            password_hash = password_hash.decode('ascii')
        except UnicodeDecodeError:
            return False

    try:
        raw = bytes.fromhex(password_hash)
    except ValueError:
        return False

    # 原始数据至少应包含 16 字节盐 + 32 字节哈希
    if len(raw) < 16 + 32:
        return False

    salt = raw[:16]
    stored_hash = raw[16:]
    computed_hash = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, 100000)
    return hmac.compare_digest(computed_hash, stored_hash)
