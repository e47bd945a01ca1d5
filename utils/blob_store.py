#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 文件存储

付款截图、赛事海报、证明文件等以 data URL (base64) 形式随请求提交，
这里负责解码并保存，返回可访问的 URL。
"""

import os
import re
import base64
import binascii
import logging
import mimetypes

from werkzeug.utils import secure_filename

from utils.errors import ValidationError, DependencyFailure
from utils.helpers import generate_unique_filename

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$', re.DOTALL)

EXTENSION_OVERRIDES = {
    'image/jpeg': '.jpg',
    'application/pdf': '.pdf',
}


def is_allowed_content_type(content_type):
    """只接受图片和 PDF"""
    return content_type.startswith('image/') or content_type == 'application/pdf'


def decode_data_url(data_url, field=None):
    """解析 data:<mime>;base64,<payload>，返回 (bytes, mime)"""
    if not isinstance(data_url, str):
        raise ValidationError('File must be a base64 data URL', field=field)
    match = DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ValidationError('File must be a base64 data URL', field=field)

    content_type = match.group('mime').lower()
    if not is_allowed_content_type(content_type):
        raise ValidationError(f'Unsupported file type: {content_type}', field=field)

    try:
        payload = base64.b64decode(match.group('data'), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError('File content is not valid base64', field=field)
    if not payload:
        raise ValidationError('File is empty', field=field)
    return payload, content_type


class BlobStore:
    """文件存储接口"""

    def put(self, payload, content_type, location_hint):
        raise NotImplementedError

    def store_data_url(self, data_url, location_hint, field=None):
        payload, content_type = decode_data_url(data_url, field=field)
        return self.put(payload, content_type, location_hint)


class LocalBlobStore(BlobStore):
    """保存到本地上传目录，由 /uploads/<path> 提供访问"""

    def __init__(self, root_folder, url_prefix='/uploads'):
        self.root_folder = root_folder
        self.url_prefix = url_prefix.rstrip('/')

    def put(self, payload, content_type, location_hint):
        parts = [secure_filename(p) for p in str(location_hint or '').split('/')]
        parts = [p for p in parts if p]
        ext = EXTENSION_OVERRIDES.get(content_type) or mimetypes.guess_extension(content_type) or ''
        filename = generate_unique_filename(f"upload{ext}")
        relative_path = '/'.join(parts + [filename])

        folder = os.path.join(self.root_folder, *parts)
        try:
            os.makedirs(folder, exist_ok=True)
            with open(os.path.join(folder, filename), 'wb') as f:
                f.write(payload)
        except OSError as e:
            logger.error(f"文件保存失败 ({relative_path}): {e}")
            raise DependencyFailure('Failed to store uploaded file')

        logger.info(f"文件已保存: {relative_path} ({len(payload)} bytes)")
        return f"{self.url_prefix}/{relative_path}"
