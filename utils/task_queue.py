#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
体育赛事报名平台 - 后台任务派发

邮件、站内通知等副作用以任务形式提交，请求在任务入队后立即返回，
任务结果只记录日志，不影响主流程。
"""

import concurrent.futures
import logging

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """基于线程池的后台任务派发器"""

    def __init__(self, max_workers=4, thread_name_prefix='dispatch'):
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )

    def submit(self, description, func, *args, **kwargs):
        """提交任务并返回 Future，失败只记录日志"""
        future = self._executor.submit(func, *args, **kwargs)
        future.add_done_callback(lambda f: _log_outcome(description, f))
        return future

    def shutdown(self, wait=True):
        self._executor.shutdown(wait=wait)


class InlineDispatcher:
    """同步执行任务（测试环境使用），异常同样只记录日志"""

    def submit(self, description, func, *args, **kwargs):
        future = concurrent.futures.Future()
        try:
            future.set_result(func(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        _log_outcome(description, future)
        return future

    def shutdown(self, wait=True):
        pass


def _log_outcome(description, future):
    exc = future.exception()
    if exc is not None:
        logger.error(f"后台任务失败 [{description}]: {exc}", exc_info=exc)
    else:
        logger.debug(f"后台任务完成 [{description}]")


def create_dispatcher(config):
    """根据 DISPATCH_MODE 创建派发器"""
    mode = (config.get('DISPATCH_MODE') or 'background').lower()
    if mode == 'inline':
        return InlineDispatcher()
    if mode == 'background':
        return BackgroundDispatcher(max_workers=config.get('DISPATCH_WORKERS', 4))
    raise ValueError(f'unknown DISPATCH_MODE: {mode}')
