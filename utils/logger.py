"""
日志工具模块
提供统一的日志配置和获取方法

控制台输出走 stderr，stdout 只留给报警行
"""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime


# 日志目录
LOG_DIR = Path(os.getenv('HEALTH_AGENT_LOG_DIR', './logs'))

# 日志格式
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 全局日志级别
LOG_LEVEL = logging.INFO

# 用于存储已创建的 logger，避免重复配置
_loggers = {}


def getLogger(name: str, level: int | None = None) -> logging.Logger:
    """
    获取配置好的 logger 实例

    Args:
        name: logger 名称，通常使用模块名
        level: 日志级别，默认使用全局配置的 LOG_LEVEL

    Returns:
        logging.Logger: 配置好的 logger 实例
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else LOG_LEVEL)

    # 防止日志向上传播到根 logger（避免重复输出）
    logger.propagate = False
    logger.handlers.clear()

    # 1. 控制台处理器（诊断信息 -> stderr）
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    # 2. 文件处理器 - 每个 logger 独立的日志文件，单个最大 10MB，保留 5 个备份
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    safe_name = name.replace('.', '_').replace('/', '_').replace('\\', '_')
    file_handler = RotatingFileHandler(
        LOG_DIR / f'{safe_name}.log',
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8',
        delay=True,
    )
    file_handler.setLevel(LOG_LEVEL)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    _loggers[name] = logger
    return logger


def set_global_log_level(level: int):
    """
    设置全局日志级别，并更新所有已创建的 logger

    Args:
        level: logging.DEBUG / INFO / WARNING / ERROR / CRITICAL
    """
    global LOG_LEVEL
    LOG_LEVEL = level

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def clear_old_logs(days: int = 7) -> int:
    """
    清理指定天数之前的日志文件，返回删除的文件数

    Args:
        days: 保留最近多少天的日志，默认 7 天
    """
    if not LOG_DIR.exists():
        return 0

    removed = 0
    current_time = datetime.now()
    for log_file in LOG_DIR.glob('*.log*'):
        if not log_file.is_file():
            continue
        age_days = (current_time - datetime.fromtimestamp(log_file.stat().st_mtime)).days
        if age_days > days:
            try:
                log_file.unlink()
                removed += 1
            except OSError:
                getLogger(__name__).warning('删除日志文件失败 %s', log_file, exc_info=True)
    return removed
