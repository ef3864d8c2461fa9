"""
日志配置模块
统一管理4类日志：
1. job_lifecycle/ - 校验作业生命周期日志（事件驱动）
2. link_probe/ - 链接探测过程日志（事件驱动）
3. error/ - 错误日志（Infrastructure层直接调用）
4. performance/ - 性能监控日志（Infrastructure层直接调用）

文件命名格式：{日期}_{日志类型}.log
例如：2026-10-18_job_lifecycle.log
"""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from datetime import datetime
from typing import Optional, Union


# 日志类型 -> (Logger名称, 保留天数)
_LOG_TYPES = {
    'job_lifecycle': ('domain.job_lifecycle', 30),
    'link_probe': ('domain.link_probe', 30),
    'error': ('infrastructure.error', 30),
    'performance': ('infrastructure.perf', 7),
}


def setup_logging(log_dir: Optional[Union[str, Path]] = None, console_level: str = 'INFO') -> Path:
    """
    初始化并配置所有logger
    应在进程启动时调用：setup_logging()

    参数:
        log_dir: 日志根目录，默认 backend/logs/
        console_level: 控制台输出级别

    返回:
        实际使用的日志根目录
    """
    if log_dir is None:
        backend_dir = Path(__file__).resolve().parent.parent.parent
        log_root_dir = backend_dir / 'logs'
    else:
        log_root_dir = Path(log_dir)

    # 当前日期（用于初始文件名）
    today = datetime.now().strftime('%Y-%m-%d')

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
            'level': console_level
        }
    }
    for log_type, (_, backup_count) in _LOG_TYPES.items():
        type_dir = log_root_dir / log_type
        type_dir.mkdir(parents=True, exist_ok=True)
        handlers[f'{log_type}_file'] = {
            'class': 'logging.handlers.TimedRotatingFileHandler',
            'filename': str(type_dir / f'{today}_{log_type}.log'),
            'when': 'MIDNIGHT',         # 每天午夜切换
            'interval': 1,
            'backupCount': backup_count,
            'encoding': 'utf-8',
            'formatter': 'json'
        }

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,

        # ==================== 格式化器 ====================
        'formatters': {
            'json': {
                '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                'timestamp': True
            },
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },

        'handlers': handlers,

        # ==================== Logger配置 ====================
        'loggers': {
            # 业务日志（由 EventHandler 使用）
            'domain.job_lifecycle': {
                'handlers': ['job_lifecycle_file', 'console'],
                'level': 'INFO',
                'propagate': False
            },
            'domain.link_probe': {
                'handlers': ['link_probe_file', 'console'],
                'level': 'INFO',
                'propagate': False
            },
            # 技术日志（Infrastructure层直接使用）
            'infrastructure.error': {
                'handlers': ['error_file', 'console'],
                'level': 'ERROR',
                'propagate': False
            },
            'infrastructure.perf': {
                'handlers': ['performance_file'],
                'level': 'INFO',
                'propagate': False
            }
        },

        # 根Logger（兜底）
        'root': {
            'level': 'INFO',
            'handlers': ['console']
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)

    # 自定义文件命名（实现日期前缀命名）
    _setup_custom_namer()

    logger = get_job_lifecycle_logger()
    logger.info("日志系统初始化完成", extra={
        'log_root_dir': str(log_root_dir),
        'directories': {log_type: str(log_root_dir / log_type) for log_type in _LOG_TYPES}
    })
    return log_root_dir


def date_prefixed_name(default_name: str) -> str:
    """
    将TimedRotatingFileHandler的默认命名转换为日期前缀格式

    /logs/job_lifecycle/2026-10-18_job_lifecycle.log.2026-10-17
    转换为：
    /logs/job_lifecycle/2026-10-17_job_lifecycle.log
    """
    path = Path(default_name)
    parts = path.name.split('.')

    # 格式：2026-10-18_job_lifecycle.log.2026-10-17
    if len(parts) == 3 and parts[1] == 'log' and '_' in parts[0]:
        log_type = parts[0].split('_', 1)[1]
        date_suffix = parts[2]
        return str(path.parent / f"{date_suffix}_{log_type}.log")

    return default_name


def _setup_custom_namer():
    """为所有TimedRotatingFileHandler设置日期前缀命名规则"""
    for logger_name, _ in _LOG_TYPES.values():
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers:
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
                handler.namer = date_prefixed_name


# ==================== 便捷获取Logger的函数 ====================

def get_job_lifecycle_logger() -> logging.Logger:
    """获取作业生命周期日志Logger（EventHandler使用）"""
    return logging.getLogger('domain.job_lifecycle')


def get_link_probe_logger() -> logging.Logger:
    """获取链接探测日志Logger（EventHandler使用）"""
    return logging.getLogger('domain.link_probe')


def get_error_logger() -> logging.Logger:
    """获取错误日志Logger（Infrastructure层使用）"""
    return logging.getLogger('infrastructure.error')


def get_performance_logger() -> logging.Logger:
    """获取性能监控日志Logger（Infrastructure层使用）"""
    return logging.getLogger('infrastructure.perf')
