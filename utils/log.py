# -*- coding: utf-8 -*-
import logging
import structlog

from config import LOG_LEVEL, LOG_JSON


def configure_logging(level: str = LOG_LEVEL, json: bool = LOG_JSON) -> None:
    """
    初始化标准 logging 与 structlog：ISO 时间戳 + key/value 事件。
    json=True 时输出 JSON 行（方便收集），否则用控制台格式。
    """
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO))
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
