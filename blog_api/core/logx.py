import logging
from pathlib import Path
from typing import Optional

from blog_api.core.config import settings


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """
    配置 blog_api 日志：
    - 控制台输出
    - 可选文件输出（LOG_FILE）
    - 重复调用不会重复挂 handler
    """
    log = logging.getLogger("blog_api")
    if log.handlers:
        return log

    log.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    return log


logger = setup_logging(settings.log_level, settings.log_file or None)
