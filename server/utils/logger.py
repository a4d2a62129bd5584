# Logging setup
# Console + rotating file handlers driven by the "logging" config section

import logging
import logging.handlers
import os
from typing import Dict, Any

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore")


def _parse_size(size_str: str) -> int:
    """Parse a size string such as '10MB' into bytes"""
    size_str = str(size_str).strip().upper()

    if size_str.endswith('KB'):
        return int(size_str[:-2]) * 1024
    elif size_str.endswith('MB'):
        return int(size_str[:-2]) * 1024 * 1024
    elif size_str.endswith('GB'):
        return int(size_str[:-2]) * 1024 * 1024 * 1024
    else:
        return int(size_str)


def _resolve_log_path(file_path: str) -> str:
    if os.path.isabs(file_path):
        return file_path
    server_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(server_dir, file_path)


def setup_logging(config: Dict[str, Any]):
    """
    Configure the root logger from config.

    Args:
        config: Full config dict; only the "logging" section is read
    """
    log_config = config.get('logging', {})
    level_name = str(log_config.get('level', 'INFO')).upper()

    logger = logging.getLogger()

    # Drop handlers left over from a previous setup (reloads, tests)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(log_config.get('format',
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_config.get('file_enabled', True):
        file_path = _resolve_log_path(log_config.get('file_path', 'logs/app.log'))
        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=_parse_size(log_config.get('max_file_size', '10MB')),
            backupCount=int(log_config.get('backup_count', 5)),
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging initialised, level: {level_name}")
