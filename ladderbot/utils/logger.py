import logging
import sys
from datetime import datetime
from pathlib import Path

from ladderbot.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str) -> logging.Logger:
    """
    Get a logger for name with the batch engine's handlers attached.

    Console output follows DEBUG. Every record also goes to a daily audit
    file under Config.LOG_DIR unless LOG_DIR is empty. Calling this for the
    "ladderbot" package logger also covers modules that use plain
    logging.getLogger(__name__).
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if Config.LOG_DIR:
        logger.addHandler(_daily_file_handler(Path(Config.LOG_DIR), formatter))

    return logger


def _daily_file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.FileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(
        log_dir / f'ladder_batch_{datetime.now().strftime("%Y%m%d")}.log',
        encoding='utf-8'
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler
