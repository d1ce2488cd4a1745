# totp_engine/logger.py - Configuration du logging

import logging
import sys
from logging.handlers import RotatingFileHandler
from datetime import datetime

from totp_engine import config


def setup_logger(name=config.APP_NAME, log_level=None):
    """Configure le système de logging"""
    if log_level is None:
        log_level = config.log_level()

    log_dir = config.log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    # Nom du fichier avec la date du jour
    log_file = log_dir / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Éviter les handlers multiples
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-12s | %(funcName)-20s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Handler pour fichier avec rotation (max 10MB, 5 fichiers)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    # Console moins verbeuse
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(levelname)-8s | %(name)-12s | %(message)s'
    ))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.debug(f"Logging initialized - Log file: {log_file}")

    return logger

# Instance globale
app_logger = setup_logger()
