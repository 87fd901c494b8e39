# utils/logging_factory.py

import logging
import os


class LoggerFactory:
    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

        if not logger.handlers:
            formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

            # Console handler
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # File handler (desligado com LOG_TO_FILE=false)
            if os.getenv("LOG_TO_FILE", "true").lower() != "false":
                log_dir = os.getenv("LOG_DIR", "logs")
                os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), encoding="utf-8")
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

        return logger
