import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "dial_client"


class JsonFormatter(logging.Formatter):
    def __init__(self, redact_content: bool = False):
        super().__init__()
        self._redact_content = redact_content

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self._redact_content:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, ensure_ascii=False)


def setup_logger(log_dir: Optional[Union[str, Path]] = None, redact_content: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    if log_dir is None:
        # 库默认不写文件，由 CLI 按配置开启
        logger.addHandler(logging.NullHandler())
        return logger
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(path / "dial_client.log", encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(JsonFormatter(redact_content))
    logger.addHandler(fh)
    return logger


logger = setup_logger()
