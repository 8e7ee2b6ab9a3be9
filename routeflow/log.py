import logging
import os
from typing import Optional

DEFAULT_LABEL = "routeflow"


def setup_logging(level: Optional[str] = None,
                  label: str = DEFAULT_LABEL,
                  log_file: Optional[str] = None) -> None:
    """
    timestamp [label LEVEL] logger: message
    Level falls back to ROUTEFLOW_LOG_LEVEL, then INFO.
    """
    level = (level or os.getenv("ROUTEFLOW_LOG_LEVEL") or "INFO").upper()
    handler = logging.FileHandler(log_file, encoding="utf-8") if log_file else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f"%(asctime)s [{label} %(levelname)s] %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
