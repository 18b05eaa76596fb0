from alttext.core.config import get_config
from alttext.core.logging import setup_logging

__all__ = ["get_config", "setup_logging"]
