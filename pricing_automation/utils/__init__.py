from .logger import setup_logging
from .registry import Registry

__all__ = ["setup_logging", "Registry"]
