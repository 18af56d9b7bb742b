from .config_repository import ConfigRepository
from .deletion_log_repository import DeletionLogRepository

__all__ = [
    'ConfigRepository',
    'DeletionLogRepository'
]
