from .asset import Asset
from .component import Component
from .config import NexusSettings, RetentionConfig
from .deletion_record import DeletionRecord
from .repository import Repository
from .retention_summary import RetentionSummary
from .rule import Rule

__all__ = [
    "Asset",
    "Component",
    "DeletionRecord",
    "NexusSettings",
    "Repository",
    "RetentionConfig",
    "RetentionSummary",
    "Rule",
]
