"""Repository package: expose all concrete repositories from one import."""
from .base import atomic_write
from .csv_codec import RecordCodec
from .catalog_repository import CatalogRepository
from .config_repository import ConfigRepository

__all__ = [
    'atomic_write',
    'RecordCodec',
    'CatalogRepository',
    'ConfigRepository',
]
