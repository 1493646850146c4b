"""
Services package for yolo-prep.
Service classes wrap the core build and review logic behind small
interfaces so front ends never touch the filesystem layout directly.
"""

# Interfaces
from .interfaces import (
    IConfigService, IDatasetService, IImageService, ILogger, IReviewService, BuildSummary
)

# Concrete implementations
from .config_service import ConfigService, BuildDefaults
from .dataset_service import DatasetService
from .image_service import ImageService
from .logging_service import LoggingService, LogLevel, NullLogger, MemoryLogger
from .review_service import ReviewService
from .container import (
    ServiceContainer, ServiceContainerBuilder,
    get_container, set_container, get_service, configure_services
)

__all__ = [
    # Interfaces
    'IConfigService', 'IDatasetService', 'IImageService', 'ILogger', 'IReviewService',
    'BuildSummary',

    # Implementations
    'ConfigService', 'DatasetService', 'ImageService', 'LoggingService', 'ReviewService',

    # Configuration classes
    'BuildDefaults',

    # Logging utilities
    'LogLevel', 'NullLogger', 'MemoryLogger',

    # Dependency injection
    'ServiceContainer', 'ServiceContainerBuilder',
    'get_container', 'set_container', 'get_service', 'configure_services',
]
