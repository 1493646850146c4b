"""
Dependency injection container for yolo-prep.
Wires services together by the types in their constructor signatures.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type, TypeVar, get_type_hints
from pathlib import Path
import inspect
import sys
from dataclasses import dataclass

from .interfaces import IConfigService, IDatasetService, IImageService, ILogger, IReviewService
from .config_service import ConfigService
from .dataset_service import DatasetService
from .image_service import ImageService
from .logging_service import LoggingService, LogLevel
from .review_service import ReviewService

T = TypeVar("T")


@dataclass
class ServiceRegistration:
    """Registration information for a service."""

    service_type: Type
    implementation: Optional[Type]
    factory: Optional[Callable] = None


class ServiceContainer:
    """Dependency injection container."""

    def __init__(self):
        self._registrations: Dict[str, ServiceRegistration] = {}
        self._instances: Dict[str, Any] = {}
        self._building: set[str] = set()  # circular dependency detection

    # ------------------------------------------------------------------
    # Registration helpers
    # ------------------------------------------------------------------
    def register_singleton(self, service_type: Type[T], implementation: Type[T]) -> "ServiceContainer":
        key = self._get_service_key(service_type)
        self._registrations[key] = ServiceRegistration(service_type, implementation)
        return self

    def register_factory(self, service_type: Type[T], factory: Callable[..., T]) -> "ServiceContainer":
        key = self._get_service_key(service_type)
        self._registrations[key] = ServiceRegistration(service_type, None, factory=factory)
        return self

    def register_instance(self, service_type: Type[T], instance: T) -> "ServiceContainer":
        self._instances[self._get_service_key(service_type)] = instance
        return self

    # ------------------------------------------------------------------
    # Resolution API
    # ------------------------------------------------------------------
    def get(self, service_type: Type[T]) -> T:
        key = self._get_service_key(service_type)

        if key in self._instances:
            return self._instances[key]

        if key not in self._registrations:
            raise ValueError(f"Service {service_type.__name__} is not registered")

        if key in self._building:
            raise ValueError(f"Circular dependency detected for service {service_type.__name__}")

        registration = self._registrations[key]
        try:
            self._building.add(key)
            if registration.factory:
                instance = self._call_with_dependencies(registration.factory, registration.factory)
            else:
                impl = registration.implementation
                instance = self._call_with_dependencies(impl, impl.__init__, skip_self=True)
            self._instances[key] = instance
            return instance
        finally:
            self._building.discard(key)

    def _call_with_dependencies(self, target: Callable, signature_of: Callable, skip_self: bool = False) -> Any:
        sig = inspect.signature(signature_of)
        module = sys.modules.get(getattr(target, "__module__", ""), None)
        globalns = vars(module) if module else {}
        try:
            type_hints = get_type_hints(signature_of, globalns=globalns)
        except (NameError, TypeError):
            type_hints = {}

        kwargs: Dict[str, Any] = {}
        for param_name, param in sig.parameters.items():
            if skip_self and param_name == "self":
                continue
            annotation = type_hints.get(param_name, param.annotation)
            dependency_type = annotation if isinstance(annotation, type) else None
            if dependency_type is None or not self.is_registered(dependency_type):
                if param.default is inspect.Parameter.empty and param.kind not in (
                    inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD
                ):
                    raise ValueError(
                        f"Cannot resolve dependency {param_name!r} for {getattr(target, '__name__', target)}"
                    )
                continue
            kwargs[param_name] = self.get(dependency_type)
        return target(**kwargs)

    # ------------------------------------------------------------------
    # Registry helpers
    # ------------------------------------------------------------------
    def _get_service_key(self, service_type: Type) -> str:
        if not hasattr(service_type, "__module__") or not hasattr(service_type, "__name__"):
            raise TypeError(f"Service key expects a type, got {service_type!r}")
        return f"{service_type.__module__}.{service_type.__name__}"

    def is_registered(self, service_type: Type) -> bool:
        try:
            key = self._get_service_key(service_type)
        except TypeError:
            return False
        return key in self._registrations or key in self._instances



class ServiceContainerBuilder:
    """Builder for configuring the service container."""

    def __init__(self):
        self._container = ServiceContainer()

    def configure_default_services(self) -> "ServiceContainerBuilder":
        if not self._container.is_registered(ILogger):
            self.configure_logging()
        if not self._container.is_registered(IConfigService):
            self._container.register_singleton(IConfigService, ConfigService)
        self._container.register_singleton(IImageService, ImageService)
        self._container.register_singleton(IDatasetService, DatasetService)
        self._container.register_singleton(IReviewService, ReviewService)
        return self

    def configure_logging(
        self,
        log_file: Optional[Path] = None,
        console_level: LogLevel = LogLevel.INFO,
        file_level: LogLevel = LogLevel.DEBUG,
    ) -> "ServiceContainerBuilder":
        self._container.register_factory(
            ILogger,
            lambda: LoggingService("yolo_prep", log_file, console_level, file_level),
        )
        return self

    def configure_config(self, config_dir: Path) -> "ServiceContainerBuilder":
        def config_factory(logger: ILogger) -> IConfigService:
            return ConfigService(logger, config_dir)

        self._container.register_factory(IConfigService, config_factory)
        return self

    def add_instance(self, service_type: Type[T], instance: T) -> "ServiceContainerBuilder":
        self._container.register_instance(service_type, instance)
        return self

    def build(self) -> ServiceContainer:
        return self._container


# Global container instance
_global_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    global _global_container
    if _global_container is None:
        _global_container = ServiceContainerBuilder().configure_default_services().build()
    return _global_container


def set_container(container: ServiceContainer) -> None:
    global _global_container
    _global_container = container


def get_service(service_type: Type[T]) -> T:
    return get_container().get(service_type)


def configure_services(
    log_file: Optional[Path] = None,
    config_dir: Optional[Path] = None,
    console_level: LogLevel = LogLevel.INFO,
) -> ServiceContainer:
    builder = ServiceContainerBuilder().configure_logging(log_file, console_level)
    if config_dir:
        builder.configure_config(config_dir)
    container = builder.configure_default_services().build()
    set_container(container)
    return container
