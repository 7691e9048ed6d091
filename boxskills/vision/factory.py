"""Factory pattern for creating annotation service instances."""

import logging
from typing import Dict, Type

from boxskills.vision.base import AnnotationService
from boxskills.vision.google import GoogleVisionAnnotator
from boxskills.vision.exceptions import AnnotationError

logger = logging.getLogger(__name__)


class VisionServiceFactory:
    """Factory for creating annotation service instances.
    
    Services are looked up by provider name in a registry so that
    additional annotation backends can be plugged in through configuration.
    """
    
    # Registry of available service classes
    _service_registry: Dict[str, Type[AnnotationService]] = {
        "google-cloud-vision": GoogleVisionAnnotator,
    }
    
    @classmethod
    def create(cls, provider: str, **kwargs) -> AnnotationService:
        """Create an annotation service instance.
        
        Args:
            provider: Name of the provider to create
            **kwargs: Provider-specific configuration
            
        Returns:
            AnnotationService instance
            
        Raises:
            AnnotationError: If provider is not supported or cannot be created
            
        Examples:
            >>> service = VisionServiceFactory.create("google-cloud-vision", project_id="my-project")
        """
        provider_lower = provider.lower().strip()
        
        if provider_lower not in cls._service_registry:
            available = ", ".join(cls._service_registry.keys())
            raise AnnotationError(
                f"Unsupported annotation provider: {provider}. "
                f"Available providers: {available}"
            )
        
        service_class = cls._service_registry[provider_lower]
        
        logger.info(f"Creating {service_class.__name__} instance for provider: {provider}")
        
        try:
            return service_class(model_name=provider_lower, **kwargs)
        except AnnotationError:
            raise
        except Exception as e:
            raise AnnotationError(
                f"Failed to create annotation service {provider}: {e}"
            ) from e
    
    @classmethod
    def create_from_config(cls, config) -> AnnotationService:
        """Create the configured annotation service.
        
        Args:
            config: ConfigManager with ``annotation.*`` and ``google.*`` settings
            
        Returns:
            AnnotationService instance
        """
        return cls.create(
            config.get("annotation.provider", "google-cloud-vision"),
            project_id=config.get("google.project_id"),
            client_email=config.get("google.client_email"),
            private_key=config.get("google.private_key"),
            token_uri=config.get("google.token_uri"),
            features=config.get("annotation.features"),
            timeout=config.get("annotation.timeout", 60),
            max_image_bytes=config.get("annotation.max_image_bytes", 0),
            jpeg_quality=config.get("annotation.jpeg_quality", 85),
        )
    
    @classmethod
    def register_service(cls, name: str, service_class: Type[AnnotationService]) -> None:
        """Register a new service class with the factory.
        
        Args:
            name: Provider name identifier
            service_class: AnnotationService subclass to register
        """
        if not issubclass(service_class, AnnotationService):
            raise AnnotationError(
                f"Service class must be a subclass of AnnotationService: {service_class}"
            )
        
        cls._service_registry[name.lower()] = service_class
        logger.debug(f"Registered annotation service: {name} -> {service_class.__name__}")
    
    @classmethod
    def list_providers(cls) -> list:
        """List all available provider names."""
        return list(cls._service_registry.keys())
