"""Tests for ProviderRegistry."""

import pytest
from unittest.mock import Mock

from modelhost.models.config import ModelhostConfig
from modelhost.providers.base import BaseProvider
from modelhost.providers.container import ContainerProvider
from modelhost.providers.image import ImageProvider
from modelhost.providers.models import ModelProvider
from modelhost.providers.registry import ProviderRegistry


class MockProvider(BaseProvider):
    """Mock provider for testing registry."""

    def __init__(self):
        self.initialized = False
        self.registry_ref = None
        self.config_ref = None

    async def initialize(self, config, registry):
        self.initialized = True
        self.config_ref = config
        self.registry_ref = registry


class TestProviderRegistry:
    """Test ProviderRegistry initialization and injection."""

    @pytest.mark.asyncio
    async def test_initialization_injection(self):
        """Test that registry injects itself into providers."""
        registry = ProviderRegistry()
        registry._provider_classes = {"mock": MockProvider}

        mock_config = Mock()
        await registry.initialize(mock_config)

        provider = registry.get_provider("mock")
        assert isinstance(provider, MockProvider)
        assert provider.initialized is True
        assert provider.config_ref == mock_config
        assert provider.registry_ref == registry

    @pytest.mark.asyncio
    async def test_default_providers_are_wired(self):
        """Test peers are injected across providers."""
        registry = ProviderRegistry()
        await registry.initialize(ModelhostConfig())

        for name in ("runtime", "image", "container", "models"):
            assert registry.get_provider(name) is not None

        container = registry.get_provider("container")
        models = registry.get_provider("models")
        assert isinstance(container, ContainerProvider)
        assert isinstance(container.image_provider, ImageProvider)
        assert isinstance(models, ModelProvider)
        assert models.container_provider is container
        assert registry.get_provider("nonexistent") is None

    def test_no_providers_before_init(self):
        """Test that providers only exist after initialization."""
        registry = ProviderRegistry()
        assert registry.get_provider("container") is None
