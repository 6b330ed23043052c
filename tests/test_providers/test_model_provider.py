"""Tests for model provider."""

import pytest
from unittest.mock import Mock

from modelhost.errors import ResourceError
from modelhost.models.config import ModelsConfig
from modelhost.models.container import ContainerSpec
from modelhost.providers.models import ModelProvider, is_present
from modelhost.models.resource import ModelEntry
from modelhost.utils.process import CommandResult


HEADER = "NAME                                         ID              SIZE      MODIFIED"

REQUIRED = [
    "nomic-embed-text:latest",
    "hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M",
]


class FakeOllama:
    """Stands in for ``ContainerProvider.execute`` against an ollama container."""

    def __init__(self, present=None, failing=None, list_ok=True):
        self.present = list(present or [])
        self.failing = set(failing or [])
        self.list_ok = list_ok
        self.commands = []

    async def __call__(self, spec, command, timeout=None):
        self.commands.append(command)
        if command == ["ollama", "list"]:
            if not self.list_ok:
                return CommandResult(returncode=1, stderr="could not connect to ollama app")
            rows = [f"{name}    0a109f422b47    274 MB    2 days ago" for name in self.present]
            return CommandResult(returncode=0, stdout="\n".join([HEADER, *rows]) + "\n")
        if command[:2] == ["ollama", "pull"]:
            name = command[2]
            if name in self.failing:
                return CommandResult(returncode=1, stderr="pull model manifest: file does not exist")
            self.present.append(name)
            return CommandResult(returncode=0)
        return CommandResult(returncode=127)

    @property
    def pulls(self):
        return [c[2] for c in self.commands if c[:2] == ["ollama", "pull"]]

    @property
    def listings(self):
        return [c for c in self.commands if c == ["ollama", "list"]]


@pytest.fixture
def spec():
    return ContainerSpec(name="ollama", image="ollama/ollama:latest")


def make_provider(fake):
    provider = ModelProvider()
    provider.config = ModelsConfig()
    provider._container_provider = Mock(execute=fake)
    return provider


class TestIsPresent:
    """Test qualifier-insensitive matching."""

    def test_unqualified_present_satisfies_qualified(self):
        assert is_present("foo:v1", [ModelEntry(name="foo")])

    def test_different_tag_still_matches(self):
        assert is_present("foo:v1", [ModelEntry(name="foo:latest")])

    def test_case_insensitive(self):
        assert is_present(
            "hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M",
            [ModelEntry(name="hf.co/limcheekin/coderankembed-gguf:Q4_K_M")],
        )

    def test_different_base_name(self):
        assert not is_present("foo:v1", [ModelEntry(name="foobar:v1")])
        assert not is_present("foo", [])


@pytest.mark.asyncio
class TestEnsureModels:
    """Test model reconciliation."""

    async def test_pulls_all_missing(self, spec):
        """Test both declared models are pulled into an empty service."""
        fake = FakeOllama()
        provider = make_provider(fake)

        pulled = await provider.ensure_models(spec, REQUIRED)

        assert pulled == REQUIRED
        assert fake.pulls == REQUIRED
        assert len(fake.listings) == 1

    async def test_skips_present_models(self, spec):
        """Test a present model with another tag is not pulled again."""
        fake = FakeOllama(present=["nomic-embed-text:v1.5"])
        provider = make_provider(fake)

        pulled = await provider.ensure_models(spec, REQUIRED)

        assert pulled == ["hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M"]

    async def test_second_call_is_idempotent(self, spec):
        """Test a repeat call only lists."""
        fake = FakeOllama()
        provider = make_provider(fake)

        await provider.ensure_models(spec, REQUIRED)
        fake.commands.clear()

        pulled = await provider.ensure_models(spec, REQUIRED)

        assert pulled == []
        assert fake.commands == [["ollama", "list"]]

    async def test_first_failure_halts(self, spec):
        """Test fail-fast on a model that cannot be pulled."""
        fake = FakeOllama(failing={"nomic-embed-text:latest"})
        provider = make_provider(fake)

        with pytest.raises(ResourceError) as exc_info:
            await provider.ensure_models(spec, REQUIRED)

        assert exc_info.value.name == "nomic-embed-text:latest"
        assert "Failed to pull model nomic-embed-text:latest" in str(exc_info.value)
        assert fake.pulls == ["nomic-embed-text:latest"]

    async def test_listing_failure_pulls_everything(self, spec):
        """Test an unreadable listing counts as empty."""
        fake = FakeOllama(list_ok=False)
        provider = make_provider(fake)

        pulled = await provider.ensure_models(spec, REQUIRED)

        assert pulled == REQUIRED

    async def test_pull_uses_exact_name(self, spec):
        """Test the qualified name is passed verbatim to pull."""
        fake = FakeOllama()
        provider = make_provider(fake)

        await provider.pull(spec, "hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M")

        assert fake.commands == [["ollama", "pull", "hf.co/limcheekin/CodeRankEmbed-GGUF:Q4_K_M"]]

