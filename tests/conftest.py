"""Pytest configuration for Card Pet tests."""
from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
import pytest

from custom_components.cardpet.const import DOMAIN


class SequenceRng:
    """Random source that replays fixed draws."""

    def __init__(self, *values: float):
        self._values = list(values)
        self.calls = 0

    def __call__(self) -> float:
        value = self._values[min(self.calls, len(self._values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def mock_config_entry():
    """Return a mock config entry."""
    entry = Mock(spec=ConfigEntry)
    entry.entry_id = "test_entry_id"
    entry.domain = DOMAIN
    entry.data = {"owners": "alice,bob"}
    entry.options = {}
    return entry


@pytest.fixture
def mock_hass():
    """Return a mock Home Assistant instance."""
    hass = Mock(spec=HomeAssistant)
    hass.data = {}
    hass.config_entries = Mock()
    hass.services = Mock()
    hass.states = Mock()
    hass.bus = Mock()

    # Mock async methods
    hass.config_entries.async_forward_entry_setups = AsyncMock(return_value=True)
    hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    hass.services.async_register = Mock()
    hass.services.async_remove = Mock()
    hass.services.async_call = AsyncMock()

    return hass


@pytest.fixture
def mock_storage_data():
    """Return mock storage data."""
    return {
        "cards": {
            "card-1": {
                "id": "card-1",
                "owner_id": "alice",
                "name": "Jane Doe",
                "company": "Acme",
                "email": "jane@acme.test",
                "phone": None,
                "title": "CTO",
                "memo": None,
                "created_ts": 1234567890.0,
                "updated_ts": None,
            }
        },
        "pets": {
            "alice": {
                "owner_id": "alice",
                "lineage": "SPIRIT",
                "stage": 0,
                "evolution_key": None,
                "card_count": 1,
                "updated_ts": 1234567890.0,
            }
        },
    }


@pytest.fixture
def coordinator(mock_hass):
    """Return a coordinator with a mocked store and a fixed random source."""
    from custom_components.cardpet.coordinator import CardPetCoordinator
    from custom_components.cardpet.models import StorageModel

    # Patch the Store to avoid real file operations
    with patch('custom_components.cardpet.coordinator.CardPetStore') as mock_store_class:
        mock_store = AsyncMock()
        mock_store.async_save = AsyncMock()
        mock_store.async_load = AsyncMock(return_value=StorageModel())
        mock_store_class.return_value = mock_store

        coord = CardPetCoordinator(mock_hass, rng=lambda: 0.0)
        coord.model = StorageModel()
        coord.store = mock_store

    return coord


@pytest.fixture
def sequence_rng():
    """Return the replaying random source class."""
    return SequenceRng
