"""Unit tests for Card Pet coordinator."""
from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import pytest

from custom_components.cardpet.const import EVENT_PET_EVOLVED
from custom_components.cardpet.coordinator import CardPetCoordinator, normalize_text
from custom_components.cardpet.models import BusinessCard, PetStats, StorageModel


async def _add_cards(coordinator, owner_id, count):
    pet = None
    for i in range(count):
        _, pet = await coordinator.add_card(owner_id, f"Person {i}")
    return pet


class TestNormalizeText:
    """Test normalize_text."""

    def test_strips(self):
        assert normalize_text("  Acme  ") == "Acme"

    def test_blank_and_non_string(self):
        assert normalize_text("   ") is None
        assert normalize_text(None) is None
        assert normalize_text(42) is None


class TestCardPetCoordinator:
    """Test CardPetCoordinator."""

    @pytest.mark.asyncio
    async def test_init(self, mock_hass):
        """Test coordinator initialization."""
        with patch('custom_components.cardpet.coordinator.CardPetStore') as mock_store_class:
            coordinator = CardPetCoordinator(mock_hass)
            assert coordinator.hass == mock_hass
            assert coordinator.model is None
            mock_store_class.assert_called_once_with(mock_hass)

    @pytest.mark.asyncio
    async def test_async_init(self, mock_hass):
        """Test async_init loads the model from storage."""
        with patch('custom_components.cardpet.coordinator.CardPetStore') as mock_store_class:
            mock_store = mock_store_class.return_value
            mock_store.async_load = AsyncMock(return_value=StorageModel())

            coordinator = CardPetCoordinator(mock_hass)
            await coordinator.async_init()

            assert coordinator.model is not None
            mock_store.async_load.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_save_without_model(self, mock_hass):
        """Test saving before loading raises RuntimeError."""
        with patch('custom_components.cardpet.coordinator.CardPetStore'):
            coordinator = CardPetCoordinator(mock_hass)
            with pytest.raises(RuntimeError):
                await coordinator.async_save()

    @pytest.mark.asyncio
    async def test_ensure_owner(self, coordinator):
        """Test ensuring an owner creates an empty pet once."""
        pet = await coordinator.ensure_owner("alice")
        assert pet.stage == 0
        assert coordinator.model.pets["alice"] is pet

        pet.stage = 2
        again = await coordinator.ensure_owner("alice")
        assert again.stage == 2
        coordinator.store.async_save.assert_called_once()

    def test_get_pet_summary_unknown_owner(self, coordinator):
        """Test an unknown owner gets an egg summary."""
        summary = coordinator.get_pet_summary("nobody")
        assert summary["stage"] == 0
        assert summary["lineage"] is None
        assert summary["next_evolution_at"] == 3

    @pytest.mark.asyncio
    async def test_add_card(self, coordinator):
        """Test registering a card normalizes fields and grows the pet."""
        card, pet = await coordinator.add_card(
            "alice", "  Jane Doe ", company=" Acme ", email="", phone=None
        )

        assert card.name == "Jane Doe"
        assert card.company == "Acme"
        assert card.email is None
        assert card.phone is None
        assert coordinator.model.cards[card.id] is card
        assert pet.card_count == 1
        assert pet.lineage == "ANIMAL"
        assert pet.stage == 0
        assert pet.evolution_key is None

    @pytest.mark.asyncio
    async def test_add_card_requires_name(self, coordinator):
        """Test a blank name is rejected."""
        with pytest.raises(ValueError, match="name is required"):
            await coordinator.add_card("alice", "   ")
        assert coordinator.model.cards == {}

    @pytest.mark.asyncio
    async def test_lineage_assigned_once(self, mock_hass, sequence_rng):
        """Test the lineage is picked on the first card and kept afterwards."""
        with patch('custom_components.cardpet.coordinator.CardPetStore'):
            rng = sequence_rng(0.5, 0.0, 0.0)
            coordinator = CardPetCoordinator(mock_hass, rng=rng)
            coordinator.model = StorageModel()
            coordinator.store = Mock(async_save=AsyncMock())

            await coordinator.add_card("alice", "First")
            assert coordinator.get_pet("alice").lineage == "SPIRIT"

            await coordinator.add_card("alice", "Second")
            assert coordinator.get_pet("alice").lineage == "SPIRIT"
            assert rng.calls == 1

    @pytest.mark.asyncio
    async def test_evolves_at_thresholds(self, coordinator, mock_hass):
        """Test the pet evolves when the card count reaches each threshold."""
        pet = await _add_cards(coordinator, "alice", 2)
        assert pet.stage == 0
        mock_hass.bus.async_fire.assert_not_called()

        pet = await _add_cards(coordinator, "alice", 1)
        assert pet.card_count == 3
        assert pet.stage == 1
        assert pet.evolution_key == "ANIMAL_PUP"
        mock_hass.bus.async_fire.assert_called_once_with(
            EVENT_PET_EVOLVED,
            {
                "owner_id": "alice",
                "lineage": "ANIMAL",
                "old_stage": 0,
                "new_stage": 1,
                "evolution_key": "ANIMAL_PUP",
            },
        )

        pet = await _add_cards(coordinator, "alice", 7)
        assert pet.card_count == 10
        assert pet.stage == 2
        assert pet.evolution_key == "ANIMAL_HUNTER"

        pet = await _add_cards(coordinator, "alice", 15)
        assert pet.card_count == 25
        assert pet.stage == 3
        assert pet.evolution_key == "ANIMAL_ALPHA"
        assert mock_hass.bus.async_fire.call_count == 3

    @pytest.mark.asyncio
    async def test_no_event_when_announcements_disabled(self, coordinator, mock_hass):
        """Test evolutions are silent when announcements are off."""
        coordinator.announce_evolutions = False
        pet = await _add_cards(coordinator, "alice", 3)
        assert pet.stage == 1
        mock_hass.bus.async_fire.assert_not_called()

    @pytest.mark.asyncio
    async def test_owners_grow_independently(self, coordinator):
        """Test cards only count for their own owner."""
        await _add_cards(coordinator, "alice", 3)
        await _add_cards(coordinator, "bob", 1)

        assert coordinator.get_pet("alice").stage == 1
        assert coordinator.get_pet("bob").stage == 0
        assert coordinator.count_cards("bob") == 1

    @pytest.mark.asyncio
    async def test_stage_never_drops(self, coordinator):
        """Test a stored stage is kept even if the count is below its threshold."""
        coordinator.model.pets["alice"] = PetStats(
            owner_id="alice", lineage="DATA", stage=2, evolution_key="DATA_SPRITE"
        )
        pet = await coordinator.advance_pet("alice")

        assert pet.card_count == 0
        assert pet.stage == 2
        assert pet.evolution_key == "DATA_SPRITE"

    @pytest.mark.asyncio
    async def test_advance_pet_updates_sensors(self, coordinator):
        """Test registered sensors are written after growth."""
        sensor = Mock()
        sensor.hass = Mock()
        detached = Mock()
        detached.hass = None
        coordinator.register_pet_sensor("alice", sensor)
        coordinator.register_pet_sensor("alice", detached)

        await coordinator.add_card("alice", "Jane")

        sensor.async_write_ha_state.assert_called_once()
        detached.async_write_ha_state.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_card(self, coordinator):
        """Test updating given fields only."""
        card, _ = await coordinator.add_card("alice", "Jane", company="Acme", email="j@acme.test")

        updated = await coordinator.update_card("alice", card.id, company=" Globex ", email=None)

        assert updated is card
        assert card.name == "Jane"
        assert card.company == "Globex"
        assert card.email is None
        assert card.updated_ts is not None

    @pytest.mark.asyncio
    async def test_update_card_validation(self, coordinator):
        """Test empty names and empty patches are rejected."""
        card, _ = await coordinator.add_card("alice", "Jane")

        with pytest.raises(ValueError, match="name cannot be empty"):
            await coordinator.update_card("alice", card.id, name="  ")
        with pytest.raises(ValueError, match="No updates provided"):
            await coordinator.update_card("alice", card.id)

    @pytest.mark.asyncio
    async def test_update_card_other_owner(self, coordinator):
        """Test a card cannot be updated through another owner."""
        card, _ = await coordinator.add_card("alice", "Jane")

        assert await coordinator.update_card("bob", card.id, name="Mallory") is None
        assert await coordinator.update_card("alice", "missing", name="Mallory") is None
        assert card.name == "Jane"

    def test_search_cards(self, coordinator):
        """Test searching by field, newest first, with a clamped limit."""
        coordinator.model.cards = {
            "1": BusinessCard(id="1", owner_id="alice", name="Jane Doe", company="Acme", created_ts=1.0),
            "2": BusinessCard(id="2", owner_id="alice", name="John Roe", email="john@acme.test", created_ts=2.0),
            "3": BusinessCard(id="3", owner_id="alice", name="Ann Lee", company="Globex", created_ts=3.0),
            "4": BusinessCard(id="4", owner_id="bob", name="Jane Bob", company="Acme", created_ts=4.0),
        }

        assert [c.id for c in coordinator.search_cards("alice")] == ["3", "2", "1"]
        assert [c.id for c in coordinator.search_cards("alice", "acme")] == ["2", "1"]
        assert [c.id for c in coordinator.search_cards("alice", "ACME", field="company")] == ["1"]
        assert [c.id for c in coordinator.search_cards("alice", "acme", field="email")] == ["2"]
        assert [c.id for c in coordinator.search_cards("alice", "jane", field="name")] == ["1"]
        assert [c.id for c in coordinator.search_cards("alice", limit=0)] == ["3"]
        assert len(coordinator.search_cards("alice", limit=500)) == 3
        assert [c.id for c in coordinator.search_cards("alice", "lee", field="bogus")] == ["3"]
