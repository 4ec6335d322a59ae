"""The Card Pet integration."""
from __future__ import annotations

import asyncio
from dataclasses import asdict
import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import ConfigEntryNotReady, HomeAssistantError
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.typing import ConfigType
import voluptuous as vol

_LOGGER = logging.getLogger(__name__)

from .const import (
    CONF_ANNOUNCE_EVOLUTIONS,
    DOMAIN,
    PLATFORMS,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_FIELDS,
    SEARCH_MAX_LIMIT,
    SERVICE_REGISTER_CARD,
    SERVICE_SEARCH_CARDS,
    SERVICE_UPDATE_CARD,
)
from .coordinator import CardPetCoordinator
from .models import CARD_FIELDS


def parse_owners(entry: ConfigEntry) -> list[str]:
    """Return the owner ids configured on an entry."""
    owners_csv = entry.data.get("owners", "alex,emma")
    return [o.strip() for o in owners_csv.split(",") if o.strip()]


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Card Pet component."""
    return True

async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Card Pet from a config entry."""
    try:
        coordinator = CardPetCoordinator(hass)
        await coordinator.async_init()
        for owner in parse_owners(entry):
            await coordinator.ensure_owner(owner)
    except (asyncio.TimeoutError, ConnectionError, OSError) as ex:
        raise ConfigEntryNotReady(f"Failed to initialize Card Pet coordinator: {ex}") from ex
    except Exception as ex:
        _LOGGER.exception("Unexpected error setting up Card Pet")
        raise ConfigEntryNotReady(f"Setup failed: {ex}") from ex

    coordinator.announce_evolutions = entry.options.get(CONF_ANNOUNCE_EVOLUTIONS, True)
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    try:
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    except Exception as ex:
        _LOGGER.exception("Failed to set up platforms")
        raise ConfigEntryNotReady(f"Failed to set up platforms: {ex}") from ex

    # ---- Services ----
    async def _register_card(call: ServiceCall) -> None:
        """Register card service handler."""
        try:
            data = call.data
            owner = data["owner"]
            name = data["name"]
            fields = {key: data[key] for key in CARD_FIELDS if key in data}

            card, pet = await coordinator.add_card(owner, name, **fields)
            _LOGGER.info("Registered card '%s' for %s (cards: %d, stage: %d)",
                         card.name, owner, pet.card_count, pet.stage)

        except KeyError as ex:
            _LOGGER.error("Missing required parameter in register_card service: %s", ex)
            raise HomeAssistantError(f"Missing required parameter: {ex}") from ex
        except (ValueError, TypeError) as ex:
            _LOGGER.error("Invalid parameter value in register_card service: %s", ex)
            raise HomeAssistantError(f"Invalid parameter: {ex}") from ex
        except Exception as ex:
            _LOGGER.exception("Unexpected error in register_card service")
            raise HomeAssistantError(f"Service failed: {ex}") from ex

    async def _update_card(call: ServiceCall) -> None:
        """Update card service handler."""
        try:
            data = call.data
            owner = data["owner"]
            card_id = data["card_id"]
            fields = {key: data[key] for key in ("name", *CARD_FIELDS) if key in data}

            card = await coordinator.update_card(owner, card_id, **fields)
            if card is None:
                raise HomeAssistantError(f"Card not found: {card_id}")
            _LOGGER.info("Updated card %s for %s", card_id, owner)

        except HomeAssistantError:
            raise
        except KeyError as ex:
            _LOGGER.error("Missing required parameter in update_card service: %s", ex)
            raise HomeAssistantError(f"Missing required parameter: {ex}") from ex
        except (ValueError, TypeError) as ex:
            _LOGGER.error("Invalid parameter value in update_card service: %s", ex)
            raise HomeAssistantError(f"Invalid parameter: {ex}") from ex
        except Exception as ex:
            _LOGGER.exception("Unexpected error in update_card service")
            raise HomeAssistantError(f"Service failed: {ex}") from ex

    async def _search_cards(call: ServiceCall) -> ServiceResponse:
        """Search cards service handler."""
        try:
            data = call.data
            owner = data["owner"]
            cards = coordinator.search_cards(
                owner,
                query=data.get("query", ""),
                field=data.get("field", "all"),
                limit=data.get("limit", SEARCH_DEFAULT_LIMIT),
            )
            _LOGGER.debug("search_cards for %s returned %d cards", owner, len(cards))
            return {"cards": [asdict(card) for card in cards]}

        except KeyError as ex:
            _LOGGER.error("Missing required parameter in search_cards service: %s", ex)
            raise HomeAssistantError(f"Missing required parameter: {ex}") from ex
        except (ValueError, TypeError) as ex:
            _LOGGER.error("Invalid parameter value in search_cards service: %s", ex)
            raise HomeAssistantError(f"Invalid parameter: {ex}") from ex
        except Exception as ex:
            _LOGGER.exception("Unexpected error in search_cards service")
            raise HomeAssistantError(f"Service failed: {ex}") from ex

    # Service schemas
    card_fields_schema: dict[Any, Any] = {
        vol.Optional(key): vol.Any(None, cv.string) for key in CARD_FIELDS
    }

    register_card_schema = vol.Schema({
        vol.Required("owner"): cv.string,
        vol.Required("name"): cv.string,
        **card_fields_schema,
    })

    update_card_schema = vol.Schema({
        vol.Required("owner"): cv.string,
        vol.Required("card_id"): cv.string,
        vol.Optional("name"): cv.string,
        **card_fields_schema,
    })

    search_cards_schema = vol.Schema({
        vol.Required("owner"): cv.string,
        vol.Optional("query", default=""): cv.string,
        vol.Optional("field", default="all"): vol.In(SEARCH_FIELDS),
        vol.Optional("limit", default=SEARCH_DEFAULT_LIMIT): vol.All(
            vol.Coerce(int), vol.Clamp(min=1, max=SEARCH_MAX_LIMIT)
        ),
    })

    hass.services.async_register(DOMAIN, SERVICE_REGISTER_CARD, _register_card, schema=register_card_schema)
    hass.services.async_register(DOMAIN, SERVICE_UPDATE_CARD, _update_card, schema=update_card_schema)
    hass.services.async_register(
        DOMAIN, SERVICE_SEARCH_CARDS, _search_cards,
        schema=search_cards_schema, supports_response=SupportsResponse.ONLY,
    )

    return True

async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply changed options to the running coordinator."""
    coordinator: CardPetCoordinator = hass.data[DOMAIN][entry.entry_id]
    coordinator.announce_evolutions = entry.options.get(CONF_ANNOUNCE_EVOLUTIONS, True)
    _LOGGER.debug("Card Pet options updated: announce_evolutions=%s", coordinator.announce_evolutions)

async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        # Unregister services if this is the last instance
        if not hass.data[DOMAIN]:
            hass.services.async_remove(DOMAIN, SERVICE_REGISTER_CARD)
            hass.services.async_remove(DOMAIN, SERVICE_UPDATE_CARD)
            hass.services.async_remove(DOMAIN, SERVICE_SEARCH_CARDS)
    return unload_ok
