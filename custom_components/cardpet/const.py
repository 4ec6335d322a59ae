"""Constants for the Card Pet integration."""
DOMAIN = "cardpet"
PLATFORMS = ["sensor", "text", "button"]

CONF_OWNERS = "owners"
CONF_ANNOUNCE_EVOLUTIONS = "announce_evolutions"
DEFAULT_OWNERS = "alex,emma"

STORAGE_VERSION = 1
STORAGE_KEY = f"{DOMAIN}_pets"

EVENT_PET_EVOLVED = f"{DOMAIN}_pet_evolved"

SEARCH_FIELDS = ["all", "name", "company", "email"]
SEARCH_DEFAULT_LIMIT = 50
SEARCH_MAX_LIMIT = 100

# Services
SERVICE_REGISTER_CARD = "register_card"
SERVICE_UPDATE_CARD = "update_card"
SERVICE_SEARCH_CARDS = "search_cards"
