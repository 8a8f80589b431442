"""Configuration management via environment variables."""

import json
import os

from extract_info.schemas.models import EntityNameTable

# NLU service
NLU_ENDPOINT = os.getenv("NLU_ENDPOINT", "")
NLU_SUBSCRIPTION_KEY = os.getenv("NLU_SUBSCRIPTION_KEY", "")
NLU_TIMEOUT = float(os.getenv("NLU_TIMEOUT", "10"))

# Entity name table, JSON with camelCase keys (e.g. {"personEntityName": "judgeName"})
_luis_configuration = os.getenv("LUIS_CONFIGURATION")
try:
    ENTITY_NAMES = EntityNameTable.model_validate(
        json.loads(_luis_configuration) if _luis_configuration else {}
    )
except ValueError as e:
    raise ValueError(f"LUIS_CONFIGURATION is not a valid entity name table: {e}")

_person_intent_type_map = os.getenv("PERSON_INTENT_TYPE_MAP")
PERSON_INTENT_TYPE_MAP = (
    json.loads(_person_intent_type_map)
    if _person_intent_type_map
    else {
        "CourtHearingNameEntity": "Judge",
        "CaseDecisionNameEntity": "Judge",
        "None": "Unknown",
    }
)

# Normalization
MAX_TEXT_LENGTH = int(os.getenv("MAX_TEXT_LENGTH", "500"))
MIN_DATE_YEAR = int(os.getenv("MIN_DATE_YEAR", "1900"))

# Logging
LOG_TRANSCRIPTS = os.getenv("LOG_TRANSCRIPTS", "false").lower() == "true"
