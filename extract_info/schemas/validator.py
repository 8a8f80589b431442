"""Sanity checks for extraction configuration."""

import logging
from typing import Dict, List, Optional

from extract_info.schemas.models import EntityNameTable

logger = logging.getLogger(__name__)


def validate_entity_names(
    entity_names: EntityNameTable,
    person_intent_type_map: Optional[Dict[str, str]] = None,
) -> tuple[bool, List[str]]:
    """
    Validate the entity name table and person role map.
    Returns (is_valid, error_list).
    """
    errors = []

    names = entity_names.model_dump(by_alias=True)
    for slot, name in names.items():
        if not name or not name.strip():
            errors.append(f"{slot} must be a non-empty string")

    # Each slot needs its own name or entities would be claimed twice.
    seen: Dict[str, str] = {}
    for slot, name in names.items():
        if name in seen:
            errors.append(f"{slot} duplicates {seen[name]}: {name}")
        else:
            seen[name] = slot

    for intent, person_type in (person_intent_type_map or {}).items():
        if not isinstance(person_type, str) or not person_type:
            errors.append(f"Person type for intent {intent} must be a non-empty string")

    return len(errors) == 0, errors
