"""Splits an NLU response into typed mentions and semantic slots."""

import logging
from typing import Dict, List, Optional

from extract_info.schemas.models import (
    AdditionalMention,
    DateTimeMention,
    EntityNameTable,
    LocationInfo,
    LocationMention,
    LuisCompositeEntity,
    LuisEntity,
    LuisResponse,
    ParsedResponse,
    PersonInfo,
    PersonMention,
    RawEntityMention,
)

logger = logging.getLogger(__name__)

UNKNOWN_PERSON_TYPE = "Unknown"


class ResponseParser:
    """Decodes the intent/entity graph of an NLU response."""

    def __init__(
        self,
        entity_names: EntityNameTable,
        person_intent_type_map: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize parser.

        Args:
            entity_names: Entity type names for each semantic slot
            person_intent_type_map: Maps intents to person roles (e.g. CourtHearing -> Judge)
        """
        self.entity_names = entity_names
        self.person_intent_type_map = dict(person_intent_type_map or {})
        self._temporal_names = entity_names.temporal_names()
        self._expected_names = entity_names.expected_names()

    def classify(self, entity: LuisEntity) -> Optional[RawEntityMention]:
        """
        Map one entity onto the mention union.

        Location sub-entities (city/state/zipcode) return None; they are read
        from the composite location instead.
        """
        common = dict(
            type=entity.type,
            text=entity.entity,
            start_index=entity.start_index,
            end_index=entity.end_index,
        )

        if entity.type in self._temporal_names:
            resolved = entity.resolution.first_value() if entity.resolution else None
            return DateTimeMention(
                **common,
                resolved_value=resolved.value if resolved else None,
                resolution_type=resolved.type if resolved else None,
            )
        if entity.type == self.entity_names.person_entity_name:
            return PersonMention(**common)
        if entity.type == self.entity_names.location_entity_name:
            return LocationMention(**common)
        if entity.type not in self._expected_names:
            return AdditionalMention(**common)
        return None

    def parse(self, response: LuisResponse) -> ParsedResponse:
        """
        Parse an NLU response.

        Args:
            response: Decoded NLU response

        Returns:
            ParsedResponse with mentions in appearance order
        """
        entities: List[LuisEntity] = list(response.entities or [])
        # Stable: ties keep the order the service reported them in.
        entities.sort(key=lambda e: e.start_index)

        mentions = [m for m in (self.classify(e) for e in entities) if m is not None]

        intent = response.top_scoring_intent.intent if response.top_scoring_intent else None
        intent_confidence = response.top_scoring_intent.score if response.top_scoring_intent else 0.0

        date_mentions = [m for m in mentions if m.kind == "datetime"]
        person_mentions = [m for m in mentions if m.kind == "person"]
        location_mentions = [m for m in mentions if m.kind == "location"]
        additional_mentions = [m for m in mentions if m.kind == "additional"]

        if len(person_mentions) > 1:
            logger.info(f"{len(person_mentions)} person entities found; keeping the first")
        if len(location_mentions) > 1:
            logger.info(f"{len(location_mentions)} location entities found; keeping the first")

        return ParsedResponse(
            intent=intent,
            intent_confidence=intent_confidence,
            date_mentions=date_mentions,
            person=self._build_person(person_mentions, intent),
            location=self._build_location(location_mentions, response.composite_entities),
            additional_mentions=additional_mentions,
        )

    def _build_person(
        self,
        mentions: List[PersonMention],
        intent: Optional[str],
    ) -> Optional[PersonInfo]:
        if not mentions:
            return None
        person_type = self.person_intent_type_map.get(intent, UNKNOWN_PERSON_TYPE) if intent else UNKNOWN_PERSON_TYPE
        return PersonInfo(name=mentions[0].text, type=person_type)

    def _build_location(
        self,
        mentions: List[LocationMention],
        composites: Optional[List[LuisCompositeEntity]],
    ) -> Optional[LocationInfo]:
        if not mentions:
            return None

        location = LocationInfo(location=mentions[0].text)

        composite = next(
            (
                c for c in (composites or [])
                if c.parent_type == self.entity_names.location_entity_name
            ),
            None,
        )
        if composite is None or not composite.children:
            return location

        parts: Dict[str, str] = {}
        for child in composite.children:
            # First child of each type wins.
            if child.value is not None and child.type not in parts:
                parts[child.type] = child.value

        location.city = parts.get(self.entity_names.city_entity_name)
        location.state = parts.get(self.entity_names.state_entity_name)
        location.zipcode = parts.get(self.entity_names.zipcode_entity_name)
        return location
