"""Main extraction pipeline."""

import logging
from typing import Dict, List, Optional

from extract_info.nlu.luis_client import LuisClient
from extract_info.pipeline.assembler import ResponseAssembler
from extract_info.pipeline.deduplicator import EntityDeduplicator
from extract_info.pipeline.response_parser import ResponseParser
from extract_info.pipeline.temporal import DEFAULT_MIN_YEAR, TemporalMergeEngine
from extract_info.pipeline.transformations import apply_transformations
from extract_info.schemas.models import (
    DataTransformation,
    EntityNameTable,
    LuisResponse,
    NormalizationResult,
)
from extract_info.utils.text_norm import DEFAULT_MAX_LENGTH

logger = logging.getLogger(__name__)


class InfoExtractor:
    """Extraction pipeline orchestrator."""

    def __init__(
        self,
        luis_client: Optional[LuisClient],
        entity_names: EntityNameTable,
        person_intent_type_map: Optional[Dict[str, str]] = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        min_year: int = DEFAULT_MIN_YEAR,
        log_transcripts: bool = False,
    ):
        """
        Initialize extractor.

        Args:
            luis_client: NLU client; only needed by extract()
            entity_names: Entity type names for each semantic slot
            person_intent_type_map: Maps intents to person roles
            max_length: Default max length of the evaluated text
            min_year: Default plausibility threshold for extracted dates
            log_transcripts: Whether transcript text may be written to logs
        """
        self.luis = luis_client
        self.parser = ResponseParser(entity_names, person_intent_type_map)
        self.max_length = max_length
        self.min_year = min_year
        self.log_transcripts = log_transcripts

    def transform_text(
        self,
        text: str,
        transformations: Optional[List[DataTransformation]] = None,
        max_length: Optional[int] = None,
    ) -> str:
        """Apply the request's transformations (or the default chain)."""
        return apply_transformations(
            text,
            transformations,
            max_length if max_length is not None else self.max_length,
        )

    def normalize(
        self,
        transcription: str,
        evaluated_transcription: str,
        luis_response: LuisResponse,
        min_year: Optional[int] = None,
    ) -> NormalizationResult:
        """
        Normalize an NLU response into a NormalizationResult.

        Pure: no I/O and no state carried between calls.

        Args:
            transcription: Original transcript
            evaluated_transcription: Text that was sent to the NLU service
            luis_response: Decoded NLU response
            min_year: Plausibility threshold override

        Returns:
            NormalizationResult
        """
        # Step 1: Parse the intent/entity graph
        parsed = self.parser.parse(luis_response)

        # Step 2: Merge date/time mentions
        engine = TemporalMergeEngine(min_year if min_year is not None else self.min_year)
        dates, date_rejected = engine.merge(parsed.date_mentions)

        # Step 3: Key additional entities
        additional_data = EntityDeduplicator.deduplicate(parsed.additional_mentions)

        # Step 4: Assemble
        return ResponseAssembler.assemble(
            transcription=transcription,
            evaluated_transcription=evaluated_transcription,
            parsed=parsed,
            dates=dates,
            date_rejected=date_rejected,
            additional_data=additional_data,
        )

    async def extract(
        self,
        text: str,
        transformations: Optional[List[DataTransformation]] = None,
        max_length: Optional[int] = None,
        min_year: Optional[int] = None,
    ) -> NormalizationResult:
        """
        Full extraction: transform, query the NLU service once, normalize.

        Raises:
            RuntimeError: No NLU client configured
            ValueError: Invalid transformation parameters
        """
        if self.luis is None:
            raise RuntimeError("No NLU client configured")

        evaluated = self.transform_text(text, transformations, max_length)
        return await self.extract_evaluated(text, evaluated, min_year)

    async def extract_evaluated(
        self,
        text: str,
        evaluated: str,
        min_year: Optional[int] = None,
    ) -> NormalizationResult:
        """Query the NLU service once with already transformed text and normalize."""
        if self.luis is None:
            raise RuntimeError("No NLU client configured")

        if self.log_transcripts:
            logger.info(f"Extracting from text: '{evaluated}'")

        luis_response = await self.luis.query(evaluated)
        return self.normalize(text, evaluated, luis_response, min_year)
