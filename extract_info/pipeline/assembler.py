"""Assembles the final extraction record and its status."""

import logging
from typing import List, Tuple

from extract_info.schemas.models import (
    DateInfo,
    ExtractInfoFlag,
    ExtractInfoStatusCode,
    NormalizationResult,
    ParsedResponse,
    TranscriptionData,
)

logger = logging.getLogger(__name__)


class ResponseAssembler:
    """Combines parsed slots and merged dates into a NormalizationResult."""

    @staticmethod
    def status_for(data: TranscriptionData) -> Tuple[int, str]:
        """Ok only when intent, a plausible date, location and person are all present."""
        has_date = any(not d.is_rejected for d in data.dates)
        if data.intent is None or not has_date or data.location is None or data.person is None:
            status = ExtractInfoStatusCode.MissingEntities
        else:
            status = ExtractInfoStatusCode.Ok
        return int(status), status.name

    @staticmethod
    def assemble(
        transcription: str,
        evaluated_transcription: str,
        parsed: ParsedResponse,
        dates: List[DateInfo],
        date_rejected: bool,
        additional_data: dict,
    ) -> NormalizationResult:
        data = TranscriptionData(
            intent=parsed.intent,
            intent_confidence=parsed.intent_confidence,
            transcription=transcription,
            evaluated_transcription=evaluated_transcription,
            dates=dates,
            person=parsed.person,
            location=parsed.location,
            additional_data=additional_data,
        )

        flags = [ExtractInfoFlag.DATE_REJECTED] if date_rejected else []
        status_code, status_desc = ResponseAssembler.status_for(data)

        logger.info(
            "Date = %s, Location = %s, Person = %s",
            "yes" if dates else "no",
            "yes" if data.location else "no",
            "yes" if data.person else "no",
        )

        return NormalizationResult(
            data=data,
            flags=flags,
            status_code=status_code,
            status_desc=status_desc,
        )
