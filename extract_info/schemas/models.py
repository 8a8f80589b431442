"""Pydantic models for API contracts, NLU payloads and engine results."""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Request/Response Models (API)
# ============================================================================


class DataTransformation(CamelModel):
    """A named text transformation applied before the NLU query."""

    name: str = Field(..., description="Transformation name, e.g. 'removepunctuation'")
    parameters: Dict[str, str] = Field(default_factory=dict)


class ExtractInfoRequest(CamelModel):
    """Request for the extract info endpoint."""

    call_sid: Optional[str] = Field(None, description="Identifier of the recorded call")
    text: Optional[str] = Field(None, description="Transcribed text to extract from")
    transformations: Optional[List[DataTransformation]] = Field(
        None, description="Ordered transformations; defaults are used when omitted"
    )
    max_length: Optional[int] = Field(None, description="Max evaluated text length")
    min_year: Optional[int] = Field(None, description="Dates before this year are rejected")

    def check_required(self) -> None:
        """Raise MalformedRequestError if callSid or text is missing or blank."""
        if not self.call_sid or not self.call_sid.strip():
            raise MalformedRequestError(ExtractInfoErrorCode.RequestMissingCallSid, "callSid")
        if not self.text or not self.text.strip():
            raise MalformedRequestError(ExtractInfoErrorCode.RequestMissingText, "text")


class MalformedRequestError(ValueError):
    """A required request field is missing."""

    def __init__(self, error_code: "ExtractInfoErrorCode", key_name: str):
        super().__init__(f"Request body is missing required key: {key_name}")
        self.error_code = error_code
        self.key_name = key_name


class ExtractInfoStatusCode(IntEnum):
    """Overall status of a successful extraction."""

    Ok = 0
    MissingEntities = 1


class ExtractInfoErrorCode(IntEnum):
    """Error codes reported by the extract info endpoint."""

    NoError = 0
    RequestMissingCallSid = 1
    RequestMissingText = 2
    BadRequest = -2
    DataExtractorGenericFailure = -1000


class ExtractInfoFlag:
    """Quality flags attached to a result."""

    DATE_REJECTED = "dateRejected"


# ============================================================================
# Extracted Data Models
# ============================================================================


class DateInfo(CamelModel):
    """Normalized date and time extracted from a transcription."""

    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    full_date: Optional[datetime] = None

    @classmethod
    def from_datetime(cls, value: datetime) -> "DateInfo":
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            full_date=value,
        )

    @classmethod
    def rejected(cls) -> "DateInfo":
        """Placeholder for a date that was present but failed plausibility."""
        return cls()

    @property
    def is_rejected(self) -> bool:
        return self.full_date is None


class PersonInfo(CamelModel):
    """Person extracted from a transcription."""

    name: str
    type: str = Field("Unknown", description="Role of the person, e.g. 'Judge'")


class LocationInfo(CamelModel):
    """Location extracted from a transcription."""

    location: str = Field(..., description="Raw location text")
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None


class TranscriptionData(CamelModel):
    """Structured data extracted from a single transcription."""

    intent: Optional[str] = None
    intent_confidence: float = 0.0
    transcription: str
    evaluated_transcription: str
    dates: List[DateInfo] = Field(default_factory=list)
    person: Optional[PersonInfo] = None
    location: Optional[LocationInfo] = None
    additional_data: Dict[str, str] = Field(default_factory=dict)


class NormalizationResult(CamelModel):
    """Engine output: extracted data plus quality flags and status."""

    data: TranscriptionData
    flags: List[str] = Field(default_factory=list)
    status_code: int
    status_desc: str


class ExtractInfoResponse(CamelModel):
    """Response from the extract info endpoint."""

    call_sid: Optional[str] = None
    data: Optional[TranscriptionData] = None
    flags: List[str] = Field(default_factory=list)
    status_code: int = ExtractInfoStatusCode.Ok
    status_desc: Optional[str] = None
    has_error: bool = False
    error_code: int = ExtractInfoErrorCode.NoError
    error_details: Optional[str] = None


# ============================================================================
# Configuration Models
# ============================================================================


class EntityNameTable(CamelModel):
    """Maps semantic slots to the entity type names used by the NLU app."""

    date_time_entity_name: str = "builtin.datetimeV2.datetime"
    date_entity_name: str = "builtin.datetimeV2.date"
    time_entity_name: str = "builtin.datetimeV2.time"
    person_entity_name: str = "builtin.personName"
    location_entity_name: str = "location"
    city_entity_name: str = "city"
    state_entity_name: str = "state"
    zipcode_entity_name: str = "zipcode"

    def temporal_names(self) -> set[str]:
        return {
            self.date_time_entity_name,
            self.date_entity_name,
            self.time_entity_name,
        }

    def location_part_names(self) -> set[str]:
        return {
            self.city_entity_name,
            self.state_entity_name,
            self.zipcode_entity_name,
        }

    def expected_names(self) -> set[str]:
        """All names with a semantic slot; anything else is 'additional'."""
        return (
            self.temporal_names()
            | self.location_part_names()
            | {self.person_entity_name, self.location_entity_name}
        )


# ============================================================================
# NLU Response Schema
# ============================================================================


class LuisIntent(CamelModel):
    intent: str
    score: float = 0.0


class LuisResolutionValue(CamelModel):
    timex: Optional[str] = None
    type: Optional[str] = None
    value: Optional[str] = None


class LuisResolution(CamelModel):
    """Entity resolution; either a list of values or a single value/subtype."""

    values: Optional[List[LuisResolutionValue]] = None
    value: Optional[str] = None
    subtype: Optional[str] = None

    def first_value(self) -> Optional[LuisResolutionValue]:
        if self.values:
            return self.values[0]
        if self.value is not None:
            return LuisResolutionValue(type=self.subtype, value=self.value)
        return None


class LuisEntity(CamelModel):
    entity: str
    type: str
    start_index: int = 0
    end_index: int = 0
    value: Optional[str] = None
    score: Optional[float] = None
    resolution: Optional[LuisResolution] = None


class LuisCompositeChild(CamelModel):
    type: str
    value: Optional[str] = None


class LuisCompositeEntity(CamelModel):
    parent_type: str
    value: Optional[str] = None
    children: Optional[List[LuisCompositeChild]] = None


class LuisResponse(CamelModel):
    """Decoded NLU service response."""

    query: Optional[str] = None
    top_scoring_intent: Optional[LuisIntent] = None
    entities: Optional[List[LuisEntity]] = None
    composite_entities: Optional[List[LuisCompositeEntity]] = None


# ============================================================================
# Internal helper models
# ============================================================================


class _Mention(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    text: str
    start_index: int = 0
    end_index: int = 0


class DateTimeMention(_Mention):
    kind: Literal["datetime"] = "datetime"
    resolved_value: Optional[str] = None
    resolution_type: Optional[str] = None


class PersonMention(_Mention):
    kind: Literal["person"] = "person"


class LocationMention(_Mention):
    kind: Literal["location"] = "location"


class AdditionalMention(_Mention):
    kind: Literal["additional"] = "additional"


RawEntityMention = Annotated[
    Union[DateTimeMention, PersonMention, LocationMention, AdditionalMention],
    Field(discriminator="kind"),
]


class TemporalKind(str, Enum):
    DATE_ONLY = "DateOnly"
    TIME_ONLY = "TimeOnly"
    COMPLETE = "Complete"


class TemporalFragment(BaseModel):
    """A classified date/time mention awaiting merge."""

    model_config = ConfigDict(frozen=True)

    kind: TemporalKind
    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    order: int


class ParsedResponse(BaseModel):
    """NLU response split into semantic slots, in mention order."""

    intent: Optional[str] = None
    intent_confidence: float = 0.0
    date_mentions: List[DateTimeMention] = Field(default_factory=list)
    person: Optional[PersonInfo] = None
    location: Optional[LocationInfo] = None
    additional_mentions: List[AdditionalMention] = Field(default_factory=list)
