"""FastAPI application and endpoints."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from extract_info import config
from extract_info.nlu.luis_client import LuisClient, NluResponseParseError
from extract_info.pipeline.extractor import InfoExtractor
from extract_info.schemas.models import (
    ExtractInfoErrorCode,
    ExtractInfoRequest,
    ExtractInfoResponse,
    MalformedRequestError,
)
from extract_info.schemas.validator import validate_entity_names

logger = logging.getLogger(__name__)

# Global instances
luis_client: Optional[LuisClient] = None
extractor: Optional[InfoExtractor] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle: startup and shutdown."""
    global luis_client, extractor

    # Startup
    logger.info("Starting up transcript info extraction service")
    valid, errors = validate_entity_names(config.ENTITY_NAMES, config.PERSON_INTENT_TYPE_MAP)
    if not valid:
        raise ValueError(f"Invalid entity configuration: {'; '.join(errors)}")

    if config.NLU_ENDPOINT:
        luis_client = LuisClient(
            config.NLU_ENDPOINT,
            config.NLU_SUBSCRIPTION_KEY,
            timeout=config.NLU_TIMEOUT,
        )
    else:
        logger.warning("NLU_ENDPOINT is not set; extraction requests will fail")

    extractor = InfoExtractor(
        luis_client=luis_client,
        entity_names=config.ENTITY_NAMES,
        person_intent_type_map=config.PERSON_INTENT_TYPE_MAP,
        max_length=config.MAX_TEXT_LENGTH,
        min_year=config.MIN_DATE_YEAR,
        log_transcripts=config.LOG_TRANSCRIPTS,
    )

    yield

    # Shutdown
    logger.info("Shutting down transcript info extraction service")
    if luis_client:
        await luis_client.close()


app = FastAPI(
    title="Transcript Info Extraction",
    description="Extracts hearing dates, people, locations and extra entities from call transcripts",
    version="1.0.0",
    lifespan=lifespan,
)


def _error_detail(
    response: ExtractInfoResponse,
    error_code: ExtractInfoErrorCode,
    details: Optional[str],
) -> dict:
    response.has_error = True
    response.error_code = error_code
    response.error_details = details
    return response.model_dump(mode="json", by_alias=True)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies in the same shape as other caller errors."""
    body = exc.body if isinstance(exc.body, dict) else {}
    call_sid = body.get("callSid")
    fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) for err in exc.errors())
    logger.error(f"Malformed request body; invalid fields: {fields}")

    response = ExtractInfoResponse(call_sid=call_sid if isinstance(call_sid, str) else None)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": _error_detail(
                response,
                ExtractInfoErrorCode.BadRequest,
                f"Request body is malformed: {fields}",
            )
        },
    )


# ============================================================================
# Health Check
# ============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# ============================================================================
# Extraction Endpoints
# ============================================================================


@app.post("/api/extractinfo", response_model=ExtractInfoResponse, tags=["Extraction"])
async def extract_info(request: ExtractInfoRequest):
    """
    Extract structured hearing information from a transcript.

    Returns:
        - data: intent, dates, person, location and additional entities
        - flags: 'dateRejected' when the date is not a single plausible value
        - statusCode: Ok (0) or MissingEntities (1)
    """
    response = ExtractInfoResponse(call_sid=request.call_sid)

    try:
        request.check_required()
    except MalformedRequestError as e:
        logger.error(f"Malformed request body; missing key: {e.key_name}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail(response, e.error_code, str(e)),
        )

    if extractor is None or extractor.luis is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=_error_detail(
                response,
                ExtractInfoErrorCode.DataExtractorGenericFailure,
                "NLU service is not configured.",
            ),
        )

    try:
        evaluated = extractor.transform_text(
            request.text,
            transformations=request.transformations,
            max_length=request.max_length,
        )
    except ValueError as e:
        logger.error(f"Invalid transformation: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail(response, ExtractInfoErrorCode.BadRequest, str(e)),
        )

    try:
        result = await extractor.extract_evaluated(
            request.text,
            evaluated,
            min_year=request.min_year,
        )
    except httpx.RequestError as e:
        logger.error(f"NLU request failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=_error_detail(
                response,
                ExtractInfoErrorCode.DataExtractorGenericFailure,
                "NLU backend unavailable. Check NLU_ENDPOINT / network connectivity.",
            ),
        )
    except httpx.HTTPStatusError as e:
        logger.error(f"NLU request returned {e.response.status_code}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=_error_detail(
                response,
                ExtractInfoErrorCode.DataExtractorGenericFailure,
                f"NLU backend request failed with status {e.response.status_code}.",
            ),
        )
    except NluResponseParseError as e:
        logger.error(f"NLU response could not be parsed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_detail(
                response,
                ExtractInfoErrorCode.DataExtractorGenericFailure,
                "Internal parse failure reading the NLU response.",
            ),
        )
    except Exception as e:
        logger.error(f"Unexpected error during extraction: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_detail(response, ExtractInfoErrorCode.BadRequest, "Internal server error"),
        )

    response.data = result.data
    response.flags = result.flags
    response.status_code = result.status_code
    response.status_desc = result.status_desc
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
