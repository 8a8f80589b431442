"""Named text transformations selectable per request."""

import logging
from typing import Callable, Dict, List, Optional

from extract_info.schemas.models import DataTransformation
from extract_info.utils.text_norm import DEFAULT_MAX_LENGTH, TextNormalizer

logger = logging.getLogger(__name__)

Transformation = Callable[[str, Dict[str, str]], str]

REMOVE_PUNCTUATION = "removepunctuation"
TRIM_END = "trimend"
# Name accepted by earlier clients of the service.
TRIM_END_LEGACY = "trimeend"
MAX_LENGTH_KEY = "MaxLength"


def _remove_punctuation(text: str, parameters: Dict[str, str]) -> str:
    logger.info("Removing punctuation from input...")
    return TextNormalizer.remove_punctuation(text)


def _trim_end(text: str, parameters: Dict[str, str]) -> str:
    raw = parameters.get(MAX_LENGTH_KEY)
    try:
        max_length = int(raw) if raw is not None else DEFAULT_MAX_LENGTH
    except ValueError:
        raise ValueError(f"{MAX_LENGTH_KEY} must be an integer, got: {raw}")

    logger.info(f"Trimming input from the end if length is greater than {max_length}...")
    return TextNormalizer.trim_end(text, max_length)


class TransformationFactory:
    """Resolves transformation names to callables."""

    _registry: Dict[str, Transformation] = {
        REMOVE_PUNCTUATION: _remove_punctuation,
        TRIM_END: _trim_end,
        TRIM_END_LEGACY: _trim_end,
    }

    @classmethod
    def create(cls, name: str) -> Optional[Transformation]:
        """Return the transformation for name (case-insensitive), or None."""
        return cls._registry.get(name.lower())

    @staticmethod
    def default_chain(max_length: int = DEFAULT_MAX_LENGTH) -> List[DataTransformation]:
        return [
            DataTransformation(name=REMOVE_PUNCTUATION),
            DataTransformation(name=TRIM_END, parameters={MAX_LENGTH_KEY: str(max_length)}),
        ]


def apply_transformations(
    text: str,
    transformations: Optional[List[DataTransformation]],
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """
    Run the requested transformations in order.

    Args:
        text: Original transcript
        transformations: Requested transformations; the default chain is used when empty
        max_length: Max length used by the default chain

    Returns:
        Transformed text
    """
    if not transformations:
        transformations = TransformationFactory.default_chain(max_length)

    result = text
    for transformation in transformations:
        op = TransformationFactory.create(transformation.name)
        if op is None:
            logger.warning(f"Unknown transformation skipped: {transformation.name}")
            continue
        result = op(result, transformation.parameters)

    return result
