"""Keying of repeated 'additional' entity types."""

import logging
from typing import Dict, List

from extract_info.schemas.models import AdditionalMention

logger = logging.getLogger(__name__)


class EntityDeduplicator:
    """Assigns suffixed keys to repeated entity types so nothing is overwritten."""

    @staticmethod
    def deduplicate(mentions: List[AdditionalMention]) -> Dict[str, str]:
        """
        Build the additional-data mapping.

        Args:
            mentions: Additional mentions in appearance order

        Returns:
            Mapping where the first occurrence of a type uses the bare key and
            the Nth uses "{type}-N"
        """
        counts: Dict[str, int] = {}
        result: Dict[str, str] = {}

        for mention in mentions:
            count = counts.get(mention.type, 0) + 1
            key = mention.type if count == 1 else f"{mention.type}-{count}"

            # A literal upstream type may already own the suffixed key.
            while key in result:
                count += 1
                key = f"{mention.type}-{count}"

            counts[mention.type] = count
            result[key] = mention.text

        if len(result) > len(counts):
            logger.info(
                f"Keyed {len(result)} additional entities across {len(counts)} types"
            )

        return result
