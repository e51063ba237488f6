"""Hard eligibility filtering: channel visibility and entity locking."""

import logging
from typing import Iterable, List, Optional

from ..models.record import ServiceRecord
from ..utils.text_processing import TextProcessor

logger = logging.getLogger(__name__)


class EligibilityFilter:
    """
    Reduces the catalogue to the records that may be shown at all.

    Eligibility is not scored: a record that fails the channel rule never
    reaches the scorer, whatever its relevance.
    """

    def __init__(self, text_processor: Optional[TextProcessor] = None):
        self.text_processor = text_processor or TextProcessor()

    def filter(
        self,
        catalogue: Iterable[ServiceRecord],
        channel: str,
        locked_entity: Optional[str] = None
    ) -> List[ServiceRecord]:
        """
        Apply the channel rule, then the entity lock if one is given.

        Args:
            catalogue: Records in catalogue order
            channel: Concrete requesting channel
            locked_entity: Core entity detected in the query

        Returns:
            Eligible records in catalogue order. If the entity lock would
            leave nothing, the channel-only result is returned.
        """
        visible = [record for record in catalogue if self.is_channel_eligible(record, channel)]

        if not locked_entity:
            logger.debug(f"{len(visible)} records visible on channel '{channel}'")
            return visible

        locked = [
            record for record in visible
            if self.text_processor.contains(record.name, locked_entity)
        ]
        if not locked:
            logger.debug(
                f"Entity lock '{locked_entity}' matched no records; "
                f"keeping {len(visible)} channel-eligible records"
            )
            return visible

        logger.debug(
            f"Entity lock '{locked_entity}' narrowed {len(visible)} records to {len(locked)}"
        )
        return locked

    def is_channel_eligible(self, record: ServiceRecord, channel: str) -> bool:
        """A record is visible when it lists no channels or lists this one."""
        if not record.channels:
            return True
        wanted = self.text_processor.fold(channel.strip())
        return any(self.text_processor.fold(c.strip()) == wanted for c in record.channels)
