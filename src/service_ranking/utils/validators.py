"""Input validation utilities."""

import math
from typing import List

from ..models.context import RequestContext, ANY
from ..models.record import ServiceRecord
from ..core.exceptions import ValidationError


def validate_record(record: ServiceRecord) -> None:
    """
    Validate service record object.

    Args:
        record: Record to validate

    Raises:
        ValidationError: If record is invalid
    """
    try:
        if not isinstance(record, ServiceRecord):
            raise ValidationError("Invalid service record type")

        if not record.id or not record.id.strip():
            raise ValidationError("Service record ID is required")

        if not isinstance(record.name, str):
            raise ValidationError(f"Service record {record.id} name must be a string")

        if record.satisfaction is not None:
            if not math.isfinite(record.satisfaction) or record.satisfaction < 0:
                raise ValidationError(
                    f"Service record {record.id} satisfaction must be a non-negative number"
                )

    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        raise ValidationError(f"Service record validation failed: {str(e)}")


def validate_context(context: RequestContext) -> None:
    """
    Validate request context object.

    Args:
        context: Context to validate

    Raises:
        ValidationError: If context is invalid
    """
    try:
        if not isinstance(context, RequestContext):
            raise ValidationError("Invalid request context type")

        if not context.channel or context.channel.strip().lower() == ANY:
            raise ValidationError("A concrete channel is required")

        if not isinstance(context.weight_popularity, bool):
            raise ValidationError("weight_popularity must be a boolean")

    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        raise ValidationError(f"Request context validation failed: {str(e)}")


def validate_records_batch(records: List[ServiceRecord]) -> None:
    """
    Validate a batch of service records.

    Args:
        records: List of records to validate

    Raises:
        ValidationError: If any record is invalid or IDs repeat
    """
    if not records:
        raise ValidationError("Record list cannot be empty")

    record_ids = set()
    for record in records:
        validate_record(record)

        if record.id in record_ids:
            raise ValidationError(f"Duplicate service record ID found: {record.id}")
        record_ids.add(record.id)
