"""Write-side validation for raw resource rows (spell slots, tracked features)."""

from ..exceptions import ValidationError, create_error_context


def validate_resource_counts(
    *, level: int | None, maximum: int, used: int, operation: str, record_type: str
) -> None:
    """
    Reject resource counts the status aggregation cannot interpret.

    Raises:
        ValidationError: If level < 1, maximum < 0, used < 0 or used > maximum
    """
    context = create_error_context(operation=operation, metadata={"record_type": record_type})
    if level is not None and level < 1:
        raise ValidationError("Level must be at least 1", context=context, field="level", value=level)
    if maximum < 0:
        raise ValidationError("Maximum uses cannot be negative", context=context, field="maximum", value=maximum)
    if used < 0:
        raise ValidationError("Used count cannot be negative", context=context, field="used", value=used)
    if used > maximum:
        raise ValidationError(
            f"Used count ({used}) cannot exceed maximum ({maximum})",
            context=context,
            field="used",
            value=used,
        )
