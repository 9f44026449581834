"""Status classification for provider match signals.

The base status depends on the match signal alone:

    Y -> valid         (confirmed deliverable)
    S -> corrected     (provider ignored the secondary/unit information)
    D -> unverifiable  (required secondary information is missing)
    N, "" or anything else -> invalid

A `valid` base status is promoted to `corrected` when the standardized
address differs from the input after normalization. No other promotion
happens: a missing unit dominates any rephrasing of the street line.
"""

from typing import Union

from address_validation.domain.models import MatchSignal, ValidationStatus

_BASE_STATUS = {
    MatchSignal.CONFIRMED: ValidationStatus.VALID,
    MatchSignal.SECONDARY_IGNORED: ValidationStatus.CORRECTED,
    MatchSignal.SECONDARY_MISSING: ValidationStatus.UNVERIFIABLE,
    MatchSignal.NOT_CONFIRMED: ValidationStatus.INVALID,
    MatchSignal.NONE: ValidationStatus.INVALID,
}


def base_status(match_signal: Union[MatchSignal, str, None]) -> ValidationStatus:
    """Look up the base status for a match signal without any promotion."""
    if not isinstance(match_signal, MatchSignal):
        match_signal = MatchSignal.parse(match_signal)
    return _BASE_STATUS[match_signal]


def classify_status(
    match_signal: Union[MatchSignal, str, None],
    input_normalized: str,
    standardized_normalized: str,
) -> ValidationStatus:
    """Classify a provider result into a ValidationStatus.

    Args:
        match_signal: Provider match signal (enum or raw code)
        input_normalized: Normalized caller input
        standardized_normalized: Normalized standardized address

    Returns:
        The validation status
    """
    status = base_status(match_signal)

    if status == ValidationStatus.VALID and input_normalized != standardized_normalized:
        return ValidationStatus.CORRECTED

    return status
