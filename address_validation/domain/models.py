"""Core domain models for address lookups and validation results.

This module defines the data structures used throughout the application:
- MatchSignal: provider-neutral deliverability signal
- AddressComponents / ProviderCandidate: what a provider lookup returns
- StandardizedAddress: the display form of the authoritative candidate
- ValidationStatus / AddressCorrection / ValidationResult: the verdict
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class MatchSignal(str, Enum):
    """How well the provider could confirm deliverability of an address."""

    CONFIRMED = "Y"
    SECONDARY_IGNORED = "S"
    SECONDARY_MISSING = "D"
    NOT_CONFIRMED = "N"
    NONE = ""

    @classmethod
    def parse(cls, value: Optional[str]) -> "MatchSignal":
        """Parse a raw provider code.

        Codes match exactly: Smarty sends single upper-case letters, and
        anything else (lower case, padding, unknown letters, missing) is NONE.
        """
        if not isinstance(value, str):
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class ValidationStatus(str, Enum):
    """Verdict for a single address."""

    VALID = "valid"
    CORRECTED = "corrected"
    UNVERIFIABLE = "unverifiable"
    INVALID = "invalid"


class AddressComponents(BaseModel):
    """Parsed components of a standardized address."""

    primary_number: str = Field("", description="House or building number")
    street_predirection: str = Field("", description="Directional before the street name")
    street_name: str = Field("", description="Street name")
    street_suffix: str = Field("", description="Street suffix (St, Ave, Pkwy)")
    street_postdirection: str = Field("", description="Directional after the street name")
    secondary_designator: str = Field("", description="Unit designator (Apt, Ste)")
    secondary_number: str = Field("", description="Unit number")
    city: str = Field("", description="City name")
    state: str = Field("", description="State abbreviation")
    zipcode: str = Field("", description="5-digit ZIP code")
    plus4_code: str = Field("", description="ZIP+4 add-on code")

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Providers omit components they do not know; store them as empty strings."""
        if v is None:
            return ""
        return str(v).strip()

    @property
    def street(self) -> str:
        """Street line without the primary number."""
        parts = [
            self.street_predirection,
            self.street_name,
            self.street_suffix,
            self.street_postdirection,
        ]
        return " ".join(part for part in parts if part)

    @property
    def full_zipcode(self) -> str:
        """ZIP code with the +4 add-on when present."""
        if self.zipcode and self.plus4_code:
            return f"{self.zipcode}-{self.plus4_code}"
        return self.zipcode


class ProviderCandidate(BaseModel):
    """One standardized interpretation of the input, as returned by a provider.

    Provider-neutral: vendor field names are mapped onto this model by the
    provider client, so the validation core never sees them.
    """

    delivery_line_1: str = Field(..., description="First delivery line (number + street + unit)")
    delivery_line_2: Optional[str] = Field(None, description="Optional second delivery line")
    last_line: str = Field(..., description="City, state and ZIP line")
    components: AddressComponents = Field(default_factory=AddressComponents)
    match_signal: MatchSignal = Field(MatchSignal.NONE, description="Deliverability signal")
    vacant: bool = Field(False, description="Delivery point is flagged vacant")
    undeliverable: bool = Field(False, description="Delivery point is flagged as not receiving mail")
    cmra: bool = Field(False, description="Commercial mail receiving agency")
    footnotes: List[str] = Field(default_factory=list, description="Provider footnote codes")

    @field_validator("match_signal", mode="before")
    @classmethod
    def parse_match_signal(cls, v):
        """Accept raw provider codes and map unknown values to NONE."""
        if isinstance(v, MatchSignal):
            return v
        return MatchSignal.parse(v)

    @field_validator("delivery_line_2")
    @classmethod
    def strip_optional_line(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    model_config = {"json_schema_extra": {"example": {
        "delivery_line_1": "1600 Amphitheatre Pkwy",
        "last_line": "Mountain View CA 94043-1351",
        "components": {
            "primary_number": "1600",
            "street_name": "Amphitheatre",
            "street_suffix": "Pkwy",
            "city": "Mountain View",
            "state": "CA",
            "zipcode": "94043",
            "plus4_code": "1351",
        },
        "match_signal": "Y",
    }}}


class StandardizedAddress(BaseModel):
    """Standardized address as presented to callers."""

    street: str = Field("", description="Street name with directionals and suffix")
    number: str = Field("", description="Primary number")
    city: str = Field("", description="City name")
    state: str = Field("", description="State abbreviation")
    zipcode: str = Field("", description="ZIP or ZIP+4")
    delivery_line_1: str = Field(..., description="First delivery line")
    delivery_line_2: Optional[str] = Field(None, description="Second delivery line")
    last_line: str = Field(..., description="City, state and ZIP line")
    full_address: str = Field(..., description="Single-line standardized address")


class AddressCorrection(BaseModel):
    """A difference between the caller's input and the standardized address."""

    field: str = Field(..., description="Which part of the address changed")
    original: str = Field(..., description="Caller-supplied text")
    corrected: str = Field(..., description="Standardized text")


class ValidationMetadata(BaseModel):
    """Diagnostic details attached to a successful result."""

    provider: str = Field(..., description="Provider that produced the candidate")
    processing_time_ms: int = Field(0, ge=0, description="Time spent in the provider call")
    match_signal: MatchSignal = Field(MatchSignal.NONE, description="Raw deliverability signal")
    vacant: bool = False
    undeliverable: bool = False
    footnotes: List[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Verdict for one validated address.

    A status other than `invalid` always carries a standardized address.
    """

    status: ValidationStatus
    original_input: str = Field(..., description="Address exactly as validated")
    standardized_address: Optional[StandardizedAddress] = None
    corrections: List[AddressCorrection] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    metadata: Optional[ValidationMetadata] = None

    @model_validator(mode="after")
    def require_standardized_address(self):
        if self.status != ValidationStatus.INVALID and self.standardized_address is None:
            raise ValueError(
                f"standardized_address is required when status is '{self.status.value}'"
            )
        return self

    @property
    def has_corrections(self) -> bool:
        return bool(self.corrections)

    def to_response(self) -> dict:
        """Serialize to a JSON-compatible dict, dropping unset optional sections."""
        return self.model_dump(mode="json", exclude_none=True)
