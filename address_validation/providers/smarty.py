"""Smarty US Street Address API client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from address_validation.domain.models import AddressComponents, ProviderCandidate

from .base import DEFAULT_USER_AGENT, BaseProvider
from .exceptions import ProviderConfigurationError, ProviderResponseError

logger = logging.getLogger(__name__)

MATCH_STRATEGIES = ("strict", "invalid", "enhanced")


class SmartyStreetProvider(BaseProvider):
    """Client for the Smarty US Street Address API.

    Sends one free-form address per request and maps each returned candidate
    onto a ProviderCandidate. Smarty answers an unmatched address with an
    empty JSON array and HTTP 200.

    API Details:
        Endpoint: https://us-street.api.smarty.com/street-address
        Method: GET
        Authentication: auth-id / auth-token query parameters
        Response: JSON array of candidates, best match first
    """

    PROVIDER_NAME = "smarty"
    API_BASE_URL = "https://us-street.api.smarty.com/street-address"

    def __init__(
        self,
        auth_id: str,
        auth_token: str,
        base_url: Optional[str] = None,
        max_candidates: int = 1,
        match_strategy: str = "strict",
        licenses: Optional[List[str]] = None,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the Smarty client.

        Args:
            auth_id: Smarty secret key ID
            auth_token: Smarty secret key token
            base_url: Override for the street-address endpoint
            max_candidates: Candidates to request per lookup (1-10)
            match_strategy: strict, invalid or enhanced
            licenses: Optional license names to send with each request
            timeout: HTTP socket timeout in seconds
            user_agent: User-Agent header

        Raises:
            ProviderConfigurationError: On missing credentials or out-of-range settings
        """
        super().__init__(timeout=timeout, user_agent=user_agent)

        if not auth_id or not auth_token:
            raise ProviderConfigurationError("Smarty auth_id and auth_token are required")
        if not 1 <= max_candidates <= 10:
            raise ProviderConfigurationError(
                f"max_candidates must be between 1 and 10, got: {max_candidates}"
            )
        if match_strategy not in MATCH_STRATEGIES:
            raise ProviderConfigurationError(
                f"Unknown match_strategy: {match_strategy}. "
                f"Supported strategies: {', '.join(MATCH_STRATEGIES)}"
            )

        self._auth_id = auth_id
        self._auth_token = auth_token
        self.base_url = (base_url or self.API_BASE_URL).rstrip("/")
        self.max_candidates = max_candidates
        self.match_strategy = match_strategy
        self.licenses = [name for name in (licenses or []) if name]

    def lookup(self, address: str) -> List[ProviderCandidate]:
        """Look up an address with Smarty.

        Args:
            address: Trimmed, non-empty address text

        Returns:
            List of ProviderCandidate objects, empty when Smarty found no match

        Raises:
            ProviderHTTPError: On HTTP errors (auth, quota, rate limit, 5xx)
            ProviderRequestTimeoutError: On socket timeout
            ProviderResponseError: On a malformed body or an unparseable top-ranked candidate
        """
        params = {
            "auth-id": self._auth_id,
            "auth-token": self._auth_token,
            "street": address,
            "candidates": str(self.max_candidates),
            "match": self.match_strategy,
        }
        if self.licenses:
            params["license"] = ",".join(self.licenses)

        response = self._make_request(self.base_url, params=params)

        if not isinstance(response, list):
            raise ProviderResponseError(
                f"Expected JSON array response, got {type(response).__name__}"
            )

        candidates = []
        for index, raw_candidate in enumerate(response):
            try:
                candidates.append(self._transform_candidate(raw_candidate))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                if index == 0:
                    # Rank 0 is authoritative; promoting a lower rank would misclassify
                    raise ProviderResponseError(
                        f"Top-ranked Smarty candidate could not be parsed: {type(e).__name__}"
                    ) from e
                logger.warning(
                    "Skipping malformed Smarty candidate",
                    extra={
                        "provider": self.PROVIDER_NAME,
                        "candidate_index": index,
                        "error": str(e),
                    },
                )

        logger.debug(
            "Smarty lookup completed",
            extra={
                "provider": self.PROVIDER_NAME,
                "count": len(candidates),
            },
        )

        return candidates

    def _transform_candidate(self, raw: Dict[str, Any]) -> ProviderCandidate:
        """Transform a Smarty candidate object to ProviderCandidate."""
        components = raw.get("components") or {}
        analysis = raw.get("analysis") or {}

        return ProviderCandidate(
            delivery_line_1=raw["delivery_line_1"],
            delivery_line_2=raw.get("delivery_line_2"),
            last_line=raw["last_line"],
            components=AddressComponents(
                primary_number=components.get("primary_number"),
                street_predirection=components.get("street_predirection"),
                street_name=components.get("street_name"),
                street_suffix=components.get("street_suffix"),
                street_postdirection=components.get("street_postdirection"),
                secondary_designator=components.get("secondary_designator"),
                secondary_number=components.get("secondary_number"),
                city=components.get("city_name"),
                state=components.get("state_abbreviation"),
                zipcode=components.get("zipcode"),
                plus4_code=components.get("plus4_code"),
            ),
            match_signal=analysis.get("dpv_match_code"),
            vacant=analysis.get("dpv_vacant") == "Y",
            undeliverable=analysis.get("dpv_no_stat") == "Y",
            cmra=analysis.get("dpv_cmra") == "Y",
            footnotes=self._parse_footnotes(analysis.get("dpv_footnotes"), analysis.get("footnotes")),
        )

    def _parse_footnotes(self, dpv_footnotes: Optional[str], footnotes: Optional[str]) -> List[str]:
        """Split Smarty footnote strings into individual codes.

        DPV footnotes are concatenated two-character codes ("AABB"); general
        footnotes are '#'-terminated ("N#A#").
        """
        codes = []
        if dpv_footnotes:
            codes.extend(dpv_footnotes[i:i + 2] for i in range(0, len(dpv_footnotes), 2))
        if footnotes:
            codes.extend(code for code in footnotes.split("#") if code)
        return codes
