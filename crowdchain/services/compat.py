# crowdchain/services/compat.py
"""
Reconciliation of legacy and current creator application payloads.

Older clients still send `experience`, `portfolio` and `bio` instead of
`professionalTitle` and `website`. classify_payload() tags the raw form data
as one or the other, and reconcile_payload() turns either variant into a
NormalizedApplication.

Removal plan: once no submission has been classified as legacy for a full
release cycle, delete LegacyApplicationPayload and the legacy branch of
reconcile_payload(), and read the current fields directly.
"""

from dataclasses import dataclass
from typing import Optional, Union

LEGACY_FIELDS = ('experience', 'portfolio', 'bio')
CURRENT_FIELDS = ('professionalTitle', 'website', 'websiteUrl')


@dataclass(frozen=True)
class CurrentApplicationPayload:
    wallet_address: Optional[str]
    full_name: Optional[str]
    email: Optional[str]
    professional_title: Optional[str]
    linkedin_url: Optional[str] = None
    website_url: Optional[str] = None
    # Accepted while clients migrate; takes precedence over the synthesized text.
    bio: Optional[str] = None


@dataclass(frozen=True)
class LegacyApplicationPayload:
    wallet_address: Optional[str]
    full_name: Optional[str]
    email: Optional[str]
    experience: Optional[str] = None
    portfolio: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None


ApplicationPayload = Union[CurrentApplicationPayload, LegacyApplicationPayload]


@dataclass(frozen=True)
class NormalizedApplication:
    wallet_address: Optional[str]
    full_name: Optional[str]
    email: Optional[str]
    professional_title: Optional[str]
    linkedin_url: Optional[str]
    website_url: Optional[str]
    bio: Optional[str]


def _clean(value):
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def _first(data, *keys):
    """First non-blank value among keys, in order."""
    for key in keys:
        value = _clean(data.get(key))
        if value:
            return value
    return None


def classify_payload(data):
    """
    Tags raw submission data (form or JSON mapping) as legacy or current.

    A payload is legacy when it carries any legacy field and none of the
    newer ones. A current payload still falls back field by field:
    experience stands in for a missing professionalTitle and portfolio for a
    missing website.
    """
    has_current = any(_clean(data.get(key)) for key in CURRENT_FIELDS)
    has_legacy = any(_clean(data.get(key)) for key in LEGACY_FIELDS)

    common = dict(
        wallet_address=_clean(data.get('walletAddress')),
        full_name=_clean(data.get('fullName')),
        email=_clean(data.get('email')),
        linkedin_url=_first(data, 'linkedIn', 'linkedinUrl'),
    )

    if has_legacy and not has_current:
        return LegacyApplicationPayload(
            experience=_clean(data.get('experience')),
            portfolio=_clean(data.get('portfolio')),
            bio=_clean(data.get('bio')),
            **common,
        )

    return CurrentApplicationPayload(
        professional_title=_first(data, 'professionalTitle', 'experience'),
        website_url=_first(data, 'website', 'websiteUrl', 'portfolio'),
        bio=_clean(data.get('bio')),
        **common,
    )


def _fallback_bio(professional_title):
    if not professional_title:
        return None
    return f"Professional with expertise in {professional_title}"


def reconcile_payload(payload):
    """Maps either payload variant onto the current application fields."""
    if isinstance(payload, LegacyApplicationPayload):
        title = payload.experience
        return NormalizedApplication(
            wallet_address=payload.wallet_address,
            full_name=payload.full_name,
            email=payload.email,
            professional_title=title,
            linkedin_url=payload.linkedin_url,
            website_url=payload.portfolio,
            bio=payload.bio or _fallback_bio(title),
        )

    if isinstance(payload, CurrentApplicationPayload):
        return NormalizedApplication(
            wallet_address=payload.wallet_address,
            full_name=payload.full_name,
            email=payload.email,
            professional_title=payload.professional_title,
            linkedin_url=payload.linkedin_url,
            website_url=payload.website_url,
            bio=payload.bio or _fallback_bio(payload.professional_title),
        )

    raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
