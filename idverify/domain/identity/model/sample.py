"""Redacted diagnostic summaries of credentials.

A TokenSample is safe to put in a log record: it keeps the shape of a token
(how many space-separated parts, whether it carries a bearer prefix) and at
most six trailing characters of its last part. It is never used to make an
authentication decision.
"""

from dataclasses import asdict, dataclass
from typing import Any

BEARER_PREFIX = "Bearer "

# Upper bound on the number of characters copied out of a credential.
MAX_SAMPLE_LENGTH = 6


@dataclass(frozen=True)
class TokenSample:
    """Shape of a credential plus a short suffix of its last part."""

    part_count: int
    has_bearer_prefix: bool
    suffix_sample: str

    def as_log_data(self) -> dict[str, Any]:
        return asdict(self)


def sample_token(raw: str) -> TokenSample:
    """Summarise ``raw`` for diagnostics without exposing it.

    The suffix is the last six characters of the final space-separated
    segment. Segments shorter than six characters contribute only their last
    ``len // 2`` characters.

    >>> sample_token("Bearer 123456789")
    TokenSample(part_count=2, has_bearer_prefix=True, suffix_sample='456789')
    >>> sample_token("Bearer A 12")
    TokenSample(part_count=3, has_bearer_prefix=True, suffix_sample='2')
    """
    parts = raw.split(" ")
    last = parts[-1]

    if len(last) >= MAX_SAMPLE_LENGTH:
        suffix = last[-MAX_SAMPLE_LENGTH:]
    else:
        keep = len(last) // 2
        suffix = last[len(last) - keep :]

    return TokenSample(
        part_count=len(parts),
        has_bearer_prefix=raw.startswith(BEARER_PREFIX),
        suffix_sample=suffix,
    )
