"""Selection of the codec matching a configured API version."""

from ledger_sync.application.ports.ledger_codec import LedgerCodecPort
from ledger_sync.domain.errors import UnsupportedVersionError
from ledger_sync.domain.models.api_version import ApiVersion
from ledger_sync.infrastructure.hledger_json.v1_14 import DecimalPointCodec
from ledger_sync.infrastructure.hledger_json.v1_19 import PrecisionObjectCodec
from ledger_sync.infrastructure.hledger_json.v1_23 import IntegerPrecisionCodec
from ledger_sync.infrastructure.hledger_json.v1_32 import DecimalMarkCodec
from ledger_sync.infrastructure.hledger_json.v1_50 import PeriodBalanceCodec


def codec_for(version: ApiVersion) -> LedgerCodecPort:
    """Return a fresh codec for ``version``.

    Args:
        version: Resolved API version.

    Returns:
        LedgerCodecPort: Codec for that wire format.

    Raises:
        UnsupportedVersionError: For AUTO, HTML or anything that is not an
            ApiVersion. There is no fallback to another revision.
    """
    if version in (ApiVersion.V1_14, ApiVersion.V1_15):
        return DecimalPointCodec(version)
    if version is ApiVersion.V1_19_1:
        return PrecisionObjectCodec()
    if version is ApiVersion.V1_23:
        return IntegerPrecisionCodec()
    if version in (ApiVersion.V1_32, ApiVersion.V1_40):
        return DecimalMarkCodec(version)
    if version is ApiVersion.V1_50:
        return PeriodBalanceCodec()
    raise UnsupportedVersionError(f"No JSON codec for API version {version!r}")


__all__ = ["codec_for"]
