"""Codecs for the hledger-web JSON API revisions."""

from .registry import codec_for
from .v1_14 import DecimalPointCodec
from .v1_19 import PrecisionObjectCodec
from .v1_23 import IntegerPrecisionCodec
from .v1_32 import DecimalMarkCodec
from .v1_50 import PeriodBalanceCodec

__all__ = [
    "codec_for",
    "DecimalPointCodec",
    "PrecisionObjectCodec",
    "IntegerPrecisionCodec",
    "DecimalMarkCodec",
    "PeriodBalanceCodec",
]
