"""Price string normalization for Argentine retail sites.

Sites disagree on how they print prices ("$ 179.999", "$4.865,00",
"$ 3.400"), so every extractor declares the ``PricePolicy`` it expects
and passes it on each call. There is no global default format.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)


_NON_PRICE_CHARS = re.compile(r"[^\d.,]")
_DIGITS_ONLY = re.compile(r"^\d+$")
# A single dot followed by one or two trailing digits ("4865.5", "4865.00")
_DECIMAL_DOT = re.compile(r"^\d+\.\d{1,2}$")
# One price with well-formed dot thousands ("179.999", "1.234.567")
_DOT_THOUSANDS = re.compile(r"^\d{1,3}(\.\d{3})+$")
# Comma used as a thousands separator ("149,999", "1,234,567")
_COMMA_THOUSANDS = re.compile(r"^\d{1,3}(,\d{3})+$")

# Digit runs this long are assumed to be several prices glued together
CONCATENATED_MIN_DIGITS = 10
# Longest prefix kept when repairing a concatenated run
CONCATENATED_PREFIX_DIGITS = 6


class PricePolicy(str, Enum):
    """How a site's comma is interpreted."""

    # Dot = thousands, comma = decimals; stored as integer pesos
    INTEGER = "integer"
    # Dot = thousands, comma = decimals; cents kept as a decimal value
    DECIMAL = "decimal"


class PriceNormalizer:
    """Convert raw price strings into canonical numeric strings.

    Canonical output has no currency symbol and no thousands separators.
    ``normalize`` never raises: input it cannot interpret is returned with
    everything except digits, dots and commas stripped.
    """

    @staticmethod
    def clean(raw: str) -> str:
        """Strip everything except digits, dots and commas."""
        if not raw:
            return ""
        return _NON_PRICE_CHARS.sub("", str(raw))

    @classmethod
    def normalize(cls, raw: str, policy: PricePolicy = PricePolicy.INTEGER) -> str:
        """Normalize a raw price string.

        Examples:
            "$ 179.999"            -> "179999"   (INTEGER)
            "$ 169.999,00"         -> "169999"   (INTEGER, decimals dropped)
            "$4.865,00"            -> "4865"     (DECIMAL)
            "$4.865,50"            -> "4865.5"   (DECIMAL)
            "149,999"              -> "149999"   (comma thousands, any policy)
            "179999179999"         -> "179.999"  (concatenation repair)
            "$ 199.999 $ 179.999"  -> "199.999"  (concatenation repair)

        A run of 10 or more digits without separators cannot be told apart
        from glued prices, so it is always repaired. Normalizing is
        therefore not idempotent for canonical integers of that length:
        "$ 1.234.567.890" gives "1234567890", which normalizes again to
        "12.345".

        Args:
            raw: Raw text taken from the page
            policy: Comma policy declared by the calling extractor

        Returns:
            Canonical numeric string, or the minimally cleaned input
        """
        cleaned = cls.clean(raw)
        if not cleaned:
            return ""

        if "," in cleaned:
            return cls._normalize_comma(cleaned, policy)

        if "." in cleaned:
            if policy is PricePolicy.DECIMAL and _DECIMAL_DOT.match(cleaned):
                return cls._format_decimal(cleaned, fallback=cleaned)
            digits = cleaned.replace(".", "")
            if _DOT_THOUSANDS.match(cleaned):
                return digits
            # Malformed grouping: several dotted prices read from one element
            return cls._repair_if_concatenated(digits)

        return cls._repair_if_concatenated(cleaned)

    @classmethod
    def _repair_if_concatenated(cls, digits: str) -> str:
        if _DIGITS_ONLY.match(digits) and len(digits) >= CONCATENATED_MIN_DIGITS:
            return cls.repair_concatenated(digits)
        return digits

    @classmethod
    def _normalize_comma(cls, cleaned: str, policy: PricePolicy) -> str:
        if _COMMA_THOUSANDS.match(cleaned):
            return cleaned.replace(",", "")

        without_thousands = cleaned.replace(".", "")
        integer_part, _, decimals = without_thousands.rpartition(",")
        # Any earlier commas are stray separators
        integer_part = integer_part.replace(",", "")

        if policy is PricePolicy.DECIMAL:
            candidate = f"{integer_part}.{decimals}" if decimals else integer_part
            return cls._format_decimal(candidate, fallback=cleaned)

        if not integer_part:
            # ",99" style input has no integer pesos to keep
            return cleaned
        return integer_part

    @staticmethod
    def _format_decimal(candidate: str, fallback: str) -> str:
        try:
            value = Decimal(candidate)
        except InvalidOperation:
            logger.warning("price_not_decimal", raw=candidate)
            return fallback

        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")

    @staticmethod
    def repair_concatenated(digits: str) -> str:
        """Best-effort repair of several prices glued into one digit run.

        Keeps the first half of the run (bounded to six digits) and puts a
        thousands break three digits from its end. This is a heuristic:
        "179999179999" becomes "179.999" but odd-length runs may still be
        wrong.
        """
        head = digits[: len(digits) // 2][:CONCATENATED_PREFIX_DIGITS]
        if len(head) <= 3:
            return head
        repaired = f"{head[:-3]}.{head[-3:]}"
        logger.warning("price_concatenation_repaired", raw=digits, repaired=repaired)
        return repaired
