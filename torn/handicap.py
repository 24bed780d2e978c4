"""Handicaps: scoring adjustments attached to league teams and players."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import HANDICAP_STYLE_MARKERS

_NUMBER = re.compile(r'^\d+(\.\d+)?$')


class HandicapError(ValueError):
    """Raised when handicap text cannot be parsed."""


class HandicapStyle(Enum):
    """How a handicap value adjusts a score."""

    PERCENT = 'Percent'
    PLUS = 'Plus'
    MINUS = 'Minus'

    @property
    def marker(self) -> str:
        """Single-character marker used in documents: %, + or -."""
        return HANDICAP_STYLE_MARKERS[self.value]

    @classmethod
    def from_text(cls, text: Optional[str]) -> 'HandicapStyle':
        """
        Read a handicap style from a marker or a style name.

        Accepts '%', '+', '-' and the names 'Percent', 'Plus', 'Minus'
        (case-insensitive). Anything else, including empty text, is Percent.
        """
        if not text:
            return cls.PERCENT

        text = text.strip()
        for style in cls:
            if text == style.marker or text.lower() == style.value.lower():
                return style
        return cls.PERCENT


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Handicap:
    """
    A handicap value and the style it is applied in.

    A handicap with no value leaves scores unchanged.

    Example:
        Handicap.parse('110%').apply(100)  # 110.0
        Handicap.parse('+50').apply(100)   # 150.0
    """

    value: Optional[float] = None
    style: HandicapStyle = HandicapStyle.PERCENT

    def apply(self, score: float) -> float:
        """Return score adjusted by this handicap."""
        if self.value is None:
            return score
        if self.style is HandicapStyle.PERCENT:
            return score * self.value / 100
        if self.style is HandicapStyle.PLUS:
            return score + self.value
        return score - self.value

    def with_style(self, style: HandicapStyle) -> 'Handicap':
        """Same value, reinterpreted under another style."""
        return Handicap(self.value, style)

    def is_zero(self) -> bool:
        """True for 100%, +0 and -0: handicaps that change nothing."""
        if self.value is None:
            return False
        if self.style is HandicapStyle.PERCENT:
            return self.value == 100
        return self.value == 0

    @classmethod
    def parse(cls, text: Optional[str]) -> 'Handicap':
        """
        Parse handicap text such as '110%', '+1000', '-1000' or '110'.

        Text without a marker is taken as a percentage.

        Args:
            text: Handicap text; None or blank gives a handicap with no value

        Returns:
            Parsed Handicap

        Raises:
            HandicapError: If the text after the marker is not a number
        """
        if text is None or not text.strip():
            return cls()

        text = text.strip()
        if text.endswith('%'):
            payload, style = text[:-1], HandicapStyle.PERCENT
        elif text.startswith('+'):
            payload, style = text[1:], HandicapStyle.PLUS
        elif text.startswith('-'):
            payload, style = text[1:], HandicapStyle.MINUS
        else:
            payload, style = text, HandicapStyle.PERCENT

        payload = payload.strip()
        if not _NUMBER.match(payload):
            raise HandicapError(f'Invalid handicap: {text!r}')

        return cls(float(payload), style)

    def __str__(self) -> str:
        if self.value is None:
            return ''
        if self.style is HandicapStyle.PERCENT:
            return f'{_format_number(self.value)}%'
        return f'{self.style.marker}{_format_number(self.value)}'
