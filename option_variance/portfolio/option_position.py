"""
Option position record submitted to the risk engine.
"""
from dataclasses import dataclass
from enum import Enum

import numpy as np


class InvalidOptionParameters(ValueError):
    """Raised when an option cannot be valued (bad strike, expiry or kind)."""


class OptionKind(str, Enum):
    """Vanilla option type, 'C' for call and 'P' for put."""
    CALL = 'C'
    PUT = 'P'

    @classmethod
    def from_string(cls, value) -> 'OptionKind':
        """
        Parse an option kind.

        Args:
            value: OptionKind, or one of 'C', 'P', 'Call', 'Put' (any case)

        Returns:
            OptionKind
        """
        if isinstance(value, cls):
            return value

        text = str(value).strip().upper()
        if text in ('C', 'CALL'):
            return cls.CALL
        if text in ('P', 'PUT'):
            return cls.PUT

        raise InvalidOptionParameters(f"Unknown option type {value!r}, expected Call or Put")


@dataclass(frozen=True)
class OptionPosition:
    """
    A vanilla option position.

    Strike and expiry are checked when the position is submitted to the
    engine, not here, so that invalid records can still be built and rejected.
    """
    kind: OptionKind
    strike: float
    time_to_expiry: float  # In years
    position_multiplier: float = 1.0  # +1 long, -1 short, fractions allowed

    def __post_init__(self):
        object.__setattr__(self, 'kind', OptionKind.from_string(self.kind))

    @property
    def is_call(self) -> bool:
        return self.kind is OptionKind.CALL

    def __repr__(self) -> str:
        return (f"OptionPosition({self.kind.name.title()} K={self.strike} "
                f"T={self.time_to_expiry}y, pos:{self.position_multiplier:+g})")


def validate_option(option: OptionPosition):
    """
    Check that an option can be valued.

    Args:
        option: Option to check

    Raises:
        InvalidOptionParameters: If strike or time to expiry is not a positive
            finite number, or the position multiplier is not finite
    """
    # Written as "not > 0" so NaN is rejected as well
    if not option.time_to_expiry > 0 or not option.strike > 0:
        raise InvalidOptionParameters(
            f"Invalid time to expiry ({option.time_to_expiry}) or "
            f"strike price ({option.strike})"
        )
    if not (np.isfinite(option.time_to_expiry) and np.isfinite(option.strike)):
        raise InvalidOptionParameters(
            f"Time to expiry ({option.time_to_expiry}) and strike price "
            f"({option.strike}) must be finite"
        )
    if not np.isfinite(option.position_multiplier):
        raise InvalidOptionParameters(
            f"Position multiplier must be finite, got {option.position_multiplier}")
