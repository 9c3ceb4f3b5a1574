"""
Flow Estimator - Types.

============================================================
PURPOSE
============================================================
The Checkpoint: last known-correct (amount, timestamp, rate)
triple for a continuously accruing quantity.

INVARIANTS:
- All three fields are exact integers, never floats
- base_amount is non-negative
- Checkpoints are immutable; a new upstream snapshot
  produces a new Checkpoint

============================================================
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.exceptions import InvalidCheckpointError


def _is_exact_int(value: Any) -> bool:
    # bool is an int subclass but never a valid amount.
    return isinstance(value, int) and not isinstance(value, bool)


def parse_exact_int(value: Any, field: str) -> int:
    """
    Parse an upstream numeric value into an exact integer.

    Subgraph responses carry big numbers as decimal strings; ints
    pass through. Floats are rejected outright, since they already
    lost precision before reaching us.
    """
    if _is_exact_int(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in ("-", "+") else text
        if digits.isascii() and digits.isdigit():
            return int(text)
        raise InvalidCheckpointError(
            f"{field} is not an integer string",
            field=field,
            actual=value,
        )
    raise InvalidCheckpointError(
        f"{field} must be an exact integer, got {type(value).__name__}",
        field=field,
        actual=value,
    )


@dataclass(frozen=True)
class Checkpoint:
    """
    Snapshot of an accruing quantity.

    The true amount at any t >= base_timestamp is
    base_amount + rate_per_second * (t - base_timestamp).
    """

    base_amount: int
    """Amount in smallest token unit, correct as of base_timestamp."""

    base_timestamp: int
    """Seconds since epoch when the snapshot was recorded upstream."""

    rate_per_second: int
    """Signed accrual rate (negative for net outflows)."""

    def __post_init__(self) -> None:
        for name in ("base_amount", "base_timestamp", "rate_per_second"):
            value = getattr(self, name)
            if not _is_exact_int(value):
                raise InvalidCheckpointError(
                    f"{name} must be an exact integer, got {type(value).__name__}",
                    field=name,
                    actual=value,
                )
        if self.base_amount < 0:
            raise InvalidCheckpointError(
                "base_amount must be non-negative",
                field="base_amount",
                actual=self.base_amount,
            )

    @classmethod
    def zero(cls) -> "Checkpoint":
        """Checkpoint for an account or pool with no snapshot yet."""
        return cls(base_amount=0, base_timestamp=0, rate_per_second=0)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Optional[Mapping[str, Any]],
        amount_key: str = "balanceUntilUpdatedAt",
        timestamp_key: str = "updatedAtTimestamp",
        rate_key: str = "totalNetFlowRate",
    ) -> "Checkpoint":
        """
        Build a checkpoint from upstream query data.

        A missing snapshot (None) yields the zero checkpoint. A snapshot
        that is present but lacks one of the keys is malformed.

        Args:
            snapshot: Mapping such as an account token snapshot
            amount_key: Key of the base amount
            timestamp_key: Key of the base timestamp
            rate_key: Key of the per-second rate
        """
        if snapshot is None:
            return cls.zero()

        values = {}
        for field, key in (
            ("base_amount", amount_key),
            ("base_timestamp", timestamp_key),
            ("rate_per_second", rate_key),
        ):
            if key not in snapshot:
                raise InvalidCheckpointError(
                    f"Snapshot is missing '{key}'",
                    field=field,
                    context={"key": key},
                )
            values[field] = parse_exact_int(snapshot[key], key)

        return cls(**values)

    def with_rate(self, rate_per_second: int) -> "Checkpoint":
        """Same base, different rate. Used to preview a rate change."""
        return Checkpoint(
            base_amount=self.base_amount,
            base_timestamp=self.base_timestamp,
            rate_per_second=rate_per_second,
        )

    def to_dict(self) -> dict:
        # Big integers go out as strings, matching how they came in.
        return {
            "base_amount": str(self.base_amount),
            "base_timestamp": self.base_timestamp,
            "rate_per_second": str(self.rate_per_second),
        }


__all__ = ["Checkpoint", "parse_exact_int"]
