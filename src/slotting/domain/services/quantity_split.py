"""Carton to pallet conversion and per-placement carton quantities."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_REMAINDER_THRESHOLD = 5


@dataclass(frozen=True)
class CartonSplit:
    """A carton quantity expressed as pallets.

    Attributes:
        full_pallets: Number of completely filled pallets.
        remainder_cartons: Cartons left over after the full pallets.
        cartons_per_pallet: Capacity of one full pallet.
        merge_remainder: Whether the remainder rides on the last full pallet
            instead of needing a pallet of its own.
    """

    full_pallets: int
    remainder_cartons: int
    cartons_per_pallet: int
    merge_remainder: bool = False

    @property
    def pallets_needed(self) -> int:
        if self.remainder_cartons and not self.merge_remainder:
            return self.full_pallets + 1
        return self.full_pallets

    @property
    def total_cartons(self) -> int:
        return self.full_pallets * self.cartons_per_pallet + self.remainder_cartons

    def cartons_for(self, ordinal: int) -> tuple[int, bool]:
        """Carton quantity and partial flag for the pallet at ``ordinal``.

        Ordinals are 0-based positions in placement order. Only the last
        pallet of the request can be partial.
        """
        is_last = ordinal == self.pallets_needed - 1
        if not is_last or not self.remainder_cartons:
            return self.cartons_per_pallet, False
        if self.merge_remainder:
            return self.cartons_per_pallet + self.remainder_cartons, True
        return self.remainder_cartons, True

    @classmethod
    def for_pallets(cls, pallets: int, cartons_per_pallet: int) -> "CartonSplit":
        """Split describing ``pallets`` full pallets."""
        return cls(
            full_pallets=pallets,
            remainder_cartons=0,
            cartons_per_pallet=cartons_per_pallet,
        )


def split_cartons(
    total_cartons: int,
    cartons_per_pallet: int,
    threshold: int = DEFAULT_REMAINDER_THRESHOLD,
) -> CartonSplit:
    """Convert a carton total into pallets.

    A remainder of at most ``threshold`` cartons is merged into the last full
    pallet; a larger remainder, or any quantity below one pallet, takes a
    partial pallet of its own.

    Example:
        >>> split_cartons(43, 20).pallets_needed
        2
        >>> split_cartons(50, 20).pallets_needed
        3
    """
    if total_cartons < 0:
        raise ValueError("Carton quantity cannot be negative")
    if cartons_per_pallet < 1:
        raise ValueError("Cartons per pallet must be at least 1")
    full, remainder = divmod(total_cartons, cartons_per_pallet)
    merge = 0 < remainder <= threshold and full > 0
    return CartonSplit(
        full_pallets=full,
        remainder_cartons=remainder,
        cartons_per_pallet=cartons_per_pallet,
        merge_remainder=merge,
    )
