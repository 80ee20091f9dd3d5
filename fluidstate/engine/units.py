"""
Molar / mass unit-basis conversion.

The backend always works per mole. Per-amount properties are divided by the
molar mass to get the per-mass value; density goes the other way because it
is amount per volume. Everything else is basis-independent.
"""

import math

from fluidstate.config import Basis
from fluidstate.engine.quantities import QuantityKind
from fluidstate.errors import InvalidUnitBasis

K = QuantityKind

PER_AMOUNT_KINDS = frozenset({K.H, K.S, K.U, K.G, K.A, K.CP, K.CV, K.V})
PER_VOLUME_KINDS = frozenset({K.RHO})


def check_basis(basis) -> Basis:
    """Return *basis* as a Basis, accepting the enum or its string value."""
    if isinstance(basis, Basis):
        return basis
    try:
        return Basis(basis.lower())
    except (AttributeError, ValueError):
        raise InvalidUnitBasis(
            f"Unsupported unit basis: {basis!r}. Use 'molar' or 'mass'."
        ) from None


class UnitConverter:
    """Converts property values between molar and mass basis."""

    def __init__(self, molar_mass: float):
        if not math.isfinite(molar_mass) or molar_mass <= 0.0:
            raise ValueError(f"Molar mass must be positive and finite, got {molar_mass}")
        self.molar_mass = molar_mass

    def to_mass(self, kind: QuantityKind, molar_value: float) -> float:
        if kind in PER_AMOUNT_KINDS:
            return molar_value / self.molar_mass
        if kind in PER_VOLUME_KINDS:
            return molar_value * self.molar_mass
        return molar_value

    def to_molar(self, kind: QuantityKind, mass_value: float) -> float:
        if kind in PER_AMOUNT_KINDS:
            return mass_value * self.molar_mass
        if kind in PER_VOLUME_KINDS:
            return mass_value / self.molar_mass
        return mass_value

    def to_basis(self, kind: QuantityKind, molar_value: float, basis: Basis) -> float:
        """Express a molar-basis value in *basis*."""
        if check_basis(basis) == Basis.MASS:
            return self.to_mass(kind, molar_value)
        return molar_value

    def from_basis(self, kind: QuantityKind, value: float, basis: Basis) -> float:
        """Convert a value given in *basis* back to molar basis."""
        if check_basis(basis) == Basis.MASS:
            return self.to_molar(kind, value)
        return value
