"""
Typed thermodynamic quantities.

Every scalar handed to or returned from a Fluid carries its kind. A pressure
and a temperature with the same magnitude are different values, and a value
only becomes another kind through an explicit conversion (density and
specific volume are the only reciprocal pair).
"""

from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict

from fluidstate.errors import UnknownQuantity


class QuantityKind(str, Enum):
    T = "T"
    P = "P"
    H = "H"
    S = "S"
    U = "U"
    A = "A"
    G = "G"
    RHO = "RHO"
    V = "V"
    CP = "CP"
    CV = "CV"
    KAPPA = "KAPPA"
    ALPHA = "ALPHA"
    W = "W"
    Z = "Z"
    X = "X"
    ETA = "ETA"
    NU = "NU"
    TC = "TC"
    PR = "PR"
    MW = "MW"
    T_SAT = "T_SAT"
    P_SAT = "P_SAT"
    T_CRIT = "T_CRIT"
    P_CRIT = "P_CRIT"
    PHASE = "PHASE"

    @classmethod
    def parse(cls, name: str) -> "QuantityKind":
        """
        Map a symbol or long name (case-insensitive) to a QuantityKind.

        Raises:
            UnknownQuantity: If the name is not recognized.
        """
        key = " ".join(str(name).replace("_", " ").split()).upper()
        try:
            return _ALIASES[key]
        except KeyError:
            raise UnknownQuantity(f"Unknown quantity: {name!r}") from None


_ALIASES: dict[str, QuantityKind] = {
    "T": QuantityKind.T,
    "TEMPERATURE": QuantityKind.T,
    "P": QuantityKind.P,
    "PRESSURE": QuantityKind.P,
    "H": QuantityKind.H,
    "ENTHALPY": QuantityKind.H,
    "S": QuantityKind.S,
    "ENTROPY": QuantityKind.S,
    "U": QuantityKind.U,
    "INTERNAL ENERGY": QuantityKind.U,
    "A": QuantityKind.A,
    "HELMHOLTZ ENERGY": QuantityKind.A,
    "G": QuantityKind.G,
    "GIBBS ENERGY": QuantityKind.G,
    "RHO": QuantityKind.RHO,
    "D": QuantityKind.RHO,
    "DENSITY": QuantityKind.RHO,
    "V": QuantityKind.V,
    "VOL": QuantityKind.V,
    "VOLUME": QuantityKind.V,
    "SPECIFIC VOLUME": QuantityKind.V,
    "CP": QuantityKind.CP,
    "CV": QuantityKind.CV,
    "KAPPA": QuantityKind.KAPPA,
    "ISOTHERMAL COMPRESSIBILITY": QuantityKind.KAPPA,
    "ALPHA": QuantityKind.ALPHA,
    "THERMAL EXPANSION": QuantityKind.ALPHA,
    "W": QuantityKind.W,
    "SPEED OF SOUND": QuantityKind.W,
    "Z": QuantityKind.Z,
    "COMPRESSIBILITY FACTOR": QuantityKind.Z,
    "X": QuantityKind.X,
    "Q": QuantityKind.X,
    "QUALITY": QuantityKind.X,
    "VAPOR QUALITY": QuantityKind.X,
    "ETA": QuantityKind.ETA,
    "DYNAMIC VISCOSITY": QuantityKind.ETA,
    "NU": QuantityKind.NU,
    "KINEMATIC VISCOSITY": QuantityKind.NU,
    "TC": QuantityKind.TC,
    "THERMAL CONDUCTIVITY": QuantityKind.TC,
    "PR": QuantityKind.PR,
    "PRANDTL NUMBER": QuantityKind.PR,
    "MW": QuantityKind.MW,
    "MOLAR MASS": QuantityKind.MW,
    "MOLECULAR WEIGHT": QuantityKind.MW,
    "TSAT": QuantityKind.T_SAT,
    "T SAT": QuantityKind.T_SAT,
    "SATURATION TEMPERATURE": QuantityKind.T_SAT,
    "PSAT": QuantityKind.P_SAT,
    "P SAT": QuantityKind.P_SAT,
    "SATURATION PRESSURE": QuantityKind.P_SAT,
    "TCRIT": QuantityKind.T_CRIT,
    "T CRIT": QuantityKind.T_CRIT,
    "CRITICAL TEMPERATURE": QuantityKind.T_CRIT,
    "PCRIT": QuantityKind.P_CRIT,
    "P CRIT": QuantityKind.P_CRIT,
    "CRITICAL PRESSURE": QuantityKind.P_CRIT,
    "PHASE": QuantityKind.PHASE,
}


class Quantity(BaseModel):
    """An immutable scalar tagged with its QuantityKind."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[QuantityKind]
    value: float

    def __init__(self, value: float, /, **data: Any) -> None:
        super().__init__(value=value, **data)

    def __float__(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    __str__ = __repr__


def _reciprocal(quantity: Quantity) -> float:
    if quantity.value == 0.0:
        raise ValueError(f"Cannot invert {quantity!r}: value is zero")
    return 1.0 / quantity.value


class T(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.T


class P(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.P


class H(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.H


class S(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.S


class U(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.U


class A(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.A


class G(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.G


class Rho(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.RHO

    def to_volume(self) -> "V":
        return V(_reciprocal(self))


class V(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.V

    def to_density(self) -> Rho:
        return Rho(_reciprocal(self))


class Cp(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.CP


class Cv(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.CV


class Kappa(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.KAPPA


class Alpha(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.ALPHA


class W(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.W


class Z(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.Z


class X(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.X


class Eta(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.ETA


class Nu(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.NU


class TC(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.TC


class PR(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.PR


class MW(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.MW


class Tsat(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.T_SAT


class Psat(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.P_SAT


class Tcrit(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.T_CRIT


class Pcrit(Quantity):
    kind: ClassVar[QuantityKind] = QuantityKind.P_CRIT


# Long-form aliases
Temperature = T
Pressure = P
Enthalpy = H
Entropy = S
InternalEnergy = U
HelmholtzEnergy = A
GibbsEnergy = G
Density = Rho
Volume = V
VaporQuality = X
MolarMass = MW


QUANTITY_TYPES: dict[QuantityKind, type[Quantity]] = {
    cls.kind: cls
    for cls in (
        T, P, H, S, U, A, G, Rho, V, Cp, Cv, Kappa, Alpha, W, Z, X,
        Eta, Nu, TC, PR, MW, Tsat, Psat, Tcrit, Pcrit,
    )
}

KindLike = Union[QuantityKind, type[Quantity], str]


def as_kind(kind: KindLike) -> QuantityKind:
    """Normalize a QuantityKind, Quantity subclass or name to a QuantityKind."""
    if isinstance(kind, QuantityKind):
        return kind
    if isinstance(kind, type) and issubclass(kind, Quantity) and kind is not Quantity:
        return kind.kind
    if isinstance(kind, str):
        return QuantityKind.parse(kind)
    raise UnknownQuantity(f"Cannot interpret {kind!r} as a quantity kind")


def make_quantity(kind: QuantityKind, value: float) -> Quantity:
    """Build the typed Quantity for *kind*."""
    try:
        return QUANTITY_TYPES[kind](float(value))
    except KeyError:
        raise UnknownQuantity(f"{kind.value} has no scalar quantity type") from None
