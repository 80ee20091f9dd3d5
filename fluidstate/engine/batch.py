"""
Deferred multi-property retrieval.

A PropertyBatch records which kinds to read and in what basis. Nothing is
read from the backend until the batch is materialized, and a batch can be
materialized exactly once.
"""

import math
from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Sequence, Union

import numpy as np

from fluidstate.config import Basis, Phase
from fluidstate.engine.quantities import KindLike, QuantityKind, as_kind, make_quantity
from fluidstate.engine.units import check_basis
from fluidstate.errors import BatchConsumed

if TYPE_CHECKING:
    from fluidstate.engine.fluid import Fluid


class PropertyBatch:
    """Single-use request for N >= 1 properties of one Fluid."""

    def __init__(
        self,
        fluid: "Fluid",
        kinds: Sequence[KindLike],
        basis: Basis = Basis.MOLAR,
        valid: bool = True,
    ):
        if len(kinds) == 0:
            raise ValueError("A property batch needs at least one property")
        self._fluid = fluid
        self.kinds: tuple[QuantityKind, ...] = tuple(as_kind(k) for k in kinds)
        self.basis = check_basis(basis)
        self.valid = valid
        self._consumed = False

    def __len__(self) -> int:
        return len(self.kinds)

    def __repr__(self) -> str:
        names = ", ".join(k.value for k in self.kinds)
        state = "consumed" if self._consumed else ("valid" if self.valid else "invalid")
        return f"PropertyBatch([{names}], basis={self.basis.value}, {state})"

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _values(self) -> list[Union[float, Phase]]:
        if self._consumed:
            raise BatchConsumed("This property batch has already been materialized")
        self._consumed = True

        if not self.valid:
            return [Phase.UNKNOWN if k == QuantityKind.PHASE else math.nan for k in self.kinds]
        return self._fluid._read_many(list(self.kinds), self.basis)

    def _quantities(self) -> list[Any]:
        return [
            value if isinstance(value, Phase) else make_quantity(kind, value)
            for kind, value in zip(self.kinds, self._values())
        ]

    # Materializers

    def as_tuple(self) -> tuple:
        """Typed quantities in request order."""
        return tuple(self._quantities())

    def as_list(self) -> list[Union[float, Phase]]:
        """Raw scalar values in request order."""
        return self._values()

    def as_record(self, record_type=None):
        """
        Fill a record type positionally with the typed quantities.

        Without a record type, returns an ordered dict keyed by kind name.
        """
        quantities = self._quantities()
        if record_type is None:
            return OrderedDict((k.value, q) for k, q in zip(self.kinds, quantities))
        return record_type(*quantities)

    def as_container(self, container_type=tuple):
        """
        Build any container from the quantities.

        Named-tuple classes are called with positional fields; any other
        type is called with the list of quantities.
        """
        quantities = self._quantities()
        if isinstance(container_type, type) and issubclass(container_type, tuple) and hasattr(container_type, "_fields"):
            return container_type(*quantities)
        return container_type(quantities)

    def as_array(self) -> np.ndarray:
        """Raw float values as a 1-D numpy array. PHASE cannot be included."""
        if QuantityKind.PHASE in self.kinds:
            raise ValueError("PHASE is not numeric and cannot be returned in an array")
        return np.array(self._values(), dtype=float)
