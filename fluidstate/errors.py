"""
Exception types raised by the fluidstate engine.

Errors that stem from bad caller input subclass ValueError so the API layer
can map them to 422 responses the same way it handles any other validation
failure.
"""


class FluidStateError(Exception):
    """Base class for all fluidstate errors."""


class InvalidSpecification(FluidStateError, ValueError):
    """The two input quantities do not form a supported specification pair."""


class InvalidUnitBasis(FluidStateError, ValueError):
    """A unit basis other than molar or mass was requested."""


class UnknownQuantity(FluidStateError, ValueError):
    """A quantity name could not be mapped to a QuantityKind."""


class ConvergenceFailure(FluidStateError, RuntimeError):
    """The EOS backend failed to converge for the given inputs."""


class TwoPhaseProbeError(FluidStateError, RuntimeError):
    """The two-phase interpolator was invoked outside its preconditions."""


class StateNotSet(FluidStateError, RuntimeError):
    """A state-dependent property was queried before a successful set_state."""


class BatchConsumed(FluidStateError, RuntimeError):
    """A property batch was materialized more than once."""


class PropertyUnavailable(FluidStateError, LookupError):
    """The backend cannot evaluate the requested property at the current state."""
