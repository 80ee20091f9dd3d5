"""
Two-phase property interpolation.

Inside the vapor dome the backend cannot evaluate h, s, rho, u, cp and cv
directly. They are recovered by probing the saturated-liquid (x = 0) and
saturated-vapor (x = 1) states at the current pressure and blending linearly
by vapor quality. Density is blended through specific volume, which is the
quantity that is actually linear in quality.

The probes move the backend; it is always put back at (p, x) before
returning, including when a probe fails.
"""

import logging
import math
from typing import Iterable

from fluidstate.config import Phase
from fluidstate.engine.backend import FluidBackend
from fluidstate.engine.quantities import QuantityKind
from fluidstate.errors import TwoPhaseProbeError

logger = logging.getLogger(__name__)

K = QuantityKind

TWO_PHASE_KINDS = frozenset({K.H, K.S, K.RHO, K.U, K.CP, K.CV})

_READERS = {
    K.H: "enthalpy",
    K.S: "entropy",
    K.RHO: "density",
    K.U: "internal_energy",
    K.CP: "cp",
    K.CV: "cv",
}


def vapor_quality(backend: FluidBackend) -> float:
    """
    Vapor quality of the current state, clamped to [0, 1].

    Returns NaN above the critical point. A backend phase flag of liquid or
    gas resolves to exactly 0 or 1 without querying the backend's quality.
    """
    if (
        backend.pressure() >= backend.critical_pressure()
        and backend.temperature() >= backend.critical_temperature()
    ):
        return math.nan

    phase = backend.phase()
    if phase == Phase.LIQUID:
        return 0.0
    if phase == Phase.GAS:
        return 1.0
    return min(max(backend.vapor_quality(), 0.0), 1.0)


def _blend(liquid: float, vapor: float, quality: float) -> float:
    # Weighted form so x = 0 and x = 1 reproduce the endpoints exactly
    return (1.0 - quality) * liquid + quality * vapor


def interpolate_many(backend: FluidBackend, kinds: Iterable[QuantityKind]) -> dict[QuantityKind, float]:
    """
    Evaluate several two-phase properties with a single pair of endpoint probes.

    Args:
        backend: Backend currently holding a two-phase state.
        kinds: Subset of TWO_PHASE_KINDS to evaluate.

    Returns:
        Molar-basis value per requested kind.

    Raises:
        TwoPhaseProbeError: If the state is not two-phase, a kind cannot be
            interpolated, or the quality is undefined.
    """
    kinds = list(dict.fromkeys(kinds))
    unsupported = [k.value for k in kinds if k not in TWO_PHASE_KINDS]
    if unsupported:
        raise TwoPhaseProbeError(f"Cannot interpolate {', '.join(unsupported)} across the two-phase region")
    if backend.phase() != Phase.TWO_PHASE:
        raise TwoPhaseProbeError("Two-phase interpolation requested outside the two-phase region")

    pressure = backend.pressure()
    quality = vapor_quality(backend)
    if math.isnan(quality):
        raise TwoPhaseProbeError(f"Vapor quality is undefined at p={pressure}")

    try:
        backend.set_state_px(pressure, 0.0)
        liquid = {k: getattr(backend, _READERS[k])() for k in kinds}
        backend.set_state_px(pressure, 1.0)
        vapor = {k: getattr(backend, _READERS[k])() for k in kinds}
    except Exception as probe_error:
        logger.warning("Saturated-endpoint probe at p=%s failed: %s", pressure, probe_error)
        try:
            backend.set_state_px(pressure, quality)
        except Exception as restore_error:
            raise restore_error from probe_error
        raise
    backend.set_state_px(pressure, quality)

    result = {}
    for k in kinds:
        if k == K.RHO:
            result[k] = 1.0 / _blend(1.0 / liquid[k], 1.0 / vapor[k], quality)
        else:
            result[k] = _blend(liquid[k], vapor[k], quality)
    return result


def interpolate(backend: FluidBackend, kind: QuantityKind) -> float:
    """Evaluate one two-phase property by endpoint blending."""
    return interpolate_many(backend, [kind])[kind]
