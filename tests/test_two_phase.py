"""
Tests for two-phase interpolation between saturated endpoints.
"""

import logging
import math

import pytest

import fake_backend
from fake_backend import FakeBackend
from fluidstate.engine.quantities import QuantityKind
from fluidstate.engine.two_phase import (
    TWO_PHASE_KINDS,
    interpolate,
    interpolate_many,
    vapor_quality,
)
from fluidstate.errors import ConvergenceFailure, TwoPhaseProbeError

K = QuantityKind

PRESSURE = 1.0e6  # Tsat = 310 K in the toy model


def approx(value: float, rel_tol: float = 1e-12, abs_tol: float = 1e-9):
    return pytest.approx(value, rel=rel_tol, abs=abs_tol)


class _RestoreFails(FakeBackend):
    """Fails to return to the starting mixture state once armed."""

    restore_fails = False

    def set_state_px(self, pressure, quality):
        if self.restore_fails and 0.0 < quality < 1.0:
            self.calls.append(("px", (pressure, quality)))
            raise ConvergenceFailure(f"px({pressure}, {quality}) restore failed")
        super().set_state_px(pressure, quality)


def _two_phase(quality, **options):
    backend = FakeBackend(**options)
    backend.set_state_px(PRESSURE, quality)
    return backend


# ---------------------------------------------------------------------------
# vapor_quality
# ---------------------------------------------------------------------------

class TestVaporQuality:

    def test_inside_dome(self):
        assert vapor_quality(_two_phase(0.25)) == 0.25

    def test_liquid_is_zero(self):
        backend = FakeBackend()
        backend.set_state_pt(1.0e6, 305.0)
        assert vapor_quality(backend) == 0.0

    def test_gas_is_one(self):
        backend = FakeBackend()
        backend.set_state_pt(1.0e5, 400.0)
        assert vapor_quality(backend) == 1.0

    def test_supercritical_is_nan(self):
        backend = FakeBackend()
        backend.set_state_pt(3.0e7, 600.0)
        assert math.isnan(vapor_quality(backend))

    def test_clamped_to_unit_interval(self):
        backend = FakeBackend(raw_phase_override="twophase")
        backend.set_state_pt(1.0e5, 400.0)
        # Single-phase quality reads -1 from the backend
        assert vapor_quality(backend) == 0.0


# ---------------------------------------------------------------------------
# Linear exactness
# ---------------------------------------------------------------------------

class TestLinearExactness:

    @pytest.mark.parametrize("quality", [0.0, 0.25, 0.5, 0.75, 1.0])
    @pytest.mark.parametrize("kind, key", [(K.H, "h"), (K.S, "s"), (K.U, "u"), (K.CP, "cp"), (K.CV, "cv")])
    def test_linear_in_quality(self, quality, kind, key):
        liquid = fake_backend.liquid_endpoint(PRESSURE)[key]
        vapor = fake_backend.vapor_endpoint(PRESSURE)[key]
        expected = (1.0 - quality) * liquid + quality * vapor
        assert interpolate(_two_phase(quality), kind) == approx(expected)

    @pytest.mark.parametrize("quality", [0.0, 0.25, 0.5, 0.75, 1.0])
    def test_density_through_volume(self, quality):
        rho_l = fake_backend.liquid_endpoint(PRESSURE)["rho"]
        rho_v = fake_backend.vapor_endpoint(PRESSURE)["rho"]
        expected = 1.0 / ((1.0 - quality) / rho_l + quality / rho_v)
        assert interpolate(_two_phase(quality), K.RHO) == approx(expected)

    def test_endpoints_reproduced_exactly(self):
        assert interpolate(_two_phase(0.0), K.H) == fake_backend.liquid_endpoint(PRESSURE)["h"]
        assert interpolate(_two_phase(1.0), K.H) == fake_backend.vapor_endpoint(PRESSURE)["h"]


# ---------------------------------------------------------------------------
# Probe transparency
# ---------------------------------------------------------------------------

class TestProbeTransparency:

    def test_state_restored(self):
        backend = _two_phase(0.4)
        before = (backend.pressure(), backend.temperature(), backend.vapor_quality())
        interpolate(backend, K.H)
        assert (backend.pressure(), backend.temperature(), backend.vapor_quality()) == before
        assert backend.calls[-3:] == [
            ("px", (PRESSURE, 0.0)),
            ("px", (PRESSURE, 1.0)),
            ("px", (PRESSURE, 0.4)),
        ]
        assert backend.pressure() == PRESSURE
        assert backend.vapor_quality() == 0.4

    def test_state_restored_after_probe_failure(self):
        backend = _two_phase(0.4, fail_quality=1.0)
        with pytest.raises(ConvergenceFailure):
            interpolate(backend, K.H)
        assert backend.calls[-1] == ("px", (PRESSURE, 0.4))
        assert backend.vapor_quality() == 0.4

    def test_probe_error_kept_when_restore_fails(self, caplog):
        backend = _RestoreFails(fail_quality=1.0)
        backend.set_state_px(PRESSURE, 0.4)
        backend.restore_fails = True
        with caplog.at_level(logging.WARNING, logger="fluidstate.engine.two_phase"):
            with pytest.raises(ConvergenceFailure, match="restore") as excinfo:
                interpolate(backend, K.H)
        assert isinstance(excinfo.value.__cause__, ConvergenceFailure)
        assert "probe failure" in str(excinfo.value.__cause__)
        assert "probe failure" in caplog.text

    def test_many_kinds_share_one_pair_of_probes(self):
        backend = _two_phase(0.6)
        before = backend.probe_count()
        values = interpolate_many(backend, TWO_PHASE_KINDS)
        assert set(values) == TWO_PHASE_KINDS
        assert backend.probe_count() - before == 2


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

class TestPreconditions:

    def test_rejects_single_phase_state(self):
        backend = FakeBackend()
        backend.set_state_pt(1.0e5, 400.0)
        with pytest.raises(TwoPhaseProbeError, match="outside the two-phase region"):
            interpolate(backend, K.H)

    def test_rejects_non_interpolable_kind(self):
        with pytest.raises(TwoPhaseProbeError, match="Cannot interpolate"):
            interpolate(_two_phase(0.5), K.W)

    def test_rejection_issues_no_probes(self):
        backend = FakeBackend()
        backend.set_state_pt(1.0e5, 400.0)
        calls = list(backend.calls)
        with pytest.raises(TwoPhaseProbeError):
            interpolate(backend, K.H)
        assert backend.calls == calls
