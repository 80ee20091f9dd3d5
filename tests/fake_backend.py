"""
Deterministic in-memory backend for engine tests.

Single phase is an ideal gas with constant cp. The saturation line is linear,
Tsat(p) = 300 K + p / 1e5 Pa, with a critical point at 20 MPa / 500 K. Inside
the dome the caloric getters return NaN, like a backend that cannot evaluate
them there; exactly on the saturation line (x = 0 or x = 1) they return the
saturated-liquid or saturated-vapor value.
"""

import math

from fluidstate.config import UNIVERSAL_GAS_CONSTANT, Phase
from fluidstate.engine.backend import FluidBackend
from fluidstate.errors import ConvergenceFailure

R = UNIVERSAL_GAS_CONSTANT

MOLAR_MASS = 0.018015
P_CRIT = 2.0e7
T_CRIT = 500.0
T0 = 300.0
P0 = 1.0e5

CP_GAS = 35.0
CP_LIQUID = 75.0
CV_LIQUID = 74.0
RHO_LIQUID = 50000.0
LATENT_HEAT = 40000.0


def t_sat(p):
    return 300.0 + p / 1.0e5


def p_sat(t):
    return (t - 300.0) * 1.0e5


def liquid_endpoint(p):
    t = t_sat(p)
    h = CP_LIQUID * t
    return {
        "h": h,
        "s": 0.25 * t,
        "rho": RHO_LIQUID,
        "u": h - p / RHO_LIQUID,
        "cp": CP_LIQUID,
        "cv": CV_LIQUID,
    }


def vapor_endpoint(p):
    t = t_sat(p)
    h = CP_LIQUID * t + LATENT_HEAT
    rho = p / (R * t)
    return {
        "h": h,
        "s": 0.25 * t + LATENT_HEAT / t,
        "rho": rho,
        "u": h - p / rho,
        "cp": CP_GAS,
        "cv": CP_GAS - R,
    }


class FakeBackend(FluidBackend):
    """Toy fluid that records every state-setting call."""

    PHASE_MAP = {
        "liquid": Phase.LIQUID,
        "supercritical_liquid": Phase.LIQUID,
        "gas": Phase.GAS,
        "supercritical_gas": Phase.GAS,
        "twophase": Phase.TWO_PHASE,
        "critical_point": Phase.CRITICAL,
        "supercritical": Phase.SUPERCRITICAL,
    }

    def __init__(self, raw_phase_override=None, fail_quality=None, transport=True, missing=()):
        self.raw_phase_override = raw_phase_override
        self.fail_quality = fail_quality
        self.transport = transport
        # Optional getters that behave as not implemented
        self.missing = frozenset(missing)
        self.calls = []
        self.phase_reads = 0
        self._p = None
        self._t = None
        self._x = None

    def new_instance(self):
        return FakeBackend(
            raw_phase_override=self.raw_phase_override,
            fail_quality=self.fail_quality,
            transport=self.transport,
            missing=self.missing,
        )

    # State setting

    def _single(self, name, args, p, t):
        self.calls.append((name, args))
        self._p = self._t = self._x = None
        if not (p > 0.0 and t > 0.0) or math.isnan(p) or math.isnan(t):
            raise ConvergenceFailure(f"{name}{args} did not converge")
        self._p, self._t = p, t

    def _saturated(self, name, args, p, x):
        self.calls.append((name, args))
        self._p = self._t = self._x = None
        if self.fail_quality is not None and x == self.fail_quality:
            raise ConvergenceFailure(f"{name}{args} probe failure")
        if not (0.0 < p <= P_CRIT) or not (0.0 <= x <= 1.0):
            raise ConvergenceFailure(f"{name}{args} did not converge")
        self._p, self._t, self._x = p, t_sat(p), x

    def set_state_pt(self, pressure, temperature):
        self._single("pt", (pressure, temperature), pressure, temperature)

    def set_state_px(self, pressure, quality):
        self._saturated("px", (pressure, quality), pressure, quality)

    def set_state_tx(self, temperature, quality):
        self._saturated("tx", (temperature, quality), p_sat(temperature), quality)

    def set_state_ph(self, pressure, enthalpy):
        self._single("ph", (pressure, enthalpy), pressure, enthalpy / CP_GAS)

    def set_state_ps(self, pressure, entropy):
        t = T0 * math.exp((entropy + R * math.log(pressure / P0)) / CP_GAS) if pressure > 0 else -1.0
        self._single("ps", (pressure, entropy), pressure, t)

    def set_state_dp(self, density, pressure):
        t = pressure / (density * R) if density > 0 else -1.0
        self._single("dp", (density, pressure), pressure, t)

    def set_state_dt(self, density, temperature):
        self._single("dt", (density, temperature), density * R * temperature, temperature)

    def set_state_ds(self, density, entropy):
        if density <= 0:
            self._single("ds", (density, entropy), -1.0, -1.0)
            return
        t = math.exp((entropy + CP_GAS * math.log(T0) + R * math.log(density * R / P0)) / (CP_GAS - R))
        self._single("ds", (density, entropy), density * R * t, t)

    def set_state_dh(self, density, enthalpy):
        t = enthalpy / CP_GAS
        self._single("dh", (density, enthalpy), density * R * t, t)

    def set_state_du(self, density, internal_energy):
        t = internal_energy / (CP_GAS - R)
        self._single("du", (density, internal_energy), density * R * t, t)

    def set_state_hs(self, enthalpy, entropy):
        t = enthalpy / CP_GAS
        p = P0 * math.exp((CP_GAS * math.log(t / T0) - entropy) / R) if t > 0 else -1.0
        self._single("hs", (enthalpy, entropy), p, t)

    def set_state_pu(self, pressure, internal_energy):
        self._single("pu", (pressure, internal_energy), pressure, internal_energy / (CP_GAS - R))

    def set_state_ts(self, temperature, entropy):
        p = P0 * math.exp((CP_GAS * math.log(temperature / T0) - entropy) / R) if temperature > 0 else -1.0
        self._single("ts", (temperature, entropy), p, temperature)

    # Trivial properties

    def molar_mass(self):
        return MOLAR_MASS

    def critical_pressure(self):
        return P_CRIT

    def critical_temperature(self):
        return T_CRIT

    def min_pressure(self):
        return 611.655

    def max_pressure(self):
        return 1.0e9

    def min_temperature(self):
        return 273.16

    def max_temperature(self):
        return 2000.0

    # State properties

    def _saturated_value(self, key):
        if self._x == 0.0:
            return liquid_endpoint(self._p)[key]
        if self._x == 1.0:
            return vapor_endpoint(self._p)[key]
        return math.nan

    def _value(self, key):
        if self._p is None:
            raise RuntimeError("FakeBackend has no state")
        if self._x is not None:
            return self._saturated_value(key)
        t, p = self._t, self._p
        return {
            "h": CP_GAS * t,
            "s": CP_GAS * math.log(t / T0) - R * math.log(p / P0),
            "rho": p / (R * t),
            "u": (CP_GAS - R) * t,
            "cp": CP_GAS,
            "cv": CP_GAS - R,
        }[key]

    def temperature(self):
        return self._t

    def pressure(self):
        return self._p

    def vapor_quality(self):
        return self._x if self._x is not None else -1.0

    def enthalpy(self):
        return self._value("h")

    def entropy(self):
        return self._value("s")

    def density(self):
        return self._value("rho")

    def internal_energy(self):
        return self._value("u")

    def _check_provided(self, name):
        if name in self.missing:
            raise NotImplementedError

    def cp(self):
        self._check_provided("cp")
        return self._value("cp")

    def cv(self):
        self._check_provided("cv")
        return self._value("cv")

    def speed_of_sound(self):
        self._check_provided("speed_of_sound")
        gamma = CP_GAS / (CP_GAS - R)
        return math.sqrt(gamma * R * self._t / MOLAR_MASS)

    def dynamic_viscosity(self):
        if not self.transport:
            raise NotImplementedError
        return 1.0e-5

    def thermal_conductivity(self):
        if not self.transport:
            raise NotImplementedError
        return 0.025

    def raw_phase(self):
        self.phase_reads += 1
        if self.raw_phase_override is not None:
            return self.raw_phase_override
        if self._x is not None:
            return "twophase"
        p, t = self._p, self._t
        if p >= P_CRIT and t >= T_CRIT:
            return "supercritical"
        if p >= P_CRIT:
            return "supercritical_liquid"
        if t >= T_CRIT:
            return "supercritical_gas"
        if t > t_sat(p):
            return "gas"
        return "liquid"

    def probe_count(self):
        """Number of saturated-endpoint probes issued so far."""
        return sum(1 for name, args in self.calls if name == "px" and args[1] in (0.0, 1.0))
