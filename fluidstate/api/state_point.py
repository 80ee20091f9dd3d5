"""
API routes for state point, saturation and fluid limit queries.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from fluidstate.config import DEFAULT_FLUID, Basis
from fluidstate.engine.state_point import fluid_limits, resolve_state_point, saturation_point
from fluidstate.errors import ConvergenceFailure, PropertyUnavailable
from fluidstate.models.state_point import (
    FluidLimitsOutput,
    SaturationOutput,
    StatePointInput,
    StatePointOutput,
)

router = APIRouter(prefix="/api/v1", tags=["state-point"])


@router.post("/state-point", response_model=StatePointOutput)
async def create_state_point(data: StatePointInput) -> StatePointOutput:
    """
    Resolve a fluid state point from two independent properties.

    Accepts any supported input pair in either order (e.g. P+T, P+X, T+S,
    RHO+U, V+T) and returns the requested properties.
    """
    try:
        result = resolve_state_point(
            input_pair=data.input_pair,
            values=data.values,
            basis=data.basis,
            fluid=data.fluid,
            properties=data.properties,
            label=data.label,
        )
        return result
    except (ValueError, ConvergenceFailure, PropertyUnavailable) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.get("/saturation", response_model=SaturationOutput)
async def saturation(
    pressure: Optional[float] = None,
    temperature: Optional[float] = None,
    basis: Basis = Basis.MOLAR,
    fluid: str = DEFAULT_FLUID,
) -> SaturationOutput:
    """
    Saturated liquid and vapor properties.

    Args:
        pressure: Saturation pressure in Pa (give this or temperature)
        temperature: Saturation temperature in K
        basis: molar or mass
        fluid: CoolProp fluid name
    """
    try:
        return saturation_point(pressure=pressure, temperature=temperature, basis=basis, fluid=fluid)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")


@router.get("/fluid-limits", response_model=FluidLimitsOutput)
async def limits(fluid: str = DEFAULT_FLUID) -> FluidLimitsOutput:
    """Molar mass, critical point and valid temperature / pressure range."""
    try:
        return fluid_limits(fluid)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
