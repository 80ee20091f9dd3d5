"""
fluidstate FastAPI application entry point.
"""

from fastapi import FastAPI

from fluidstate.api.router import router

app = FastAPI(
    title="fluidstate API",
    description="Typed state-point and property queries for water/steam and other pure fluids",
    version="0.1.0",
)

app.include_router(router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "fluidstate"}
