from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .reference_data import load_reference_data
from .routers import quote, reference, research

logger = logging.getLogger("opticost")

app = FastAPI(
    title="OptiCost",
    description="Installation and logistics cost quoting for solar carports",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quote.router, prefix="/api")
app.include_router(reference.router, prefix="/api")
app.include_router(research.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "opticost"}


@app.on_event("startup")
def load_reference():
    """Load rate table, catalogs and freight prices once; held read-only on app.state."""
    app.state.reference_data = load_reference_data()
    logger.info("Reference data ready (sources: %s)",
                ", ".join(app.state.reference_data.sources) or "defaults")
