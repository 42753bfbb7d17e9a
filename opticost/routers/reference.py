from fastapi import APIRouter, Depends, Request

from ..deps import get_reference_data
from ..reference_data import ReferenceData, load_reference_data
from ..schemas import ReferenceSnapshot

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("", response_model=ReferenceSnapshot)
def get_reference(data: ReferenceData = Depends(get_reference_data)):
    return data.snapshot()


@router.post("/reload", response_model=ReferenceSnapshot)
def reload_reference(request: Request):
    """Re-fetch the spreadsheets. In-flight quotes keep the bundle they started with."""
    data = load_reference_data()
    request.app.state.reference_data = data
    return data.snapshot()
