from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_researcher
from ..research import LogisticsResearcher
from ..schemas import ResearchRequest, ResearchResult

router = APIRouter(prefix="/research", tags=["research"])


@router.post("", response_model=ResearchResult)
def research_logistics(body: ResearchRequest,
                       researcher: LogisticsResearcher = Depends(get_researcher)):
    """Estimate distance, tolls, hotel and ticket prices for an address."""
    if not researcher.available:
        raise HTTPException(status_code=503, detail="Logistics research is not configured (GEMINI_API_KEY missing)")
    result = researcher.research(body.address, body.start_date)
    if result is None:
        raise HTTPException(status_code=502, detail="Could not retrieve logistics data. Retry or enter values manually.")
    return result
