"""
Quote endpoints.

POST /api/quote             — price a job, returns QuoteBreakdown
POST /api/quote/pdf         — same body, returns the printable breakdown
POST /api/quote/description — same body, returns the CRM sales text
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..deps import get_reference_data, get_description_generator
from ..engine import QuoteEngine
from ..pdf_generator import generate_breakdown_pdf
from ..reference_data import ReferenceData
from ..sales_text import SalesDescriptionGenerator
from ..schemas import QuoteRequest, QuoteBreakdown, DescriptionResponse

router = APIRouter(prefix="/quote", tags=["quote"])

engine = QuoteEngine()


def _price(body: QuoteRequest, data: ReferenceData) -> QuoteBreakdown:
    job = body.job
    return engine.calculate(
        job,
        data.rates_with(body.rates),
        data.models,
        data.ballast_models,
        data.region(job.destination_region),
    )


def _names(body: QuoteRequest, data: ReferenceData, breakdown: QuoteBreakdown):
    region = data.region(body.job.destination_region)
    region_name = region.region if region and region.region else body.job.destination_region
    model = data.model(breakdown.model_id) if breakdown.model_id else None
    return region_name, (model.name if model else breakdown.model_id)


@router.post("", response_model=QuoteBreakdown)
def create_quote(body: QuoteRequest, data: ReferenceData = Depends(get_reference_data)):
    return _price(body, data)


@router.post("/pdf")
def quote_pdf(body: QuoteRequest, data: ReferenceData = Depends(get_reference_data)):
    breakdown = _price(body, data)
    region_name, model_name = _names(body, data, breakdown)
    pdf_bytes = generate_breakdown_pdf(body.job, breakdown, region_name, model_name)
    code = body.job.destination_region or "NA"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Quote_{code}.pdf"'},
    )


@router.post("/description", response_model=DescriptionResponse)
def quote_description(
    body: QuoteRequest,
    data: ReferenceData = Depends(get_reference_data),
    generator: SalesDescriptionGenerator = Depends(get_description_generator),
):
    breakdown = _price(body, data)
    region_name, model_name = _names(body, data, breakdown)
    text, source = generator.generate(body.job, breakdown, region_name, model_name)
    return DescriptionResponse(text=text, generated_by=source)
