"""
PDF export of a quote breakdown.

Uses fpdf2 (pure Python, no system dependencies). Internal document:
shows cost lines and the suggested resale price.

Sections:
1. Header + service
2. Configuration
3. Logistics
4. Costs
5. Suggested price
6. Notes (assumptions / fallbacks)
"""

from datetime import datetime
from typing import Optional

from fpdf import FPDF

from .config import settings
from .models import TransportMode, TRANSPORT_MODE_NAMES, SERVICE_KIND_NAMES
from .schemas import JobConfiguration, QuoteBreakdown
from .sales_text import accessories_text


def _fmt(amount) -> str:
    """Format a number as EUR 1,234.56"""
    try:
        return f"EUR {float(amount):,.2f}"
    except (ValueError, TypeError):
        return "EUR 0.00"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u20ac", "EUR")  # euro sign
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


def transport_label(breakdown: QuoteBreakdown) -> str:
    mode = breakdown.transport_mode
    if mode is None:
        return "None (assistance)"
    label = TRANSPORT_MODE_NAMES[mode]
    if mode != TransportMode.VAN:
        label += f" (x{breakdown.details.number_of_vehicles})"
    return label


class BreakdownPDF(FPDF):

    def __init__(self, company_name=""):
        super().__init__()
        self.company_name = company_name
        self.set_auto_page_break(auto=True, margin=20)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, _safe(f"Generated by OptiCost {self.company_name} for internal use - "
                               f"page {self.page_no()}/{{nb}}"), align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(243, 244, 246)
        self.set_text_color(0, 0, 0)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.ln(2)

    def key_value_row(self, label, value, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 10)
        self.cell(90, 6, _safe(str(label)))
        self.cell(0, 6, _safe(str(value)), align="R", new_x="LMARGIN", new_y="NEXT")


def generate_breakdown_pdf(job: JobConfiguration, breakdown: QuoteBreakdown,
                           region_name: str = "", model_name: Optional[str] = None,
                           company_name: Optional[str] = None) -> bytes:
    """
    Args:
        job: the priced job configuration
        breakdown: engine output for that job
        region_name: display name of the destination
        model_name: display name of the product model

    Returns:
        PDF bytes
    """
    company = company_name or settings.COMPANY_NAME
    pdf = BreakdownPDF(company_name=company)
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Header ──
    pdf.set_font("Helvetica", "B", 22)
    pdf.set_text_color(37, 99, 235)
    pdf.cell(0, 10, _safe(company.upper()), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(75, 85, 99)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, "Preliminary quote", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Date: {datetime.utcnow().strftime('%d/%m/%Y')}", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Installation and transport cost summary", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 11)
    service = SERVICE_KIND_NAMES[job.service_kind]
    if not job.is_installation:
        service += f" ({job.assistance_techs} technicians)"
    pdf.cell(0, 6, _safe(f"Service: {service}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 6, _safe(f"Destination: {region_name or job.destination_region or '-'}"),
             new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Configuration ──
    pdf.section_header("CONFIGURATION")
    if job.is_installation:
        pdf.key_value_row("Model", model_name or breakdown.model_id or job.model_id)
        pdf.key_value_row("Parking spots", job.spots)
        pdf.key_value_row("Accessories", accessories_text(job) or "-")
        if job.has_ballast:
            pdf.key_value_row("Ballast", f"{job.ballast_model_id.replace('_', ' ')} "
                                         f"(x{breakdown.details.ballast_count})")
        else:
            pdf.key_value_row("Ballast", "None")
    else:
        pdf.key_value_row("Duration", f"{job.assistance_days:g} days")
    pdf.ln(4)

    # ── Logistics ──
    pdf.section_header("LOGISTICS")
    pdf.key_value_row("Distance (round trip)", f"{job.distance_km * 2:,.0f} km")
    pdf.key_value_row("Schedule", f"{breakdown.total_days} working days")
    pdf.key_value_row("Total weight", f"{breakdown.total_weight_kg:,.0f} kg")
    pdf.key_value_row("Transport", transport_label(breakdown))
    pdf.key_value_row("Overnight stay",
                      "Yes (lodging included)" if breakdown.details.is_overnight else "No")
    if breakdown.details.vehicle_reason:
        pdf.set_font("Helvetica", "I", 9)
        pdf.multi_cell(0, 4.5, _safe(breakdown.details.vehicle_reason), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Costs ──
    pdf.section_header("COSTS (VAT excluded)")
    pdf.key_value_row("Labor", _fmt(breakdown.cost_labor))
    pdf.key_value_row("Travel & stay", _fmt(breakdown.cost_travel + breakdown.cost_stay))
    pdf.key_value_row("Rental / lifting", _fmt(breakdown.cost_equipment_rental))
    pdf.key_value_row("Material transport", _fmt(breakdown.cost_freight))
    pdf.set_text_color(220, 38, 38)
    pdf.key_value_row("TOTAL COSTS", _fmt(breakdown.total_cost), bold=True)
    pdf.set_text_color(0, 0, 0)
    pdf.ln(6)

    # ── Suggested price ──
    y = pdf.get_y()
    pdf.set_fill_color(239, 246, 255)
    pdf.rect(pdf.l_margin, y, pdf.w - pdf.l_margin - pdf.r_margin, 22, style="F")
    pdf.set_xy(pdf.l_margin + 6, y + 3)
    pdf.set_font("Helvetica", "", 12)
    pdf.set_text_color(30, 64, 175)
    pdf.cell(0, 7, "SUGGESTED PRICE (RESALE)", new_x="LMARGIN", new_y="NEXT")
    pdf.set_x(pdf.l_margin + 6)
    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 9, _fmt(breakdown.suggested_price), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.set_y(y + 28)

    # ── Notes ──
    if breakdown.assumptions:
        pdf.section_header("NOTES")
        pdf.set_font("Helvetica", "", 9)
        for note in breakdown.assumptions:
            pdf.multi_cell(0, 4.5, _safe(f"- {note}"), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
