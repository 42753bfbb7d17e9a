"""
Sales description generator.

Produces the text the sales team pastes into the CRM: an INSTALLATION and a
TRANSPORT section, formal and short. It must never mention internal costs,
margins or hourly rates, and always closes with the contact sentence.

Uses Gemini when configured; otherwise (or on any failure) a deterministic
template applying the same rules.
"""

import logging
import urllib.error
from typing import Optional

from .config import settings
from .gemini_client import call_gemini
from .models import TransportMode, TRANSPORT_MODE_NAMES, SERVICE_KIND_NAMES
from .schemas import JobConfiguration, QuoteBreakdown

logger = logging.getLogger(__name__)

CRANE_UNLOADING_TEXT = "Unloading on site included, with suitable equipment."
CUSTOMER_UNLOADING_TEXT = (
    "The customer must provide suitable unloading equipment on site (forklift or crane)."
)
OVERNIGHT_TEXT = "The quote includes board and lodging for the technical team."
INSULATED_TEXT = "Insulated roof panels: the extra load volume is already accounted for."


def contact_sentence(email: str) -> str:
    return f"For any technical or logistics question please reply to {email}"


def accessories_text(job: JobConfiguration) -> str:
    parts = []
    if job.has_pv:
        parts.append("photovoltaic")
    if job.has_led:
        parts.append("LED lighting")
    if job.has_tarp:
        parts.append("tarp")
    if job.has_insulated_panels:
        parts.append("insulated panels")
    return ", ".join(parts)


class SalesDescriptionGenerator:

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 contact_email: Optional[str] = None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.contact_email = contact_email or settings.CONTACT_EMAIL

    def generate(self, job: JobConfiguration, breakdown: QuoteBreakdown,
                 region_name: str = "", model_name: str = ""):
        """Returns (text, generated_by) where generated_by is 'ai' or 'template'."""
        if self.api_key:
            try:
                text = call_gemini(self.build_prompt(job, breakdown, region_name, model_name),
                                   api_key=self.api_key, model=self.model, temperature=0.4)
                if text and text.strip():
                    return self._ensure_contact(text.strip()), "ai"
                logger.warning("AI description was empty — using template")
            except (urllib.error.URLError, OSError, KeyError, IndexError, ValueError) as e:
                logger.warning("AI description failed: %s — using template", e)
        else:
            logger.info("No GEMINI_API_KEY — using template description")
        return self.build_template(job, breakdown, region_name, model_name), "template"

    def _ensure_contact(self, text: str) -> str:
        sentence = contact_sentence(self.contact_email)
        if sentence in text:
            return text
        return f"{text}\n\n{sentence}"

    def _rules(self, job: JobConfiguration, breakdown: QuoteBreakdown) -> list:
        rules = []
        if breakdown.transport_mode == TransportMode.CRANE_TRUCK:
            rules.append(CRANE_UNLOADING_TEXT)
        elif breakdown.transport_mode == TransportMode.FREIGHT_TRUCK:
            rules.append(CUSTOMER_UNLOADING_TEXT)
        if breakdown.details.is_overnight:
            rules.append(OVERNIGHT_TEXT)
        if job.is_installation and job.has_insulated_panels:
            rules.append(INSULATED_TEXT)
        return rules

    def build_prompt(self, job: JobConfiguration, breakdown: QuoteBreakdown,
                     region_name: str, model_name: str) -> str:
        mode = breakdown.transport_mode
        vehicles = (f"{breakdown.details.number_of_vehicles}x {TRANSPORT_MODE_NAMES[mode]}"
                    if mode else "none (assistance only)")
        crew = (job.active_techs_internal + job.active_techs_external
                if job.is_installation else job.assistance_techs)
        mandatory = "\n".join(f'- Include the sentence: "{r}"' for r in self._rules(job, breakdown))
        return (
            "You are an assistant for the sales team of a solar carport manufacturer.\n"
            "Write a professional description to paste into the CRM.\n"
            'Split it into two clear sections: "INSTALLATION" and "TRANSPORT".\n'
            "Formal tone, concise but complete.\n\n"
            "MANDATORY:\n"
            "- NEVER mention internal costs, margins, hourly rates or price breakdowns.\n"
            f'- End with exactly: "{contact_sentence(self.contact_email)}"\n'
            f"{mandatory}\n\n"
            "INPUT:\n"
            f"- Service: {SERVICE_KIND_NAMES[job.service_kind]}\n"
            f"- Destination: {region_name or job.destination_region}\n"
            f"- Model: {model_name or job.model_id}\n"
            f"- Parking spots: {job.spots}\n"
            f"- Accessories: {accessories_text(job) or 'none'}\n"
            f"- Ballast units: {breakdown.details.ballast_count}\n"
            f"- Estimated days on site: {breakdown.total_days}\n"
            f"- Crew: {crew} technicians\n"
            f"- Transport: {vehicles}\n"
            f"- Total material weight: {breakdown.total_weight_kg:,.0f} kg\n"
        )

    def build_template(self, job: JobConfiguration, breakdown: QuoteBreakdown,
                       region_name: str = "", model_name: str = "") -> str:
        destination = region_name or job.destination_region or "the customer site"
        lines = ["INSTALLATION"]
        if job.is_installation:
            accessories = accessories_text(job)
            lines.append(
                f"Turnkey installation of {job.spots} parking spots, model "
                f"{model_name or job.model_id}"
                + (f", including {accessories}" if accessories else "") + "."
            )
            if breakdown.details.ballast_count:
                lines.append(f"Ballasted foundation with {breakdown.details.ballast_count} ballast units.")
        else:
            lines.append(f"Technical assistance on site by {job.assistance_techs} technician(s).")
        lines.append(f"Estimated duration on site: {breakdown.total_days} working day(s), in {destination}.")
        if breakdown.details.is_overnight:
            lines.append(OVERNIGHT_TEXT)

        lines.append("")
        lines.append("TRANSPORT")
        mode = breakdown.transport_mode
        if mode is None:
            lines.append("No material shipment required.")
        else:
            lines.append(
                f"Delivery by {TRANSPORT_MODE_NAMES[mode].lower()}"
                + (f" ({breakdown.details.number_of_vehicles} vehicles)"
                   if breakdown.details.number_of_vehicles > 1 else "")
                + f", total material weight about {breakdown.total_weight_kg:,.0f} kg."
            )
            if mode == TransportMode.CRANE_TRUCK:
                lines.append(CRANE_UNLOADING_TEXT)
            elif mode == TransportMode.FREIGHT_TRUCK:
                lines.append(CUSTOMER_UNLOADING_TEXT)
            if job.has_insulated_panels:
                lines.append(INSULATED_TEXT)

        lines.append("")
        lines.append(contact_sentence(self.contact_email))
        return "\n".join(lines)
