"""
Logistics research assistant.

Asks Gemini (with web search) for driving distance, tolls, a typical hotel
price and a public-transport ticket price between the base of operations and
a destination address. The result only pre-fills job overrides; the engine
never depends on it.

Fallback: returns None when no API key is configured or anything fails.
"""

import logging
import math
import urllib.error
from typing import Optional

from .config import settings
from .gemini_client import call_gemini, extract_json_object
from .schemas import ResearchResult

logger = logging.getLogger(__name__)

DEFAULT_RESEARCH_HOTEL_PRICE = 80.0


def _number(value, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) and number > 0 else default


class LogisticsResearcher:

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 starting_address: Optional[str] = None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.starting_address = starting_address or settings.STARTING_ADDRESS

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def build_prompt(self, address: str, start_date: Optional[str] = None) -> str:
        return (
            f'Find logistics data for a work trip from "{self.starting_address}" '
            f'to "{address}". The trip starts on: {start_date or "next monday"}.\n\n'
            "Search for and estimate these 4 values:\n"
            "1. Driving distance (km), one way.\n"
            "2. Motorway tolls, one way, in Euro.\n"
            "3. Average price of a decent 3-star hotel/B&B within 15 km of the "
            "destination for 1 night (single room with breakfast) on that date.\n"
            "4. Price of a round-trip public transport ticket (train or plane plus "
            "local taxi) for 1 person from the base to the destination.\n\n"
            "If the destination is within 30 km, hotel and public transport may be 0.\n\n"
            "Return ONLY a raw JSON object (no markdown) with these keys:\n"
            '{"distance_km": number, "tolls_one_way": number, '
            '"hotel_avg_price": number, "public_transport_return_price": number}'
        )

    def parse_response(self, text: str, address: str) -> Optional[ResearchResult]:
        data = extract_json_object(text)
        if data is None:
            logger.warning("Research reply contained no JSON object")
            return None
        return ResearchResult(
            distance_km=_number(data.get("distance_km")),
            tolls_one_way=_number(data.get("tolls_one_way")),
            hotel_price=_number(data.get("hotel_avg_price"), DEFAULT_RESEARCH_HOTEL_PRICE),
            public_transport_price=_number(data.get("public_transport_return_price")),
            address=address,
        )

    def research(self, address: str, start_date: Optional[str] = None) -> Optional[ResearchResult]:
        if not address:
            return None
        if not self.available:
            logger.info("No GEMINI_API_KEY — skipping logistics research")
            return None
        try:
            text = call_gemini(self.build_prompt(address, start_date),
                               api_key=self.api_key, model=self.model, use_search=True)
        except (urllib.error.URLError, OSError, KeyError, IndexError, ValueError) as e:
            logger.warning("Logistics research failed for %r: %s", address, e)
            return None
        return self.parse_response(text, address)
