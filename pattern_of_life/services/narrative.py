import json
import logging
from typing import Optional, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..config import GEMINI_API_KEY, GEMINI_MODEL
from ..schemas.schemas import AnalysisResult, AOIType, AreaOfInterest, Cluster, RiskLevel, SignalPoint

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
You are an expert Pattern of Life (PoL) Analyst.
Your task is to analyze movement data to identify routines, common routes, and deviations.
Your output should be objective, analytical, and professional.
Focus on:
1. Routine establishment (Regular commutes, repeated stops, established corridors).
2. Anomaly detection (Unexpected stops, deviations from the norm).
3. Efficiency and logic of the route.

Do not use military or tactical terminology.
"""

DAILY_FALLBACK = AnalysisResult(
    summary="Analysis unavailable due to connection error.",
    attention_level=RiskLevel.LOW,
    key_insights=["Data unavailable"],
)
TOTAL_FAILURE = "Analysis failed completely."


def _client(client=None):
    return client if client is not None else genai.Client(api_key=GEMINI_API_KEY)


def _grounded_config(lat: float, lng: float) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        tools=[
            types.Tool(google_maps=types.GoogleMaps()),
            types.Tool(google_search=types.GoogleSearch()),
        ],
        tool_config=types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(latitude=lat, longitude=lng),
            ),
        ),
    )


def grounding_sources(response) -> str:
    """Comma-separated titles (or URIs) of the web chunks the answer was grounded on."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    names = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        name = (getattr(web, "title", None) or getattr(web, "uri", None)) if web else None
        if name:
            names.append(name)
    return ", ".join(names)


def _with_sources(text: Optional[str], default: str, response, label: str = "Source") -> str:
    sources = grounding_sources(response)
    suffix = f"\n({label}: {sources})" if sources else ""
    return (text or default) + suffix


def summarize_points(points: Sequence[SignalPoint]) -> str:
    return "\n".join(
        f"- {p.time}: {p.lat:.4f}, {p.lng:.4f} ({p.description or 'Unknown'})" for p in points
    )


def parse_daily_analysis(text: str) -> AnalysisResult:
    """Validate the model's JSON answer. Accepts camelCase or snake_case keys."""
    payload = json.loads(text or "{}")
    return AnalysisResult(
        summary=payload["summary"],
        attention_level=payload.get("attentionLevel", payload.get("attention_level")),
        key_insights=payload.get("keyInsights", payload.get("key_insights", [])),
    )


async def analyze_daily_pattern(day: str, points: Sequence[SignalPoint], client=None,
                                model: str = GEMINI_MODEL) -> AnalysisResult:
    prompt = f"""
    Analyze the following movement data for {day}.

    Data:
    {summarize_points(points)}

    Provide a JSON response with:
    - summary: A brief narrative of the day's activity, focusing on the flow of movement.
    - attentionLevel: LOW (Routine), MEDIUM (Minor Deviation), or HIGH (Major Deviation).
    - keyInsights: An array of 2-3 specific observations (e.g., "Commute time matches historical average", "Unusual stop at Location X").
    """
    try:
        response = await _client(client).aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
            ),
        )
        result = parse_daily_analysis(response.text)
        logger.info(f"[✓] Daily analysis for {day}: attention={result.attention_level.value}")
        return result
    except (json.JSONDecodeError, KeyError, ValidationError) as e:
        logger.error(f"[✗] Unreadable daily analysis for {day}: {e}")
        return DAILY_FALLBACK
    except Exception as e:
        logger.error(f"[✗] Daily analysis failed for {day}: {e}")
        return DAILY_FALLBACK


async def fallback_search(lat: float, lng: float, context: str, client=None, model: str = GEMINI_MODEL) -> str:
    """Plain search-grounded lookup used when the maps-grounded request is rejected."""
    prompt = f"""
    I have coordinates: {lat}, {lng}.
    Context: {context}

    Using Google Search:
    1. Find what is at or near these coordinates.
    2. Describe the location type (Commercial, Residential, etc).
    """
    try:
        response = await _client(client).aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())]),
        )
        return _with_sources(response.text, "Fallback analysis unavailable.", response, "Sources")
    except Exception as e:
        logger.error(f"[✗] Fallback search failed for ({lat}, {lng}): {e}")
        return TOTAL_FAILURE


async def intel_for_cluster(cluster: Cluster, client=None, model: str = GEMINI_MODEL) -> str:
    lat, lng = cluster.centroid
    prompt = f"""
    Search for places and businesses at these coordinates: {lat}, {lng}.
    What is the primary function of this area (Residential, Commercial, Industrial)?
    Does it match the description "{cluster.description}"?
    """
    try:
        response = await _client(client).aio.models.generate_content(
            model=model, contents=prompt, config=_grounded_config(lat, lng),
        )
        return _with_sources(response.text, "No intelligence available.", response)
    except Exception as e:
        logger.warning(f"[✗] Maps grounding failed for cluster {cluster.code}, falling back to search: {e}")
        return await fallback_search(lat, lng, cluster.description, client, model)


def aoi_context(aoi: AreaOfInterest) -> str:
    if aoi.type is AOIType.GAP:
        return f"Signal lost for {aoi.duration}."
    return f"Dwell time of {aoi.duration}."


async def analyze_aoi(aoi: AreaOfInterest, client=None, model: str = GEMINI_MODEL) -> str:
    lat, lng = aoi.center
    context = aoi_context(aoi)
    prompt = f"""
    Identify the nearest buildings or landmarks to coordinates: {lat}, {lng}.
    Context: {context}
    Hypothesize the reason for the stop.
    """
    try:
        response = await _client(client).aio.models.generate_content(
            model=model, contents=prompt, config=_grounded_config(lat, lng),
        )
        return _with_sources(response.text, "Analysis unavailable.", response)
    except Exception as e:
        logger.warning(f"[✗] AOI analysis failed for {aoi.id}, falling back: {e}")
        return await fallback_search(lat, lng, context, client, model)


async def analyze_location(lat: float, lng: float, client=None, model: str = GEMINI_MODEL) -> str:
    """Site survey of an arbitrary coordinate: nearest address, nearby businesses, environment."""
    lat_dir = "North" if lat >= 0 else "South"
    lng_dir = "East" if lng >= 0 else "West"
    prompt = f"""
    Perform a comprehensive site survey for the location.

    Location Data:
    - Decimal: {lat} ({lat_dir}), {lng} ({lng_dir})

    Using Google Maps or Search:
    1. Identify the nearest street address and major intersection.
    2. Search for all businesses, restaurants, retail stores, and landmarks within a 400m radius of these coordinates.
       - List these businesses.
       - Mention if there are any popular chains.
    3. Describe the environment (e.g., "Dense Commercial", "Rural Residential", "University Campus").
    """
    try:
        response = await _client(client).aio.models.generate_content(
            model=model, contents=prompt, config=_grounded_config(lat, lng),
        )
        return _with_sources(response.text, "Site analysis unavailable.", response, "Sources")
    except Exception as e:
        logger.warning(f"[✗] Maps grounding rejected site survey for ({lat}, {lng}), falling back: {e}")
        return await fallback_search(lat, lng, "Site Survey", client, model)
