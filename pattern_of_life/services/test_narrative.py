import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from pattern_of_life.core.gaps import detect_gaps
from pattern_of_life.core.pipeline import build_clusters
from pattern_of_life.schemas.schemas import RiskLevel
from pattern_of_life.services import narrative


def gemini_response(text, sources=()):
    chunks = [SimpleNamespace(web=SimpleNamespace(title=title, uri=None)) for title in sources]
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))],
    )


def fake_client(*responses):
    """Gemini client whose async generate_content yields the given responses or raises exceptions in order."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=list(responses))
    return client


def test_daily_pattern_parses_json(make_point):
    payload = {
        "summary": "Commute followed by a long retail stop.",
        "attentionLevel": "MEDIUM",
        "keyInsights": ["Departure matches prior Mondays", "Unusual 2h gap after 08:10"],
    }
    client = fake_client(gemini_response(json.dumps(payload)))

    result = asyncio.run(narrative.analyze_daily_pattern("MON", [make_point(description="Home")], client=client))

    assert result.attention_level is RiskLevel.MEDIUM
    assert result.key_insights[1] == "Unusual 2h gap after 08:10"
    prompt = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert "08:00: 32.7840, -97.3810 (Home)" in prompt


def test_daily_pattern_falls_back_on_error(make_point):
    client = fake_client(RuntimeError("quota exceeded"))
    result = asyncio.run(narrative.analyze_daily_pattern("MON", [make_point()], client=client))
    assert result == narrative.DAILY_FALLBACK


def test_daily_pattern_falls_back_on_bad_json(make_point):
    client = fake_client(gemini_response("not json"))
    result = asyncio.run(narrative.analyze_daily_pattern("MON", [make_point()], client=client))
    assert result.summary == "Analysis unavailable due to connection error."
    assert result.key_insights == ["Data unavailable"]


def test_cluster_intel_appends_sources(monday_dataset):
    cluster = build_clusters(monday_dataset, "MON")[0]
    client = fake_client(gemini_response("Residential street.", sources=["Maps listing", "County records"]))

    text = asyncio.run(narrative.intel_for_cluster(cluster, client=client))

    assert text == "Residential street.\n(Source: Maps listing, County records)"


def test_cluster_intel_uses_search_fallback(monday_dataset):
    cluster = build_clusters(monday_dataset, "MON")[0]
    client = fake_client(RuntimeError("400 INVALID_ARGUMENT"), gemini_response(None))

    text = asyncio.run(narrative.intel_for_cluster(cluster, client=client))

    assert text == "Fallback analysis unavailable."
    assert client.aio.models.generate_content.await_count == 2


def test_total_failure_never_raises(make_point):
    aoi = detect_gaps([make_point(time="08:00"), make_point(time="10:00")])[0]
    client = fake_client(RuntimeError("down"), RuntimeError("still down"))

    assert asyncio.run(narrative.analyze_aoi(aoi, client=client)) == narrative.TOTAL_FAILURE


def test_aoi_prompt_describes_gap(make_point):
    aoi = detect_gaps([make_point(time="08:00"), make_point(time="10:00")])[0]
    client = fake_client(gemini_response("Likely indoors."))

    assert asyncio.run(narrative.analyze_aoi(aoi, client=client)) == "Likely indoors."
    prompt = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert "Signal lost for 2h 0m." in prompt


def test_location_survey_hemispheres():
    client = fake_client(gemini_response(None))

    text = asyncio.run(narrative.analyze_location(32.784, -97.381, client=client))

    assert text == "Site analysis unavailable."
    prompt = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert "32.784 (North), -97.381 (West)" in prompt


def test_grounding_sources_handles_missing_metadata():
    assert narrative.grounding_sources(SimpleNamespace(candidates=None)) == ""
    assert narrative.grounding_sources(SimpleNamespace(candidates=[SimpleNamespace(grounding_metadata=None)])) == ""
