"""
Analysis pipeline behind POST /analyze.

normalize URL -> cached report? -> analyze_url + generate_heatmap in
parallel (separate render sessions) -> assemble report -> persist.
Storage problems are logged and never fail the request.
"""

import asyncio
import logging
import uuid

from pagelens import database
from pagelens.analyzer import analyze_url
from pagelens.config import get_settings
from pagelens.heatmap import generate_heatmap
from pagelens.insights import build_insights, calculate_seo_score
from pagelens.models import AnalysisReport, HeatmapData, PageAnalysis
from pagelens.urls import normalize_url

logger = logging.getLogger(__name__)

NO_TITLE = "No title found"


def build_report(url: str, analysis: PageAnalysis, heatmap: HeatmapData) -> AnalysisReport:
    seo = analysis.seo
    technical = analysis.technical
    title = seo.title.value or NO_TITLE
    return AnalysisReport(
        id=str(uuid.uuid4()),
        url=url,
        title=title,
        screenshot_url=heatmap.screenshot or None,
        heatmap_url=heatmap.heatmap_image or None,
        seo_score=calculate_seo_score(seo),
        load_time=technical.performance.load_time,
        page_size=technical.performance.resource_count,
        technologies=list(technical.technologies),
        insights=build_insights(title, analysis.content, seo, technical),
        content_analysis=analysis.content,
        seo_analysis=seo,
        technical_analysis=technical,
        heatmap_data=heatmap,
        is_public=True,
    )


async def _cached_report(url: str, settings) -> AnalysisReport | None:
    if settings.cache_ttl_seconds <= 0:
        return None
    try:
        return await database.get_recent_analysis(url, settings.cache_ttl_seconds)
    except Exception as e:
        logger.warning(f"[cache] Lookup failed for {url}: {e}")
        return None


async def _persist(report: AnalysisReport) -> None:
    try:
        await database.save_analysis(report)
    except Exception as e:
        logger.warning(f"[store] Saving analysis {report.id} failed (continuing without history): {e}")


async def run_analysis(url: str, refresh: bool = False, renderer=None, settings=None) -> AnalysisReport:
    """
    Analyze `url` end to end. Raises InputError before any render for a bad
    URL, and other AnalysisError subclasses if the DOM/SEO pass fails. A
    failed heatmap only empties the heatmap section.
    """
    settings = settings or get_settings()
    url = normalize_url(url)

    if not refresh:
        cached = await _cached_report(url, settings)
        if cached is not None:
            logger.info(f"[analyze] Returning cached analysis {cached.id} for {url}")
            return cached

    logger.info(f"[analyze] Analyzing {url}")
    # Wait for both sessions to finish (and close) before surfacing an error.
    analysis, heatmap = await asyncio.gather(
        analyze_url(url, renderer=renderer, settings=settings),
        generate_heatmap(url, renderer=renderer, settings=settings),
        return_exceptions=True,
    )
    if isinstance(analysis, BaseException):
        raise analysis
    if isinstance(heatmap, BaseException):
        logger.warning(f"[heatmap] Unexpected failure for {url}: {heatmap}")
        heatmap = HeatmapData.empty()

    report = build_report(url, analysis, heatmap)
    logger.info(f"[analyze] {url}: seo score {report.seo_score}, "
                f"{len(heatmap.heatmap_points)} heatmap points")
    await _persist(report)
    return report
