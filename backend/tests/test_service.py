import pytest

from conftest import FakeRenderer, page_dom
from pagelens import database, service
from pagelens.collector import ELEMENT_SNAPSHOT_JS
from pagelens.errors import InputError, NavigationTimeoutError
from pagelens.models import AnalysisReport, HeatmapData


@pytest.fixture
def stored(monkeypatch):
    """Capture saves instead of talking to Supabase."""
    saved = []

    async def save_analysis(report):
        saved.append(report)
        return report

    monkeypatch.setattr(database, "save_analysis", save_analysis)
    return saved


async def test_report_for_one_h1_page_without_meta_description(settings, stored):
    renderer = FakeRenderer(results=page_dom(h1_count=1, images=10, images_with_alt=5, meta_description=None))
    report = await service.run_analysis("Example.com/", renderer=renderer, settings=settings)

    assert report.url == "https://example.com"
    assert report.seo_analysis.headings.heading_structure is True
    assert report.seo_analysis.meta_description.present is False
    assert report.seo_analysis.images.alt_text_coverage == 50
    assert report.seo_score == 60
    assert report.insights.seo.score == 60
    assert report.title == "A page title that is forty-five characters!!"
    assert report.load_time == 1234
    assert report.page_size == 17
    assert report.technologies == ["React", "Bootstrap"]
    assert report.screenshot_url == report.heatmap_data.screenshot
    assert len(report.heatmap_data.heatmap_points) == 6
    assert stored == [report]

    # analysis and heatmap each used (and closed) their own session
    assert len(renderer.sessions) == 2
    assert [s.close_calls for s in renderer.sessions] == [1, 1]


async def test_report_serializes_to_camel_case(settings, stored):
    report = await service.run_analysis("https://example.com", renderer=FakeRenderer(), settings=settings)
    data = report.model_dump(mode="json", by_alias=True)
    assert {"seoScore", "contentAnalysis", "seoAnalysis", "technicalAnalysis", "heatmapData"} <= data.keys()
    assert {"screenshot", "heatmapImage", "heatmapPoints"} == data["heatmapData"].keys()
    assert AnalysisReport.model_validate(data) == report


async def test_missing_title_falls_back(settings, stored):
    report = await service.run_analysis(
        "https://example.com", renderer=FakeRenderer(results=page_dom(title="")), settings=settings,
    )
    assert report.title == "No title found"
    assert report.seo_score == 60 - 25


async def test_invalid_url_never_opens_a_session(settings, stored):
    renderer = FakeRenderer()
    with pytest.raises(InputError):
        await service.run_analysis("not-a-valid-url", renderer=renderer, settings=settings)
    assert renderer.sessions == []
    assert stored == []


async def test_heatmap_failure_does_not_block_analysis(settings, stored):
    renderer = FakeRenderer(evaluate_error=RuntimeError("snapshot failed"), fail_on=ELEMENT_SNAPSHOT_JS)
    report = await service.run_analysis("https://example.com", renderer=renderer, settings=settings)
    assert report.heatmap_data == HeatmapData.empty()
    assert report.screenshot_url is None
    assert report.seo_score == 60
    assert [s.close_calls for s in renderer.sessions] == [1, 1]


async def test_analysis_failure_is_fatal_and_every_session_closes(settings, stored):
    renderer = FakeRenderer(goto_error=Exception("Timeout 2000ms exceeded."))
    with pytest.raises(NavigationTimeoutError):
        await service.run_analysis("https://example.com", renderer=renderer, settings=settings)
    assert [s.close_calls for s in renderer.sessions] == [1, 1]
    assert stored == []


async def test_storage_failure_is_not_fatal(settings, monkeypatch):
    async def broken_save(report):
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in .env")

    monkeypatch.setattr(database, "save_analysis", broken_save)
    report = await service.run_analysis("https://example.com", renderer=FakeRenderer(), settings=settings)
    assert report.seo_score == 60


async def test_recent_report_is_reused(settings, stored, monkeypatch):
    cached = AnalysisReport(id="cached-id", url="https://example.com")
    lookups = []

    async def get_recent_analysis(url, max_age_seconds):
        lookups.append((url, max_age_seconds))
        return cached

    monkeypatch.setattr(database, "get_recent_analysis", get_recent_analysis)
    settings.cache_ttl_seconds = 600
    renderer = FakeRenderer()

    report = await service.run_analysis("https://EXAMPLE.com/", renderer=renderer, settings=settings)
    assert report is cached
    assert lookups == [("https://example.com", 600)]
    assert renderer.sessions == []

    fresh = await service.run_analysis("https://example.com", refresh=True, renderer=renderer, settings=settings)
    assert fresh.id != "cached-id"
    assert len(renderer.sessions) == 2


async def test_cache_lookup_failure_falls_through_to_a_fresh_render(settings, stored, monkeypatch):
    async def broken_lookup(url, max_age_seconds):
        raise ValueError("no credentials")

    monkeypatch.setattr(database, "get_recent_analysis", broken_lookup)
    settings.cache_ttl_seconds = 600
    renderer = FakeRenderer()
    report = await service.run_analysis("https://example.com", renderer=renderer, settings=settings)
    assert report.url == "https://example.com"
    assert len(renderer.sessions) == 2
