"""
Data types shared by the scorer, collector, extractors and API.

Field names are snake_case in Python and camelCase on the wire
(`heatmapPoints`, `altTextCoverage`, ...). Models accept either form.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenWireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Geometry / heatmap
# ---------------------------------------------------------------------------

class Viewport(FrozenWireModel):
    width: int = 1920
    height: int = 1080

    @property
    def area(self) -> int:
        return self.width * self.height


class PageGeometry(FrozenWireModel):
    scroll_height: float

    @classmethod
    def from_scroll_heights(cls, viewport: Viewport, *heights: float) -> "PageGeometry":
        """Effective page height: the tallest of the document, body and viewport."""
        return cls(scroll_height=max([viewport.height, *[h or 0 for h in heights]]))


class ElementRect(FrozenWireModel):
    left: float
    top: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height


class ElementSnapshot(FrozenWireModel):
    """One DOM element as read from the page for scoring."""

    tag: str
    has_label: bool = False
    rect: ElementRect


class AttentionPoint(FrozenWireModel):
    x: float
    y: float
    value: float


class NormalizedPoint(FrozenWireModel):
    x: float
    y: float
    value: float


class HeatmapData(FrozenWireModel):
    screenshot: str = ""
    heatmap_image: str = ""
    heatmap_points: tuple[NormalizedPoint, ...] = ()

    @classmethod
    def empty(cls) -> "HeatmapData":
        """Degraded result when generation fails: well-formed, no content."""
        return cls()


# ---------------------------------------------------------------------------
# Content analysis
# ---------------------------------------------------------------------------

class HeadingCounts(WireModel):
    h1: int = 0
    h2: int = 0
    h3: int = 0
    h4: int = 0
    h5: int = 0
    h6: int = 0


class ImageCounts(WireModel):
    total: int = 0
    with_alt: int = 0
    without_alt: int = 0


class LinkCounts(WireModel):
    total: int = 0
    internal: int = 0
    external: int = 0


class ContentAnalysis(WireModel):
    word_count: int = 0
    headings: HeadingCounts = Field(default_factory=HeadingCounts)
    images: ImageCounts = Field(default_factory=ImageCounts)
    links: LinkCounts = Field(default_factory=LinkCounts)


# ---------------------------------------------------------------------------
# SEO analysis
# ---------------------------------------------------------------------------

class TextTag(WireModel):
    present: bool = False
    length: int = 0
    value: str | None = None


class SeoHeadings(WireModel):
    has_h1: bool = False
    h1_count: int = 0
    heading_structure: bool = False


class SeoImages(WireModel):
    alt_text_coverage: float = 0


class SeoLinks(WireModel):
    internal_link_count: int = 0
    external_link_count: int = 0


class SeoAnalysis(WireModel):
    title: TextTag = Field(default_factory=TextTag)
    meta_description: TextTag = Field(default_factory=TextTag)
    headings: SeoHeadings = Field(default_factory=SeoHeadings)
    images: SeoImages = Field(default_factory=SeoImages)
    links: SeoLinks = Field(default_factory=SeoLinks)


# ---------------------------------------------------------------------------
# Technical analysis
# ---------------------------------------------------------------------------

class Performance(WireModel):
    load_time: int = 0  # ms
    resource_count: int = 0


class Accessibility(WireModel):
    score: int = 0
    issues: list[str] = Field(default_factory=list)


class Security(WireModel):
    has_ssl: bool = Field(default=False, alias="hasSSL")
    security_headers: list[str] = Field(default_factory=list)


class TechnicalAnalysis(WireModel):
    technologies: list[str] = Field(default_factory=list)
    performance: Performance = Field(default_factory=Performance)
    accessibility: Accessibility = Field(default_factory=Accessibility)
    security: Security = Field(default_factory=Security)


class PageAnalysis(WireModel):
    """Result of the DOM/SEO/technical pass over one render session."""

    content: ContentAnalysis
    seo: SeoAnalysis
    technical: TechnicalAnalysis


# ---------------------------------------------------------------------------
# Insights / report
# ---------------------------------------------------------------------------

InsightStatus = Literal["good", "warning", "error"]


class SeoInsight(WireModel):
    title: str
    status: InsightStatus
    description: str
    details: str | None = None
    recommendations: list[str] = Field(default_factory=list)


class SeoInsights(WireModel):
    score: int = 0
    insights: list[SeoInsight] = Field(default_factory=list)


class Heading(WireModel):
    level: int
    text: str


class ContentMetrics(WireModel):
    word_count: int | None = None
    paragraph_count: int | None = None
    image_count: int | None = None
    link_count: LinkCounts | None = None
    reading_time: int | None = None  # minutes


class ContentInsights(WireModel):
    title: str | None = None
    meta_description: str | None = None
    headings: list[Heading] = Field(default_factory=list)
    metrics: ContentMetrics = Field(default_factory=ContentMetrics)


class AnalysisInsights(WireModel):
    seo: SeoInsights = Field(default_factory=SeoInsights)
    content: ContentInsights = Field(default_factory=ContentInsights)
    technical: TechnicalAnalysis = Field(default_factory=TechnicalAnalysis)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisReport(WireModel):
    id: str
    url: str
    title: str | None = None
    screenshot_url: str | None = None
    heatmap_url: str | None = None
    seo_score: int | None = None
    load_time: int | None = None
    page_size: int | None = None
    technologies: list[str] = Field(default_factory=list)
    insights: AnalysisInsights | None = None
    content_analysis: ContentAnalysis = Field(default_factory=ContentAnalysis)
    seo_analysis: SeoAnalysis = Field(default_factory=SeoAnalysis)
    technical_analysis: TechnicalAnalysis = Field(default_factory=TechnicalAnalysis)
    heatmap_data: HeatmapData = Field(default_factory=HeatmapData.empty)
    is_public: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
