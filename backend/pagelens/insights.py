"""
SEO rule table: turns an SeoAnalysis into good/warning/error insights and a
0-100 score. Thresholds and wording are fixed; the frontend and stored
reports depend on them.
"""

import math

from pagelens.models import (
    AnalysisInsights,
    ContentAnalysis,
    ContentInsights,
    ContentMetrics,
    Heading,
    LinkCounts,
    SeoAnalysis,
    SeoInsight,
    SeoInsights,
    TechnicalAnalysis,
    TextTag,
)

TITLE_RULE = {
    "title": "Title Tag Optimization",
    "min": 30,
    "max": 60,
    "good": (
        "Title length is optimal",
        "Title is {n} characters long, which is within the recommended range.",
        ["Keep the title descriptive and relevant to the page content"],
    ),
    "short": (
        "Title is too short",
        "Title is only {n} characters long. Recommended length is 30-60 characters.",
        ["Expand the title to be more descriptive", "Include relevant keywords"],
    ),
    "long": (
        "Title is too long",
        "Title is {n} characters long. It may be truncated in search results.",
        ["Shorten the title to 60 characters or less", "Keep the most important keywords at the beginning"],
    ),
    "missing": (
        "Missing title tag",
        "The page does not have a title tag, which is crucial for SEO.",
        ["Add a descriptive title tag", "Include relevant keywords", "Keep it between 30-60 characters"],
    ),
}

META_DESCRIPTION_RULE = {
    "title": "Meta Description Optimization",
    "min": 120,
    "max": 160,
    "good": (
        "Meta description length is optimal",
        "Meta description is {n} characters long, which is within the recommended range.",
        ["Ensure the description accurately summarizes the page content"],
    ),
    "short": (
        "Meta description is too short",
        "Meta description is only {n} characters long. Recommended length is 120-160 characters.",
        ["Expand the description to be more informative", "Include relevant keywords and call-to-action"],
    ),
    "long": (
        "Meta description is too long",
        "Meta description is {n} characters long. It may be truncated in search results.",
        ["Shorten the description to 160 characters or less", "Keep the most important information at the beginning"],
    ),
    "missing": (
        "Missing meta description",
        "The page does not have a meta description, which helps search engines understand the page content.",
        ["Add a compelling meta description", "Include relevant keywords", "Keep it between 120-160 characters"],
    ),
}

HEADING_TITLE = "Heading Structure"
ALT_TEXT_TITLE = "Image Alt Text"

ALT_GOOD = 90
ALT_WARNING = 70

# Points awarded per SeoAnalysis signal; sums to 100.
SCORE_WEIGHTS = {
    "title": 25,
    "meta_description": 25,
    "has_h1": 20,
    "heading_structure": 15,
    "alt_text": 15,
}
ALT_SCORE_THRESHOLD = 80

WORDS_PER_MINUTE = 200


def _band(rule: dict, tag: TextTag) -> tuple[str, str]:
    """(band key, status) for a length-checked tag."""
    if not tag.present:
        return "missing", "error"
    if rule["min"] <= tag.length <= rule["max"]:
        return "good", "good"
    if tag.length < rule["min"]:
        return "short", "warning"
    return "long", "warning"


def length_insight(rule: dict, tag: TextTag) -> SeoInsight:
    band, status = _band(rule, tag)
    description, details, recommendations = rule[band]
    return SeoInsight(
        title=rule["title"],
        status=status,
        description=description,
        details=details.format(n=tag.length),
        recommendations=list(recommendations),
    )


def heading_insight(seo: SeoAnalysis) -> SeoInsight:
    headings = seo.headings
    if not headings.has_h1:
        return SeoInsight(
            title=HEADING_TITLE,
            status="error",
            description="Missing H1 tag",
            details="The page does not have an H1 tag, which is important for SEO and accessibility.",
            recommendations=[
                "Add an H1 tag with the main page topic",
                "Include relevant keywords in the H1",
                "Use H2-H6 for subheadings",
            ],
        )
    if headings.heading_structure:
        return SeoInsight(
            title=HEADING_TITLE,
            status="good",
            description="Proper heading structure detected",
            details="The page has exactly one H1 tag, which is the recommended structure.",
            recommendations=["Ensure H1 contains the main keyword for the page"],
        )
    return SeoInsight(
        title=HEADING_TITLE,
        status="warning",
        description="Multiple H1 tags detected",
        details=f"The page has {headings.h1_count} H1 tags. It's recommended to have only one H1 per page.",
        recommendations=[
            "Use only one H1 tag per page",
            "Use H2-H6 for subheadings",
            "Ensure proper heading hierarchy",
        ],
    )


def alt_text_insight(coverage: float) -> SeoInsight:
    if coverage >= ALT_GOOD:
        return SeoInsight(
            title=ALT_TEXT_TITLE,
            status="good",
            description="Excellent alt text coverage",
            details=f"{coverage:.1f}% of images have alt text.",
            recommendations=["Continue providing descriptive alt text for all images"],
        )
    if coverage >= ALT_WARNING:
        return SeoInsight(
            title=ALT_TEXT_TITLE,
            status="warning",
            description="Good alt text coverage",
            details=f"{coverage:.1f}% of images have alt text. Aim for 100% coverage.",
            recommendations=["Add alt text to remaining images", "Make alt text descriptive and relevant"],
        )
    return SeoInsight(
        title=ALT_TEXT_TITLE,
        status="error",
        description="Poor alt text coverage",
        details=f"Only {coverage:.1f}% of images have alt text.",
        recommendations=[
            "Add descriptive alt text to all images",
            "Include relevant keywords where appropriate",
            "Improve accessibility for screen readers",
        ],
    )


def generate_seo_insights(seo: SeoAnalysis) -> list[SeoInsight]:
    return [
        length_insight(TITLE_RULE, seo.title),
        length_insight(META_DESCRIPTION_RULE, seo.meta_description),
        heading_insight(seo),
        alt_text_insight(seo.images.alt_text_coverage),
    ]


def calculate_seo_score(seo: SeoAnalysis) -> int:
    earned = {
        "title": seo.title.present,
        "meta_description": seo.meta_description.present,
        "has_h1": seo.headings.has_h1,
        "heading_structure": seo.headings.heading_structure,
        "alt_text": seo.images.alt_text_coverage > ALT_SCORE_THRESHOLD,
    }
    return sum(SCORE_WEIGHTS[key] for key, ok in earned.items() if ok)


def heading_outline(content: ContentAnalysis) -> list[Heading]:
    """Placeholder outline: one entry per counted heading, in level order."""
    outline = []
    for level in range(1, 7):
        count = getattr(content.headings, f"h{level}")
        outline.extend(Heading(level=level, text=f"H{level} Heading {i + 1}") for i in range(count))
    return outline


def reading_time(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_MINUTE)


def build_insights(
    title: str,
    content: ContentAnalysis,
    seo: SeoAnalysis,
    technical: TechnicalAnalysis,
) -> AnalysisInsights:
    return AnalysisInsights(
        seo=SeoInsights(score=calculate_seo_score(seo), insights=generate_seo_insights(seo)),
        content=ContentInsights(
            title=title,
            meta_description=seo.meta_description.value,
            headings=heading_outline(content),
            metrics=ContentMetrics(
                word_count=content.word_count,
                image_count=content.images.total,
                link_count=LinkCounts(**content.links.model_dump()),
                reading_time=reading_time(content.word_count),
            ),
        ),
        technical=technical,
    )
