"""
Content, SEO and technical extractors.

Each extractor runs one read-only page.evaluate() that returns raw DOM
signals; the counting/classification happens here in Python. The three
passes do not mutate the page and can run concurrently on one session.
"""

import asyncio
from urllib.parse import urlsplit

from pagelens.models import (
    Accessibility,
    ContentAnalysis,
    HeadingCounts,
    ImageCounts,
    LinkCounts,
    Performance,
    Security,
    SeoAnalysis,
    SeoHeadings,
    SeoImages,
    SeoLinks,
    TechnicalAnalysis,
    TextTag,
)

CONTENT_JS = '''() => {
    const text = document.body ? (document.body.innerText || '') : '';
    const headings = {};
    for (const level of ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']) {
        headings[level] = document.querySelectorAll(level).length;
    }
    const images = [...document.querySelectorAll('img')];
    return {
        wordCount: (text.match(/\\S+/g) || []).length,
        headings,
        imageCount: images.length,
        imagesWithAlt: images.filter(img => img.hasAttribute('alt')).length,
        origin: window.location.origin,
        links: [...document.querySelectorAll('a')].map(a => a.href || ''),
    };
}'''

SEO_JS = '''() => {
    const meta = document.querySelector('meta[name="description"]');
    const images = [...document.querySelectorAll('img')];
    return {
        title: document.title || '',
        metaDescription: meta ? (meta.getAttribute('content') || null) : null,
        h1Count: document.querySelectorAll('h1').length,
        imageCount: images.length,
        imagesWithAlt: images.filter(img => img.hasAttribute('alt')).length,
        origin: window.location.origin,
        links: [...document.querySelectorAll('a')].map(a => a.href || ''),
    };
}'''

TECHNICAL_JS = '''() => {
    return {
        globals: {
            angular: typeof window.angular !== 'undefined',
            React: typeof window.React !== 'undefined',
            Vue: typeof window.Vue !== 'undefined',
            jQuery: typeof window.jQuery !== 'undefined',
        },
        scriptSrcs: [...document.querySelectorAll('script[src]')].map(s => s.getAttribute('src') || ''),
        resourceCount:
            document.querySelectorAll('img').length +
            document.querySelectorAll('script').length +
            document.querySelectorAll('link[rel="stylesheet"]').length +
            document.querySelectorAll('video').length +
            document.querySelectorAll('audio').length,
        imagesMissingAlt: document.querySelectorAll('img:not([alt])').length,
        h1Count: document.querySelectorAll('h1').length,
        unlabelledRoles: [...document.querySelectorAll('[role]')]
            .filter(el => !el.hasAttribute('aria-label'))
            .map(el => el.getAttribute('role')),
        protocol: window.location.protocol,
        metaHttpEquiv: [...document.querySelectorAll('meta[http-equiv]')].map(m => ({
            name: m.getAttribute('http-equiv') || '',
            content: m.getAttribute('content') || '',
        })),
    };
}'''

# window global -> technology name
GLOBAL_SIGNATURES = {
    "angular": "Angular",
    "React": "React",
    "Vue": "Vue",
    "jQuery": "jQuery",
}

# substring of a <script src> -> technology name
SCRIPT_SIGNATURES = {
    "bootstrap": "Bootstrap",
    "tailwind": "Tailwind CSS",
}

SECURITY_HEADERS = ["X-Frame-Options", "Content-Security-Policy", "X-Content-Type-Options"]


# ---------------------------------------------------------------------------
# Pure builders
# ---------------------------------------------------------------------------

def _origin(url: str) -> str:
    parts = urlsplit(url or "")
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}".lower()


def split_links(hrefs: list[str], origin: str) -> tuple[int, int]:
    """(internal, external). Anchors without an href count as external."""
    page_origin = _origin(origin) or (origin or "").lower()
    internal = sum(1 for href in hrefs if page_origin and _origin(href) == page_origin)
    return internal, len(hrefs) - internal


def alt_text_coverage(total: int, with_alt: int) -> float:
    if not total:
        return 0
    return with_alt / total * 100


def build_content_analysis(raw: dict) -> ContentAnalysis:
    links = raw.get("links") or []
    internal, external = split_links(links, raw.get("origin", ""))
    total_images = raw.get("imageCount", 0)
    with_alt = raw.get("imagesWithAlt", 0)
    return ContentAnalysis(
        word_count=raw.get("wordCount", 0),
        headings=HeadingCounts(**(raw.get("headings") or {})),
        images=ImageCounts(total=total_images, with_alt=with_alt, without_alt=total_images - with_alt),
        links=LinkCounts(total=len(links), internal=internal, external=external),
    )


def _text_tag(value: str | None) -> TextTag:
    return TextTag(present=bool(value), length=len(value or ""), value=value or None)


def build_seo_analysis(raw: dict) -> SeoAnalysis:
    h1_count = raw.get("h1Count", 0)
    internal, external = split_links(raw.get("links") or [], raw.get("origin", ""))
    return SeoAnalysis(
        title=_text_tag(raw.get("title")),
        meta_description=_text_tag(raw.get("metaDescription")),
        headings=SeoHeadings(has_h1=h1_count > 0, h1_count=h1_count, heading_structure=h1_count == 1),
        images=SeoImages(alt_text_coverage=alt_text_coverage(raw.get("imageCount", 0), raw.get("imagesWithAlt", 0))),
        links=SeoLinks(internal_link_count=internal, external_link_count=external),
    )


def detect_technologies(globals_: dict, script_srcs: list[str]) -> list[str]:
    found = [name for key, name in GLOBAL_SIGNATURES.items() if globals_.get(key)]
    for needle, name in SCRIPT_SIGNATURES.items():
        if any(needle in (src or "").lower() for src in script_srcs):
            found.append(name)
    return found


def check_accessibility(images_missing_alt: int, h1_count: int, unlabelled_roles: list[str]) -> Accessibility:
    issues = ["Image missing alt text"] * images_missing_alt
    if h1_count == 0:
        issues.append("No H1 heading found")
    if h1_count > 1:
        issues.append("Multiple H1 headings found")
    for role in unlabelled_roles:
        issues.append(f'Element with role="{role}" missing aria-label')
    return Accessibility(score=max(0, 100 - len(issues) * 10), issues=issues)


def check_security(protocol: str, meta_http_equiv: list[dict], response_headers: dict | None = None) -> Security:
    response_headers = {k.lower() for k in (response_headers or {})}
    found = []
    for header in SECURITY_HEADERS:
        in_meta = any(
            header.lower() in (m.get("name") or "").lower() or header in (m.get("content") or "")
            for m in meta_http_equiv
        )
        if in_meta or header.lower() in response_headers:
            found.append(header)
    return Security(has_ssl=protocol == "https:", security_headers=found)


def build_technical_analysis(raw: dict, load_time: int, response_headers: dict | None = None) -> TechnicalAnalysis:
    return TechnicalAnalysis(
        technologies=detect_technologies(raw.get("globals") or {}, raw.get("scriptSrcs") or []),
        performance=Performance(load_time=load_time, resource_count=raw.get("resourceCount", 0)),
        accessibility=check_accessibility(
            raw.get("imagesMissingAlt", 0),
            raw.get("h1Count", 0),
            raw.get("unlabelledRoles") or [],
        ),
        security=check_security(raw.get("protocol", ""), raw.get("metaHttpEquiv") or [], response_headers),
    )


# ---------------------------------------------------------------------------
# Page passes
# ---------------------------------------------------------------------------

async def analyze_content(session) -> ContentAnalysis:
    return build_content_analysis(await session.evaluate(CONTENT_JS))


async def analyze_seo(session) -> SeoAnalysis:
    return build_seo_analysis(await session.evaluate(SEO_JS))


async def analyze_technical(session, load_time: int) -> TechnicalAnalysis:
    raw = await session.evaluate(TECHNICAL_JS)
    return build_technical_analysis(raw, load_time, getattr(session, "response_headers", None))


async def extract_all(session, load_time: int) -> tuple[ContentAnalysis, SeoAnalysis, TechnicalAnalysis]:
    content, seo, technical = await asyncio.gather(
        analyze_content(session),
        analyze_seo(session),
        analyze_technical(session, load_time),
    )
    return content, seo, technical
