"""
Supabase client for analysis record CRUD.

Table `analyses`: id (text, pk), url, title, seo_score, is_public,
report (jsonb, the full camelCase AnalysisReport), created_at, updated_at.
"""

from datetime import datetime, timedelta, timezone

from pagelens.config import get_settings
from pagelens.models import AnalysisReport


def _get_client():
    """Get a Supabase client. Raises if credentials are missing."""
    settings = get_settings()
    url = settings.supabase_url
    key = settings.supabase_key
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in .env")
    from supabase import create_client
    return create_client(url, key)


def _table():
    return _get_client().table(get_settings().supabase_table)


def _to_row(report: AnalysisReport) -> dict:
    return {
        "id": report.id,
        "url": report.url,
        "title": report.title,
        "seo_score": report.seo_score,
        "is_public": report.is_public,
        "report": report.model_dump(mode="json", by_alias=True),
        "created_at": report.created_at.isoformat(),
        "updated_at": report.updated_at.isoformat(),
    }


def _from_row(row: dict | None) -> AnalysisReport | None:
    if not row or not row.get("report"):
        return None
    return AnalysisReport.model_validate(row["report"])


async def save_analysis(report: AnalysisReport) -> AnalysisReport:
    """Insert an analysis record. Returns the stored report."""
    result = _table().insert(_to_row(report)).execute()
    return _from_row(result.data[0] if result.data else None) or report


async def get_analysis(analysis_id: str) -> AnalysisReport | None:
    result = _table().select("report").eq("id", analysis_id).limit(1).execute()
    return _from_row(result.data[0] if result.data else None)


async def get_public_analysis(analysis_id: str) -> AnalysisReport | None:
    result = (
        _table()
        .select("report")
        .eq("id", analysis_id)
        .eq("is_public", True)
        .limit(1)
        .execute()
    )
    return _from_row(result.data[0] if result.data else None)


async def get_recent_analysis(url: str, max_age_seconds: int) -> AnalysisReport | None:
    """Newest report for `url` created within the last `max_age_seconds`."""
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=max_age_seconds)
    result = (
        _table()
        .select("report")
        .eq("url", url)
        .gte("created_at", cutoff.isoformat())
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    return _from_row(result.data[0] if result.data else None)


async def list_public_analyses(limit: int = 20) -> list[AnalysisReport]:
    result = (
        _table()
        .select("report")
        .eq("is_public", True)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    return [r for r in (_from_row(row) for row in result.data or []) if r is not None]


async def update_analysis(analysis_id: str, changes: dict) -> AnalysisReport | None:
    """Apply `changes` (snake_case AnalysisReport fields) and bump updated_at."""
    current = await get_analysis(analysis_id)
    if current is None:
        return None
    updated = current.model_copy(update={**changes, "updated_at": datetime.now(timezone.utc)})
    row = _to_row(updated)
    row.pop("id")
    row.pop("created_at")
    _table().update(row).eq("id", analysis_id).execute()
    return updated


async def delete_analysis(analysis_id: str) -> bool:
    """Delete an analysis record."""
    _table().delete().eq("id", analysis_id).execute()
    return True
