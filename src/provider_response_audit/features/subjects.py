from __future__ import annotations

from provider_response_audit.config import FilterConfig, SubjectCatalog


def allowed_subjects(
    filters: FilterConfig,
    catalog: SubjectCatalog | None = None,
) -> tuple[str, ...]:
    """Return the subjects enabled by the active toggles, in catalog order."""
    resolved_catalog = catalog or SubjectCatalog()
    subjects: list[str] = []
    if filters.judicial_decision:
        subjects.extend(resolved_catalog.judicial_decision)
    if filters.administrative:
        subjects.extend(resolved_catalog.administrative)
    return tuple(dict.fromkeys(subjects))


def filter_subtitle(filters: FilterConfig) -> str:
    active = []
    if filters.judicial_decision:
        active.append("judicial decision")
    if filters.administrative:
        active.append("administrative")
    if not active:
        return "No active filter"
    if len(active) == 2:
        return "Filters: judicial decision and administrative"
    return f"Filter: {active[0]}"
