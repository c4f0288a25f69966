# jobtech_mcp/formatters.py
"""Text rendering of job ads and the output truncation rule."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .constants import CHARACTER_LIMIT, TRUNCATION_MARKER


def truncate_if_needed(text: str, limit: int = CHARACTER_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def _label(obj: Optional[Dict[str, Any]]) -> Optional[str]:
    return (obj or {}).get("label") or None


def _labels(items: Optional[Iterable[Dict[str, Any]]]) -> str:
    return ", ".join(str(i.get("label")) for i in (items or []) if i.get("label"))


def date_only(value: Optional[str]) -> str:
    """'2024-06-01T00:00:00' -> '2024-06-01'"""
    return (value or "").split("T")[0]


def format_job_ad_summary(ad: Dict[str, Any]) -> str:
    lines: List[str] = [
        f"**{ad.get('headline', '')}**",
        f"ID: {ad.get('id', '')}",
    ]

    employer = ad.get("employer") or {}
    address = ad.get("workplace_address") or {}

    if employer.get("name"):
        lines.append(f"Arbetsgivare: {employer['name']}")
    place = address.get("city") or address.get("municipality")
    if place:
        lines.append(f"Plats: {place}")
    if _label(ad.get("occupation")):
        lines.append(f"Yrke: {_label(ad.get('occupation'))}")
    if _label(ad.get("employment_type")):
        lines.append(f"Anställningstyp: {_label(ad.get('employment_type'))}")
    if ad.get("application_deadline"):
        lines.append(f"Sista ansökningsdag: {date_only(ad['application_deadline'])}")
    if ad.get("webpage_url"):
        lines.append(f"Länk: {ad['webpage_url']}")

    return "\n".join(lines)


def format_job_ad_full(ad: Dict[str, Any]) -> str:
    lines: List[str] = [
        f"# {ad.get('headline', '')}",
        f"**ID:** {ad.get('id', '')}",
    ]

    employer = ad.get("employer") or {}
    if employer.get("name"):
        lines.append(f"**Arbetsgivare:** {employer['name']}")

    addr = ad.get("workplace_address")
    if addr:
        location = ", ".join(
            p for p in (
                addr.get("street_address"),
                addr.get("city") or addr.get("municipality"),
                addr.get("region"),
                addr.get("country"),
            ) if p
        )
        if location:
            lines.append(f"**Adress:** {location}")

    for key, title in (
        ("occupation", "Yrke"),
        ("occupation_group", "Yrkesgrupp"),
        ("employment_type", "Anställningsform"),
        ("duration", "Varaktighet"),
        ("working_hours_type", "Arbetstid"),
    ):
        if _label(ad.get(key)):
            lines.append(f"**{title}:** {_label(ad.get(key))}")

    scope = ad.get("scope_of_work") or {}
    if scope.get("min") is not None:
        upper = scope.get("max") if scope.get("max") is not None else scope["min"]
        lines.append(f"**Tjänstgöringsgrad:** {scope['min']}–{upper}%")
    if ad.get("number_of_vacancies"):
        lines.append(f"**Antal platser:** {ad['number_of_vacancies']}")
    if _label(ad.get("salary_type")):
        lines.append(f"**Lönetyp:** {_label(ad.get('salary_type'))}")
    if ad.get("publication_date"):
        lines.append(f"**Publicerad:** {date_only(ad['publication_date'])}")
    if ad.get("application_deadline"):
        lines.append(f"**Sista ansökningsdag:** {date_only(ad['application_deadline'])}")

    must = ad.get("must_have") or {}
    nice = ad.get("nice_to_have") or {}
    if _labels(must.get("skills")):
        lines.append(f"**Krav – kompetenser:** {_labels(must.get('skills'))}")
    if _labels(must.get("languages")):
        lines.append(f"**Krav – språk:** {_labels(must.get('languages'))}")
    if _labels(nice.get("skills")):
        lines.append(f"**Meriterande – kompetenser:** {_labels(nice.get('skills'))}")

    description = (ad.get("description") or {}).get("text")
    if description:
        lines.append("\n## Beskrivning")
        lines.append(description)

    if ad.get("webpage_url"):
        lines.append(f"\n**Ansök här:** {ad['webpage_url']}")

    return truncate_if_needed("\n".join(lines))


def format_hits(hits: List[Dict[str, Any]], detail: str) -> str:
    render = format_job_ad_full if detail == "full" else format_job_ad_summary
    return "\n\n---\n\n".join(render(ad) for ad in hits)
