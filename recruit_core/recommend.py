"""
Role / industry driven assessment template recommendations.

Two static lookup tables (role -> templates, industry -> templates) are
merged into one ordered, de-duplicated list of template ids, which is
then resolved against the template catalog.  The tables are passed in
explicitly; nothing here reads module-level state, so every function
is a pure function of its arguments.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

from loguru import logger

from .config import (
    GENERIC_INDUSTRY_DESCRIPTION,
    GENERIC_ROLE_DESCRIPTION,
    AssessmentTemplate,
    RecommendationTables,
    TemplateRecommendation,
)
from .normalize import dedup_preserve_order


def recommended_template_ids(role: str, industry: str, tables: RecommendationTables) -> List[str]:
    """Role ids then industry ids, each in technical/behavioral/cultural order.

    Repeated ids keep their first position.  Unknown keys contribute
    nothing.
    """
    ids: List[str] = []
    role_rec = tables.roles.get(role)
    if role_rec is not None:
        ids.extend(role_rec.recommended_templates.in_order())
    industry_rec = tables.industries.get(industry)
    if industry_rec is not None:
        ids.extend(industry_rec.recommended_templates.in_order())
    return dedup_preserve_order(ids)


def resolve_templates(
    role: str,
    industry: str,
    catalog: Mapping[str, AssessmentTemplate],
    tables: RecommendationTables,
) -> List[AssessmentTemplate]:
    """Resolve the templates recommended for a role in an industry.

    If neither key is known the whole catalog is returned in catalog
    order.  Recommended ids with no catalog entry are skipped.
    """
    if role not in tables.roles and industry not in tables.industries:
        logger.debug("No recommendation for role={!r} industry={!r}; returning full catalog", role, industry)
        return list(catalog.values())

    templates: List[AssessmentTemplate] = []
    for template_id in recommended_template_ids(role, industry, tables):
        template = catalog.get(template_id)
        if template is None:
            logger.debug("Recommended template {} not in catalog; skipping", template_id)
            continue
        templates.append(template)
    return templates


def describe_role(role: str, tables: RecommendationTables) -> str:
    rec = tables.roles.get(role)
    return rec.description if rec is not None and rec.description else GENERIC_ROLE_DESCRIPTION


def describe_industry(industry: str, tables: RecommendationTables) -> str:
    rec = tables.industries.get(industry)
    return rec.description if rec is not None and rec.description else GENERIC_INDUSTRY_DESCRIPTION


def key_areas(role: str, industry: str, tables: RecommendationTables) -> List[str]:
    """Role key skills followed by industry focus areas, without repeats."""
    role_rec = tables.roles.get(role)
    industry_rec = tables.industries.get(industry)
    skills = list(role_rec.key_skills) if role_rec is not None else []
    focus = list(industry_rec.key_focus) if industry_rec is not None else []
    return dedup_preserve_order(skills + focus)


def recommend(
    role: str,
    industry: str,
    catalog: Mapping[str, AssessmentTemplate],
    tables: RecommendationTables,
) -> TemplateRecommendation:
    """Bundle templates, descriptions and key areas for one role/industry pair."""
    templates = resolve_templates(role, industry, catalog, tables)
    logger.info(
        "Resolved {} templates for role={!r} industry={!r}", len(templates), role, industry
    )
    return TemplateRecommendation(
        role=role,
        industry=industry,
        role_description=describe_role(role, tables),
        industry_description=describe_industry(industry, tables),
        key_areas=key_areas(role, industry, tables),
        templates=templates,
    )


def list_keys(tables: RecommendationTables) -> Dict[str, List[str]]:
    """Known role and industry keys, in table order."""
    return {"roles": list(tables.roles), "industries": list(tables.industries)}
