"""
Utilities to load and normalise the assessment template catalog.

The catalog can come from the bundled seed JSON or from a file exported
by the content team (CSV, Excel, Parquet or JSON).  Exports do not agree
on column names, so we map several likely variants onto a canonical
schema, clean the text fields and hand back an ordered
``{template_id: AssessmentTemplate}`` mapping for the resolver.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import TEMPLATES_PATH, AssessmentTemplate
from .mapping import to_template
from .normalize import basic_clean, clean_instructions


# ---------------------------
# Column detection / standardisation
# ---------------------------

COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "id": ["id", "ID", "template_id", "templateId", "Template ID"],
    "type_raw": ["type", "Type", "category", "Category", "Assessment Type"],
    "subtype": ["subtype", "Subtype", "sub_type"],
    "title": ["title", "Title", "name", "Name", "Template Name"],
    "description": ["description", "Description", "Summary", "Overview"],
    "instructions": ["instructions", "Instructions", "Prompt", "Brief"],
    "duration_raw": [
        "duration",
        "Duration",
        "Duration (mins)",
        "Duration (Minutes)",
        "duration_minutes",
        "Time (minutes)",
    ],
    "difficulty_raw": ["difficulty", "Difficulty", "Level", "level"],
    "created_at": ["createdAt", "created_at", "Created"],
    "updated_at": ["updatedAt", "updated_at", "Updated"],
}

CANONICAL_COLUMNS = [
    "id",
    "type",
    "subtype",
    "title",
    "description",
    "instructions",
    "duration",
    "difficulty",
    "created_at",
    "updated_at",
]

TYPE_ALIASES: Dict[str, str] = {
    "technical": "technical",
    "tech": "technical",
    "behavioral": "behavioral",
    "behavioural": "behavioral",
    "behavior": "behavioral",
    "behaviour": "behavioral",
    "cultural": "cultural",
    "culture": "cultural",
    "culture fit": "cultural",
    "values": "cultural",
    "skills": "skills",
    "skill": "skills",
}

DIFFICULTY_ALIASES: Dict[str, str] = {
    "easy": "easy",
    "beginner": "easy",
    "low": "easy",
    "medium": "medium",
    "intermediate": "medium",
    "moderate": "medium",
    "hard": "hard",
    "advanced": "hard",
    "high": "hard",
}


def _standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns from an exported catalog to the internal schema.
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            # Try exact, then case-insensitive
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.info("Standardising columns with map: {}", col_map)

    df_std = df.rename(columns=col_map)

    required = ["id", "type_raw", "title"]
    missing = [c for c in required if c not in df_std.columns]
    if missing:
        logger.warning("Template catalog is missing required columns: {}", missing)

    return df_std


# ---------------------------
# Field parsing helpers
# ---------------------------

def parse_duration_to_minutes(value) -> int:
    """
    Parse a duration field into an integer number of minutes.

    Rules:
    - If it's already numeric, clamp to int >= 0.
    - Hours are converted: "2 hours" -> 120, "1 hour 45 minutes" -> 105.
    - Otherwise return the upper bound of any range, e.g. "20-30 minutes" -> 30.
    - If no numbers are found, return 0.
    """
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return 0

    if isinstance(value, (int, float)):
        return max(0, int(value))

    text = str(value).lower()
    hours = re.search(r"(\d+(?:\.\d+)?)\s*(?:h|hr|hrs|hour|hours)\b", text)
    if hours:
        minutes = re.search(r"(\d+)\s*(?:m|min|mins|minute|minutes)\b", text)
        total = float(hours.group(1)) * 60 + (int(minutes.group(1)) if minutes else 0)
        return max(0, int(total))

    nums = re.findall(r"\d+", text)
    if not nums:
        return 0
    return max(int(n) for n in nums)


def canonicalise_type(value) -> Optional[str]:
    """Map a raw category label onto a template type, or None if unknown."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    key = re.sub(r"[\s_-]+", " ", str(value).strip().lower())
    return TYPE_ALIASES.get(key)


def canonicalise_difficulty(value) -> str:
    """Map a raw difficulty label onto easy/medium/hard; unknown -> medium."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "medium"
    return DIFFICULTY_ALIASES.get(str(value).strip().lower(), "medium")


# ---------------------------
# Catalog normalisation
# ---------------------------

def normalise_catalog_df(df_raw: pd.DataFrame) -> pd.DataFrame:
    """
    Main normalisation pipeline for a template catalog export.

    Output columns follow ``CANONICAL_COLUMNS``.  Rows without an id or
    with an unrecognised type are dropped; repeated ids keep the first
    row.  Row order is otherwise preserved.
    """
    logger.info("Normalising catalog dataframe with {} raw rows", len(df_raw))

    df = _standardise_columns(df_raw.copy())

    if "id" not in df.columns:
        logger.error("No id column found after standardisation; resulting catalog will be empty.")
        return pd.DataFrame(columns=CANONICAL_COLUMNS)

    df["id"] = df["id"].fillna("").astype(str).str.strip()
    df = df[df["id"] != ""]
    df = df.drop_duplicates(subset=["id"], keep="first").reset_index(drop=True)

    df["type"] = df.get("type_raw", pd.Series([None] * len(df))).apply(canonicalise_type)
    unknown = df[df["type"].isna()]
    if len(unknown):
        logger.warning("Dropping {} rows with unknown template type: {}", len(unknown), unknown["id"].tolist())
        df = df[df["type"].notna()].reset_index(drop=True)

    for col in ("title", "description"):
        df[col] = df[col].fillna("").astype(str).apply(basic_clean) if col in df.columns else ""
    if "instructions" in df.columns:
        df["instructions"] = df["instructions"].fillna("").astype(str).apply(clean_instructions)
    else:
        df["instructions"] = ""

    if "duration_raw" in df.columns:
        df["duration"] = df["duration_raw"].apply(parse_duration_to_minutes)
    else:
        df["duration"] = 0

    if "difficulty_raw" in df.columns:
        df["difficulty"] = df["difficulty_raw"].apply(canonicalise_difficulty)
    else:
        df["difficulty"] = "medium"

    for col in ("subtype", "created_at", "updated_at"):
        if col not in df.columns:
            df[col] = None

    df_out = df[CANONICAL_COLUMNS].reset_index(drop=True)
    logger.info("Catalog normalisation complete. Final rows: {}", len(df_out))
    return df_out


def build_template_catalog(df_norm: pd.DataFrame) -> Dict[str, AssessmentTemplate]:
    """Turn a normalised frame into an ordered id -> template mapping."""
    catalog: Dict[str, AssessmentTemplate] = {}
    for _, row in df_norm.iterrows():
        template = to_template(row)
        catalog[template.id] = template
    return catalog


# ---------------------------
# IO helpers
# ---------------------------

def read_catalog_file(path: Path) -> pd.DataFrame:
    """
    Read a raw catalog export.  JSON may be a list of records or an
    object keyed by template id.
    """
    ext = path.suffix.lower()
    logger.info("Loading raw catalog from {}", path)
    if ext == ".json":
        with path.open("r", encoding="utf-8") as fp:
            payload = json.load(fp)
        if isinstance(payload, dict):
            df = pd.DataFrame.from_dict(payload, orient="index").reset_index(drop=True)
        else:
            df = pd.DataFrame.from_records(payload)
    elif ext in {".xlsx", ".xls"}:
        df = pd.read_excel(path)
    elif ext == ".parquet":
        df = pd.read_parquet(path)
    elif ext == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"Unsupported catalog format: {path.suffix}")
    logger.info("Loaded {} rows from raw catalog", len(df))
    return df


def load_template_catalog(path: Path = TEMPLATES_PATH) -> Dict[str, AssessmentTemplate]:
    """
    End-to-end: read export -> normalise -> id-keyed template catalog.
    """
    df_norm = normalise_catalog_df(read_catalog_file(Path(path)))
    catalog = build_template_catalog(df_norm)
    logger.info("Template catalog ready with {} templates", len(catalog))
    return catalog
