"""Label translation for calculator results, forms and estimates.

English labels are the keys; other languages live in
``translations/<lang>.json`` beside this module.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

TRANSLATIONS_DIR = Path(__file__).resolve().parent / "translations"
DEFAULT_LANGUAGE = "en"


def _base_language(lang: str) -> str:
    # "es-MX" and "es_MX" share the "es" labels.
    return (lang or DEFAULT_LANGUAGE).replace("_", "-").split("-")[0].lower()


@lru_cache()
def load_translations(lang: str) -> Dict[str, str]:
    """Label mapping for ``lang``; empty for English or unknown languages."""
    path = TRANSLATIONS_DIR / f"{_base_language(lang)}.json"
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return {}


def available_languages() -> List[str]:
    return [DEFAULT_LANGUAGE] + sorted(p.stem for p in TRANSLATIONS_DIR.glob("*.json"))


def t(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    return load_translations(lang).get(key, key)
