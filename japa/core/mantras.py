from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import yaml


class Variant(Enum):
    """Language variant of a mantra text."""

    PRIMARY = "primary"
    TRANSLITERATED = "transliterated"

    @property
    def label(self) -> str:
        if self is Variant.PRIMARY:
            return "Hindi (देवनागरी)"
        return "Hinglish (Roman)"

    @property
    def opening_token(self) -> str:
        """Canonical spelling of the opening syllable that om/aum are corrected to."""
        if self is Variant.PRIMARY:
            return "ॐ"
        return "Om"


@dataclass(frozen=True)
class Mantra:
    key: str
    title: str
    texts: Dict[Variant, str]

    def text(self, variant: Variant) -> str:
        return self.texts[variant]


DEFAULT_MANTRA_DIR = Path(__file__).resolve().parent.parent / "data" / "mantras"


class MantraRepository:
    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_MANTRA_DIR
        self._mantras = self._load_mantras()

    def all(self) -> List[Mantra]:
        return list(self._mantras.values())

    def get(self, key: str) -> Mantra:
        return self._mantras[key]

    def default(self) -> Mantra:
        """First mantra in file order."""
        return next(iter(self._mantras.values()))

    def _load_mantras(self) -> Dict[str, Mantra]:
        base_dir = self._base_dir
        if not base_dir.exists():
            raise FileNotFoundError(f"Mantras directory not found: {base_dir}")

        mantras: Dict[str, Mantra] = {}
        for mantra_path in sorted(base_dir.glob("*.yaml"), key=lambda p: p.stem):
            key = mantra_path.stem
            raw = yaml.safe_load(mantra_path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{mantra_path.name}: expected YAML with 'title' and 'variants'")
            title = raw.get("title")
            variants = raw.get("variants")
            if not title or not isinstance(title, str):
                raise ValueError(f"{mantra_path.name}: missing or invalid 'title'")
            if not isinstance(variants, dict):
                raise ValueError(f"{mantra_path.name}: missing 'variants'")
            texts: Dict[Variant, str] = {}
            for variant in Variant:
                text = str(variants.get(variant.value) or "").strip()
                if not text:
                    # an empty target can never be typed to completion
                    raise ValueError(f"{mantra_path.name}: '{variant.value}' text is missing or empty")
                texts[variant] = text
            mantras[key] = Mantra(key=key, title=title.strip(), texts=texts)

        if not mantras:
            raise ValueError(f"No mantra files (*.yaml) found in {base_dir}")
        return mantras
