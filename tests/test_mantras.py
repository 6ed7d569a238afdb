"""Tests for japa.core.mantras – YAML mantra loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from japa.core.mantras import MantraRepository, Variant


def _write_mantra(base: Path, key: str, body: str) -> None:
    base.mkdir(parents=True, exist_ok=True)
    (base / f"{key}.yaml").write_text(body, encoding="utf-8")


VALID = "title: Test\nvariants:\n  primary: ॐ नमः\n  transliterated: Om namah\n"


class TestVariant:
    def test_values(self):
        assert Variant("primary") is Variant.PRIMARY
        assert Variant("transliterated") is Variant.TRANSLITERATED

    def test_opening_tokens(self):
        assert Variant.PRIMARY.opening_token == "ॐ"
        assert Variant.TRANSLITERATED.opening_token == "Om"

    def test_labels(self):
        assert "Hindi" in Variant.PRIMARY.label
        assert "Hinglish" in Variant.TRANSLITERATED.label


class TestBundledMantras:
    def test_default_is_gayatri(self):
        mantra = MantraRepository().default()
        assert mantra.key == "gayatri"
        assert mantra.title == "Gayatri Mantra"

    def test_texts(self):
        mantra = MantraRepository().get("gayatri")
        assert mantra.text(Variant.PRIMARY).startswith("ॐ भूर्भुवः स्वः")
        assert mantra.text(Variant.PRIMARY).endswith("प्रचोदयात्॥")
        assert mantra.text(Variant.TRANSLITERATED) == (
            "Om bhur bhuvah swah tat savitur varenyam bhargo devasya dheemahi dhiyo yo nah prachodayat"
        )


class TestMantraRepository:
    def test_loads_sorted_by_key(self, tmp_path: Path):
        _write_mantra(tmp_path, "b_second", VALID)
        _write_mantra(tmp_path, "a_first", VALID)
        repo = MantraRepository(tmp_path)
        assert [m.key for m in repo.all()] == ["a_first", "b_second"]
        assert repo.default().key == "a_first"

    def test_texts_are_stripped(self, tmp_path: Path):
        _write_mantra(tmp_path, "m", "title: ' Test '\nvariants:\n  primary: '  ॐ नमः '\n  transliterated: Om namah\n")
        mantra = MantraRepository(tmp_path).get("m")
        assert mantra.title == "Test"
        assert mantra.text(Variant.PRIMARY) == "ॐ नमः"

    def test_unknown_key(self, tmp_path: Path):
        _write_mantra(tmp_path, "m", VALID)
        with pytest.raises(KeyError):
            MantraRepository(tmp_path).get("other")

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            MantraRepository(tmp_path / "nope")

    def test_empty_directory(self, tmp_path: Path):
        with pytest.raises(ValueError, match="No mantra files"):
            MantraRepository(tmp_path)

    @pytest.mark.parametrize(
        "body",
        [
            "",
            "- a list\n",
            "variants:\n  primary: a\n  transliterated: b\n",
            "title: T\nvariants: nope\n",
            "title: T\nvariants:\n  primary: ॐ\n",
            "title: T\nvariants:\n  primary: '  '\n  transliterated: Om\n",
        ],
    )
    def test_invalid_files(self, tmp_path: Path, body: str):
        _write_mantra(tmp_path, "bad", body)
        with pytest.raises(ValueError):
            MantraRepository(tmp_path)
