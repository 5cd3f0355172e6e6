"""Tests for name normalization helpers."""

from __future__ import annotations

import pytest

from storytree.normalize import NameIndex, normalize_character_name, normalize_for_comparison


class TestNormalizeCharacterName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            pytest.param("Greaves", "Greaves", id="unchanged"),
            pytest.param("  Greaves  ", "Greaves", id="trimmed"),
            pytest.param("The   Kid", "The Kid", id="collapsed"),
            pytest.param("Dr.\tCohen\n", "Dr. Cohen", id="mixed-whitespace"),
            pytest.param("   ", "", id="blank"),
        ],
    )
    def test_storage_form(self, raw: str, expected: str) -> None:
        assert normalize_character_name(raw) == expected

    def test_preserves_case(self) -> None:
        assert normalize_character_name("McALLISTER") == "McALLISTER"


class TestNormalizeForComparison:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            pytest.param("Dr. Cohen", "drcohen", id="punctuation"),
            pytest.param("  GREAVES  ", "greaves", id="case-and-space"),
            pytest.param("Agent 47", "agent47", id="digits-kept"),
            pytest.param("Élodie", "élodie", id="accent-kept"),
            pytest.param("李 明", "李明", id="cjk"),
            pytest.param("Агата", "агата", id="cyrillic"),
            pytest.param("Ｇｒｅａｖｅｓ", "greaves", id="fullwidth"),
            pytest.param(" ...  ", "...", id="only-punctuation"),
            pytest.param("?  !", "? !", id="only-symbols-collapsed"),
        ],
    )
    def test_comparison_form(self, raw: str, expected: str) -> None:
        assert normalize_for_comparison(raw) == expected

    def test_spellings_compare_equal(self) -> None:
        spellings = ["Dr. Cohen", "dr cohen", "  DR COHEN "]
        assert len({normalize_for_comparison(s) for s in spellings}) == 1

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            pytest.param("李", "王", id="cjk"),
            pytest.param("Élodie", "Lodie", id="accented-initial"),
            pytest.param("Ωmega", "mega", id="greek-initial"),
            pytest.param("???", "!!!", id="punctuation-only"),
        ],
    )
    def test_distinct_names_stay_distinct(self, left: str, right: str) -> None:
        assert normalize_for_comparison(left) != normalize_for_comparison(right)

    def test_composed_and_decomposed_forms_compare_equal(self) -> None:
        composed = "\u00c9lodie"
        decomposed = "E\u0301lodie"

        assert composed != decomposed
        assert normalize_for_comparison(composed) == normalize_for_comparison(decomposed)


class TestNameIndex:
    def test_resolve_any_spelling_to_stored_key(self) -> None:
        index = NameIndex(["Dr. Cohen"])

        assert index.resolve("dr cohen") == "Dr. Cohen"
        assert index.resolve("DR. COHEN") == "Dr. Cohen"
        assert index.resolve("Greaves") is None

    def test_register_keeps_first_spelling(self) -> None:
        index = NameIndex()

        assert index.register("Greaves") == "Greaves"
        assert index.register("GREAVES") == "Greaves"
        assert list(index) == ["Greaves"]

    def test_discard(self) -> None:
        index = NameIndex(["Greaves", "Vespera"])

        index.discard("greaves")

        assert "Greaves" not in index
        assert "vespera" in index
        assert len(index) == 1

    def test_contains_rejects_non_strings(self) -> None:
        index = NameIndex(["Greaves"])

        assert 42 not in index

    def test_non_latin_names_do_not_collide(self) -> None:
        index = NameIndex()

        assert index.register("李") == "李"
        assert index.register("王") == "王"
        assert index.register("Élodie") == "Élodie"

        assert list(index) == ["李", "王", "Élodie"]
        assert index.resolve("Lodie") is None
        assert index.resolve("ÉLODIE") == "Élodie"

    def test_iterates_in_registration_order(self) -> None:
        index = NameIndex(["Vespera", "Greaves", "vespera"])

        assert list(index) == ["Vespera", "Greaves"]
