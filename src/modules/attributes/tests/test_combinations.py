"""Tests for variant combination generation."""

from __future__ import annotations

import itertools

from src.modules.attributes.combinations import (
    count_variant_combinations,
    generate_variant_combinations,
    iter_variant_combinations,
)


class TestGenerateVariantCombinations:
    def test_last_key_varies_fastest(self) -> None:
        combos = generate_variant_combinations({"size": ["S", "M"], "color": ["red", "blue"]})
        assert combos == [
            {"size": "S", "color": "red"},
            {"size": "S", "color": "blue"},
            {"size": "M", "color": "red"},
            {"size": "M", "color": "blue"},
        ]

    def test_single_key(self) -> None:
        combos = generate_variant_combinations({"size": ["S", "M", "L"]})
        assert combos == [{"size": "S"}, {"size": "M"}, {"size": "L"}]

    def test_empty_mapping_yields_one_empty_combination(self) -> None:
        assert generate_variant_combinations({}) == [{}]

    def test_any_empty_value_list_yields_nothing(self) -> None:
        assert generate_variant_combinations({"size": ["S", "M"], "color": []}) == []
        assert generate_variant_combinations({"color": []}) == []

    def test_size_is_product_of_value_counts(self) -> None:
        attributes = {"size": ["S", "M", "L"], "color": ["red", "blue"], "fit": ["slim", "regular"]}
        combos = generate_variant_combinations(attributes)
        assert len(combos) == 12
        # Every combination is distinct and covers every key
        assert len({tuple(sorted(c.items())) for c in combos}) == 12
        assert all(set(c) == set(attributes) for c in combos)

    def test_values_come_from_their_own_key(self) -> None:
        attributes = {"size": ["S", "M"], "color": ["red", "blue", "green"]}
        for combo in generate_variant_combinations(attributes):
            for key, value in combo.items():
                assert value in attributes[key]

    def test_same_input_gives_same_order(self) -> None:
        attributes = {"size": ["L", "S"], "material": ["cotton", "linen"]}
        assert generate_variant_combinations(attributes) == generate_variant_combinations(attributes)

    def test_combinations_are_independent_dicts(self) -> None:
        combos = generate_variant_combinations({"size": ["S", "M"]})
        combos[0]["size"] = "XL"
        assert combos[1] == {"size": "M"}

    def test_non_string_values_pass_through(self) -> None:
        combos = generate_variant_combinations({"pack": [1, 6], "gift": [True]})
        assert combos == [{"pack": 1, "gift": True}, {"pack": 6, "gift": True}]


class TestIterVariantCombinations:
    def test_is_lazy(self) -> None:
        attributes = {f"k{i}": ["a", "b", "c", "d"] for i in range(12)}
        first_three = list(itertools.islice(iter_variant_combinations(attributes), 3))
        assert first_three[0] == {f"k{i}": "a" for i in range(12)}
        assert first_three[2]["k11"] == "c"


class TestCountVariantCombinations:
    def test_counts_match_generation(self) -> None:
        attributes = {"size": ["S", "M", "L"], "color": ["red", "blue"]}
        assert count_variant_combinations(attributes) == len(generate_variant_combinations(attributes))

    def test_empty_mapping_counts_one(self) -> None:
        assert count_variant_combinations({}) == 1

    def test_empty_value_list_counts_zero(self) -> None:
        assert count_variant_combinations({"size": ["S"], "color": []}) == 0
