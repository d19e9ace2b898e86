"""
Tests for FNV-1a seed hashing and the mulberry32 generator.

Test Categories:
- TestHashToSeed: Published FNV-1a vectors, UTF-16 code unit handling
- TestMulberry32: Determinism, ranges and the sampling helpers
"""

import pytest

from revenue_bridge.services.prng import (
    FNV_OFFSET_BASIS,
    FNV_PRIME,
    UINT32_MASK,
    Mulberry32,
    hash_to_seed,
    seed_to_stream,
)


def _reference_fnv1a(code_units):
    h = FNV_OFFSET_BASIS
    for unit in code_units:
        h ^= unit
        h = (h * FNV_PRIME) & UINT32_MASK
    return h


class TestHashToSeed:
    """FNV-1a over UTF-16 code units."""

    def test_empty_string_is_offset_basis(self) -> None:
        assert hash_to_seed("") == 2166136261

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a", 0xE40C292C),
            ("foobar", 0xBF9CF968),
        ],
    )
    def test_published_vectors(self, text: str, expected: int) -> None:
        assert hash_to_seed(text) == expected

    def test_result_is_uint32(self) -> None:
        for text in ("FP&A-bridge|2025-06|existing-clients|0", "x" * 500, "Δ"):
            value = hash_to_seed(text)
            assert 0 <= value <= UINT32_MASK

    def test_non_bmp_character_hashes_surrogate_pair(self) -> None:
        # U+1F600 is the surrogate pair D83D DE00 in UTF-16
        assert hash_to_seed("\U0001F600") == _reference_fnv1a([0xD83D, 0xDE00])

    def test_bmp_non_ascii_uses_single_code_unit(self) -> None:
        assert hash_to_seed("Δ") == _reference_fnv1a([0x0394])

    def test_order_sensitive(self) -> None:
        assert hash_to_seed("ab") != hash_to_seed("ba")

    def test_distinct_inputs_give_distinct_seeds(self) -> None:
        seeds = {
            hash_to_seed(f"FP&A-bridge|2025-06|existing-clients|{offset}")
            for offset in range(0, -12, -1)
        }
        assert len(seeds) == 12


class TestMulberry32:
    """Generator behaviour and helpers."""

    def test_same_seed_same_stream(self) -> None:
        a, b = Mulberry32(12345), Mulberry32(12345)
        assert [a.next_float() for _ in range(50)] == [b.next_float() for _ in range(50)]

    def test_different_seeds_diverge(self) -> None:
        a, b = Mulberry32(1), Mulberry32(2)
        assert [a.next_float() for _ in range(5)] != [b.next_float() for _ in range(5)]

    def test_outputs_in_unit_interval(self) -> None:
        rng = Mulberry32(hash_to_seed("range-check"))
        for _ in range(5000):
            value = rng.next_float()
            assert 0.0 <= value < 1.0

    def test_call_is_next_float(self) -> None:
        a, b = Mulberry32(99), Mulberry32(99)
        assert a() == b.next_float()

    def test_seed_is_masked_to_32_bits(self) -> None:
        assert Mulberry32(2 ** 32 + 5).state == 5

    def test_state_advances(self) -> None:
        rng = Mulberry32(0)
        rng.next_float()
        assert rng.state == 0x6D2B79F5

    def test_seed_to_stream_matches_generator(self) -> None:
        stream = seed_to_stream(777)
        rng = Mulberry32(777)
        assert [stream() for _ in range(10)] == [rng.next_float() for _ in range(10)]

    def test_uniform_bounds(self) -> None:
        rng = Mulberry32(5)
        for _ in range(1000):
            assert 0.15 <= rng.uniform(0.15, 0.40) < 0.40

    def test_symmetric_bounds(self) -> None:
        rng = Mulberry32(6)
        for _ in range(1000):
            assert -0.3 <= rng.symmetric(0.3) < 0.3

    def test_randint_is_inclusive(self) -> None:
        rng = Mulberry32(7)
        seen = {rng.randint(6, 8) for _ in range(1000)}
        assert seen == {6, 7, 8}

    def test_choice_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            Mulberry32(1).choice([])

    def test_choice_returns_member(self) -> None:
        rng = Mulberry32(8)
        items = ("a", "b", "c")
        assert all(rng.choice(items) in items for _ in range(100))

    def test_sample_without_replacement(self) -> None:
        rng = Mulberry32(9)
        items = [f"client-{i}" for i in range(8)]
        for k in range(0, 9):
            picked = rng.sample(items, k)
            assert len(picked) == k
            assert len(set(picked)) == k
            assert set(picked) <= set(items)

    def test_sample_caps_at_population(self) -> None:
        assert sorted(Mulberry32(10).sample([1, 2, 3], 10)) == [1, 2, 3]

    def test_sample_does_not_mutate_input(self) -> None:
        items = [1, 2, 3, 4]
        Mulberry32(11).sample(items, 2)
        assert items == [1, 2, 3, 4]
