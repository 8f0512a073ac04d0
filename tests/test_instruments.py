from styleprompt.services.catalog import CATALOG
from styleprompt.services.instruments import (
    assemble_instruments,
    select_instruments,
    select_multi_genre_instruments,
)
from styleprompt.services.random_stream import RandomStream


def _pool_items(genre_id: str) -> set[str]:
    rules = CATALOG.genres[genre_id].instruments
    return {item for pool in rules.pools.values() for item in pool.items}


def test_single_genre_selection_respects_pools_and_cap() -> None:
    for genre_id in CATALOG.genre_ids:
        rules = CATALOG.genres[genre_id].instruments
        for seed in range(10):
            picked = select_instruments(genre_id, RandomStream(seed))
            assert picked
            assert len(picked) <= rules.max_tags
            assert len(set(picked)) == len(picked)
            assert set(picked) <= _pool_items(genre_id)


def test_exclusion_pairs_never_co_occur() -> None:
    for seed in range(60):
        picked = select_instruments("jazz", RandomStream(seed))
        assert not ("piano" in picked and "rhodes" in picked)
        rock = select_instruments("rock", RandomStream(seed))
        assert not ("distorted guitar" in rock and "clean electric guitar" in rock)


def test_unknown_genre_has_no_instruments() -> None:
    assert select_instruments("polka", RandomStream(1)) == []


def test_multi_genre_selection_is_capped_and_unique() -> None:
    for seed in range(20):
        picked = select_multi_genre_instruments(["jazz", "rock", "ambient"], RandomStream(seed))
        assert 1 <= len(picked) <= 4
        assert len(set(picked)) == len(picked)


def test_assembled_selection_formats_progression_and_vocals() -> None:
    selection = assemble_instruments(["jazz"], RandomStream(21))
    assert selection.chord_progression.endswith("harmony")
    assert selection.vocal_style.endswith("vocals")
    assert selection.formatted.endswith(selection.vocal_style)
    assert selection.formatted.startswith(selection.instruments[0])
    assert selection == assemble_instruments(["jazz"], RandomStream(21))
