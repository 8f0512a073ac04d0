from styleprompt.services.keywords import (
    clear_pattern_cache,
    classify_mood_phrase,
    extract_priority_moods,
    extract_themes,
    find_keywords,
    harmonic_complexity_score,
    matches_whole_word,
)


def test_whole_word_matching_ignores_substrings() -> None:
    assert not matches_whole_word("discovering new sounds", "disco")
    assert matches_whole_word("a disco night", "disco")
    assert matches_whole_word("Some Jazz, please", "jazz")


def test_whole_word_matching_handles_symbols() -> None:
    assert matches_whole_word("smooth r&b vibes", "r&b")
    assert matches_whole_word("lo-fi study", "lo-fi")
    assert not matches_whole_word("", "jazz")


def test_find_keywords_respects_order_and_limit() -> None:
    text = "rock and jazz and punk"
    assert find_keywords(text, ["punk", "jazz", "rock"]) == ["punk", "jazz", "rock"]
    assert find_keywords(text, ["punk", "jazz", "rock"], limit=2) == ["punk", "jazz"]


def test_extract_themes_follows_mapping_order() -> None:
    assert extract_themes("rain in the city at night", 2) == ["rainy atmosphere", "city lights"]
    assert extract_themes("nothing here", 2) == []


def test_priority_moods_and_complexity() -> None:
    assert extract_priority_moods("a melancholic, dreamy tune", 2) == ["melancholic", "dreamy"]
    assert harmonic_complexity_score("modal jazz with chromatic runs") == 3
    assert harmonic_complexity_score("simple song") == 0


def test_mood_phrase_classifier() -> None:
    assert classify_mood_phrase("a peaceful evening", {"peaceful": "ambient"}) == "ambient"
    assert classify_mood_phrase("a loud evening", {"peaceful": "ambient"}) is None


def test_clearing_cache_does_not_change_results() -> None:
    before = find_keywords("chill jazz at midnight", ["jazz", "midnight", "chill"])
    clear_pattern_cache()
    assert find_keywords("chill jazz at midnight", ["jazz", "midnight", "chill"]) == before
