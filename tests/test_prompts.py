from book_recommender.prompts import (
    NO_TEXT_PLACEHOLDER,
    build_prompt,
    build_request_body,
    extract_text,
    provider_error_message,
)


def test_build_prompt_template():
    assert build_prompt("Fantasy", "Curious", "Beginner") == (
        "Recommend 6 books for a Beginner Fantasy reader feeling Curious. Explain why each book fits."
    )

def test_build_prompt_custom_override_is_verbatim():
    assert build_prompt("Fantasy", "Curious", "Beginner", "  just one book ") == "  just one book "

def test_build_prompt_empty_override_uses_template():
    assert build_prompt("Horror", "Spooky", "Expert", "").startswith("Recommend 6 books for a Expert Horror")

def test_request_body_wraps_one_user_turn():
    assert build_request_body("hi") == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}

def test_extract_joins_parts_with_newline():
    data = {"candidates": [{"content": {"parts": [{"text": "Part A"}, {"text": "Part B"}]}}]}
    assert extract_text(data) == "Part A\nPart B"

def test_extract_skips_empty_fragments_and_trims():
    data = {"candidates": [{"content": {"parts": [{"text": "  A"}, {"text": ""}, {}, {"text": "B\n"}]}}]}
    assert extract_text(data) == "A\nB"

def test_extract_uses_first_candidate_only():
    data = {"candidates": [
        {"content": {"parts": [{"text": "first"}]}},
        {"content": {"parts": [{"text": "second"}]}},
    ]}
    assert extract_text(data) == "first"

def test_extract_placeholder_when_nothing_usable():
    assert extract_text({"candidates": [{"content": {"parts": []}}]}) == NO_TEXT_PLACEHOLDER
    assert extract_text({"candidates": []}) == NO_TEXT_PLACEHOLDER
    assert extract_text({}) == NO_TEXT_PLACEHOLDER
    assert extract_text(None) == NO_TEXT_PLACEHOLDER
    assert extract_text({"candidates": [{"content": {"parts": [{"text": "   "}]}}]}) == NO_TEXT_PLACEHOLDER

def test_provider_error_message():
    assert provider_error_message({"error": {"message": "rate limited"}}, "fallback") == "rate limited"
    assert provider_error_message({"error": "nope"}, "fallback") == "fallback"
    assert provider_error_message({}, "fallback") == "fallback"
