"""
Tests for the tokens module using pytest.

Tests cover:
- TiktokenCounter: initialization with different models, fallback behavior, token counting
- NoOpTokenCounter: configurable counts for tests
"""

import pytest

from core.tokens import NoOpTokenCounter, TiktokenCounter


# ============================================================================
# Tests for TiktokenCounter
# ============================================================================


@pytest.mark.unit
@pytest.mark.mock
def test_tiktoken_counter_known_model(mocker):
    """Known models use their own encoding."""
    mock_encoding_for_model = mocker.patch("core.tokens.tiktoken.encoding_for_model")
    mock_get_encoding = mocker.patch("core.tokens.tiktoken.get_encoding")

    counter = TiktokenCounter("gpt-4o")

    mock_encoding_for_model.assert_called_once_with("gpt-4o")
    mock_get_encoding.assert_not_called()
    assert counter.encoder is mock_encoding_for_model.return_value


@pytest.mark.unit
@pytest.mark.mock
def test_tiktoken_counter_unknown_model_falls_back(mocker):
    """Unknown model names fall back to cl100k_base."""
    mocker.patch(
        "core.tokens.tiktoken.encoding_for_model", side_effect=KeyError("unknown")
    )
    mock_get_encoding = mocker.patch("core.tokens.tiktoken.get_encoding")

    counter = TiktokenCounter("anthropic/claude-sonnet")

    mock_get_encoding.assert_called_once_with("cl100k_base")
    assert counter.encoder is mock_get_encoding.return_value


@pytest.mark.unit
@pytest.mark.mock
def test_tiktoken_counter_counts_encoded_tokens(mocker):
    """The count is the length of the encoded token list."""
    mock_encoder = mocker.MagicMock()
    mock_encoder.encode.return_value = [1, 2, 3, 4]
    mocker.patch("core.tokens.tiktoken.encoding_for_model", return_value=mock_encoder)

    counter = TiktokenCounter("gpt-4o")

    assert counter.count("export default Foo;") == 4
    mock_encoder.encode.assert_called_once_with("export default Foo;")


@pytest.mark.unit
@pytest.mark.mock
@pytest.mark.parametrize("text", [None, ""])
def test_tiktoken_counter_empty_text(mocker, text):
    """Empty text counts as zero without encoding."""
    mock_encoder = mocker.MagicMock()
    mocker.patch("core.tokens.tiktoken.encoding_for_model", return_value=mock_encoder)

    assert TiktokenCounter("gpt-4o").count(text) == 0
    mock_encoder.encode.assert_not_called()


# ============================================================================
# Tests for NoOpTokenCounter
# ============================================================================


@pytest.mark.unit
def test_noop_token_counter_return_value():
    """return_value is returned for any text."""
    counter = NoOpTokenCounter(return_value=42, count_fn=lambda t: 7)

    assert counter.count("anything") == 42


@pytest.mark.unit
def test_noop_token_counter_count_fn():
    """count_fn is used when no return_value is set."""
    counter = NoOpTokenCounter(count_fn=lambda t: len(t or ""))

    assert counter.count("abc") == 3


@pytest.mark.unit
def test_noop_token_counter_default_zero():
    """Without configuration every text counts as zero."""
    assert NoOpTokenCounter().count("abc") == 0
