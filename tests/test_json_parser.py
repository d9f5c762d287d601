"""Tests for JSON extraction utility."""

import json

import pytest

from resume_optimizer.utils.json_parser import extract_json, strip_code_fence


class TestExtractJson:
    def test_direct_json(self):
        result = extract_json('{"name": "test"}')
        assert result == {"name": "test"}

    def test_fenced_code_block(self):
        text = 'Here is the result:\n```json\n{"name": "test"}\n```\nDone.'
        result = extract_json(text)
        assert result == {"name": "test"}

    def test_fenced_without_json_tag(self):
        text = '```\n{"key": "value"}\n```'
        result = extract_json(text)
        assert result == {"key": "value"}

    def test_fenced_single_line(self):
        assert extract_json('```json{"a": 1}```') == {"a": 1}

    def test_embedded_json(self):
        text = 'The analysis is: {"score": 90, "pass": true} as shown above.'
        result = extract_json(text)
        assert result == {"score": 90, "pass": True}

    def test_nested_json(self):
        text = '{"outer": {"inner": [1, 2, 3]}}'
        result = extract_json(text)
        assert result["outer"]["inner"] == [1, 2, 3]

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json("no json here at all")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            extract_json("")

    def test_unterminated_fence(self):
        text = '```json\n{"overallScore": 80}'
        assert extract_json(text) == {"overallScore": 80}

    def test_backticks_inside_string_value(self):
        payload = {"summary": "Wrap snippets in ```python``` blocks", "items": []}
        assert extract_json(json.dumps(payload)) == payload

    def test_backticks_inside_fenced_reply(self):
        payload = {"summary": "Wrap snippets in ```python``` blocks", "items": []}
        text = f"```json\n{json.dumps(payload)}\n```"
        assert extract_json(text) == payload


class TestStripCodeFence:
    def test_unfenced_text_is_stripped(self):
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'

    def test_language_tag_removed(self):
        assert strip_code_fence('```javascript\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_opening_fence(self):
        assert strip_code_fence("```") == ""

    def test_inner_backticks_kept(self):
        text = '```json\n{"a": "```sh``` here"}\n```'
        assert strip_code_fence(text) == '{"a": "```sh``` here"}'
