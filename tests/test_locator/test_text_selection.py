"""Tests for locating a text span inside a form field value."""

from resume_optimizer.locator.text_selection import find_selection


class TestFindSelection:
    def test_exact_match(self):
        assert find_selection("Hello world", "world") == (6, 11)

    def test_case_insensitive_match(self):
        assert find_selection("Hello World", "world") == (6, 11)

    def test_whitespace_normalized_match(self):
        content = "Led a  team\nof 4"
        assert find_selection(content, "led a team of 4") == (0, len(content))

    def test_containing_sentence(self):
        content = "Built APIs. Reduced response time by 40 percent using caching. Led team."
        start, end = find_selection(content, "cut response time with caching")
        assert content[start:end] == "Reduced response time by 40 percent using caching"

    def test_word_adjacency_across_sentences(self):
        content = "Scaled platform. Kubernetes migration done quickly"
        assert find_selection(content, "platform kubernetes") == (7, 16)

    def test_single_anchor_word_takes_short_sentence(self):
        content = "Intro text here. Mentored interns weekly. More."
        start, end = find_selection(content, "interns mentoring")
        assert content[start:end] == "interns weekly."

    def test_no_match(self):
        assert find_selection("nothing relevant", "zzzz") is None

    def test_blank_inputs(self):
        assert find_selection("", "x") is None
        assert find_selection("content", "   ") is None
