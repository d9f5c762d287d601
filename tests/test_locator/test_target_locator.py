"""Tests for TargetLocator against an in-memory element tree."""

import pytest

from resume_optimizer.errors import UnlocatableTarget
from resume_optimizer.locator.target_locator import (
    MatchStrategy,
    TargetLocator,
    match_kind,
    significant_words,
)
from resume_optimizer.locator.tree import ElementNode, ElementTree
from resume_optimizer.models.analysis import ResumeSuggestion

DESCRIPTION = "Lead development of microservices architecture serving 10M+ users daily."


def _build_tree() -> tuple[ElementTree, dict[str, ElementNode]]:
    nodes = {
        "description": ElementNode("textarea", value=DESCRIPTION),
        "achievement": ElementNode("li", text="Reduced API response time by 40%", classes=["achievement"]),
        "add_achievement": ElementNode("button", text="Add", attrs={"data-action": "add-achievement"}),
        "python": ElementNode("span", text="Python", attrs={"data-role": "skill-badge"}),
        "java": ElementNode("span", text="Java", attrs={"data-role": "skill-badge"}),
        "javascript": ElementNode("span", text="JavaScript", attrs={"data-role": "skill-badge"}),
        "add_category": ElementNode("button", text="Add category", attrs={"data-action": "add-category"}),
        "email": ElementNode("a", text="jane@example.com"),
        "name": ElementNode("p", text="Jane Doe"),
    }
    skills = ElementNode(
        "div",
        ElementNode(
            "div",
            ElementNode("div", nodes["python"], nodes["java"], attrs={"data-content": "skill-list"}),
            ElementNode("button", text="+", attrs={"data-action": "add-skill"}),
            attrs={"data-skill-category-id": "1"},
        ),
        ElementNode(
            "div",
            ElementNode("div", nodes["javascript"], attrs={"data-content": "skill-list"}),
            attrs={"data-skill-category-id": "2"},
        ),
        nodes["add_category"],
        attrs={"data-section": "skills"},
    )
    nodes["skills"] = skills
    nodes["projects"] = ElementNode("div", attrs={"data-section": "projects"})
    root = ElementNode(
        "div",
        ElementNode("div", ElementNode("div", nodes["name"]), nodes["email"]),
        ElementNode(
            "div",
            ElementNode(
                "div",
                nodes["description"],
                ElementNode("ul", nodes["achievement"]),
                nodes["add_achievement"],
                attrs={"data-item-id": "1"},
            ),
            attrs={"data-section": "workExperience"},
        ),
        skills,
        nodes["projects"],
    )
    return ElementTree(root), nodes


@pytest.fixture
def tree_and_nodes():
    return _build_tree()


@pytest.fixture
def locator(tree_and_nodes, scheduler):
    tree, _ = tree_and_nodes
    return TargetLocator(tree, scheduler)


class TestMatchHelpers:
    def test_match_kind(self):
        assert match_kind("Reduced  latency by 30%", "Reduced  latency") == "exact"
        assert match_kind("Reduced latency by 30%", "Reduced \n latency") == "normalized"
        assert match_kind("Cut latency by 30% via caching", "Reduced latency via caching") is None
        assert match_kind("caching cut latency, reduced", "Reduced latency via caching") == "partial"
        assert match_kind("", "x") is None

    def test_significant_words(self):
        assert significant_words("a big improvement in system latency") == [
            "improvement",
            "system",
            "latency",
        ]


class TestLocate:
    def test_skill_badge_scoped_to_category(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="skills", type="remove", title="Drop", current_content="JavaScript", item_id="2")
        target = locator.locate(s)
        assert target.node is nodes["javascript"]
        assert target.strategy is MatchStrategy.CONTENT_CONTAINER

    def test_skill_badge_parentheses_stripped(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="skills", type="modify", title="Rename", current_content="Python (5 years)", item_id="1"
        )
        assert locator.locate(s).node is nodes["python"]

    def test_modify_prefers_form_field(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Sharpen description",
            current_content="microservices architecture",
            item_id="1",
        )
        target = locator.locate(s)
        assert target.node is nodes["description"]
        assert target.strategy is MatchStrategy.FORM_FIELD
        assert target.match == "exact"

    def test_modify_falls_back_to_content_container(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Quantify highlights",
            current_content="Reduced API response time by 40%",
        )
        target = locator.locate(s)
        assert target.node is nodes["achievement"]
        assert target.strategy is MatchStrategy.CONTENT_CONTAINER

    def test_add_achievement_button(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="workExperience", type="add", title="Add metric", item_id="1")
        target = locator.locate(s)
        assert target.node is nodes["add_achievement"]
        assert target.strategy is MatchStrategy.ADD_BUTTON

    def test_add_skill_without_category_uses_add_category(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="skills", type="add", title="Add Go", suggested_content="Go")
        assert locator.locate(s).node is nodes["add_category"]

    def test_add_skill_without_button_falls_back_to_section(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="skills", type="add", title="Add Go", suggested_content="Go", item_id="2")
        target = locator.locate(s)
        assert target.node is nodes["skills"]
        assert target.strategy is MatchStrategy.SECTION_CONTAINER

    def test_add_project_falls_back_to_section(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="projects", type="add", title="New project", suggested_content="x")
        assert locator.locate(s).node is nodes["projects"]

    def test_any_text_prefers_interactive(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="personalInfo", type="highlight", title="Email", current_content="jane@example.com"
        )
        target = locator.locate(s)
        assert target.node is nodes["email"]
        assert target.strategy is MatchStrategy.INTERACTIVE_ELEMENT

    def test_any_text_picks_innermost_container(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(section="personalInfo", type="highlight", title="Name", current_content="Jane Doe")
        target = locator.locate(s)
        assert target.node is nodes["name"]
        assert target.strategy is MatchStrategy.TEXT_CONTAINER

    def test_unlocatable(self, locator):
        s = ResumeSuggestion(section="education", type="highlight", title="Honors", item_id="9")
        with pytest.raises(UnlocatableTarget):
            locator.locate(s)
        assert locator.highlight_target(s) is False


class TestHighlight:
    def test_form_field_selects_text_and_reverts(self, locator, tree_and_nodes, scheduler):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Sharpen description",
            current_content="microservices architecture",
            item_id="1",
        )
        assert locator.highlight_target(s) is True

        node = nodes["description"]
        start = DESCRIPTION.index("microservices")
        assert node.selection == (start, start + len("microservices architecture"))
        assert node.focused and node.scrolled
        assert node.style["outline"] == "3px solid #3b82f6"
        assert scheduler.timers[0].delay == 4.0

        scheduler.run_all()
        assert node.style == {}

    def test_unmatched_text_selects_whole_field(self, locator, tree_and_nodes):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Sharpen description",
            current_content="Lead development of microservices",
            item_id="1",
        )
        target = locator.locate(s)
        locator.highlight(target, s.model_copy(update={"current_content": "zzzz qqqq"}))
        assert nodes["description"].selection == (0, len(DESCRIPTION))

    def test_content_highlight_lasts_longer_and_restores_tab_index(
        self, locator, tree_and_nodes, scheduler
    ):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Quantify highlights",
            current_content="Reduced API response time by 40%",
        )
        locator.highlight_target(s)
        node = nodes["achievement"]
        assert node.tab_index == 0
        assert "background-color" in node.style
        assert scheduler.timers[0].delay == 6.0

        scheduler.run_all()
        assert node.tab_index == -1
        assert "background-color" not in node.style

    def test_add_button_highlight_keeps_existing_style(self, locator, tree_and_nodes, scheduler):
        _, nodes = tree_and_nodes
        button = nodes["add_achievement"]
        button.style["outline"] = "1px dotted gray"
        s = ResumeSuggestion(section="workExperience", type="add", title="Add metric", item_id="1")
        locator.highlight_target(s)
        assert button.style["animation"] == "pulse 2s infinite"

        scheduler.run_all()
        assert button.style == {"outline": "1px dotted gray"}

    def test_revert_is_noop_when_node_detached(self, locator, tree_and_nodes, scheduler):
        _, nodes = tree_and_nodes
        s = ResumeSuggestion(
            section="workExperience",
            type="modify",
            title="Quantify highlights",
            current_content="Reduced API response time by 40%",
        )
        locator.highlight_target(s)
        node = nodes["achievement"]
        node.remove()

        scheduler.run_all()
        assert node.tab_index == 0
        assert node.style["outline"] == "2px solid #f59e0b"
