"""Target Locator - maps a suggestion to the on-screen element it refers to.

Matching is a best-effort cascade over the UI tree; a miss is expected and
is reported as ``False`` rather than an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from resume_optimizer.errors import UnlocatableTarget
from resume_optimizer.locator.text_selection import find_selection
from resume_optimizer.locator.tree import (
    ATTR_ACTION,
    ATTR_CONTENT,
    ATTR_ITEM_ID,
    ATTR_ROLE,
    ATTR_SECTION,
    ATTR_SKILL_CATEGORY_ID,
    CONTENT_SKILL_LIST,
    INTERACTIVE_TAGS,
    ROLE_SKILL_BADGE,
    UINode,
    UITree,
)
from resume_optimizer.models.analysis import ResumeSuggestion, Section, SuggestionType
from resume_optimizer.scheduling import Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)

CONTENT_CLASSES = ("achievement", "highlight", "description", "content")
GENERIC_CONTAINER_TAGS = ("div", "span", "p", "li")
SKIPPED_TAGS = ("script", "style")

SECTION_ADD_ACTIONS: dict[Section, str] = {
    Section.PROJECTS: "add-project",
    Section.EDUCATION: "add-education",
}

FIELD_STYLE = {
    "outline": "3px solid #3b82f6",
    "outline-offset": "2px",
    "box-shadow": "0 0 0 6px rgba(59, 130, 246, 0.2)",
}
ADD_ACTION_STYLE = {
    "outline": "3px solid #10b981",
    "outline-offset": "2px",
    "box-shadow": "0 0 0 6px rgba(16, 185, 129, 0.2)",
    "animation": "pulse 2s infinite",
}
CONTENT_STYLE = {
    "outline": "2px solid #f59e0b",
    "outline-offset": "2px",
    "background-color": "rgba(245, 158, 11, 0.1)",
    "box-shadow": "0 0 0 4px rgba(245, 158, 11, 0.1)",
}
STYLE_KEYS = ("outline", "outline-offset", "box-shadow", "background-color", "animation")


class MatchStrategy(str, Enum):
    FORM_FIELD = "form_field"
    CONTENT_CONTAINER = "content_container"
    ADD_BUTTON = "add_button"
    SECTION_CONTAINER = "section_container"
    INTERACTIVE_ELEMENT = "interactive_element"
    TEXT_CONTAINER = "text_container"


PASSIVE_STRATEGIES = frozenset(
    {MatchStrategy.CONTENT_CONTAINER, MatchStrategy.SECTION_CONTAINER, MatchStrategy.TEXT_CONTAINER}
)


@dataclass
class LocatedTarget:
    node: UINode
    strategy: MatchStrategy
    match: str = ""


def normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def significant_words(text: str, limit: int = 3) -> list[str]:
    return [word for word in text.split(" ") if len(word) > 3][:limit]


def match_kind(haystack: str, needle: str) -> str | None:
    """Classify how ``needle`` occurs in ``haystack``: exact, normalized, partial or None."""
    if not needle or not haystack:
        return None
    if needle in haystack:
        return "exact"
    normalized = normalize_whitespace(needle)
    if normalized and normalized in normalize_whitespace(haystack):
        return "normalized"
    words = significant_words(needle)
    lowered = haystack.lower()
    if words and all(word.lower() in lowered for word in words):
        return "partial"
    return None


class TargetLocator:
    """Find, scroll to and temporarily highlight the element a suggestion refers to."""

    def __init__(
        self,
        tree: UITree,
        scheduler: Scheduler | None = None,
        *,
        field_highlight_seconds: float = 4.0,
        content_highlight_seconds: float = 6.0,
    ):
        self.tree = tree
        self.scheduler = scheduler or ThreadingScheduler()
        self.field_highlight_seconds = field_highlight_seconds
        self.content_highlight_seconds = content_highlight_seconds

    def highlight_target(self, suggestion: ResumeSuggestion) -> bool:
        """Locate and highlight the suggestion's target. Returns False when nothing matches."""
        try:
            target = self.locate(suggestion)
        except UnlocatableTarget as exc:
            logger.info("%s", exc)
            return False
        self.highlight(target, suggestion)
        return True

    def locate(self, suggestion: ResumeSuggestion) -> LocatedTarget:
        """Run the matching cascade. Raises UnlocatableTarget when every strategy misses."""
        logger.debug("Locating target for %s", suggestion.key)
        for strategy in (
            self._find_skill_badge,
            self._find_modified_content,
            self._find_add_action,
            self._find_any_text,
        ):
            target = strategy(suggestion)
            if target is not None:
                logger.debug("Located %r via %s (%s)", target.node, target.strategy.value, target.match)
                return target
        raise UnlocatableTarget(f"No target element found for suggestion {suggestion.title!r}")

    # --- strategy 1: skill badges ---

    def _find_skill_badge(self, suggestion: ResumeSuggestion) -> LocatedTarget | None:
        if suggestion.section is not Section.SKILLS or not suggestion.current_content:
            return None

        cleaned = normalize_whitespace(re.sub(r"\([^)]*\)", " ", suggestion.current_content))
        fragments = [part.strip() for part in cleaned.split(",") if part.strip()]
        if not fragments:
            return None

        if suggestion.item_id:
            category = self._first(ATTR_SKILL_CATEGORY_ID, suggestion.item_id)
            if category is not None:
                badge = self._match_badge(fragments, within=category)
                if badge is not None:
                    return LocatedTarget(badge, MatchStrategy.CONTENT_CONTAINER, "skill")

        badge = self._match_badge(fragments)
        if badge is not None:
            return LocatedTarget(badge, MatchStrategy.CONTENT_CONTAINER, "skill")
        return None

    def _match_badge(self, fragments: list[str], within: UINode | None = None) -> UINode | None:
        for skill_list in self._nodes_with(ATTR_CONTENT, CONTENT_SKILL_LIST, within):
            for badge in self._nodes_with(ATTR_ROLE, ROLE_SKILL_BADGE, skill_list):
                text = badge.text_content.strip()
                if text and any(f in text or text in f for f in fragments):
                    return badge
        return None

    # --- strategy 2: modify/remove ---

    def _find_modified_content(self, suggestion: ResumeSuggestion) -> LocatedTarget | None:
        if (
            suggestion.type not in (SuggestionType.MODIFY, SuggestionType.REMOVE)
            or not suggestion.current_content
            or suggestion.section is Section.SKILLS
        ):
            return None
        needle = suggestion.current_content

        for node in self.tree.iter_nodes():
            if node.is_text_field:
                kind = match_kind(node.value, needle)
                if kind:
                    return LocatedTarget(node, MatchStrategy.FORM_FIELD, kind)

        for selector in self._content_selectors():
            matches = []
            kinds = {}
            for node in self.tree.iter_nodes():
                if selector(node):
                    kind = match_kind(node.text_content, needle)
                    if kind:
                        matches.append(node)
                        kinds[id(node)] = kind
            if matches:
                node = self._innermost(matches)
                return LocatedTarget(node, MatchStrategy.CONTENT_CONTAINER, kinds[id(node)])
        return None

    @staticmethod
    def _content_selectors():
        yield lambda node: node.get_attribute(ATTR_CONTENT) is not None
        for cls in CONTENT_CLASSES:
            yield lambda node, cls=cls: node.has_class(cls)
        for tag in GENERIC_CONTAINER_TAGS:
            yield lambda node, tag=tag: node.tag == tag

    # --- strategy 3: add actions ---

    def _find_add_action(self, suggestion: ResumeSuggestion) -> LocatedTarget | None:
        if suggestion.type is not SuggestionType.ADD:
            return None

        button = None
        if suggestion.section is Section.WORK_EXPERIENCE:
            if suggestion.item_id:
                entry = self._first(ATTR_ITEM_ID, suggestion.item_id)
                if entry is not None:
                    button = self._first(ATTR_ACTION, "add-achievement", within=entry)
            button = (
                button
                or self._first(ATTR_ACTION, "add-achievement")
                or self._first(ATTR_ACTION, "add-experience")
            )
        elif suggestion.section is Section.SKILLS:
            if suggestion.item_id:
                category = self._first(ATTR_SKILL_CATEGORY_ID, suggestion.item_id)
                if category is not None:
                    button = self._first(ATTR_ACTION, "add-skill", within=category)
            else:
                button = self._first(ATTR_ACTION, "add-category")
        elif suggestion.section in SECTION_ADD_ACTIONS:
            button = self._first(ATTR_ACTION, SECTION_ADD_ACTIONS[suggestion.section])

        if button is not None:
            return LocatedTarget(button, MatchStrategy.ADD_BUTTON, "action")

        container = self._first(ATTR_SECTION, suggestion.section.value)
        if container is not None:
            return LocatedTarget(container, MatchStrategy.SECTION_CONTAINER, "section")
        return None

    # --- strategy 4: any text ---

    def _find_any_text(self, suggestion: ResumeSuggestion) -> LocatedTarget | None:
        needle = suggestion.current_content
        if not needle:
            return None

        containers = []
        for node in self.tree.iter_nodes():
            if node.tag in SKIPPED_TAGS or needle not in node.text_content:
                continue
            if node.tag in INTERACTIVE_TAGS:
                return LocatedTarget(node, MatchStrategy.INTERACTIVE_ELEMENT, "exact")
            containers.append(node)
        if containers:
            return LocatedTarget(self._innermost(containers), MatchStrategy.TEXT_CONTAINER, "exact")
        return None

    # --- highlighting ---

    def highlight(self, target: LocatedTarget, suggestion: ResumeSuggestion) -> None:
        """Scroll to the target and apply a transient highlight that reverts itself."""
        node = target.node
        node.scroll_into_view()
        original = {key: node.style.get(key, "") for key in STYLE_KEYS}
        original_tab_index = node.tab_index

        if target.strategy is MatchStrategy.FORM_FIELD:
            node.style.update(FIELD_STYLE)
            node.focus()
            if suggestion.current_content:
                self._select_text(node, suggestion.current_content)
        elif target.strategy is MatchStrategy.ADD_BUTTON:
            node.style.update(ADD_ACTION_STYLE)
            node.focus()
        else:
            node.style.update(CONTENT_STYLE)
            node.tab_index = 0
            node.focus()

        duration = (
            self.content_highlight_seconds
            if target.strategy in PASSIVE_STRATEGIES
            else self.field_highlight_seconds
        )

        def revert() -> None:
            if not self.tree.contains(node):
                return
            for key, value in original.items():
                if value:
                    node.style[key] = value
                else:
                    node.style.pop(key, None)
            node.tab_index = original_tab_index

        self.scheduler.call_later(duration, revert)

    @staticmethod
    def _select_text(node: UINode, target: str) -> None:
        span = find_selection(node.value, target)
        if span is None:
            logger.debug("No span for %r, selecting the whole field", target[:50])
            node.select_all()
        else:
            node.set_selection_range(*span)

    # --- tree helpers ---

    def _nodes_with(self, attr: str, value: str, within: UINode | None = None):
        for node in self.tree.iter_nodes(within):
            if node.get_attribute(attr) == value:
                yield node

    def _first(self, attr: str, value: str, within: UINode | None = None) -> UINode | None:
        return next(self._nodes_with(attr, value, within), None)

    def _innermost(self, matches: list[UINode]) -> UINode:
        """The deepest match along the chain of nested matches starting at the first one."""
        best = matches[0]
        for node in matches[1:]:
            if any(descendant is node for descendant in self.tree.iter_nodes(best)):
                best = node
        return best
