"""Topic selection state for a report draft.

A pure reducer: every transition returns a new TopicSelection. ``chosen`` is
the ordered set of selected topics (vocabulary or custom); ``custom`` is the
ordered list of ad hoc topics the tutor has added, whether or not they are
currently selected.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tutor_reports.vocabulary import Category, Subject, topic_options


@dataclass(frozen=True, slots=True)
class TopicSelection:
    chosen: tuple[str, ...] = ()
    custom: tuple[str, ...] = ()

    @classmethod
    def from_topics(
        cls, topics: Iterable[str], category: Category, subject: Subject
    ) -> TopicSelection:
        """Rebuild selection state for a stored report; non-vocabulary topics become custom."""
        options = topic_options(category, subject)
        chosen = tuple(dict.fromkeys(topics))
        return cls(chosen=chosen, custom=tuple(t for t in chosen if t not in options))

    def toggle(self, topic: str) -> TopicSelection:
        """Select the topic if unselected, otherwise deselect it."""
        if topic in self.chosen:
            return TopicSelection(tuple(t for t in self.chosen if t != topic), self.custom)
        return TopicSelection((*self.chosen, topic), self.custom)

    def add_custom(self, topic: str) -> TopicSelection:
        """Add and select an ad hoc topic. Blank input is ignored."""
        name = topic.strip()
        if not name:
            return self
        custom = self.custom if name in self.custom else (*self.custom, name)
        chosen = self.chosen if name in self.chosen else (*self.chosen, name)
        return TopicSelection(chosen, custom)

    def remove_custom(self, topic: str) -> TopicSelection:
        """Drop an ad hoc topic entirely (also deselects it)."""
        return TopicSelection(
            tuple(t for t in self.chosen if t != topic),
            tuple(t for t in self.custom if t != topic),
        )

    def reset(self) -> TopicSelection:
        """Clear everything; applied when the category or subject changes."""
        return TopicSelection()

    @property
    def topics(self) -> list[str]:
        """Topics to submit with the draft."""
        return list(self.chosen)
