from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from data_validator import is_non_empty
from services.text_cleaning import clean_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocatorMatch:
    selector: str
    node: Tag
    text: str


def select_first(root: Tag, selector: str) -> Optional[Tag]:
    """``select_one`` that treats an unsupported selector as a miss."""
    try:
        return root.select_one(selector)
    except (SelectorSyntaxError, NotImplementedError) as e:
        logger.debug("Selector failed: %s (%s)", selector, e)
        return None


def find_first_node(root: Tag, selectors: Sequence[str]) -> Optional[Tag]:
    """Find element using multiple selectors (first match wins, no validation)."""
    for selector in selectors:
        node = select_first(root, selector)
        if node is not None:
            return node
    return None


def node_text(node: Optional[Tag]) -> str:
    return clean_text(node.get_text()) if node is not None else ""


@dataclass(frozen=True)
class LocatorCascade:
    """Ordered structural locators for one semantic field.

    Earlier selectors encode the most specific, most current page structure;
    later ones are progressively generic fallbacks. A node that matches but
    fails validation is skipped and the next selector is tried.
    """

    field: str
    selectors: Sequence[str]
    validator: Callable[[Optional[str]], bool] = is_non_empty

    def find(self, root: Tag) -> Optional[LocatorMatch]:
        for selector in self.selectors:
            node = select_first(root, selector)
            if node is None:
                continue
            text = node_text(node)
            if self.validator(text):
                logger.debug("Found %s with selector %s", self.field, selector, extra={"field": self.field})
                return LocatorMatch(selector=selector, node=node, text=text)
            logger.debug("Rejected %s text %r from selector %s", self.field, text, selector, extra={"field": self.field})
        return None

    def extract(self, root: Tag) -> str:
        match = self.find(root)
        return match.text if match else ""
