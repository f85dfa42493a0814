"""Named extension points (filters and actions) for wiring features into the host."""
from __future__ import annotations

import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

# Admin context
EDIT_FORM_PANELS = "edit_form_panels"
SAVE_ITEM = "save_item"

# Public context
GET_CANONICAL_URL = "get_canonical_url"
SEO_CANONICAL = "seo_canonical"
THE_CONTENT = "the_content"
ITEM_LINK = "item_link"

# Operator overrides
ENABLE_CANONICAL_DISCLAIMER = "enable_canonical_disclaimer"
CANONICAL_DISCLAIMER = "canonical_disclaimer"


@dataclass(order=True, slots=True)
class _Registration:
    priority: int
    sequence: int
    callback: Callable[..., Any] = field(compare=False)


class HookRegistry:
    """Holds callbacks per extension point name.

    Filters transform a value: each callback gets the current value plus the
    caller's extra arguments and returns the new value. Actions are called
    for their side effects only. Callbacks run by ascending priority, then in
    registration order. Exceptions raised by callbacks propagate.
    """

    def __init__(self, name: str = "hooks") -> None:
        self.name = name
        self._hooks: dict[str, list[_Registration]] = defaultdict(list)
        self._sequence = itertools.count()

    def _add(self, hook_name: str, callback: Callable[..., Any], priority: int) -> None:
        registrations = self._hooks[hook_name]
        registrations.append(_Registration(priority, next(self._sequence), callback))
        registrations.sort()
        logger.debug("Registered %s on %s:%s (priority %d)", getattr(callback, "__qualname__", callback), self.name, hook_name, priority)

    def add_filter(self, hook_name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._add(hook_name, callback, priority)

    def add_action(self, hook_name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._add(hook_name, callback, priority)

    def remove_hook(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        registrations = self._hooks.get(hook_name)
        if not registrations:
            return False
        kept = [entry for entry in registrations if entry.callback != callback]
        removed = len(kept) != len(registrations)
        self._hooks[hook_name] = kept
        return removed

    def has_hook(self, hook_name: str) -> bool:
        return bool(self._hooks.get(hook_name))

    def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        for entry in list(self._hooks.get(hook_name, ())):
            value = entry.callback(value, *args)
        return value

    def do_action(self, hook_name: str, *args: Any) -> None:
        for entry in list(self._hooks.get(hook_name, ())):
            entry.callback(*args)
