"""
Live document model for the block checkout surface.

A BeautifulSoup tree whose structural edits produce mutation records, observed
the way browser MutationObservers observe the page, plus DOM-style events and
a single-threaded cooperative event loop with a virtual clock (milliseconds).
"""

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


class TimerHandle:
    """A scheduled callback; `cancel()` keeps it from running."""

    def __init__(self, due, callback, args):
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True


class EventLoop:
    """
    Microtasks run before any timer; timers run in due order as the clock advances.
    Callback errors are logged and do not stop the loop.
    """

    def __init__(self):
        self.now = 0
        self._microtasks = deque()
        self._timers = []
        self._sequence = itertools.count()

    def call_soon(self, callback, *args):
        self._microtasks.append((callback, args))

    def call_later(self, delay_ms, callback, *args) -> TimerHandle:
        handle = TimerHandle(self.now + max(0, delay_ms), callback, args)
        heapq.heappush(self._timers, (handle.due, next(self._sequence), handle))
        return handle

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, handle in self._timers if not handle.cancelled)

    def _run(self, callback, args):
        try:
            callback(*args)
        except Exception:
            logger.exception(f'Error in event loop callback {callback!r}')

    def run_microtasks(self):
        while self._microtasks:
            callback, args = self._microtasks.popleft()
            self._run(callback, args)

    def advance(self, ms):
        """Move the clock forward by `ms`, running everything that falls due."""
        target = self.now + ms
        self.run_microtasks()
        while self._timers and self._timers[0][0] <= target:
            due, _, handle = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self.now = due
            handle.done = True
            self._run(handle.callback, handle.args)
            self.run_microtasks()
        self.now = target

    def run_until_idle(self):
        """Run microtasks and every pending timer, advancing the clock as needed."""
        self.run_microtasks()
        while self._timers:
            self.advance(self._timers[0][0] - self.now)


@dataclass
class MutationRecord:
    target: Tag
    added_nodes: List = field(default_factory=list)
    removed_nodes: List = field(default_factory=list)


@dataclass
class Event:
    type: str
    target: Optional[Tag] = None


class MutationObserver:
    """Collects child-list mutations under observed nodes and delivers them as a microtask."""

    def __init__(self, document, callback: Callable):
        self.document = document
        self.callback = callback
        self._targets = []
        self._records = []
        self._delivery_scheduled = False

    def observe(self, node, child_list=True, subtree=False):
        if not child_list:
            return
        self._targets.append((node, subtree))
        self.document._register_observer(self)

    def disconnect(self):
        self._targets = []
        self._records = []
        self.document._unregister_observer(self)

    def take_records(self) -> List[MutationRecord]:
        records, self._records = self._records, []
        return records

    def watches(self, node) -> bool:
        for target, subtree in self._targets:
            if node is target:
                return True
            if subtree and any(parent is target for parent in node.parents):
                return True
        return False

    def _enqueue(self, record):
        self._records.append(record)
        if not self._delivery_scheduled:
            self._delivery_scheduled = True
            self.document.loop.call_soon(self._deliver)

    def _deliver(self):
        self._delivery_scheduled = False
        records = self.take_records()
        if records:
            self.callback(records, self)


class LiveDocument:
    """
    A parsed page that checkout code edits through this object so observers
    see the changes. Nodes are BeautifulSoup tags.
    """

    def __init__(self, markup='', loop: Optional[EventLoop] = None):
        self.soup = markup if isinstance(markup, BeautifulSoup) else BeautifulSoup(markup, 'html.parser')
        self.loop = loop or EventLoop()
        self.ready = False
        self._observers = []
        self._listeners = []
        self._ready_callbacks = []

    def __str__(self):
        return str(self.soup)

    @property
    def body(self):
        return self.soup.body or self.soup

    # Queries

    def select(self, selector) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector) -> Optional[Tag]:
        return self.soup.select_one(selector)

    # Node construction

    def create_element(self, name, **attrs) -> Tag:
        if 'class_' in attrs:
            attrs['class'] = attrs.pop('class_')
        if isinstance(attrs.get('class'), str):
            # Same multi-valued form the parser produces
            attrs['class'] = attrs['class'].split()
        return self.soup.new_tag(name, attrs=attrs)

    def parse_fragment(self, html) -> list:
        return list(BeautifulSoup(html or '', 'html.parser').contents)

    # Structural edits

    def append(self, parent, node):
        parent.append(node)
        self._record(MutationRecord(parent, added_nodes=[node]))

    def insert_after(self, anchor, node):
        parent = anchor.parent
        anchor.insert_after(node)
        self._record(MutationRecord(parent, added_nodes=[node]))

    def remove(self, node):
        parent = node.parent
        node.extract()
        if parent is not None:
            self._record(MutationRecord(parent, removed_nodes=[node]))

    def replace_with(self, old, new):
        """Replace `old` with `new` (a tag or markup), as a framework re-render does."""
        parent = old.parent
        nodes = self.parse_fragment(new) if isinstance(new, str) else [new]
        old.replace_with(*nodes)
        self._record(MutationRecord(parent, added_nodes=nodes, removed_nodes=[old]))
        return nodes[0] if len(nodes) == 1 else nodes

    def set_inner_html(self, parent, html):
        removed = list(parent.contents)
        parent.clear()
        added = self.parse_fragment(html)
        for node in added:
            parent.append(node)
        self._record(MutationRecord(parent, added_nodes=added, removed_nodes=removed))

    def _record(self, record):
        for observer in list(self._observers):
            if observer.watches(record.target):
                observer._enqueue(record)

    def _register_observer(self, observer):
        if not any(existing is observer for existing in self._observers):
            self._observers.append(observer)

    def _unregister_observer(self, observer):
        self._observers = [existing for existing in self._observers if existing is not observer]

    # Events

    def add_event_listener(self, event_type, callback, selector=None):
        """Listen on the document; with `selector`, only for events whose target matches it."""
        listener = (event_type, callback, selector)
        self._listeners.append(listener)
        return listener

    def remove_event_listener(self, listener):
        self._listeners = [existing for existing in self._listeners if existing is not listener]

    def dispatch_event(self, event_type, target=None) -> Event:
        event = Event(event_type, target)
        for listened_type, callback, selector in list(self._listeners):
            if listened_type != event_type:
                continue
            if selector is not None and (target is None or not target.css.match(selector)):
                continue
            callback(event)
        return event

    def change(self, input_node) -> Event:
        """Select a radio input and fire its change event."""
        name = input_node.get('name')
        if name:
            for other in self.soup.find_all('input', attrs={'name': name}):
                other.attrs.pop('checked', None)
        input_node['checked'] = 'checked'
        return self.dispatch_event('change', input_node)

    # Lifecycle

    def on_ready(self, callback):
        if self.ready:
            self.loop.call_soon(callback)
        else:
            self._ready_callbacks.append(callback)

    def mark_ready(self):
        """The page's interactive elements exist; run ready callbacks."""
        self.ready = True
        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            self.loop.call_soon(callback)
        self.loop.run_microtasks()
