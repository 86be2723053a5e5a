"""
Block checkout description reconciler.

The block checkout re-renders its shipping option rows whenever quantities,
addresses or the selected method change. The reconciler keeps exactly one
description node under every option row whose rate has a description, by
re-running an add-only pass on document ready, on subtree mutations of the
shipping containers, and shortly after checkout update and shipping change
events. Because a pass only adds missing nodes, any number of passes in any
order converge on the same document.
"""

import logging
from typing import Mapping, Optional, Sequence

from shipdesc.shipping.constants import (
    BLOCK_CONTAINER_SELECTORS,
    BLOCK_INPUT_NAME_PATTERN,
    BLOCK_INPUT_SELECTOR,
    BLOCK_LABEL_SELECTOR,
    BLOCK_OPTION_SELECTORS,
    BLOCK_UPDATE_EVENTS,
)
from shipdesc.shipping.dom import LiveDocument, MutationObserver

logger = logging.getLogger(__name__)

DEFAULT_CSS_CLASS = 'shipping-method-description'
DEFAULT_DELAY_MS = 100


class ShippingDescriptionReconciler:
    """
    Applies a description map to the shipping option rows of a LiveDocument.

    Without a description map (None) the reconciler does nothing, ever.
    """

    def __init__(
        self,
        document: LiveDocument,
        descriptions: Optional[Mapping[str, str]],
        css_class: str = DEFAULT_CSS_CLASS,
        delay_ms: int = DEFAULT_DELAY_MS,
        option_selectors: Sequence[str] = BLOCK_OPTION_SELECTORS,
        container_selectors: Sequence[str] = BLOCK_CONTAINER_SELECTORS,
        input_selector: str = BLOCK_INPUT_SELECTOR,
        label_selector: str = BLOCK_LABEL_SELECTOR,
        update_events: Sequence[str] = BLOCK_UPDATE_EVENTS,
        input_name_pattern: str = BLOCK_INPUT_NAME_PATTERN,
    ):
        self.document = document
        self.descriptions = descriptions
        self.css_class = css_class
        self.delay_ms = delay_ms
        self.option_selectors = tuple(option_selectors)
        self.container_selectors = tuple(container_selectors)
        self.input_selector = input_selector
        self.label_selector = label_selector
        self.update_events = tuple(update_events)
        self.change_selector = f'input[name*="{input_name_pattern}"]'
        self.observer = None
        self._listeners = []
        self._scheduled = []
        self.started = False

    @property
    def active(self) -> bool:
        return self.descriptions is not None

    def _option_elements(self):
        seen = set()
        for selector in self.option_selectors:
            for element in self.document.select(selector):
                if id(element) not in seen:
                    seen.add(id(element))
                    yield element

    def _rate_id(self, element) -> str:
        radio = element.select_one(self.input_selector)
        if radio is None:
            return ''
        return (radio.get('value') or '').strip()

    def _build_description_node(self, text):
        node = self.document.create_element('div', class_=self.css_class)
        for child in self.document.parse_fragment(text):
            node.append(child)
        return node

    def reconcile_once(self) -> int:
        """Add missing description nodes; returns how many were added."""
        if not self.active:
            return 0

        added = 0
        for element in self._option_elements():
            rate_id = self._rate_id(element)
            if not rate_id:
                continue
            text = self.descriptions.get(rate_id)
            if not text:
                continue
            if element.find(class_=self.css_class) is not None:
                continue

            node = self._build_description_node(text)
            label = element.select_one(self.label_selector)
            if label is not None:
                self.document.insert_after(label, node)
            else:
                self.document.append(element, node)
            added += 1

        if added:
            logger.debug(f'Added {added} shipping description(s)')
        return added

    def schedule_reconcile(self, event=None):
        """Reconcile after the checkout's own re-render has had time to finish."""
        self._scheduled = [handle for handle in self._scheduled if not handle.done]
        self._scheduled.append(self.document.loop.call_later(self.delay_ms, self.reconcile_once))

    def _on_mutations(self, records, observer):
        if any(record.added_nodes for record in records):
            self.reconcile_once()

    def _on_ready(self):
        if not self.started:
            return
        self.reconcile_once()

        self.observer = MutationObserver(self.document, self._on_mutations)
        for selector in self.container_selectors:
            for container in self.document.select(selector):
                self.observer.observe(container, child_list=True, subtree=True)

        for event_type in self.update_events:
            self._listeners.append(
                self.document.add_event_listener(event_type, self.schedule_reconcile)
            )
        self._listeners.append(
            self.document.add_event_listener('change', self.schedule_reconcile, selector=self.change_selector)
        )

    def start(self):
        """Hook into the document; the first pass runs once the document is ready."""
        if not self.active:
            logger.debug('No shipping descriptions provided; reconciler disabled')
            return
        if self.started:
            return
        self.started = True
        self.document.on_ready(self._on_ready)

    def stop(self):
        if self.observer is not None:
            self.observer.disconnect()
            self.observer = None
        for listener in self._listeners:
            self.document.remove_event_listener(listener)
        self._listeners = []
        # Passes already scheduled by events must not run after stop
        for handle in self._scheduled:
            handle.cancel()
        self._scheduled = []
        self.started = False


def annotate_block_markup(markup: str, descriptions: Optional[Mapping[str, str]],
                          css_class: str = DEFAULT_CSS_CLASS) -> str:
    """Apply descriptions to a rendered block fragment and return the resulting markup."""
    document = LiveDocument(markup)
    reconciler = ShippingDescriptionReconciler(document, descriptions, css_class=css_class)
    reconciler.start()
    document.mark_ready()
    document.loop.run_until_idle()
    reconciler.stop()
    return str(document)
