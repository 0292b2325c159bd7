"""Scratch documents: disposable clones used to measure layout before committing it."""

from __future__ import annotations

import copy
import logging
import weakref
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .document import LayoutDocument

logger = logging.getLogger(__name__)


class Prototype:
    """A page-less snapshot of a document's configuration.

    Holds a blank document built from the source document's options, font
    families and font selection. Scratch documents are deep copies of it,
    which is cheaper than registering fonts again.
    """

    def __init__(self, document: "LayoutDocument"):
        self.document = document

    @classmethod
    def capture(cls, source: "LayoutDocument") -> "Prototype":
        blank = type(source)(copy.deepcopy(source.options), skip_page_creation=True)
        blank.font_families = copy.deepcopy(source.font_families)
        blank.set_font(source.font_family, style=source.font_style, size=source.font_size)
        return cls(blank)

    def clone(self) -> "LayoutDocument":
        return copy.deepcopy(self.document)


class ScratchPool:
    """One scratch document per primary document, created on first use."""

    def __init__(self):
        self._entries: "weakref.WeakKeyDictionary[LayoutDocument, tuple]" = weakref.WeakKeyDictionary()

    def get(self, document: "LayoutDocument") -> "LayoutDocument":
        prototype = document.prototype
        entry = self._entries.get(document)
        if entry is not None and entry[0] is prototype:
            return entry[1]
        scratch = self._create(document, prototype)
        self._entries[document] = (prototype, scratch)
        return scratch

    def discard(self, document: "LayoutDocument") -> None:
        self._entries.pop(document, None)

    def __contains__(self, document: "LayoutDocument") -> bool:
        return document in self._entries

    def _create(self, document: "LayoutDocument", prototype: Optional[Prototype]) -> "LayoutDocument":
        if prototype is not None:
            scratch = prototype.clone()
        else:
            logger.warning("No scratch prototype available; instantiating fresh scratch document")
            scratch = type(document)(skip_page_creation=True)
        scratch.state.store.info.data["Scratch"] = True
        # nested simulations clone from the same snapshot
        scratch.prototype = prototype
        logger.debug("Created scratch document for %r", document)
        return scratch


default_pool = ScratchPool()


def get_scratch_document(document: "LayoutDocument", pool: Optional[ScratchPool] = None) -> "LayoutDocument":
    """Return the scratch document paired with ``document``."""
    return (pool or default_pool).get(document)
