"""Dry runs: measure the vertical space a layout procedure consumes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, Optional

from .padding import inset
from .scratch import ScratchPool, get_scratch_document

if TYPE_CHECKING:
    from .document import LayoutDocument

logger = logging.getLogger(__name__)

LayoutProcedure = Callable[..., Any]


class DryRunResult(NamedTuple):
    """Height a procedure consumed, split into whole pages and a remainder."""

    total_height: float
    whole_pages: int
    partial_page_height: float


def dry_run(document: "LayoutDocument", procedure: LayoutProcedure,
            pool: Optional[ScratchPool] = None) -> DryRunResult:
    """Run ``procedure`` against the scratch document and measure it.

    The procedure is called as ``procedure(scratch)`` on a fresh page of the
    scratch document, with the same horizontal padding and font as
    ``document``. Nothing is written to ``document``. Pages the run creates
    are removed from the scratch document afterwards.

    The partial page height is capped at the effective page height of
    ``document``, so content pushed past the writable area by padding is not
    counted twice.
    """
    from .page_graph import truncate_pages

    scratch = get_scratch_document(document, pool)
    base_page_count = scratch.page_count
    try:
        scratch.start_new_page()
        start_page_number = scratch.page_number
        start_y = scratch.y
        bounds = document.bounds
        with inset(scratch, bounds.total_left_padding, bounds.total_right_padding):
            with scratch.using_font(document.font_family, style=document.font_style, size=document.font_size):
                procedure(scratch)
            partial_page_height = min(document.effective_page_height, start_y - scratch.y)
            whole_pages = scratch.page_number - start_page_number
    finally:
        truncate_pages(scratch, base_page_count)

    total_height = whole_pages * document.bounds.height + partial_page_height
    logger.debug(
        "Dry run measured %g (whole pages: %s, partial: %g)", total_height, whole_pages, partial_page_height
    )
    return DryRunResult(total_height, whole_pages, partial_page_height)
