"""Keep a block of content on one page when it fits on one."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NamedTuple, Optional

from .dry_run import LayoutProcedure, dry_run
from .scratch import ScratchPool

if TYPE_CHECKING:
    from .document import LayoutDocument

logger = logging.getLogger(__name__)


class KeepTogetherResult(NamedTuple):
    value: Any
    total_height: Optional[float]
    started_new_page: bool


def keep_together(document: "LayoutDocument", procedure: LayoutProcedure,
                  pool: Optional[ScratchPool] = None) -> KeepTogetherResult:
    """Start a new page first if the block would otherwise be split.

    The block is measured with a dry run. A page break is inserted only when
    the block does not fit in the space left on the page, the cursor is not
    already at the top of the page and the block fits on a single page; a
    block taller than a page is left to break naturally.

    The procedure runs twice: as ``procedure(scratch)`` while measuring, then
    as ``procedure(document, total_height, started_new_page)`` for real, so
    it must accept the two extra arguments as optional.
    """
    available_space = document.cursor
    total_height = dry_run(document, procedure, pool).total_height
    if total_height > available_space and not document.at_page_top and total_height <= document.effective_page_height:
        document.start_new_page()
        started_new_page = True
    else:
        started_new_page = False
    logger.debug(
        "Keep together: height %g, available %g, new page %s", total_height, available_space, started_new_page
    )
    value = procedure(document, total_height, started_new_page)
    return KeepTogetherResult(value, total_height, started_new_page)


def keep_together_if(document: "LayoutDocument", verdict: bool, procedure: LayoutProcedure,
                     pool: Optional[ScratchPool] = None) -> KeepTogetherResult:
    """Apply keep_together only when ``verdict`` holds; otherwise just run the procedure."""
    if verdict:
        return keep_together(document, procedure, pool)
    return KeepTogetherResult(procedure(document), None, False)
