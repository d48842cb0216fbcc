# src/specguard/engine/batch.py
"""
Batch validation.

Contracts are independent, so each one is validated on its own worker with
no shared state. Outcomes are re-sorted by (contract identifier, source
label) after the merge, never by completion order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from specguard.api.results import BatchItem
from specguard.engine.engine import ValidationEngine
from specguard.errors import ParseError
from specguard.logging import get_logger

_logger = get_logger(__name__)

BatchSources = Union[Mapping[str, str], Iterable[Union[str, Path]]]


def _labelled(sources: BatchSources) -> List[Tuple[str, Union[str, Path]]]:
    """Mappings are {label: text}; other iterables hold paths (or raw texts, labelled by index)."""
    if isinstance(sources, Mapping):
        return [(str(label), text) for label, text in sources.items()]
    out = []
    for i, src in enumerate(sources):
        if isinstance(src, Path) or ("\n" not in str(src) and Path(str(src)).is_file()):
            out.append((str(src), src))
        else:
            out.append((f"<contract {i}>", src))
    return out


def _sort_key(item: BatchItem) -> Tuple[int, str, str]:
    # Items without an identifier (parse failures) sort after identified ones.
    cid = item.contract_id
    return (0 if cid is not None else 1, cid or "", item.source)


def validate_many(
    sources: BatchSources,
    *,
    engine: Optional[ValidationEngine] = None,
    max_workers: Optional[int] = None,
) -> List[BatchItem]:
    """
    Validate many contracts concurrently.

    A ParseError is captured on its BatchItem; any other exception propagates.
    """
    engine = engine or ValidationEngine()
    workers = max_workers or engine.config.max_workers
    jobs = _labelled(sources)

    def run_one(job: Tuple[str, Union[str, Path]]) -> BatchItem:
        label, src = job
        try:
            return BatchItem(source=label, report=engine.validate(src, source=label))
        except ParseError as e:
            _logger.debug("Batch item %s failed to parse: %s", label, e)
            return BatchItem(source=label, error=e)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        items = list(pool.map(run_one, jobs))

    items.sort(key=_sort_key)
    _logger.debug("Validated %d contracts (%d parse failures)", len(items), sum(1 for i in items if i.error))
    return items
