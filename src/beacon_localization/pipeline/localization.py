"""
End-to-end localization workflow.

parsed scans -> fingerprints -> scan graph -> aggregated result
"""

from __future__ import annotations

import time
from typing import Optional, Sequence

from ..acceleration.parallel_executor import PairParallelExecutor
from ..alignment.aligner import ScanAligner
from ..alignment.fingerprint import FingerprintIndex
from ..alignment.scan_graph import ScanGraph
from ..geometry.scan import Scan
from ..reconstruction.aggregate import LocalizationResult, aggregate
from ..utils.config import AppConfig
from ..utils.logging import setup_logger

logger = setup_logger(__name__)


def localize_scans(
    scans: Sequence[Scan],
    config: Optional[AppConfig] = None,
    *,
    reference_id: int = 0,
) -> LocalizationResult:
    """
    Place every scan in the reference scan's frame and merge the beacons.

    Args:
        scans: Parsed scans with distinct ids
        config: Application config (defaults when None)
        reference_id: Scan whose frame becomes the global frame

    Returns:
        LocalizationResult with the unique beacons and scanner positions

    Raises:
        UnalignableScanError: If some scans cannot be connected to the reference
    """
    cfg = config or AppConfig()
    if not scans:
        raise ValueError("No scans to localize")

    executor = None
    if cfg.parallel.enabled:
        executor = PairParallelExecutor(n_workers=cfg.parallel.n_workers)

    logger.info(f"Localizing {len(scans)} scans (reference scan {reference_id})")
    start = time.time()

    fingerprints = None
    if cfg.alignment.use_fingerprint:
        fingerprints = FingerprintIndex().build(scans, executor=executor)
        logger.info(f"Fingerprints built in {time.time() - start:.2f}s")

    graph = ScanGraph(
        scans,
        aligner=ScanAligner(),
        fingerprints=fingerprints,
        executor=executor,
        reference_id=reference_id,
        traversal=cfg.alignment.traversal,
    )
    t_graph = time.time()
    transforms = graph.resolve()
    logger.info(f"Scan graph resolved in {time.time() - t_graph:.2f}s")

    result = aggregate(scans, transforms)
    logger.info(
        f"Found {result.beacon_count} unique beacons; largest scanner distance "
        f"{result.max_manhattan_distance} (total {time.time() - start:.2f}s)"
    )
    return result
