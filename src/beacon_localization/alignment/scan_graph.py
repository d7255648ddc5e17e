"""
Scan Graph Assembly

Grows a graph of scans connected by confirmed alignments, starting from a
reference scan whose frame becomes the global frame. Each newly aligned scan
gets its scan-to-global transform by composing the resolved neighbour's
transform with the pairwise alignment, so scans that never overlap the
reference directly are still placed through a chain of neighbours.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
from types import MappingProxyType
from typing import Deque, Dict, List, Literal, Mapping, Optional, Sequence, Set, Tuple, TYPE_CHECKING

from ..exceptions import UnalignableScanError
from ..geometry.scan import Scan
from ..geometry.transform import Transform
from ..utils.logging import setup_logger
from .aligner import Alignment, ScanAligner, align_pair
from .fingerprint import FingerprintIndex

if TYPE_CHECKING:
    from ..acceleration.parallel_executor import PairParallelExecutor

logger = setup_logger(__name__)


class GraphStatus(str, Enum):
    PENDING = "pending"
    SOLVED = "solved"
    STUCK = "stuck"


class ScanGraph:
    """
    Resolve every scan into the reference scan's frame.

    The resolved set is a mapping from scan id to scan-to-global transform.
    Entries are written once, by the parent process, and never replaced.

    Example:
        graph = ScanGraph(scans, fingerprints=FingerprintIndex().build(scans))
        transforms = graph.resolve()
    """

    def __init__(
        self,
        scans: Sequence[Scan],
        aligner: Optional[ScanAligner] = None,
        fingerprints: Optional[FingerprintIndex] = None,
        executor: Optional["PairParallelExecutor"] = None,
        reference_id: int = 0,
        traversal: Literal["breadth_first", "depth_first"] = "breadth_first",
    ):
        """
        Args:
            scans: All scans, with distinct ids
            aligner: Pairwise aligner (default: ScanAligner with the puzzle threshold)
            fingerprints: Optional index used to skip pairs that cannot overlap
            executor: Optional worker pool for alignment attempts
            reference_id: Scan whose frame is the global frame
            traversal: Expansion order of resolved scans
        """
        self._scans: Dict[int, Scan] = {}
        for scan in scans:
            if scan.scan_id in self._scans:
                raise ValueError(f"Duplicate scan id {scan.scan_id}")
            self._scans[scan.scan_id] = scan
        if reference_id not in self._scans:
            raise ValueError(f"Reference scan {reference_id} is not among the scans")
        if traversal not in ("breadth_first", "depth_first"):
            raise ValueError(f"Unknown traversal order '{traversal}'")

        self.aligner = aligner or ScanAligner()
        self.fingerprints = fingerprints
        self.executor = executor
        self.reference_id = reference_id
        self.traversal = traversal

        self._transforms: Dict[int, Transform] = {reference_id: Transform.identity()}
        self._parent: Dict[int, int] = {}
        self._edges: List[Alignment] = []
        self._tried: Set[Tuple[int, int]] = set()
        self.attempts = 0
        self.pruned = 0
        self.status = GraphStatus.PENDING if len(self._scans) > 1 else GraphStatus.SOLVED

    # ------------------------ Views ------------------------
    @property
    def scans(self) -> Mapping[int, Scan]:
        return MappingProxyType(self._scans)

    @property
    def transforms(self) -> Mapping[int, Transform]:
        return MappingProxyType(self._transforms)

    @property
    def edges(self) -> Tuple[Alignment, ...]:
        return tuple(self._edges)

    @property
    def unresolved(self) -> List[int]:
        return sorted(i for i in self._scans if i not in self._transforms)

    def neighbours(self, scan_id: int) -> List[int]:
        out = set()
        for edge in self._edges:
            if edge.reference_id == scan_id:
                out.add(edge.candidate_id)
            elif edge.candidate_id == scan_id:
                out.add(edge.reference_id)
        return sorted(out)

    def path_to_reference(self, scan_id: int) -> List[int]:
        """Chain of scan ids through which ``scan_id`` was resolved, ending at the reference."""
        if scan_id not in self._transforms:
            raise KeyError(f"Scan {scan_id} is not resolved")
        path = [scan_id]
        while path[-1] != self.reference_id:
            path.append(self._parent[path[-1]])
        return path

    # ------------------------ Resolution ------------------------
    def resolve(self) -> Mapping[int, Transform]:
        """
        Align scans outward from the reference until all are resolved.

        Returns:
            Read-only mapping of scan id to scan-to-global transform

        Raises:
            UnalignableScanError: If scans remain once every resolved scan has
                been tried against every unresolved one
        """
        if self.status is GraphStatus.SOLVED:
            return self.transforms

        frontier: Deque[int] = deque(sorted(self._transforms))
        while frontier and len(self._transforms) < len(self._scans):
            if self.traversal == "breadth_first":
                known_id = frontier.popleft()
            else:
                known_id = frontier.pop()
            for new_id in self._expand(known_id):
                frontier.append(new_id)

        unresolved = self.unresolved
        if unresolved:
            self.status = GraphStatus.STUCK
            logger.error(
                f"Scan graph stuck after {self.attempts} alignment attempts: "
                f"{len(unresolved)} scan(s) unresolved {unresolved}"
            )
            raise UnalignableScanError(unresolved, self._transforms.keys())

        self.status = GraphStatus.SOLVED
        logger.info(
            f"Resolved {len(self._scans)} scans with {self.attempts} alignment attempts "
            f"({self.pruned} pairs skipped by fingerprint)"
        )
        return self.transforms

    def _expand(self, known_id: int) -> List[int]:
        """Try one resolved scan against every unresolved scan; return newly resolved ids."""
        candidates = []
        for cand_id in self.unresolved:
            pair = (known_id, cand_id)
            if pair in self._tried:
                continue
            self._tried.add(pair)
            if self.fingerprints is not None and not self.fingerprints.is_candidate(known_id, cand_id):
                self.pruned += 1
                continue
            candidates.append(cand_id)

        if not candidates:
            return []

        known = self._scans[known_id]
        self.attempts += len(candidates)
        if self.executor is None:
            results = [self.aligner.align(known, self._scans[c]) for c in candidates]
        else:
            results = self.executor.map_tasks(
                [(known, self._scans[c]) for c in candidates],
                align_pair,
                {"min_overlap": self.aligner.min_overlap},
            )

        # Single writer: commit in ascending candidate order
        newly_resolved = []
        for cand_id, alignment in zip(candidates, results):
            if alignment is None:
                continue
            self._commit(known_id, alignment)
            newly_resolved.append(cand_id)
        return newly_resolved

    def _commit(self, known_id: int, alignment: Alignment) -> None:
        cand_id = alignment.candidate_id
        if cand_id in self._transforms:
            raise RuntimeError(f"Scan {cand_id} is already resolved")
        self._edges.append(alignment)
        self._transforms[cand_id] = self._transforms[known_id].compose(alignment.transform)
        self._parent[cand_id] = known_id
        logger.info(
            f"Scan {cand_id} resolved via scan {known_id} "
            f"({alignment.votes} shared beacons); position {self._transforms[cand_id].position}"
        )
