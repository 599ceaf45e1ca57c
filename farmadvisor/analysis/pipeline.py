"""
Dataset analysis orchestrator: runs the metrics engine, anomaly detector
and insight generator over a Dataset and caches the result by dataset
fingerprint, so repeated views of an unchanged dataset do not rescan it.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional

from farmadvisor.analysis.anomalies import Anomaly, detect_anomalies, summarize_anomalies
from farmadvisor.analysis.insights import Insight, generate_insights
from farmadvisor.analysis.metrics import (
    AggregateReport, HealthScore, dataset_report, health_score,
)
from farmadvisor.config import DEFAULT_CACHE_SIZE
from farmadvisor.data.dataset import Dataset

logger = logging.getLogger(__name__)


@dataclass
class DatasetAnalysis:
    """Every derived view of one dataset version."""
    fingerprint: str
    count: int
    report: Optional[AggregateReport]
    health: Optional[HealthScore]
    insights: List[Insight] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "fingerprint": self.fingerprint,
            "count": self.count,
            "report": self.report.to_dict() if self.report else None,
            "health_score": self.health.to_dict() if self.health else None,
            "insights": [i.to_dict() for i in self.insights],
            "anomalies": [a.to_dict() for a in self.anomalies],
            "anomaly_summary": summarize_anomalies(self.anomalies),
        }


def analyze_dataset(dataset: Dataset) -> DatasetAnalysis:
    """Compute all derived views from scratch."""
    logger.info("Analysing dataset %s (%d rows)", dataset.fingerprint[:12], len(dataset))
    report = dataset_report(dataset)
    analysis = DatasetAnalysis(
        fingerprint=dataset.fingerprint,
        count=len(dataset),
        report=report,
        health=health_score(dataset, report),
        insights=generate_insights(dataset, report),
        anomalies=detect_anomalies(dataset),
    )
    logger.info(
        "Dataset %s: %d insights, %d anomalies",
        dataset.fingerprint[:12], len(analysis.insights), len(analysis.anomalies),
    )
    return analysis


class DatasetAnalyzer:
    """
    Bounded LRU cache of DatasetAnalysis keyed by dataset fingerprint.

    Usage:
        analyzer = DatasetAnalyzer()
        analysis = analyzer.analyze(dataset)
        # a second call with the same content is a cache hit
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, DatasetAnalysis]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def analyze(self, dataset: Dataset) -> DatasetAnalysis:
        key = dataset.fingerprint
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self.hits += 1
            logger.debug("Analysis cache hit for %s", key[:12])
            return cached

        self.misses += 1
        analysis = analyze_dataset(dataset)
        self._cache[key] = analysis
        if len(self._cache) > self.max_entries:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted cached analysis %s", evicted[:12])
        return analysis

    def invalidate(self, dataset: Dataset = None):
        """Drop one dataset's cached analysis, or everything when ``dataset`` is None."""
        if dataset is None:
            self._cache.clear()
        else:
            self._cache.pop(dataset.fingerprint, None)

    def __len__(self) -> int:
        return len(self._cache)
