"""Recommendation evaluation"""

from typing import Any, Dict, Mapping

from .models import Recommendation, Result, ScanContext
from ..utils.logger import setup_logger

EVALUATION_FAILED = "<evaluation failed>"


class RecommendationEngine:
    """Applies a recommendation set to one resource

    Predicates run on the calling task. A predicate that raises is reported as
    a non-compliant result and the remaining predicates still run.
    """

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)

    def evaluate(
        self,
        recommendations: Mapping[str, Recommendation],
        target: Any,
        scan_context: ScanContext,
    ) -> Dict[str, Result]:
        """Evaluate every recommendation once against target"""

        results: Dict[str, Result] = {}
        for key, rec in recommendations.items():
            try:
                not_compliant, detail = rec.predicate(target, scan_context)
            except Exception as e:
                self.logger.error(f"Recommendation {rec.id} failed to evaluate: {e!r}")
                not_compliant, detail = True, EVALUATION_FAILED

            results[key] = Result(
                recommendation_id=rec.id,
                resource_type=rec.resource_type,
                category=rec.category,
                impact=rec.impact,
                recommendation=rec.recommendation,
                learn_more_url=rec.learn_more_url,
                recommendation_type=rec.recommendation_type,
                not_compliant=bool(not_compliant),
                result=detail or "",
            )
        return results
