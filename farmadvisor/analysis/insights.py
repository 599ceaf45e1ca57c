"""
Human-readable insights derived from a dataset's aggregate report, plus
per-sample advice text.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from farmadvisor.analysis.metrics import (
    AggregateReport, HealthScore, health_score, round_half_up,
)
from farmadvisor.data.dataset import Dataset
from farmadvisor.data.schema import SoilSample

PRIORITY_ORDER = {"high": 1, "medium": 2, "low": 3}

DIVERSE_CROPS_MIN = 5
COMPLETENESS_WARNING_BELOW = 80


@dataclass
class Insight:
    type: str
    title: str
    message: str
    priority: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class InsightRule:
    type: str
    priority: str
    title: str
    applies: Callable[[AggregateReport, HealthScore], bool]
    message: Callable[[AggregateReport, HealthScore], str]

    def build(self, report: AggregateReport, health: HealthScore) -> Insight:
        return Insight(self.type, self.title, self.message(report, health), self.priority)


INSIGHT_RULES: List[InsightRule] = [
    InsightRule(
        "warning", "high", "Low Nitrogen Levels",
        lambda r, h: r.avg.nitrogen < 20,
        lambda r, h: (f"Average nitrogen is {r.avg.nitrogen:.1f} mg/kg. Consider "
                      f"nitrogen-rich fertilizers or legume rotation."),
    ),
    InsightRule(
        "info", "medium", "High Nitrogen Levels",
        lambda r, h: r.avg.nitrogen > 140,
        lambda r, h: (f"Average nitrogen is {r.avg.nitrogen:.1f} mg/kg. Excellent for "
                      f"leafy crops like rice and maize."),
    ),
    InsightRule(
        "warning", "high", "Low Phosphorus Levels",
        lambda r, h: r.avg.phosphorus < 10,
        lambda r, h: (f"Average phosphorus is {r.avg.phosphorus:.1f} mg/kg. Add phosphate "
                      f"fertilizers for better root development."),
    ),
    InsightRule(
        "warning", "high", "Low Potassium Levels",
        lambda r, h: r.avg.potassium < 20,
        lambda r, h: (f"Average potassium is {r.avg.potassium:.1f} mg/kg. Consider potash "
                      f"fertilizers for disease resistance."),
    ),
    InsightRule(
        "warning", "high", "Acidic Soil Detected",
        lambda r, h: r.avg.ph < 5.5,
        lambda r, h: (f"Average pH is {r.avg.ph:.2f}. Lime application recommended to "
                      f"neutralize acidity. Best for: blueberries, potatoes."),
    ),
    InsightRule(
        "warning", "high", "Alkaline Soil Detected",
        lambda r, h: r.avg.ph > 8.5,
        lambda r, h: (f"Average pH is {r.avg.ph:.2f}. Sulfur or organic matter can help "
                      f"lower pH. Best for: asparagus, cabbage."),
    ),
    InsightRule(
        "success", "low", "Optimal pH Range",
        lambda r, h: 6.0 <= r.avg.ph <= 7.5,
        lambda r, h: (f"pH of {r.avg.ph:.2f} is ideal for most crops. Excellent conditions "
                      f"for diverse agriculture."),
    ),
    InsightRule(
        "info", "medium", "High Temperature Zone",
        lambda r, h: r.avg.temperature > 35,
        lambda r, h: (f"Average temperature is {r.avg.temperature:.1f}°C. Consider "
                      f"heat-tolerant crops: cotton, millet, watermelon."),
    ),
    InsightRule(
        "info", "medium", "Cool Climate Zone",
        lambda r, h: r.avg.temperature < 15,
        lambda r, h: (f"Average temperature is {r.avg.temperature:.1f}°C. Ideal for: "
                      f"wheat, barley, apples, grapes."),
    ),
    InsightRule(
        "success", "low", "High Crop Diversity",
        lambda r, h: len(r.top_crops) >= DIVERSE_CROPS_MIN,
        lambda r, h: (f"Dataset shows potential for {len(r.top_crops)} different crops. "
                      f"Excellent for crop rotation strategies."),
    ),
    InsightRule(
        "warning", "high", "Data Quality Issues",
        lambda r, h: h.completeness < COMPLETENESS_WARNING_BELOW,
        lambda r, h: (f"{round_half_up(100 - h.completeness)}% of data may have missing "
                      f"values. Verify sensor calibration."),
    ),
]


def generate_insights(dataset: Dataset, report: Optional[AggregateReport]) -> List[Insight]:
    """Evaluate every insight rule, then sort once by priority (stable)."""
    if not len(dataset) or report is None:
        return []

    health = health_score(dataset, report)
    insights = [rule.build(report, health) for rule in INSIGHT_RULES if rule.applies(report, health)]
    insights.sort(key=lambda i: PRIORITY_ORDER[i.priority])
    return insights


def analyze_sample(sample: SoilSample) -> str:
    """Plain-language advice for a single soil sample."""
    messages = []
    if sample.ph < 5.5:
        messages.append("Soil is acidic (pH < 5.5) - consider liming.")
    elif sample.ph > 7.5:
        messages.append("Soil is alkaline (pH > 7.5) - consider sulfur or acidifying practices.")
    else:
        messages.append("pH is in the good range.")
    if sample.nitrogen < 40:
        messages.append("Nitrogen is low - apply nitrogen-rich fertilizer.")
    elif sample.nitrogen > 120:
        messages.append("Nitrogen is high - avoid heavy N applications.")
    if sample.phosphorus < 20:
        messages.append("Phosphorus is low - consider P fertilizer.")
    if sample.potassium < 50:
        messages.append("Potassium is low - consider K fertilizer.")
    if sample.moisture < 20:
        messages.append("Soil moisture is low - irrigation recommended.")
    return " ".join(messages)
