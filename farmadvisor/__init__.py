"""
Farm advisory toolkit: soil-sensor CSV ingestion, soil-health metrics,
anomaly detection and rule-based crop recommendations.
"""

__version__ = "1.0.0"
