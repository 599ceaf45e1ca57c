"""
Soil analysis over a loaded Dataset.

Modules:
    metrics      — Aggregate report and dataset health score
    anomalies    — Hard-bound, z-score and missing-value anomaly detection
    recommender  — Rule-table crop recommender
    insights     — Dataset insights and per-row advice
    filters      — Range filters over soil samples
    pipeline     — Cached orchestration of all of the above
"""
