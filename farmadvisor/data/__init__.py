"""
Dataset ingestion for soil-sensor CSV files.

Modules:
    schema      — Canonical soil fields, alias tables and the SoilSample type
    csv_parser  — Quote-aware CSV text parser
    normalizer  — Map raw rows onto canonical SoilSample records
    dataset     — Immutable parsed dataset with a content fingerprint
    validation  — Soil-column gate that runs before any analysis
"""
