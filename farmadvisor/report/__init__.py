"""
Downloadable renditions of a dataset analysis (text, CSV, JSON, PDF).
"""
