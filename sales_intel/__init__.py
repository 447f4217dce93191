"""
Sales Intelligence Engine - Merge & Scoring Pipeline
=====================================================
Joins a companies dataset with a people dataset and ranks accounts:
  Stage 1: Record Ingestion (synonym resolution, validity filtering)
  Stage 2: Dataset Merge (normalized company-name join)
  Stage 3: Sales Fit Scoring (additive score + priority tier)
  Stage 4: Aggregation & Filtering (dashboard stats, filter criteria)
  Stage 5: Company Assistant (LLM answers for presentation layer)
Map points come from an optional geocoder and job openings from an optional
job-listing source; both degrade to placeholders when the service fails.
"""

__version__ = "1.0.0"
__author__ = "Sales Intelligence Team"
