"""
Utility modules for storeadmin.

Cross-cutting concerns:
- Export: CSV/JSON output of review lists
"""
