"""Exports: CSV writers and Markdown summary for a dashboard state.

- writers.py: CSV emitters with fixed column schemas
- reports.py: summary.md generator
"""
