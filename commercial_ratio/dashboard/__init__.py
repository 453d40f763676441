"""Dashboard state owned by the host, recomputed by explicit calls."""
