"""Candidate-to-recruiter allocation core."""

__version__ = "0.1.0"
