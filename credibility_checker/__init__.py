"""Claim credibility analysis service."""
