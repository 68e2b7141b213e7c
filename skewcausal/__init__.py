"""Skewcausal causal discovery for non-Gaussian data."""

# License: GNU General Public License v3.0

__version__ = "0.1.0"
