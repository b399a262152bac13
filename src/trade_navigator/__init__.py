"""
Trade Navigator Package

Landed cost and pricing optimization calculations for small and medium
manufacturers, served over a JSON API and a Streamlit dashboard.
"""

__version__ = "1.0.0"
