"""API subpackage - FastAPI routes for the calculators."""
