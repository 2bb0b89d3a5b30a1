"""
inbody_tracker - InBody body-composition ingestion and insight engine.

Layers, innermost first: domain/ -> application/ -> infrastructure/ ->
adapters/. factory.py wires them together.
"""

__version__ = "0.1.0"
