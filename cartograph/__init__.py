"""Cartograph: concept map DSL parser and distance-filtered graph model."""

from .concept_map import INFINITE_DISTANCE, ConceptMap
from .parser import parse_dsl

__version__ = "0.1.0"

__all__ = ["ConceptMap", "INFINITE_DISTANCE", "parse_dsl", "__version__"]
