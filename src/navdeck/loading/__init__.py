"""Lazy loading — viewport-driven promotion of deferred images."""

from navdeck.loading.loader import CandidateState, ViewportLoader
from navdeck.loading.targets import LazyCandidate, TargetKind, classify

__all__ = ["CandidateState", "LazyCandidate", "TargetKind", "ViewportLoader", "classify"]
