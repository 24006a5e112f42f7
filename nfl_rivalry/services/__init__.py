# nfl_rivalry/services/__init__.py
"""
Services package exports.
"""
from .rivalry_service import RivalryService
from .scores_service import ScoresService
from .squares_service import RefreshResult, SquaresService

__all__ = ["RivalryService", "ScoresService", "SquaresService", "RefreshResult"]
