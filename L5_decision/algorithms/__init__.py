# =============================================================================
# L5 Decision - Algorithms Package Init
# =============================================================================

from .dwa import DWADecisionMaker
from .pursuit import PursuitDecisionMaker

__all__ = [
    'DWADecisionMaker',
    'PursuitDecisionMaker',
]
