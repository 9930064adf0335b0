"""Guard adapters: route guard, component gate and gRPC interceptor.

All adapters take the same AccessRequirement and delegate to ``evaluate``.
"""

from .gate import ComponentGate
from .interceptors import EnforcementMode, RequirementInterceptor
from .route import DenialContext, RouteGuard, RouteOutcome, RouteResult

__all__ = [
    "ComponentGate",
    "DenialContext",
    "EnforcementMode",
    "RequirementInterceptor",
    "RouteGuard",
    "RouteOutcome",
    "RouteResult",
]
