"""Route guard: which screens a session status may reach.

Mirrors the two screen groups of the app: public screens (login, register)
and protected screens (balance, transactions, profile).
"""

from enum import Enum

from bank_client.auth.models import SessionStatus
from bank_client.auth.session_gate import SessionGate


class RouteGroup(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"


class RouteDecision(str, Enum):
    SHOW_LOADING = "show_loading"
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


def decide(status: SessionStatus, group: RouteGroup) -> RouteDecision:
    """Pure decision table. UNKNOWN always yields the neutral loading view."""
    if status is SessionStatus.UNKNOWN:
        return RouteDecision.SHOW_LOADING
    if group is RouteGroup.PROTECTED:
        return RouteDecision.ALLOW if status is SessionStatus.AUTHENTICATED else RouteDecision.REDIRECT_LOGIN
    # Signed-in users skip the login/register screens
    return RouteDecision.REDIRECT_HOME if status is SessionStatus.AUTHENTICATED else RouteDecision.ALLOW


async def resolve_route(gate: SessionGate, group: RouteGroup) -> RouteDecision:
    """Wait for the initial session lookup, then decide."""
    status = await gate.wait_until_resolved()
    return decide(status, group)
