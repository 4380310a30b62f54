"""
Business Logic Services
"""
from .gateway import GuardianGateway, GatewayError
from .activity_log import ActivityLog
from .automation import AutomationService, get_automation_service

__all__ = [
    "GuardianGateway",
    "GatewayError",
    "ActivityLog",
    "AutomationService",
    "get_automation_service",
]
