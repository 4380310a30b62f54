"""
Pytest configuration and fixtures
"""
from typing import Any, Dict, List

import pytest


@pytest.fixture
def remote_tickets() -> List[Dict[str, Any]]:
    """Ticket list as returned by the remote ticket system"""
    return [
        {
            "id": "RT-1",
            "subject": "Password reset email never arrives",
            "category": "authentification",
            "summary": "Reset email missing for an admin account",
            "status": "open",
            "priority": "urgent",
            "customerName": "Lina Morel",
            "customerEmail": "lina.morel@example.com",
            "createdAt": "2026-01-15T11:00:00Z",
            "updatedAt": "2026-01-15T11:50:00Z",
            "slaMinutes": 60,
            "tags": ["password"],
            "conversation": [
                {"role": "user", "message": "No reset email yet.", "timestamp": "2026-01-15T11:00:00Z"},
            ],
        },
        {
            "id": "RT-2",
            "subject": "Closed request",
            "category": "integration",
            "summary": "Already handled",
            "status": "resolved",
            "priority": "low",
            "customerName": "Marc Durand",
            "customerEmail": "marc.durand@example.com",
            "createdAt": "2026-01-14T08:00:00Z",
            "updatedAt": "2026-01-14T09:00:00Z",
            "slaMinutes": 720,
        },
        {
            "id": "RT-3",
            "subject": "Billing question",
            "category": "billing",
            "summary": "Invoice shows the wrong company name",
            "status": "awaiting_customer",
            "priority": "medium",
            "customerName": "Ines Garnier",
            "customerEmail": "ines.garnier@example.com",
            "createdAt": "2026-01-15T06:00:00Z",
            "updatedAt": "2026-01-15T07:00:00Z",
            "slaMinutes": 720,
            "metadata": {"invoice": "INV-2031"},
            "conversation": [
                {"role": "user", "message": "Please fix the invoice name.", "timestamp": "2026-01-15T06:00:00Z"},
            ],
        },
    ]
