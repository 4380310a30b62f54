"""
Guardian Autopilot - support ticket triage service
"""

__version__ = "1.0.0"
