"""
Static knowledge base - category kinds and reply templates

Each ticket category maps to one CategoryKind. A kind carries a description,
a default action, three remediation steps, and renders a customer reply.
Unknown categories resolve to CategoryKind.GENERIC.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from guardian.models.schemas import Ticket

SIGNATURE = "The Safe Guardian AI team"


@dataclass(frozen=True)
class KnowledgeEntry:
    """Static guidance for one category"""
    description: str
    default_action: str
    remediation: Tuple[str, str, str]


class CategoryKind(str, Enum):
    """Ticket categories known to the knowledge base"""
    AUTHENTICATION = "authentication"
    MONITORING = "monitoring"
    INTEGRATION = "integration"
    GENERIC = "generic"

    @classmethod
    def from_category(cls, category: str) -> "CategoryKind":
        """
        Resolve a raw ticket category to a kind.

        Matching is case-insensitive and accepts the historical French
        category names. Anything else is GENERIC.
        """
        key = (category or "").strip().lower()
        return _ALIASES.get(key, cls.GENERIC)

    @property
    def entry(self) -> KnowledgeEntry:
        return KNOWLEDGE_BASE[self]

    def render_response(self, ticket: Ticket) -> str:
        """Render the customer-facing reply for this kind"""
        match self:
            case CategoryKind.AUTHENTICATION:
                body = (
                    "We have received your request about resetting your password. "
                    "We have just generated a new secure link and checked the state of "
                    "our email delivery service. If nothing arrives within a few minutes, "
                    "please check your spam folder or use the \"resend\" option on the "
                    "sign-in page.\n\n"
                    "Our team keeps an eye on this ticket until you confirm you can sign in again."
                )
                closing = "Best regards,"
            case CategoryKind.MONITORING:
                body = (
                    "Thank you for your feedback. We have reviewed the alerts that were sent "
                    "and compared them with the actual metrics. An automatic recalibration of "
                    "the thresholds has just been applied to prevent false positives.\n\n"
                    "We are monitoring the next few hours and will keep you informed before "
                    "closing this ticket."
                )
                closing = "At your disposal,"
            case CategoryKind.INTEGRATION:
                body = (
                    "Thank you for your interest. We can enable API access for your "
                    "integration. To complete the setup, could you confirm:\n"
                    "- The authorized IP address or range\n"
                    "- The exact data scope you need\n"
                    "- Your security point of contact?\n\n"
                    "As soon as we hear back, we will provision an encrypted API key and "
                    "send it to you over a secure channel."
                )
                closing = "Kind regards,"
            case _:
                body = (
                    f"We have received your request about \"{ticket.subject}\". Our AI has "
                    "started analysing it and will get back to you shortly with a detailed "
                    "solution.\n\n"
                    "In the meantime, feel free to add any further information directly on "
                    "this ticket."
                )
                closing = "Best regards,"

        return f"Hello {ticket.customer_name},\n\n{body}\n\n{closing}\n{SIGNATURE}"


KNOWLEDGE_BASE = {
    CategoryKind.AUTHENTICATION: KnowledgeEntry(
        description="Incidents related to access, passwords, MFA and user sessions.",
        default_action=(
            "Check the authentication service status and restart the secure "
            "password reset flow."
        ),
        remediation=(
            "Analyse email delivery logs for SMTP errors",
            "Trigger regeneration of a secure reset link",
            "Notify the security team if the lockout looks suspicious",
        ),
    ),
    CategoryKind.MONITORING: KnowledgeEntry(
        description="Detection anomalies, false positives and alert configuration.",
        default_action="Recalibrate thresholds and verify the consistency of collected metrics.",
        remediation=(
            "Compare the raw metric with the configured smoothing window",
            "Temporarily adjust thresholds to avoid false positives",
            "Tag the incident for follow-up in the weekly report",
        ),
    ),
    CategoryKind.INTEGRATION: KnowledgeEntry(
        description="Partner onboarding, access provisioning and webhooks.",
        default_action="Collect the required information and prepare a set of temporary API keys.",
        remediation=(
            "Validate the API usage agreement and the retention period",
            "Generate an API key with a restricted scope",
            "Schedule a post-integration verification session",
        ),
    ),
    CategoryKind.GENERIC: KnowledgeEntry(
        description="Generic case",
        default_action="Collect more information and ensure customer follow-up.",
        remediation=(
            "Analyse recent logs",
            "Check the status of dependent services",
            "Schedule an automatic reminder to the customer",
        ),
    ),
}

_ALIASES = {
    "authentication": CategoryKind.AUTHENTICATION,
    "authentification": CategoryKind.AUTHENTICATION,
    "monitoring": CategoryKind.MONITORING,
    "integration": CategoryKind.INTEGRATION,
    "intégration": CategoryKind.INTEGRATION,
}
