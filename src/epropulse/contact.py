"""Three-step contact form turned into a lead in the Content Store.

Step 1 collects identity (name, email, phone), step 2 budget and deadline,
step 3 the message and preferences. A honeypot field and a minimum fill
time keep naive bots out.
"""

import logging
import time
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from epropulse.clients.content_store import ContentStoreClient
from schemas.lead import Lead

logger = logging.getLogger(__name__)

LEADS_COLLECTION = "leads"

PREDEFINED_MESSAGES = {
    "musique": "Bonjour ! Je suis intéressé(e) par votre service de création de musique personnalisée.",
    "photoshooting": "Bonjour ! Je souhaite en savoir plus sur votre service de photoshooting IA.",
    "video": "Bonjour ! Votre service de vidéo promotionnelle IA m'intéresse beaucoup.",
    "livre": "Bonjour ! Je suis intéressé(e) par votre service de rédaction de livre assistée par IA.",
    "design-graphique": "Bonjour ! Votre service de design graphique IA semble parfait pour mes besoins.",
    "chatbot-whatsapp": "Bonjour ! Je veux automatiser mes communications WhatsApp.",
    "automation-marketing": "Bonjour ! Je cherche à automatiser mes campagnes marketing.",
    "chatbot-site": "Bonjour ! J'aimerais implémenter un chatbot intelligent sur mon site web.",
    "assistant-entreprise": "Bonjour ! Je souhaite déployer un assistant IA pour mon entreprise.",
    "analyse-donnees": "Bonjour ! J'ai besoin d'analyser mes données avec l'IA.",
}
DEFAULT_MESSAGE = (
    "Bonjour ! Je suis intéressé(e) par vos services IA. "
    "Pouvez-vous me contacter pour discuter de mes besoins ?"
)

STEP_REQUIREMENTS = {
    1: (("name", "email", "phone"), "Merci de remplir vos informations personnelles."),
    2: (("budget_min", "deadline"), "Merci de remplir le budget et la date limite."),
}
LAST_STEP = 3


class SpamPolicy(BaseModel):
    """Bot heuristics applied before a lead is stored.

    Attributes:
        honeypot_field: Hidden field humans leave empty
        min_fill_seconds: Forms submitted faster than this are rejected
    """

    honeypot_field: str = "website"
    min_fill_seconds: float = 3.0

    def is_spam(
        self,
        form: Mapping[str, Any],
        started_at: float | None = None,
        now: float | None = None,
    ) -> bool:
        if str(form.get(self.honeypot_field) or "").strip():
            logger.info("Rejecting contact form: honeypot filled")
            return True
        if started_at is not None:
            elapsed = (time.monotonic() if now is None else now) - started_at
            if elapsed < self.min_fill_seconds:
                logger.info(f"Rejecting contact form: filled in {elapsed:.1f}s")
                return True
        return False


def initial_message(service: str | None) -> str:
    """Prefilled message for a service, or the generic one."""
    return PREDEFINED_MESSAGES.get(service or "", DEFAULT_MESSAGE)


def validate_step(step: int, form: Mapping[str, Any]) -> str | None:
    """Check the fields a step requires.

    Returns:
        The message to show, or None if the step may be left
    """
    required, message = STEP_REQUIREMENTS.get(step, ((), None))
    if any(not str(form.get(name) or "").strip() for name in required):
        return message
    return None


def _parse_budget(value: Any) -> int | None:
    """Leading integer of a budget field, like parseInt."""
    text = str(value or "").strip()
    digits = ""
    for i, char in enumerate(text):
        if char.isdigit() or (i == 0 and char in "+-"):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def build_lead(form: Mapping[str, Any]) -> Lead:
    """Build a Lead from submitted form values.

    Raises:
        pydantic.ValidationError: If a field holds an unsupported value
    """
    service = str(form.get("service") or "")
    return Lead(
        name=str(form.get("name") or "").strip(),
        email=str(form.get("email") or "").strip(),
        phone=str(form.get("phone") or "").strip(),
        service=service,
        message=str(form.get("message") or "").strip() or initial_message(service),
        budget_min=_parse_budget(form.get("budget_min")),
        budget_max=_parse_budget(form.get("budget_max")),
        deadline=form.get("deadline") or None,
        contact_preference=form.get("contact_preference") or "any",
        urgency=form.get("urgency") or "medium",
    )


def submit_lead(
    client: ContentStoreClient,
    form: Mapping[str, Any],
    policy: SpamPolicy | None = None,
    started_at: float | None = None,
    now: float | None = None,
) -> Lead | None:
    """Validate every step, screen for spam and insert the lead.

    Spam is dropped silently: None is returned and nothing is stored.

    Raises:
        ValueError: If a step is incomplete or a field is invalid
        StoreError: If the Content Store rejects the insert
    """
    for step in range(1, LAST_STEP + 1):
        message = validate_step(step, form)
        if message:
            raise ValueError(message)

    policy = policy or SpamPolicy()
    if policy.is_spam(form, started_at=started_at, now=now):
        return None

    try:
        lead = build_lead(form)
    except ValidationError as e:
        raise ValueError(f"Invalid contact form: {e.error_count()} errors") from e

    client.insert(LEADS_COLLECTION, [lead.model_dump(mode="json")])
    logger.info(f"Stored lead for service {lead.service or 'unspecified'}")
    return lead
