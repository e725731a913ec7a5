"""
Processing for new contact messages.

Runs after the submission response has gone out, so a freshly created message
may not carry a status yet.
"""

import logging

from database import DocumentStore, utcnow

logger = logging.getLogger(__name__)

CONTACT_COLLECTION = "contacts"


def process_new_contact(store: DocumentStore, contact_id: str) -> None:
    doc = store.get(CONTACT_COLLECTION, contact_id)
    if not doc:
        return

    email = (doc.get("email") or "").strip()
    message = (doc.get("message") or "").strip()
    if not email or not message:
        logger.warning("Invalid contact submission %s", contact_id)
        store.update(CONTACT_COLLECTION, contact_id, {"status": "invalid"})
        return

    logger.info("New contact message from: %s <%s>", doc.get("name"), email)
    # TODO: email the site owner once an SMTP transport is configured
    store.update(CONTACT_COLLECTION, contact_id, {"status": "unread", "processedAt": utcnow()})
