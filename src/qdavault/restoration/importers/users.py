"""User import stage."""

import logging
import secrets
from typing import Any

from rich.markup import escape

from qdavault.constants import DEFAULT_USER_NAME, UNUSABLE_PASSWORD_BYTES, UNUSABLE_PASSWORD_PREFIX
from qdavault.restoration.importers.base import EntityImporter, is_blank
from qdavault.storage.models import EntityKind, ImportResult
from qdavault.utils import parse_optional_timestamp

logger = logging.getLogger(__name__)


def unusable_password() -> str:
    """Random credential that can never match a login attempt."""
    return UNUSABLE_PASSWORD_PREFIX + secrets.token_hex(UNUSABLE_PASSWORD_BYTES)


class UserImporter(EntityImporter):
    """Creates destination users, or maps every source user to one identity.

    Outside reassignment, a destination user with the same email is reused
    (mapped and counted skipped). New users get an unusable password and their
    email is queued for a credential-reset notice.
    """

    kind = EntityKind.USER
    required_field = "email"

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        identity = self.context.identity
        if identity.reassigning:
            return self.skipped(
                self.source_id_of(record),
                f"reassigned to user {identity.user_id}",
                destination_id=identity.user_id,
            )

        source_id = self.validate(record)
        email = str(record["email"]).strip()

        existing = self.repository.find_by(EntityKind.USER, email=email)
        if existing is not None:
            if source_id is not None:
                self.mappings.record(EntityKind.USER, source_id, existing["id"])
            return self.skipped(
                source_id, f"user {email} already exists", destination_id=existing["id"]
            )

        name = record.get("name")
        fields = {
            "name": DEFAULT_USER_NAME if is_blank(name) else name,
            "email": email,
            "password": unusable_password(),
            "email_verified_at": parse_optional_timestamp(
                record.get("email_verified_at"), "email_verified_at", source_id
            ),
            **self.timestamps(record, source_id),
        }
        destination_id = self.persist(source_id, fields)

        self.context.password_reset_emails.append(email)
        self.context.progress(f"  [green]✓[/green] Created user: {escape(email)}")
        return self.success(source_id, destination_id)
