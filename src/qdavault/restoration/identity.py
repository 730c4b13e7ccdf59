"""Destination identity resolution for an import run."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from qdavault.exceptions import IdentityResolutionError
from qdavault.storage.models import EntityKind
from qdavault.storage.repository import RecordRepository

logger = logging.getLogger(__name__)


class IdentityMode(StrEnum):
    """How source users are carried into the destination."""

    IMPORT_ORIGINALS = "import"
    EXPLICIT = "explicit"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class ResolvedIdentity:
    """Identity policy settled before any entity is imported.

    Attributes:
        mode: Resolution mode
        user_id: Destination user all data is attached to (None when importing originals)
        name: Display name of that user
        email: Email of that user
    """

    mode: IdentityMode
    user_id: int | None = None
    name: str | None = None
    email: str | None = None

    @property
    def reassigning(self) -> bool:
        """True when all source users are replaced by one destination user."""
        return self.mode != IdentityMode.IMPORT_ORIGINALS

    @classmethod
    def import_originals(cls) -> ResolvedIdentity:
        return cls(mode=IdentityMode.IMPORT_ORIGINALS)

    @classmethod
    def for_user(cls, mode: IdentityMode, user: dict[str, Any]) -> ResolvedIdentity:
        return cls(mode=mode, user_id=int(user["id"]), name=user.get("name"), email=user.get("email"))


class IdentityResolver:
    """Decides the user-identity policy for a run.

    Three modes:
    - import originals: users from the bundle are created or matched by email
    - explicit: ``--user`` names one destination user by numeric ID or email
    - interactive: ``--current-user`` lists existing users and asks for one

    Any failure raises IdentityResolutionError, which the CLI turns into exit
    code 1 before importing anything.
    """

    def __init__(
        self,
        repository: RecordRepository,
        console: Console | None = None,
        prompt: Callable[[str], str] | None = None,
    ):
        """Initialize resolver.

        Args:
            repository: Destination repository to look users up in
            console: Console for the interactive listing
            prompt: Callable asking the operator for input (defaults to a Rich prompt)
        """
        self.repository = repository
        self.console = console or Console()
        self.prompt = prompt or (lambda message: Prompt.ask(message, console=self.console))

    def resolve(self, current_user: bool = False, user: str | None = None) -> ResolvedIdentity:
        """Resolve the identity policy from the CLI flags.

        An explicit ``user`` wins over ``current_user``.

        Args:
            current_user: Reassign everything to an interactively chosen user
            user: Destination user ID or email to reassign everything to

        Returns:
            ResolvedIdentity for the run

        Raises:
            IdentityResolutionError: If the requested user cannot be resolved
        """
        if user:
            found = self.find_user(user)
            if found is None:
                raise IdentityResolutionError(f"User not found: {user}")
            identity = ResolvedIdentity.for_user(IdentityMode.EXPLICIT, found)
            logger.info(f"Attaching all data to user {identity.user_id} ({identity.email})")
            return identity

        if current_user:
            chosen = self.choose_interactively()
            return ResolvedIdentity.for_user(IdentityMode.INTERACTIVE, chosen)

        return ResolvedIdentity.import_originals()

    def find_user(self, identifier: str) -> dict[str, Any] | None:
        """Find a destination user by numeric ID, falling back to exact email.

        Args:
            identifier: Numeric ID or email

        Returns:
            User record, or None if neither lookup matches
        """
        identifier = identifier.strip()
        if identifier.isdecimal():
            found = self.repository.get(EntityKind.USER, int(identifier))
            if found is not None:
                return found

        return self.repository.find_by(EntityKind.USER, email=identifier)

    def choose_interactively(self) -> dict[str, Any]:
        """List existing users alphabetically and ask the operator to pick one.

        Returns:
            Chosen user record

        Raises:
            IdentityResolutionError: If there are no users or the choice is invalid
        """
        users = self.repository.list_all(EntityKind.USER, order_by="name")
        if not users:
            raise IdentityResolutionError(
                "No users found in the system. Please create a user first."
            )

        self.console.print("[bold]Available users:[/bold]")
        for index, candidate in enumerate(users, 1):
            self.console.print(
                f"  [{index}] {candidate['name']} ({candidate['email']})", markup=False
            )

        choice = (self.prompt("Select user number to attach data to") or "").strip()
        if not choice.isdecimal() or not 1 <= int(choice) <= len(users):
            raise IdentityResolutionError(f"Invalid selection: {choice!r}")

        selected = users[int(choice) - 1]
        self.console.print(f"Selected: {selected['name']} ({selected['email']})", markup=False)
        logger.info(f"Interactively selected destination user {selected['id']}")
        return selected
