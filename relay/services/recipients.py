"""
relay/services/recipients.py

Recipient policy for order notifications.
- Pairing: each paired identifier notifies its partner only
- Aliases: display names mapped to identifiers (used on order updates)
Owners outside both tables resolve to None, meaning broadcast to everyone else.
"""

from typing import Mapping, Optional

import structlog

from config import settings

logger = structlog.get_logger(__name__)


class RecipientPolicy:
    """Static pairing between user identifiers plus a display-name alias table."""

    def __init__(
        self,
        pairs: Mapping[str, str],
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._partners: dict[str, str] = {}
        for left, right in pairs.items():
            if left == right:
                raise ValueError(f"user {left!r} cannot be paired with itself")
            for user_id in (left, right):
                if user_id in self._partners:
                    raise ValueError(f"user {user_id!r} appears in more than one pair")
            self._partners[left] = right
            self._partners[right] = left
        self._aliases: dict[str, str] = dict(aliases or {})

    @classmethod
    def from_settings(cls) -> "RecipientPolicy":
        return cls(settings.recipient_pairs, settings.display_name_aliases)

    def partner_of(self, user_id: Optional[str]) -> Optional[str]:
        if not user_id:
            return None
        return self._partners.get(user_id)

    def resolve(
        self,
        owner_username: Optional[str],
        use_aliases: bool = False,
    ) -> Optional[str]:
        """
        Return the single recipient for an order owned by owner_username.

        With use_aliases, a display name missing from the pairing is mapped to
        its identifier first and that identifier's partner is returned (or the
        identifier itself when it is unpaired). None means broadcast.
        """
        recipient = self.partner_of(owner_username)
        if recipient is not None:
            return recipient

        if use_aliases and owner_username in self._aliases:
            aliased = self._aliases[owner_username]
            recipient = self.partner_of(aliased) or aliased
            logger.debug(
                "recipient_alias_resolved",
                owner=owner_username,
                alias=aliased,
                recipient=recipient,
            )
            return recipient

        return None
