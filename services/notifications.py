"""Outbound invitation messages.

Delivery is not wired to a mail provider; links are written to the log so an
operator can forward them.
"""

import logging
from urllib.parse import urlencode

import config
from models.user_invitation import UserInvitation

logger = logging.getLogger(__name__)

NEW_ACCOUNT_PATH = "/accept-invitation"
JOIN_TENANT_PATH = "/auth/join-tenant"


def build_invitation_link(token: str, *, existing_account: bool = False) -> str:
    """
    Link the invitee opens to accept.

    Someone who already has an account is sent to the join page, everyone
    else to the sign-up page, e.g. ``{SITE_URL}/accept-invitation?token=...``.
    """
    base = config.settings.SITE_URL.rstrip("/")
    path = JOIN_TENANT_PATH if existing_account else NEW_ACCOUNT_PATH
    return f"{base}{path}?{urlencode({'token': token})}"


async def send_invitation(
    invitation: UserInvitation,
    *,
    tenant_name: str,
    inviter_name: str | None,
    existing_account: bool = False,
) -> str:
    """
    Dispatch the invitation link to the invitee.

    Returns:
        The link that was sent
    """
    link = build_invitation_link(invitation.invitation_token, existing_account=existing_account)
    logger.info(
        "Invitation to %s for tenant %s from %s: %s",
        invitation.email,
        tenant_name,
        inviter_name or "unknown",
        link,
    )
    return link
