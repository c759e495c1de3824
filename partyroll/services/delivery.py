"""
Message delivery for communications.

No provider is wired in: every message is logged and reported as delivered.
A real SMS or e-mail gateway would replace ``DeliveryService.deliver``.
"""
import logging
from typing import Optional

from partyroll.models.communication import CommunicationType
from partyroll.models.member import Member

logger = logging.getLogger(__name__)


class DeliveryService:
    """Logs each outgoing message instead of handing it to a gateway."""

    def address_for(self, channel: CommunicationType, member: Member) -> Optional[str]:
        if channel == CommunicationType.SMS:
            return member.phone
        if channel == CommunicationType.EMAIL:
            return member.email
        return member.membership_id

    def deliver(
        self,
        channel: CommunicationType,
        member: Member,
        subject: Optional[str],
        message: str
    ) -> bool:
        address = self.address_for(channel, member)
        logger.debug(
            "%s to %s (%s): subject=%r body=%r",
            channel.value, member.membership_id, address or "-", subject, message[:80]
        )
        return True


delivery_service = DeliveryService()
