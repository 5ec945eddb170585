from __future__ import annotations

import logging
from typing import Optional

from shared.protocol import codec
from shared.protocol.constants import ENCODING
from shared.protocol.errors import CodecError
from shared.protocol.messages import Frame

logger = logging.getLogger(__name__)


class MessageService:
    """Decodes DATA frames and produces the acknowledgment."""

    def __init__(self) -> None:
        self.received = 0
        self.decoded = 0
        self.failed = 0

    def handle_data(self, frame: Frame, peer: str) -> Optional[Frame]:
        self.received += 1
        logger.info("[%s] Encoded message: %s", peer, frame.content)
        try:
            text = codec.decode(frame.content).decode(ENCODING, errors="replace")
        except CodecError as exc:
            self.failed += 1
            logger.warning("[%s] Failed to decode Base64 message: %s", peer, exc.message)
        else:
            self.decoded += 1
            logger.info("[%s] Decoded message: %s", peer, text)
        # The ACK confirms the frame arrived, not that its payload was valid.
        return Frame.ack()
