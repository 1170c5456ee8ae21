"""
Contact Service

Verifies contact-form submissions against the bot-verification provider and
records them in the application log.
"""
import logging
import uuid
from typing import Optional

from errors import BotVerificationError
from models import ContactSubmission
from utils import sanitize_field, utc_timestamp

logger = logging.getLogger(__name__)


class ContactService:
    """Handles verified contact submissions"""

    def __init__(self, verifier, secret: Optional[str], min_score: float = 0.5):
        """
        Args:
            verifier: Bot-verification provider with verify(token, secret, remote_ip)
            secret: Server-side verification secret
            min_score: Scores at or below this are treated as automated
        """
        self.verifier = verifier
        self.secret = secret
        self.min_score = min_score

    def submit(self, submission: ContactSubmission, remote_ip: str) -> str:
        """
        Verify and record a submission

        Returns:
            Opaque reference for the submission

        Raises:
            BotVerificationError: if the token fails or scores too low
        """
        result = self.verifier.verify(submission.bot_verification_token, self.secret, remote_ip)
        if not result.success or result.score <= self.min_score:
            logger.warning(
                f'Contact submission rejected by bot verification '
                f'(success={result.success}, score={result.score}) from {remote_ip}'
            )
            raise BotVerificationError('reCAPTCHA verification failed. Please try again.')

        reference = str(uuid.uuid4())
        record = {
            'reference': reference,
            'name': sanitize_field('name', submission.name),
            'email': sanitize_field('email', submission.email),
            'message': sanitize_field('message', submission.message),
            'timestamp': utc_timestamp(),
            'ip': remote_ip,
        }
        logger.info(f'Contact form submission: {record}')
        return reference
