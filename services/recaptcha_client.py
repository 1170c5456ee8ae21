"""
reCAPTCHA Verification Client

Verifies contact-form tokens against Google's siteverify endpoint.
"""
import logging
from typing import Optional

import requests

from errors import UpstreamError
from models import VerificationResult

logger = logging.getLogger(__name__)

VERIFY_URL = 'https://www.google.com/recaptcha/api/siteverify'


class RecaptchaClient:
    """Bot-verification provider backed by Google reCAPTCHA v3"""

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None,
                 verify_url: str = VERIFY_URL):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.verify_url = verify_url

    def verify(self, token: str, secret: str, remote_ip: Optional[str] = None) -> VerificationResult:
        """
        Score a token for automation likelihood

        Args:
            token: Token produced by the reCAPTCHA widget
            secret: Server-side secret key
            remote_ip: Caller address, forwarded to Google when known

        Returns:
            VerificationResult with success flag and score
        """
        params = {'secret': secret, 'response': token}
        if remote_ip:
            params['remoteip'] = remote_ip

        try:
            response = self.session.post(self.verify_url, data=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            result = VerificationResult(
                success=bool(data.get('success')),
                score=float(data.get('score') or 0.0),
                error_codes=data.get('error-codes') or [],
            )
        except requests.exceptions.Timeout:
            raise UpstreamError('reCAPTCHA verification timed out')
        except requests.exceptions.RequestException as e:
            raise UpstreamError('reCAPTCHA verification failed', detail=str(e))
        except (ValueError, TypeError, AttributeError) as e:
            raise UpstreamError('reCAPTCHA verification failed', detail=f'Invalid response: {e}')
        if result.error_codes:
            logger.warning(f'reCAPTCHA returned error codes: {result.error_codes}')
        return result
