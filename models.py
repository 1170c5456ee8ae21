"""
Data Models for the Storefront API

Pydantic models for request validation and response shaping.
"""
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from utils import sanitize_input

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

MIN_AMOUNT = 1
MAX_AMOUNT = 999999


class Product(BaseModel):
    """Catalog item as returned to the site"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ''
    variations: List[Dict[str, Any]] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias='imageUrl')
    category_id: Optional[str] = Field(None, alias='categoryId')

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PaymentRequest(BaseModel):
    """Checkout body: {sourceId, amount, currency?, note?}"""
    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(None, alias='sourceId', validate_default=True)
    amount_minor_units: int = Field(None, alias='amount', validate_default=True)
    currency: str = 'USD'
    note: Optional[str] = ''

    @field_validator('source_id', mode='before')
    @classmethod
    def source_id_token(cls, v):
        """Payment method token must be a string of at least 5 characters"""
        if not isinstance(v, str) or len(v) < 5:
            raise ValueError('Invalid source ID')
        return v

    @field_validator('amount_minor_units', mode='before')
    @classmethod
    def amount_in_range(cls, v):
        """Amount must be a whole number of minor units in [1, 999999]"""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError('Invalid amount. Must be between 1 and 999999 cents.')
        if isinstance(v, float) and not v.is_integer():
            raise ValueError('Invalid amount. Must be between 1 and 999999 cents.')
        if v < MIN_AMOUNT or v > MAX_AMOUNT:
            raise ValueError('Invalid amount. Must be between 1 and 999999 cents.')
        return int(v)

    @field_validator('currency', mode='before')
    @classmethod
    def currency_code(cls, v):
        if v is None:
            return 'USD'
        if not isinstance(v, str) or not CURRENCY_PATTERN.match(v.strip().upper()):
            raise ValueError('Invalid currency code')
        return v.strip().upper()

    @field_validator('note', mode='before')
    @classmethod
    def note_text(cls, v):
        if v is None:
            return ''
        if not isinstance(v, str):
            raise ValueError('Invalid note')
        return v


class PaymentConfirmation(BaseModel):
    """Trimmed payment returned to the client"""
    id: str
    status: str
    amount: Optional[int] = None
    currency: Optional[str] = None
    timestamp: str


class ContactSubmission(BaseModel):
    """
    Contact form body

    Fields are declared in validation order; the first failing rule is the
    one reported to the client.
    """
    model_config = ConfigDict(populate_by_name=True)

    bot_verification_token: str = Field(None, alias='recaptchaToken', validate_default=True)
    name: str = Field(None, validate_default=True)
    email: str = Field(None, validate_default=True)
    message: str = Field(None, validate_default=True)

    @field_validator('bot_verification_token', mode='before')
    @classmethod
    def token_present(cls, v):
        if not v or not isinstance(v, str):
            raise ValueError('reCAPTCHA verification required')
        return v

    @field_validator('name', mode='before')
    @classmethod
    def name_length(cls, v):
        if not isinstance(v, str) or not 2 <= len(v) <= 100 or len(sanitize_input(v)) < 2:
            raise ValueError('Invalid name. Must be between 2 and 100 characters.')
        return v

    @field_validator('email', mode='before')
    @classmethod
    def email_format(cls, v):
        if not isinstance(v, str) or len(v) > 100 or not EMAIL_PATTERN.match(v):
            raise ValueError('Invalid email address')
        return v

    @field_validator('message', mode='before')
    @classmethod
    def message_length(cls, v):
        if not isinstance(v, str) or not 10 <= len(v) <= 1000 \
                or len(sanitize_input(v, 1000)) < 10:
            raise ValueError('Invalid message. Must be between 10 and 1000 characters.')
        return v


class VerificationResult(BaseModel):
    """Outcome reported by the bot-verification provider"""
    success: bool = False
    score: float = 0.0
    error_codes: List[str] = Field(default_factory=list)


def parse_request(model: type, data: Dict[str, Any]):
    """
    Validate a request body against a model

    Raises:
        ValidationError: with the message of the first failing field
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        error = first.get('ctx', {}).get('error')
        raise ValidationError(str(error) if error is not None else first['msg'])
