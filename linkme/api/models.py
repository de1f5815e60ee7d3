"""
Pydantic models used for request validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. Domain rules (known
categories, coordinate ranges, score bounds, password policy) are enforced
again by the core layer, which reports them as 400 errors.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """
    Represents login credentials for a user.
    """
    email: str
    """The login email."""
    password: str
    """The plaintext password provided for authentication."""


class UserData(BaseModel):
    """
    Represents data needed to register a new account.
    """
    email: str = Field(..., description="Login email, unique.", example="ana@example.com")
    password: str = Field(..., description="8+ chars with lower, upper, digit and special character.")
    name: str = Field(..., description="Display name.", example="Ana Petrović")
    role: str = Field(..., description="'user' or 'volunteer'.", example="volunteer")
    jmbg: str = Field(..., description="13-digit national ID; only its hash is stored.", example="0101990710006")
    help_categories: List[str] = Field(default_factory=list, description="Categories the user can help with.")


class UserUpdate(BaseModel):
    """Profile changes; omitted fields stay unchanged."""
    name: Optional[str] = None
    role: Optional[str] = None
    help_categories: Optional[List[str]] = None


class HelpRequestCreation(BaseModel):
    """
    Represents a new help request posted by a user.
    """
    user_id: UUID = Field(..., description="Owner of the request.")
    category: str = Field(..., description="One of the help categories.", example="shopping")
    description: str = Field(..., description="What help is needed.", example="Need groceries from the market")
    urgency: str = Field("flexible", description="'urgent' or 'flexible'.")
    latitude: float = Field(..., description="Request latitude in degrees.", example=44.8125)
    longitude: float = Field(..., description="Request longitude in degrees.", example=20.4612)
    address: str = Field(..., description="Human-readable address.", example="Knez Mihailova 1, Beograd")


class AcceptDetails(BaseModel):
    volunteer_id: UUID


class CancelDetails(BaseModel):
    user_id: UUID


class ConversationCreationDetails(BaseModel):
    """
    Represents details needed to get or create a conversation between two users.
    """
    participant1_id: UUID
    """One participant; order does not matter."""
    participant2_id: UUID
    """The other participant."""
    help_request_id: Optional[UUID] = None
    """Originating help request, stored only for a new conversation."""


class NewMessage(BaseModel):
    """
    Represents a new message to be created in a conversation.
    """
    sender_id: UUID
    """The sending participant."""
    text: str
    """The text content of the message."""


class ReadReceipt(BaseModel):
    user_id: UUID
    """The participant whose received messages are marked read."""


class RatingDetails(BaseModel):
    """
    Represents a rating given by one party of a help request to the other.
    """
    from_user_id: UUID = Field(..., description="The rater.")
    to_user_id: UUID = Field(..., description="The rated user.")
    help_request_id: UUID = Field(..., description="The rated help request.")
    score: int = Field(..., description="Integer score from 1 to 5.", example=5)
    comment: Optional[str] = Field(None, description="Optional free-text comment.")
