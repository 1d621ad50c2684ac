"""Database models for the workspace platform."""

from app.db.base import Base
from app.models.user import User
from app.models.team import Team, TeamMember
from app.models.document import Document
from app.models.ai_model import AIModel, ai_model_documents
from app.models.chat import Chat, ChatMessage
from app.models.usage import UsageRecord
from app.models.subscription import Subscription
from app.models.company import Company, CompanyContextVersion

__all__ = [
    "Base",
    "User",
    "Team",
    "TeamMember",
    "Document",
    "AIModel",
    "ai_model_documents",
    "Chat",
    "ChatMessage",
    "UsageRecord",
    "Subscription",
    "Company",
    "CompanyContextVersion",
]
