"""Pydantic schemas for API request/response validation."""

from app.schemas.common import (
    CamelModel,
    ApiResponse,
    ListResponse,
    MessageResponse,
)

from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserUpdate,
    UserResponse,
    TokenResponse,
    ApiKeyResponse,
    PasswordChangeRequest,
    UsageSummary,
)

from app.schemas.team import (
    TeamCreate,
    TeamUpdate,
    MemberAdd,
    MemberRoleUpdate,
    TeamResponse,
)

from app.schemas.document import (
    DocumentUpdate,
    DocumentResponse,
)

from app.schemas.ai_model import (
    AIModelCreate,
    AIModelUpdate,
    AIModelResponse,
)

from app.schemas.chat import (
    ChatCreate,
    ChatUpdate,
    MessageCreate,
    ChatResponse,
    MessageAccepted,
)

from app.schemas.payment import (
    PlanResponse,
    SubscribeRequest,
    CancelRequest,
    PaymentMethodUpdate,
    Invoice,
    SubscriptionResponse,
)

from app.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    ContextUpdate,
    ContextReadResult,
    ContextWriteResult,
    ContextDiagnostic,
)

__all__ = [
    # Envelopes
    "CamelModel",
    "ApiResponse",
    "ListResponse",
    "MessageResponse",
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "TokenResponse",
    "ApiKeyResponse",
    "PasswordChangeRequest",
    "UsageSummary",
    # Team schemas
    "TeamCreate",
    "TeamUpdate",
    "MemberAdd",
    "MemberRoleUpdate",
    "TeamResponse",
    # Document schemas
    "DocumentUpdate",
    "DocumentResponse",
    # AI model schemas
    "AIModelCreate",
    "AIModelUpdate",
    "AIModelResponse",
    # Chat schemas
    "ChatCreate",
    "ChatUpdate",
    "MessageCreate",
    "ChatResponse",
    "MessageAccepted",
    # Payment schemas
    "PlanResponse",
    "SubscribeRequest",
    "CancelRequest",
    "PaymentMethodUpdate",
    "Invoice",
    "SubscriptionResponse",
    # Company schemas
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyResponse",
    "ContextUpdate",
    "ContextReadResult",
    "ContextWriteResult",
    "ContextDiagnostic",
]
