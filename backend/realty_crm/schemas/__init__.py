"""Schemas package initialization"""
from .user import (
    UserRegister,
    UserLogin,
    AdminLogin,
    StaffCreate,
    UserUpdate,
    ProfileUpdate,
    PasswordChange,
    UserStatusUpdate,
    UserResponse,
    UserListResponse,
    TokenResponse,
)
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    AssignAgentRequest,
)
from .customer import (
    Budget,
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
    NoteCreate,
)
from .task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskListResponse,
    SubtaskCreate,
    CommentCreate,
)
from .agent import AgentCreate, AgentUpdate, AgentResponse, AgentListResponse, AgentStats
from .notification import (
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
    BulkActionResponse,
)
from .dashboard import SuperAdminStats, AdminStats, AgentDashboardStats

__all__ = [
    # User schemas
    "UserRegister",
    "UserLogin",
    "AdminLogin",
    "StaffCreate",
    "UserUpdate",
    "ProfileUpdate",
    "PasswordChange",
    "UserStatusUpdate",
    "UserResponse",
    "UserListResponse",
    "TokenResponse",
    # Property schemas
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "AssignAgentRequest",
    # Customer schemas
    "Budget",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CustomerListResponse",
    "NoteCreate",
    # Task schemas
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    "SubtaskCreate",
    "CommentCreate",
    # Agent schemas
    "AgentCreate",
    "AgentUpdate",
    "AgentResponse",
    "AgentListResponse",
    "AgentStats",
    # Notification schemas
    "NotificationResponse",
    "NotificationListResponse",
    "UnreadCountResponse",
    "BulkActionResponse",
    # Dashboard schemas
    "SuperAdminStats",
    "AdminStats",
    "AgentDashboardStats",
]
