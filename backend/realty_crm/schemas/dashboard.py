"""
Dashboard Schemas
"""
from typing import List
from pydantic import BaseModel

from realty_crm.schemas.customer import CustomerResponse
from realty_crm.schemas.property import PropertyResponse
from realty_crm.schemas.task import TaskResponse


class ChartPoint(BaseModel):
    name: str
    value: int


class MonthlyPoint(BaseModel):
    month: str  # "Jan"
    year: int
    properties: int
    customers: int


class SuperAdminOverview(BaseModel):
    total_properties: int
    published_properties: int
    total_customers: int
    total_tasks: int
    total_agents: int
    total_admins: int
    total_users: int


class SuperAdminCharts(BaseModel):
    tasks_by_status: List[ChartPoint]
    properties_by_type: List[ChartPoint]
    properties_by_status: List[ChartPoint]
    customers_by_status: List[ChartPoint]
    monthly_stats: List[MonthlyPoint]


class SuperAdminStats(BaseModel):
    role: str = "super_admin"
    overview: SuperAdminOverview
    recent_properties: List[PropertyResponse]
    recent_customers: List[CustomerResponse]
    charts: SuperAdminCharts


class AdminOverview(BaseModel):
    total_properties: int
    my_properties: int
    total_customers: int
    total_tasks: int
    my_tasks: int
    total_agents: int


class AdminCharts(BaseModel):
    tasks_by_status: List[ChartPoint]
    properties_by_type: List[ChartPoint]


class AdminStats(BaseModel):
    role: str = "admin"
    overview: AdminOverview
    recent_properties: List[PropertyResponse]
    recent_customers: List[CustomerResponse]
    charts: AdminCharts


class AgentOverview(BaseModel):
    assigned_properties: int
    assigned_customers: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    total_sales: float
    total_commission: float


class AgentCharts(BaseModel):
    tasks_by_priority: List[ChartPoint]


class AgentDashboardStats(BaseModel):
    role: str = "agent"
    overview: AgentOverview
    assigned_properties: List[PropertyResponse]
    assigned_customers: List[CustomerResponse]
    recent_tasks: List[TaskResponse]
    charts: AgentCharts
    has_profile: bool = True
