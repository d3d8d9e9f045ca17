"""
Assignment Service
Links properties and customers to agents.

The record's ``assigned_agent_id`` and the agent's membership list are
written in the same transaction. Membership is a set: assigning twice leaves
a single entry. Entries of a previous agent are kept on reassignment.
"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.core.exceptions import NotFoundError
from realty_crm.models.agent import Agent
from realty_crm.models.customer import Customer
from realty_crm.models.notification import NotificationType
from realty_crm.models.property import Property
from realty_crm.services.events import DomainEvent
from realty_crm.services.notifications import is_high_value

logger = logging.getLogger(__name__)


class AssignmentService:
    """Assign records to agents and report the events to announce"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_agent_profile(self, agent_user_id: UUID) -> Agent:
        """
        Resolve the Agent profile of a user.

        Raises:
            NotFoundError: If the user has no Agent profile
        """
        result = await self.db.execute(select(Agent).where(Agent.user_id == agent_user_id))
        agent = result.scalar_one_or_none()
        if not agent:
            raise NotFoundError("Agent not found")
        return agent

    async def assign_property(
        self,
        property_id: UUID,
        agent_user_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> Tuple[Property, List[DomainEvent]]:
        """
        Assign a property to an agent.

        Args:
            property_id: Property to assign
            agent_user_id: User id of the agent
            actor_id: Who performed the assignment

        Returns:
            The updated property and the events to emit after commit

        Raises:
            NotFoundError: If the property or the agent profile is missing
        """
        result = await self.db.execute(select(Property).where(Property.id == property_id))
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFoundError("Property not found")

        agent = await self.get_agent_profile(agent_user_id)

        prop.assigned_agent_id = agent_user_id
        await self.db.flush()

        if prop not in agent.assigned_properties:
            agent.assigned_properties.append(prop)

        await self.db.commit()
        await self.db.refresh(prop)
        logger.info(f"Property {prop.id} assigned to agent {agent_user_id} by {actor_id}")

        return prop, [DomainEvent(NotificationType.PROPERTY_ASSIGNED, prop.id, actor_id)]

    async def attach_customer(self, customer: Customer, agent_user_id: UUID) -> Agent:
        """Set the customer's agent and add it to the agent's list, without committing"""
        agent = await self.get_agent_profile(agent_user_id)

        customer.assigned_agent_id = agent_user_id
        await self.db.flush()

        if customer not in agent.assigned_customers:
            agent.assigned_customers.append(customer)
        return agent

    async def assign_customer(
        self,
        customer_id: UUID,
        agent_user_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> Tuple[Customer, List[DomainEvent]]:
        """
        Assign a customer to an agent.

        Returns:
            The updated customer and the events to emit after commit
            (customer_assigned, plus high_value_lead for large budgets)

        Raises:
            NotFoundError: If the customer or the agent profile is missing
        """
        result = await self.db.execute(select(Customer).where(Customer.id == customer_id))
        customer = result.scalar_one_or_none()
        if not customer:
            raise NotFoundError("Customer not found")

        await self.attach_customer(customer, agent_user_id)
        await self.db.commit()
        await self.db.refresh(customer)
        logger.info(f"Customer {customer.id} assigned to agent {agent_user_id} by {actor_id}")

        return customer, self.customer_events(customer, actor_id)

    @staticmethod
    def customer_events(customer: Customer, actor_id: Optional[UUID] = None) -> List[DomainEvent]:
        events = [DomainEvent(NotificationType.CUSTOMER_ASSIGNED, customer.id, actor_id)]
        if is_high_value(customer):
            events.append(DomainEvent(NotificationType.HIGH_VALUE_LEAD, customer.id, actor_id))
        return events
