from datetime import date
from typing import List, Optional
import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.mysql_models import Subscription
from services.cost_engine import Period, Window, sum_cost

logger = logging.getLogger(__name__)


class SubscriptionService:
    DEFAULT_LIMIT = 1000

    def __init__(self, mysql_session: Session):
        self.mysql_session = mysql_session

    def _get(self, subscription_id: str) -> Optional[Subscription]:
        return self.mysql_session.query(Subscription).filter(
            Subscription.id == subscription_id
        ).first()

    def create_subscription(
        self,
        user_id: str,
        service_name: str,
        price: int,
        start_date: date,
        end_date: Optional[date] = None
    ) -> dict:
        subscription = Subscription(
            id=str(uuid.uuid4()),
            user_id=str(user_id),
            service_name=service_name,
            price=price,
            start_date=start_date,
            end_date=end_date
        )
        self.mysql_session.add(subscription)
        self.mysql_session.commit()
        self.mysql_session.refresh(subscription)

        return self._subscription_to_dict(subscription)

    def get_subscription(self, subscription_id: str) -> Optional[dict]:
        subscription = self._get(subscription_id)
        if not subscription:
            return None

        return self._subscription_to_dict(subscription)

    def list_subscriptions(self, page: int = 1, limit: int = DEFAULT_LIMIT) -> List[dict]:
        if page < 1:
            page = 1
        if limit < 1:
            limit = self.DEFAULT_LIMIT
        offset = (page - 1) * limit

        subscriptions = (
            self.mysql_session.query(Subscription)
            .order_by(Subscription.created_at, Subscription.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._subscription_to_dict(s) for s in subscriptions]

    def update_subscription(
        self,
        subscription_id: str,
        service_name: str,
        price: int,
        start_date: date,
        end_date: Optional[date] = None
    ) -> Optional[dict]:
        subscription = self._get(subscription_id)
        if not subscription:
            return None

        subscription.service_name = service_name
        subscription.price = price
        subscription.start_date = start_date
        subscription.end_date = end_date

        self.mysql_session.commit()
        self.mysql_session.refresh(subscription)
        return self._subscription_to_dict(subscription)

    def delete_subscription(self, subscription_id: str) -> bool:
        subscription = self._get(subscription_id)
        if not subscription:
            return False

        self.mysql_session.delete(subscription)
        self.mysql_session.commit()
        return True

    def get_subscription_periods(
        self,
        user_id: Optional[str],
        service_name: Optional[str],
        filter_start: date,
        filter_end: date
    ) -> List[Period]:
        query = self.mysql_session.query(
            Subscription.price,
            Subscription.start_date,
            Subscription.end_date
        ).filter(
            or_(
                Subscription.end_date >= filter_start,
                Subscription.end_date.is_(None)
            ),
            Subscription.start_date <= filter_end
        )
        if user_id:
            query = query.filter(Subscription.user_id == user_id)
        if service_name:
            query = query.filter(Subscription.service_name == service_name)

        periods = [
            Period(price=row.price, start=row.start_date, end=row.end_date)
            for row in query.all()
        ]
        logger.debug(f"Fetched {len(periods)} subscription periods for cost aggregation")
        return periods

    def sum_subscriptions_cost(
        self,
        user_id: Optional[str],
        service_name: Optional[str],
        filter_start: date,
        filter_end: date
    ) -> int:
        periods = self.get_subscription_periods(user_id, service_name, filter_start, filter_end)
        return sum_cost(periods, Window(filter_start=filter_start, filter_end=filter_end))

    def _subscription_to_dict(self, subscription: Subscription) -> dict:
        return {
            "id": subscription.id,
            "service_name": subscription.service_name,
            "price": subscription.price,
            "user_id": subscription.user_id,
            "start_date": subscription.start_date,
            "end_date": subscription.end_date,
            "created_at": subscription.created_at,
            "updated_at": subscription.updated_at
        }
