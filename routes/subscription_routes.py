from datetime import date, datetime
from typing import List, Optional
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from db.config import get_mysql_session
from models.schemas import (
    SubscriptionCreateRequest,
    SubscriptionUpdateRequest,
    SubscriptionResponse,
    SubscriptionCostResponse,
)
from services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

MONTH_YEAR_FORMAT = "%m-%Y"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def get_subscription_service(session: Session = Depends(get_mysql_session)) -> SubscriptionService:
    return SubscriptionService(session)


def _parse_subscription_id(value: str, operation: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError:
        logger.error(f"{operation}: invalid UUID {value!r}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid UUID"
        )


def _parse_month_year(value: Optional[str], field: str, default: date) -> date:
    if not value:
        return default
    try:
        return datetime.strptime(value, MONTH_YEAR_FORMAT).date()
    except ValueError as e:
        logger.error(f"SumSubscriptionsCost: invalid {field} format: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid {field} format, expected MM-YYYY"
        )


@router.post(
    "/",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new subscription",
    description="Creates a new subscription with a generated UUID"
)
def create_subscription(
    request: SubscriptionCreateRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    result = service.create_subscription(
        user_id=str(request.user_id),
        service_name=request.service_name,
        price=request.price,
        start_date=request.start_date,
        end_date=request.end_date
    )
    logger.info(f"CreateSubscription: subscription created id={result['id']}")
    return result


@router.get(
    "/",
    response_model=List[SubscriptionResponse],
    summary="List subscriptions",
    description="Lists subscriptions page by page"
)
def list_subscriptions(
    page: int = Query(DEFAULT_PAGE, description="Page number, starting at 1"),
    limit: int = Query(DEFAULT_LIMIT, description="Page size"),
    service: SubscriptionService = Depends(get_subscription_service)
):
    if page < 1:
        page = DEFAULT_PAGE
    if limit < 1:
        limit = DEFAULT_LIMIT

    result = service.list_subscriptions(page=page, limit=limit)
    logger.info(f"ListSubscriptions: retrieved {len(result)} subscriptions")
    return result


@router.get(
    "/sum",
    response_model=SubscriptionCostResponse,
    summary="Sum subscription cost",
    description="Calculates total subscription cost filtered by user, service and period"
)
def sum_subscriptions_cost(
    user_id: Optional[str] = Query(None, description="User ID"),
    service_name: Optional[str] = Query(None, description="Service name"),
    start_date: Optional[str] = Query(None, description="Start month-year MM-YYYY"),
    end_date: Optional[str] = Query(None, description="End month-year MM-YYYY"),
    service: SubscriptionService = Depends(get_subscription_service)
):
    filter_start = _parse_month_year(start_date, "start_date", date.min)
    filter_end = _parse_month_year(end_date, "end_date", date.today())

    total = service.sum_subscriptions_cost(user_id, service_name, filter_start, filter_end)
    logger.info(
        f"SumSubscriptionsCost: total price calculated user_id={user_id} "
        f"service_name={service_name} total_price={total}"
    )
    return {"total_price": total}


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Get subscription",
    description="Retrieves a subscription by its UUID"
)
def get_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service)
):
    subscription_id = _parse_subscription_id(subscription_id, "GetSubscription")

    result = service.get_subscription(subscription_id)
    if not result:
        logger.info(f"GetSubscription: subscription not found id={subscription_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="subscription not found"
        )
    return result


@router.put(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Update subscription",
    description="Replaces service name, price and period of a subscription"
)
def update_subscription(
    subscription_id: str,
    request: SubscriptionUpdateRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    subscription_id = _parse_subscription_id(subscription_id, "UpdateSubscription")

    result = service.update_subscription(
        subscription_id,
        service_name=request.service_name,
        price=request.price,
        start_date=request.start_date,
        end_date=request.end_date
    )
    if not result:
        logger.info(f"UpdateSubscription: subscription not found id={subscription_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="subscription not found"
        )

    logger.info(f"UpdateSubscription: subscription updated id={subscription_id}")
    return result


@router.delete(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete subscription",
    description="Deletes a subscription by its UUID"
)
def delete_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service)
):
    subscription_id = _parse_subscription_id(subscription_id, "DeleteSubscription")

    if not service.delete_subscription(subscription_id):
        logger.info(f"DeleteSubscription: subscription not found id={subscription_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="subscription not found"
        )

    logger.info(f"DeleteSubscription: subscription deleted id={subscription_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
