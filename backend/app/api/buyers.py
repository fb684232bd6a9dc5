"""
Buyer API Endpoints
Customer profile and order history, assembled from the order store
"""
from fastapi import APIRouter, Depends, HTTPException

from app.api.errors import to_http_exception
from app.core.dependencies import get_order_repository
from app.core.exceptions import CustomerNotFoundError, DukaanError
from app.repositories.order_repository import OrderRepository

router = APIRouter()


@router.get("/profile/{customer_id}")
async def get_buyer_profile(customer_id: str, repo: OrderRepository = Depends(get_order_repository)):
    try:
        profile = repo.get_buyer_profile(customer_id)
        if profile is None:
            raise CustomerNotFoundError(customer_id)

        return {
            "status": "success",
            "data": profile.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching buyer profile: {str(e)}")


@router.get("/{customer_id}/orders")
async def get_buyer_orders(customer_id: str, repo: OrderRepository = Depends(get_order_repository)):
    """Customer's orders, newest first"""
    try:
        orders = sorted(repo.find_by_customer(customer_id), key=lambda o: o.created_at, reverse=True)
        return {
            "status": "success",
            "customer_id": customer_id,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching buyer orders: {str(e)}")
