"""Portfolio API router - holdings of the authenticated user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from navfolio.database import get_db
from navfolio.dependencies.auth import get_current_user_id
from navfolio.dependencies.services import get_valuation_service
from navfolio.schemas.common import MessageResponse
from navfolio.schemas.portfolio import (
    AddHoldingRequest,
    AddHoldingResponse,
    HoldingResponse,
    PortfolioListResponse,
    PortfolioValueResponse,
)
from navfolio.services.exceptions import ValidationError
from navfolio.services.portfolio.holdings_service import HoldingsService
from navfolio.services.portfolio.valuation_service import PortfolioValuationService
from navfolio.services.repositories.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


@router.post(
    "/add",
    response_model=AddHoldingResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_holding(
    request: AddHoldingRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> AddHoldingResponse:
    """Add units of a scheme to the portfolio.

    Creates the holding (201) or increments the units of the existing one (200).
    """
    try:
        result = HoldingsService(db).add_units(user_id, request.scheme_code, request.units)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fund not found. Please check the scheme code.",
        ) from e

    if not result.created:
        response.status_code = status.HTTP_200_OK

    return AddHoldingResponse(
        message=(
            "Fund added to portfolio successfully"
            if result.created
            else "Units added to existing fund successfully"
        ),
        created=result.created,
        holding=HoldingResponse.from_holding(result.holding, result.scheme),
    )


@router.get("/list", response_model=PortfolioListResponse)
def list_holdings(
    user_id: str = Depends(get_current_user_id),
    valuation_service: PortfolioValuationService = Depends(get_valuation_service),
) -> PortfolioListResponse:
    """List holdings with scheme details and current value."""
    return PortfolioListResponse.from_valuations(valuation_service.list_holdings(user_id))


@router.get("/value", response_model=PortfolioValueResponse)
def portfolio_value(
    user_id: str = Depends(get_current_user_id),
    valuation_service: PortfolioValuationService = Depends(get_valuation_service),
) -> PortfolioValueResponse:
    """Current value and profit/loss of the portfolio."""
    return PortfolioValueResponse.from_valuation(valuation_service.summarize(user_id))


@router.delete("/remove/{scheme_code}", response_model=MessageResponse)
def remove_holding(
    scheme_code: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Remove a scheme from the portfolio."""
    try:
        HoldingsService(db).remove(user_id, scheme_code)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fund not found in your portfolio",
        ) from e
    return MessageResponse(message=f"Scheme {scheme_code} removed from portfolio")
