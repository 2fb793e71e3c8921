"""
Metadata API endpoints.

This module provides:
- Currency metadata (for dropdowns)
- Account types and account roles
- Movement types and category types

These endpoints serve as the authoritative source for enumerated values,
ensuring frontend and backend stay in sync.
"""

import logging

from fastapi import APIRouter

from src.api.dependencies import CurrencyServiceDep
from src.models.enums import AccountRole, AccountType, CategoryType, MovementType
from src.schemas.currency import CurrenciesResponse
from src.schemas.metadata import (
    AccountRolesResponse,
    AccountTypesResponse,
    CategoryTypesResponse,
    MovementTypesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/metadata", tags=["Metadata"])


@router.get(
    "/currencies",
    response_model=CurrenciesResponse,
    summary="Get supported currencies",
    description="Returns supported currencies with ISO 4217 codes, symbols and rates.",
)
async def get_currencies(
    currency_service: CurrencyServiceDep,
) -> CurrenciesResponse:
    """
    Get all supported currencies.

    Example Response:
        {
            "currencies": [
                {"code": "EUR", "symbol": "€", "name": "Euro", ...},
                ...
            ]
        }
    """
    logger.debug("Fetching currencies metadata")
    return CurrenciesResponse(currencies=currency_service.get_all())


@router.get(
    "/account-types",
    response_model=AccountTypesResponse,
    summary="Get account types",
)
async def get_account_types() -> AccountTypesResponse:
    return AccountTypesResponse(account_types=AccountType.to_dict_list())


@router.get(
    "/account-roles",
    response_model=AccountRolesResponse,
    summary="Get account roles",
)
async def get_account_roles() -> AccountRolesResponse:
    return AccountRolesResponse(account_roles=AccountRole.to_dict_list())


@router.get(
    "/movement-types",
    response_model=MovementTypesResponse,
    summary="Get movement types",
)
async def get_movement_types() -> MovementTypesResponse:
    return MovementTypesResponse(movement_types=MovementType.to_dict_list())


@router.get(
    "/category-types",
    response_model=CategoryTypesResponse,
    summary="Get category types",
)
async def get_category_types() -> CategoryTypesResponse:
    return CategoryTypesResponse(category_types=CategoryType.to_dict_list())
