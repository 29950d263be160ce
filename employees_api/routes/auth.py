"""
Employees API — Login Route
============================

POST /login exchanges account credentials for a bearer token.
"""

from fastapi import APIRouter, Depends

from employees_api.dependencies import get_accounting_service
from employees_api.schemas.auth import LoginData, LoginResponse
from employees_api.schemas.common import ErrorResponse
from employees_api.services.accounting import AccountingService

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "Wrong credentials", "model": ErrorResponse}},
    summary="Log in and receive an access token",
)
async def login(
    body: LoginData,
    accounting: AccountingService = Depends(get_accounting_service),
) -> LoginResponse:
    return accounting.login(body)
