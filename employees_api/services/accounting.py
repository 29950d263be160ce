"""
Employees API — Accounting Service
===================================

What:  Holds the application accounts and turns credentials into tokens.
How:   Two accounts (ADMIN and USER) are seeded from settings at startup; their
       passwords are kept only as argon2 hashes.
Who:   Used by POST /login.

Failure Mode:
    Unknown username and wrong password raise the same LoginError, so the
    response does not reveal which accounts exist.
"""

import logging
from typing import Dict, Iterable, Optional

from employees_api.config import Settings, settings
from employees_api.exceptions import LoginError
from employees_api.schemas.auth import Account, LoginData, LoginResponse, LoginUser, Role
from employees_api.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountingService:
    """In-memory account store keyed by username."""

    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts: Dict[str, Account] = {a.username: a for a in accounts}

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "AccountingService":
        config = config or settings
        return cls(
            [
                Account(
                    username=config.admin_username,
                    role=Role.ADMIN.value,
                    password=hash_password(config.admin_password),
                ),
                Account(
                    username=config.user_username,
                    role=Role.USER.value,
                    password=hash_password(config.user_password),
                ),
            ]
        )

    def get_account(self, username: str) -> Optional[Account]:
        return self._accounts.get(username)

    def login(self, data: LoginData) -> LoginResponse:
        """
        Checks the credentials and issues an access token.

        Raises:
            LoginError: unknown username or wrong password.
        """
        account = self.get_account(data.email)
        if account is None or not verify_password(data.password, account.password):
            logger.warning("Failed login for '%s'", data.email)
            raise LoginError()

        token = create_access_token(account.username, account.role)
        logger.info("User '%s' logged in as %s", account.username, account.role)
        return LoginResponse(
            access_token=token,
            user=LoginUser(email=account.username, role=account.role),
        )
