from decimal import Decimal
from typing import List
import structlog

from errors import BankError
from models import Account, AccountType
from repositories import AccountRepository

logger = structlog.get_logger()


class BankService:
    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    def create_account(self, name: str, initial_balance: Decimal, account_type: AccountType) -> Account:
        """Open an account with the defaults the repository was configured with."""

        logger.info(
            "Creating account",
            account=name,
            initial_balance=str(initial_balance),
            type=account_type.value
        )

        try:
            account = self.account_repo.create(name, initial_balance, account_type)
        except BankError as e:
            logger.warning("Account creation rejected", account=name, reason=str(e))
            raise

        logger.info("Account created", account=name, type=account_type.value)
        return account

    def deposit(self, name: str, amount: Decimal) -> Decimal:
        """Deposit into an account and return the new balance."""

        logger.info("Processing deposit", account=name, amount=str(amount))

        with self.account_repo.get_lock():
            try:
                account = self.account_repo.get(name)
                new_balance = account.deposit(amount)
            except BankError as e:
                logger.warning(
                    "Deposit rejected",
                    account=name,
                    amount=str(amount),
                    reason=str(e)
                )
                raise

        logger.info("Deposit processed", account=name, new_balance=str(new_balance))
        return new_balance

    def withdraw(self, name: str, amount: Decimal) -> Decimal:
        """Withdraw from an account under its variant's limits and return the new balance."""

        logger.info("Processing withdrawal", account=name, amount=str(amount))

        with self.account_repo.get_lock():
            try:
                account = self.account_repo.get(name)
                old_balance = account.check_balance()
                new_balance = account.withdraw(amount)
            except BankError as e:
                logger.warning(
                    "Withdrawal rejected",
                    account=name,
                    amount=str(amount),
                    reason=str(e)
                )
                raise

        logger.debug(
            "Withdrawal processed",
            account=name,
            type=account.account_type.value,
            old_balance=str(old_balance),
            new_balance=str(new_balance)
        )
        return new_balance

    def get_balance(self, name: str) -> Decimal:
        with self.account_repo.get_lock():
            try:
                return self.account_repo.get(name).check_balance()
            except BankError as e:
                logger.warning("Balance lookup failed", account=name, reason=str(e))
                raise

    def get_history(self, name: str) -> List[str]:
        with self.account_repo.get_lock():
            try:
                return self.account_repo.get(name).get_history()
            except BankError as e:
                logger.warning("History lookup failed", account=name, reason=str(e))
                raise
