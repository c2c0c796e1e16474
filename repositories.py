from abc import ABC, abstractmethod
from decimal import Decimal
from typing import ContextManager, Dict
import threading

from errors import AccountAlreadyExistsError, AccountNotFoundError
from models import Account, AccountType


class AccountRepository(ABC):
    @abstractmethod
    def create(self, name: str, initial_balance: Decimal, account_type: AccountType) -> Account:
        """Open a new account. Raises AccountAlreadyExistsError if the name is taken."""
        pass

    @abstractmethod
    def get(self, name: str) -> Account:
        """Look up an account by exact name. Raises AccountNotFoundError."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Get total number of accounts."""
        pass

    @abstractmethod
    def get_lock(self) -> ContextManager:
        """Lock serializing every operation on the store."""
        pass


class InMemoryAccountRepository(AccountRepository):
    def __init__(
        self,
        savings_minimum_balance: Decimal = Decimal("500.00"),
        current_overdraft_limit: Decimal = Decimal("1000.00"),
    ):
        self.savings_minimum_balance = savings_minimum_balance
        self.current_overdraft_limit = current_overdraft_limit
        self.accounts: Dict[str, Account] = {}
        # Re-entrant so the service can hold it across get() + mutation.
        self.lock = threading.RLock()

    def create(self, name: str, initial_balance: Decimal, account_type: AccountType) -> Account:
        with self.lock:
            if name in self.accounts:
                raise AccountAlreadyExistsError()
            account = Account.open(
                name,
                initial_balance,
                account_type,
                minimum_balance=self.savings_minimum_balance,
                overdraft_limit=self.current_overdraft_limit,
            )
            self.accounts[name] = account
            return account

    def get(self, name: str) -> Account:
        with self.lock:
            account = self.accounts.get(name)
            if account is None:
                raise AccountNotFoundError()
            return account

    def count(self) -> int:
        with self.lock:
            return len(self.accounts)

    def get_lock(self) -> ContextManager:
        return self.lock
