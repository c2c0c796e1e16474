from pydantic import BaseModel, Field
from enum import Enum
from typing import Annotated, List, Literal, Union
from datetime import datetime
from decimal import Decimal

from errors import (
    BelowMinimumBalanceError,
    InsufficientFundsError,
    InvalidAmountError,
    OverdraftExceededError,
)


def money(value: Decimal) -> str:
    """Render an amount with two decimals, e.g. ``1200.00`` or ``-500.00``."""
    return f"{value:.2f}"


class AccountType(str, Enum):
    savings = "Savings"
    current = "Current"

    @classmethod
    def from_form(cls, value: str) -> "AccountType":
        """Anything other than an exact ``Savings`` opens a current account."""
        if value == cls.savings.value:
            return cls.savings
        return cls.current


class SavingsTerms(BaseModel):
    kind: Literal["Savings"] = "Savings"
    minimum_balance: Decimal = Field(..., description="Floor the balance may not drop below")


class CurrentTerms(BaseModel):
    kind: Literal["Current"] = "Current"
    overdraft_limit: Decimal = Field(..., description="How far below zero the balance may go")


AccountTerms = Annotated[Union[SavingsTerms, CurrentTerms], Field(discriminator="kind")]


class Account(BaseModel):
    name: str = Field(..., description="Unique, case-sensitive account name")
    balance: Decimal = Field(..., description="Current balance")
    terms: AccountTerms
    history: List[str] = Field(default_factory=list, description="Successful operations, oldest first")

    @classmethod
    def open(
        cls,
        name: str,
        initial_balance: Decimal,
        account_type: AccountType,
        minimum_balance: Decimal,
        overdraft_limit: Decimal,
    ) -> "Account":
        if account_type == AccountType.savings:
            terms = SavingsTerms(minimum_balance=minimum_balance)
        else:
            terms = CurrentTerms(overdraft_limit=overdraft_limit)
        return cls(name=name, balance=initial_balance, terms=terms)

    @property
    def account_type(self) -> AccountType:
        return AccountType(self.terms.kind)

    def deposit(self, amount: Decimal) -> Decimal:
        if amount <= 0:
            raise InvalidAmountError("Invalid deposit amount")

        self.balance += amount
        self.history.append(f"Deposited: ${money(amount)}")
        return self.balance

    def withdraw(self, amount: Decimal) -> Decimal:
        terms = self.terms

        if isinstance(terms, SavingsTerms):
            if amount <= 0:
                raise InvalidAmountError("Invalid withdrawal amount")
            if amount > self.balance:
                raise InsufficientFundsError(
                    f"Insufficient funds! Available balance: ${money(self.balance)}"
                )
            if self.balance - amount < terms.minimum_balance:
                raise BelowMinimumBalanceError(
                    "Transaction denied! You must maintain a minimum balance of "
                    f"${money(terms.minimum_balance)}"
                )
            self.balance -= amount
            entry = f"Withdrew: ${money(amount)}, Final Balance: ${money(self.balance)}"

        elif isinstance(terms, CurrentTerms):
            # Non-positive amounts are not rejected here; they pass the
            # overdraft check and move the balance like any other amount.
            if self.balance - amount < -terms.overdraft_limit:
                raise OverdraftExceededError("Overdraft limit exceeded!")
            self.balance -= amount
            entry = f"Withdrew: ${money(amount)}"

        else:
            raise TypeError(f"Unsupported account terms: {type(terms).__name__}")

        self.history.append(entry)
        return self.balance

    def check_balance(self) -> Decimal:
        return self.balance

    def get_history(self) -> List[str]:
        return list(self.history)


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status")
    timestamp: datetime = Field(default_factory=datetime.now)
    accounts_count: int = Field(..., description="Number of accounts in system")
