class BankError(Exception):
    """Base class for banking failures reported back to the caller verbatim."""


class InvalidAmountError(BankError):
    """Raised when a deposit or savings withdrawal amount is not positive."""


class InsufficientFundsError(BankError):
    """Raised when a savings withdrawal exceeds the available balance."""


class BelowMinimumBalanceError(BankError):
    """Raised when a savings withdrawal would leave less than the floor."""


class OverdraftExceededError(BankError):
    """Raised when a current account withdrawal goes past the overdraft."""


class AccountAlreadyExistsError(BankError):
    def __init__(self, message: str = "Account already exists"):
        super().__init__(message)


class AccountNotFoundError(BankError):
    def __init__(self, message: str = "Account not found"):
        super().__init__(message)
