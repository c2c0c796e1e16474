import asyncio
import httpx
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from config import ProductionSettings, TestingSettings, get_settings_for_environment
from main import create_app, parse_amount
from repositories import InMemoryAccountRepository


def create(client, name, balance, account_type="Savings"):
    return client.post("/create", data={"name": name, "balance": balance, "accountType": account_type})


def deposit(client, name, amount):
    return client.post("/deposit", data={"name": name, "amount": amount})


def withdraw(client, name, amount):
    return client.post("/withdraw", data={"name": name, "amount": amount})


class TestCreateAccount:
    """Test account creation endpoint."""

    def test_create_success(self, client: TestClient):
        response = create(client, "Alice", "1000")

        assert response.status_code == 200
        assert response.text == "Account created successfully"
        assert response.headers["content-type"].startswith("text/plain")

    def test_create_duplicate(self, client: TestClient):
        create(client, "Alice", "1000")
        response = create(client, "Alice", "5", "Current")

        assert response.status_code == 200
        assert response.text == "Account already exists"
        assert client.get("/balance", params={"name": "Alice"}).text == "Balance: $1000.00"

    def test_unknown_type_opens_current_account(self, client: TestClient):
        create(client, "Bob", "0", "Checking")

        # Only a current account can go negative
        response = withdraw(client, "Bob", "500")
        assert response.text == "Withdrawal successful! New Balance: $-500.00"

    def test_missing_type_opens_current_account(self, client: TestClient):
        client.post("/create", data={"name": "Dan", "balance": "10"})

        assert withdraw(client, "Dan", "20").text == "Withdrawal successful! New Balance: $-10.00"

    def test_malformed_balance_reads_as_zero(self, client: TestClient):
        create(client, "Eve", "lots", "Current")

        assert client.get("/balance", params={"name": "Eve"}).text == "Balance: $0.00"


class TestMoneyMovement:
    """Test deposit and withdraw endpoints."""

    def test_savings_scenario(self, client: TestClient):
        create(client, "Alice", "1000", "Savings")

        response = deposit(client, "Alice", "200")
        assert response.text == "Deposit successful! New Balance: $1200.00"

        response = withdraw(client, "Alice", "800")
        assert response.status_code == 200
        assert response.text == "Transaction denied! You must maintain a minimum balance of $500.00"

        response = withdraw(client, "Alice", "500")
        assert response.text == "Withdrawal successful! New Balance: $700.00"

    def test_current_scenario(self, client: TestClient):
        create(client, "Bob", "0", "Current")

        assert withdraw(client, "Bob", "500").text == "Withdrawal successful! New Balance: $-500.00"

        response = withdraw(client, "Bob", "600")
        assert response.status_code == 200
        assert response.text == "Overdraft limit exceeded!"
        assert client.get("/balance", params={"name": "Bob"}).text == "Balance: $-500.00"

    def test_insufficient_funds(self, client: TestClient):
        create(client, "Alice", "1000")

        assert withdraw(client, "Alice", "1500").text == "Insufficient funds! Available balance: $1000.00"

    @pytest.mark.parametrize("amount", ["0", "-5", "abc", "", "NaN"])
    def test_invalid_deposit_amounts(self, client: TestClient, amount):
        create(client, "Alice", "1000")

        response = deposit(client, "Alice", amount)

        assert response.status_code == 200
        assert response.text == "Invalid deposit amount"
        assert client.get("/history", params={"name": "Alice"}).text == ""

    @pytest.mark.parametrize("amount", ["1e1000000", "-9e999999", "1e999999"])
    def test_out_of_range_amounts_read_as_zero(self, client: TestClient, amount):
        create(client, "Alice", "1000")
        create(client, "Bob", "0", "Current")

        response = deposit(client, "Alice", amount)
        assert response.status_code == 200
        assert response.text == "Invalid deposit amount"

        response = withdraw(client, "Bob", amount)
        assert response.status_code == 200
        assert response.text == "Withdrawal successful! New Balance: $0.00"

    def test_invalid_savings_withdrawal(self, client: TestClient):
        create(client, "Alice", "1000")

        assert withdraw(client, "Alice", "-1").text == "Invalid withdrawal amount"

    def test_decimal_precision(self, client: TestClient):
        create(client, "Alice", "1000")

        assert deposit(client, "Alice", "99.99").text == "Deposit successful! New Balance: $1099.99"
        assert withdraw(client, "Alice", "0.01").text == "Withdrawal successful! New Balance: $1099.98"

    @pytest.mark.parametrize("send", [
        lambda c: deposit(c, "ghost", "10"),
        lambda c: withdraw(c, "ghost", "10"),
        lambda c: c.get("/balance", params={"name": "ghost"}),
        lambda c: c.get("/history", params={"name": "ghost"}),
    ])
    def test_account_not_found(self, client: TestClient, send):
        response = send(client)

        assert response.status_code == 200
        assert response.text == "Account not found"


class TestQueries:
    """Test balance and history endpoints."""

    def test_balance(self, client: TestClient):
        create(client, "Alice", "1234.5")

        assert client.get("/balance", params={"name": "Alice"}).text == "Balance: $1234.50"

    def test_history_lists_operations_in_order(self, client: TestClient):
        create(client, "Alice", "1000")
        deposit(client, "Alice", "200")
        withdraw(client, "Alice", "800")  # rejected, not recorded
        withdraw(client, "Alice", "500")

        response = client.get("/history", params={"name": "Alice"})

        assert response.headers["content-type"].startswith("text/html")
        assert response.text == (
            "Deposited: $200.00<br>"
            "Withdrew: $500.00, Final Balance: $700.00<br>"
        )

    def test_history_empty_for_new_account(self, client: TestClient):
        create(client, "Alice", "1000")

        assert client.get("/history", params={"name": "Alice"}).text == ""


class TestHealthAndUtility:
    """Test health check and utility endpoints."""

    def test_health_check(self, client: TestClient):
        create(client, "Alice", "1000")
        create(client, "Bob", "0", "Current")

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["accounts_count"] == 2

    def test_home_page(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/create" in response.text
        assert "/history" in response.text

    def test_apps_do_not_share_accounts(self):
        first = TestClient(create_app(account_repo=InMemoryAccountRepository()))
        second = TestClient(create_app(account_repo=InMemoryAccountRepository()))

        create(first, "Alice", "1000")

        assert second.get("/balance", params={"name": "Alice"}).text == "Account not found"
        assert create(second, "Alice", "1").text == "Account created successfully"

    def test_configured_defaults_are_applied(self):
        settings = TestingSettings(savings_minimum_balance=Decimal("0"))
        client = TestClient(create_app(app_settings=settings))

        create(client, "Alice", "100")

        assert withdraw(client, "Alice", "100").text == "Withdrawal successful! New Balance: $0.00"

    def test_testing_profile_disables_rate_limit(self):
        assert get_settings_for_environment("testing").rate_limit_enabled is False
        assert get_settings_for_environment("production").rate_limit_enabled is True

    @pytest.mark.parametrize("raw, expected", [
        ("12.5", Decimal("12.5")),
        ("1e3", Decimal("1000")),
        ("", Decimal("0")),
        ("ten", Decimal("0")),
        ("Infinity", Decimal("0")),
        ("NaN", Decimal("0")),
        ("1e1000000", Decimal("0")),
        ("-9e999999", Decimal("0")),
        ("1e309", Decimal("0")),
        ("1e308", Decimal("1e308")),
        (" 5 ", Decimal("0")),
        ("1_000", Decimal("0")),
    ])
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected


class TestRateLimiting:
    """Test rate limiting configured through the app settings."""

    def test_limit_exceeded_returns_429(self):
        settings = ProductionSettings(rate_limit_enabled=True, rate_limit_per_minute=2)
        client = TestClient(create_app(app_settings=settings))

        codes = [deposit(client, "ghost", "10").status_code for _ in range(3)]

        assert codes == [200, 200, 429]

    def test_limit_is_per_app(self):
        settings = ProductionSettings(rate_limit_enabled=True, rate_limit_per_minute=1)
        first = TestClient(create_app(app_settings=settings))
        second = TestClient(create_app(app_settings=settings))

        assert deposit(first, "ghost", "10").status_code == 200
        assert deposit(first, "ghost", "10").status_code == 429
        assert deposit(second, "ghost", "10").status_code == 200

    def test_disabled_limit_never_rejects(self):
        settings = ProductionSettings(rate_limit_enabled=False, rate_limit_per_minute=1)
        client = TestClient(create_app(app_settings=settings))

        codes = [deposit(client, "ghost", "10").status_code for _ in range(3)]

        assert codes == [200, 200, 200]


class TestConcurrency:
    """Test concurrent requests against the same account."""

    @pytest.mark.asyncio
    async def test_concurrent_withdrawals_respect_overdraft(self, app, repository):
        transport = httpx.ASGITransport(app=app)

        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.post("/create", data={"name": "Bob", "balance": "0", "accountType": "Current"})

            # Overdraft of 1000 allows exactly five withdrawals of 200
            tasks = [ac.post("/withdraw", data={"name": "Bob", "amount": "200"}) for _ in range(10)]
            results = await asyncio.gather(*tasks)

        bodies = [r.text for r in results]
        assert sum(b.startswith("Withdrawal successful!") for b in bodies) == 5
        assert bodies.count("Overdraft limit exceeded!") == 5
        assert repository.get("Bob").balance == Decimal("-1000")
