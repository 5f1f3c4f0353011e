import json

import httpx
import pytest

from paygate.adapters.http import GatewayApiClient
from paygate.cli import build_parser, render_accounts, render_payment, run_command, run_shell


API_URL = "http://gateway.test/api"


def make_client(handler) -> GatewayApiClient:
    return GatewayApiClient(API_URL, transport=httpx.MockTransport(handler))


def parse(*argv):
    return build_parser().parse_args(["--api-url", API_URL, *argv])


class Output:
    def __init__(self):
        self.lines = []

    def __call__(self, text=""):
        self.lines.append(str(text))

    @property
    def text(self):
        return "\n".join(self.lines)


def payment_handler(request: httpx.Request) -> httpx.Response:
    assert request.url.path == "/api/payments/process"
    body = json.loads(request.content)
    assert body["currency"] == "USD"
    assert body["customerInfo"] == {"name": "CLI User", "email": "cli@example.com"}
    return httpx.Response(
        200,
        json={
            "success": True,
            "transactionId": "pp_abc",
            "status": "completed",
            "message": "PayPal payment processed successfully",
            "paymentMethod": body["paymentMethod"],
            "amount": body["amount"],
            "currency": body["currency"],
            "fees": 3.7,
            "processingTime": "instant",
        },
    )


@pytest.mark.asyncio
async def test_pay_command_renders_successful_payment():
    """Test that `pay` posts the request and prints the receipt"""
    out = Output()

    async with make_client(payment_handler) as client:
        exit_code = await run_command(parse("pay", "100", "usd", "paypal"), client, out=out)

    assert exit_code == 0
    assert "Transaction ID: pp_abc" in out.text
    assert "Processing Time: instant" in out.text
    assert "Fees: $3.70" in out.text


@pytest.mark.asyncio
async def test_pay_command_reports_failed_payment():
    """Test that a failed payment prints the provider message and exits 1"""

    def handler(request):
        return httpx.Response(
            200,
            json={
                "success": False,
                "transactionId": "err_1",
                "status": "failed",
                "message": "Plaid payment processing failed",
                "paymentMethod": "plaid",
                "amount": 5,
                "currency": "USD",
            },
        )

    out = Output()
    async with make_client(handler) as client:
        exit_code = await run_command(parse("pay", "5", "USD", "plaid"), client, out=out)

    assert exit_code == 1
    assert "Payment failed: Plaid payment processing failed" in out.text
    assert "Fees" not in out.text


@pytest.mark.asyncio
async def test_pay_command_shows_server_error_message():
    """Test that error envelopes from the API are shown to the user"""

    def handler(request):
        return httpx.Response(400, json={"success": False, "message": "Missing or invalid fields: currency"})

    out = Output()
    async with make_client(handler) as client:
        exit_code = await run_command(parse("pay", "5", "US", "paypal"), client, out=out)

    assert exit_code == 1
    assert "Error: Missing or invalid fields: currency" in out.text


@pytest.mark.asyncio
async def test_pay_command_handles_unreachable_gateway():
    """Test that transport errors are reported instead of raised"""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    out = Output()
    async with make_client(handler) as client:
        exit_code = await run_command(parse("pay", "5", "USD", "paypal"), client, out=out)

    assert exit_code == 1
    assert "Gateway unreachable" in out.text


@pytest.mark.asyncio
async def test_accounts_command_lists_accounts():
    """Test that `accounts` fetches and renders linked accounts"""

    def handler(request):
        assert request.url.path == "/api/payments/plaid/accounts/user-9"
        return httpx.Response(
            200,
            json={
                "success": True,
                "accounts": [
                    {
                        "accountId": "plaid_checking_001",
                        "bankName": "Chase Bank",
                        "accountType": "checking",
                        "balance": 15420.5,
                        "currency": "USD",
                        "isActive": True,
                    }
                ],
            },
        )

    out = Output()
    async with make_client(handler) as client:
        exit_code = await run_command(parse("accounts", "user-9"), client, out=out)

    assert exit_code == 0
    assert "Found 1 linked accounts" in out.text
    assert "Chase Bank checking (plaid_checking_001): 15420.50 USD [active]" in out.text


@pytest.mark.asyncio
async def test_health_command_queries_root_health_endpoint():
    """Test that `health` goes to /health outside the /api prefix"""

    def handler(request):
        assert request.url.path == "/health"
        return httpx.Response(200, json={"status": "OK", "services": {"payments": "available"}})

    out = Output()
    async with make_client(handler) as client:
        exit_code = await run_command(parse("health"), client, out=out)

    assert exit_code == 0
    assert out.text == "Gateway status: OK (payments=available)"


@pytest.mark.asyncio
async def test_shell_runs_commands_until_exit():
    """Test the interactive prompt loop"""
    inputs = iter(["", "bogus", "pay 100 usd paypal", "exit", "health"])
    out = Output()

    async with make_client(payment_handler) as client:
        exit_code = await run_shell(client, build_parser(), read_line=lambda prompt: next(inputs), out=out)

    assert exit_code == 0
    assert "Transaction ID: pp_abc" in out.text
    assert out.lines[-1] == "Goodbye!"
    # "health" after exit is never read
    assert next(inputs) == "health"


@pytest.mark.asyncio
async def test_shell_stops_on_end_of_input():
    def read_line(prompt):
        raise EOFError

    out = Output()
    async with make_client(payment_handler) as client:
        assert await run_shell(client, build_parser(), read_line=read_line, out=out) == 0


@pytest.mark.parametrize(
    "argv",
    [
        ["pay", "-5", "USD", "paypal"],
        ["pay", "abc", "USD", "paypal"],
        ["pay", "5", "USD", "venmo"],
        ["accounts"],
    ],
)
def test_parser_rejects_invalid_arguments(argv):
    """Test that argparse validates amounts and method names"""
    with pytest.raises(SystemExit):
        build_parser().parse_args(argv)


def test_render_payment_omits_missing_fees():
    text = render_payment({"success": True, "transactionId": "pl_1", "status": "pending", "processingTime": "3-5 business days"})

    assert "Status: pending" in text
    assert "Fees" not in text


def test_render_accounts_handles_empty_list():
    assert render_accounts({"success": True, "accounts": []}) == "No linked bank accounts."
