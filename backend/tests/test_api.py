from decimal import Decimal

from conftest import OTHER_TENANT, TENANT

HEADERS = {"X-Tenant-ID": TENANT, "X-User-ID": "accountant@example.com"}


def create_account(client, code, name, account_type, headers=HEADERS, **extra):
    response = client.post("/accounts/", json={"code": code, "name": name, "account_type": account_type, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def journal_payload(debit_id, credit_id, amount, credit_amount=None):
    return {
        "date": "2026-01-15",
        "journal_type": "GENERAL",
        "entries": [
            {"debit_account_id": debit_id, "debit_amount": str(amount)},
            {"credit_account_id": credit_id, "credit_amount": str(credit_amount if credit_amount is not None else amount)},
        ],
    }


def test_tenant_header_is_required(client):
    assert client.get("/accounts/").status_code == 422
    assert client.get("/accounts/", headers={"X-Tenant-ID": "   "}).status_code == 400


def test_initialize_default_accounts(client):
    response = client.post("/accounts/initialize", headers=HEADERS)
    assert response.status_code == 201
    assert len(response.json()) == 16

    assert client.post("/accounts/initialize", headers=HEADERS).json() == []
    assert client.get("/accounts/", headers={"X-Tenant-ID": OTHER_TENANT}).json() == []


def test_account_endpoints(client):
    cash = create_account(client, "101", "Cash", "ASSET", opening_balance="250.00")
    assert Decimal(cash["balance"]) == Decimal("250.00")
    assert cash["is_active"] is True

    duplicate = client.post("/accounts/", json={"code": "101", "name": "Cash", "account_type": "ASSET"}, headers=HEADERS)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "DuplicateCodeError"

    renamed = client.patch(f"/accounts/{cash['id']}", json={"name": "Cash on Hand"}, headers=HEADERS)
    assert renamed.json()["name"] == "Cash on Hand"

    assert client.get(f"/accounts/{cash['id']}", headers={"X-Tenant-ID": OTHER_TENANT}).status_code == 404

    deactivated = client.delete(f"/accounts/{cash['id']}", headers=HEADERS)
    assert deactivated.status_code == 200
    assert deactivated.json()["status"] == "INACTIVE"


def test_journal_lifecycle(client):
    cash = create_account(client, "101", "Cash", "ASSET")
    sales = create_account(client, "401", "Sales Revenue", "REVENUE")

    created = client.post("/journals/", json=journal_payload(cash["id"], sales["id"], "100000"), headers=HEADERS)
    assert created.status_code == 201, created.text
    journal = created.json()
    assert journal["status"] == "DRAFT"
    assert journal["journal_no"].startswith("JU-")
    assert journal["created_by"] == "accountant@example.com"
    assert journal["entries"][0]["debit_account"]["code"] == "101"

    posted = client.post(f"/journals/{journal['id']}/post", headers=HEADERS)
    assert posted.status_code == 200
    assert posted.json()["status"] == "POSTED"

    again = client.post(f"/journals/{journal['id']}/post", headers=HEADERS)
    assert again.status_code == 409
    assert again.json()["error"] == "AlreadyPostedError"

    trial_balance = client.get("/financial-reports/trial-balance", headers=HEADERS).json()
    assert {line["code"]: Decimal(line["balance"]) for line in trial_balance} == {
        "101": Decimal("100000.00"),
        "401": Decimal("100000.00"),
    }

    assert client.delete(f"/journals/{journal['id']}", headers=HEADERS).status_code == 204
    assert client.get(f"/journals/{journal['id']}", headers=HEADERS).status_code == 404
    assert Decimal(client.get(f"/accounts/{cash['id']}", headers=HEADERS).json()["balance"]) == Decimal("0.00")


def test_journal_errors_map_to_status_codes(client):
    cash = create_account(client, "101", "Cash", "ASSET")
    sales = create_account(client, "401", "Sales Revenue", "REVENUE")
    foreign = create_account(client, "101", "Cash", "ASSET", headers={"X-Tenant-ID": OTHER_TENANT})

    unbalanced = client.post("/journals/", json=journal_payload(cash["id"], sales["id"], "100000", "90000"), headers=HEADERS)
    assert unbalanced.status_code == 400
    assert unbalanced.json()["error"] == "UnbalancedEntriesError"

    cross_tenant = client.post("/journals/", json=journal_payload(foreign["id"], sales["id"], "10"), headers=HEADERS)
    assert cross_tenant.status_code == 400
    assert cross_tenant.json()["error"] == "CrossTenantAccountError"

    assert client.post("/journals/9999/post", headers=HEADERS).status_code == 404
    assert client.delete("/journals/9999", headers=HEADERS).status_code == 404
    assert client.get("/journals/", headers=HEADERS).json() == []
    assert client.get("/journals/", params={"start_date": "yesterday"}, headers=HEADERS).status_code == 400


def test_sales_journal_endpoints(client):
    cash = create_account(client, "101", "Cash", "ASSET")
    sales = create_account(client, "401", "Sales Revenue", "REVENUE")
    tax = create_account(client, "211", "Sales Tax Payable", "LIABILITY")

    sale = client.post("/sales/", json={"date": "2026-01-15", "customer_name": "Toko Makmur", "subtotal": "1000.00", "tax": "100.00"}, headers=HEADERS)
    assert sale.status_code == 201, sale.text
    sale = sale.json()
    assert sale["sale_no"] == "SALE-202601-0001"
    assert Decimal(sale["total"]) == Decimal("1100.00")

    body = {"cash_account_id": cash["id"], "sales_account_id": sales["id"], "tax_account_id": tax["id"]}
    journal = client.post(f"/sales/{sale['id']}/journal", json=body, headers=HEADERS)
    assert journal.status_code == 201, journal.text
    assert journal.json()["journal_type"] == "SALES"
    assert len(journal.json()["entries"]) == 3
    assert client.get(f"/sales/{sale['id']}", headers=HEADERS).json()["journal_id"] == journal.json()["id"]

    duplicate = client.post(f"/sales/{sale['id']}/journal", json=body, headers=HEADERS)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "AlreadyJournaledError"

    assert client.post("/sales/9999/journal", json=body, headers=HEADERS).status_code == 404


def test_report_endpoints(client):
    cash = create_account(client, "101", "Cash", "ASSET")
    sales = create_account(client, "401", "Sales Revenue", "REVENUE")
    journal = client.post("/journals/", json=journal_payload(cash["id"], sales["id"], "100000"), headers=HEADERS).json()
    client.post(f"/journals/{journal['id']}/post", headers=HEADERS)

    pl = client.get("/financial-reports/profit-and-loss", params={"start_date": "2026-01-01", "end_date": "2026-01-31"}, headers=HEADERS)
    assert pl.status_code == 200
    assert Decimal(pl.json()["net_profit"]) == Decimal("100000.00")

    bs = client.get("/financial-reports/balance-sheet", params={"as_of_date": "2026-01-31"}, headers=HEADERS)
    assert bs.status_code == 200
    assert bs.json()["is_balanced"] is True

    ratios = client.get("/financial-reports/ratios", params={"start_date": "2026-01-01", "end_date": "2026-01-31"}, headers=HEADERS)
    assert Decimal(ratios.json()["roi"]) == Decimal("100.00")

    ledger = client.get(f"/financial-reports/general-ledger/{cash['id']}", headers=HEADERS)
    assert Decimal(ledger.json()["closing_balance"]) == Decimal("100000.00")

    reversed_range = client.get("/financial-reports/profit-and-loss", params={"start_date": "2026-02-01", "end_date": "2026-01-01"}, headers=HEADERS)
    assert reversed_range.status_code == 400
    assert reversed_range.json()["error"] == "InvalidDateRangeError"
