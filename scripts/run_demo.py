#!/usr/bin/env python3
"""
run_demo.py - End-to-end demo against a running milk ledger API
- Registers/logs in the vendor
- Creates products and a customer
- Places orders, records a payment
- Prints the dashboard, the customer ledger and this month's statement

Start the API first, e.g. `uvicorn milkledger.main:app --port 8000`.
"""

import requests
import json
import os
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

class DemoRunner:
    def __init__(self):
        self.base_url = os.getenv("LEDGER_URL", "http://localhost:8000")
        self.auth_url = f"{self.base_url}/auth"
        self.api_url = f"{self.base_url}/v1"

        self.vendor_email = "vendor@jaygoga-dairy.in"
        self.vendor_pass = "P@ssw0rd!"
        self.access_token: Optional[str] = None

    # ---------- helpers ----------
    def show_step(self, title: str):
        print(f"\n=== {title} ===")

    def mask_token(self, token: str) -> str:
        if not token:
            return "<none>"
        return token if len(token) <= 12 else f"{token[:8]}...{token[-6:]}"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}

    def call_api(
        self,
        method: str,
        url: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        expected_status: List[int] = [200, 201, 204],
        quiet: bool = False,
        timeout: int = 30,
    ):
        if not quiet:
            print(f"\n-> {method} {url}")
            if data is not None:
                print(f"   Body: {json.dumps(data, indent=2)}")

        try:
            resp = requests.request(
                method=method,
                url=url,
                headers=self.headers(),
                params=params,
                json=data if isinstance(data, (dict, list)) else None,
                timeout=timeout,
            )
        except requests.exceptions.RequestException as e:
            print(f"   Error: \033[91m{e}\033[0m")
            return {"status": None, "data": None, "error": str(e)}

        if not quiet:
            status_color = "\033[92m" if resp.status_code in expected_status else "\033[93m"
            print(f"   Status: {status_color}{resp.status_code}\033[0m")
        try:
            js = resp.json()
        except json.JSONDecodeError:
            return {"status": resp.status_code, "data": None}
        if not quiet:
            print(json.dumps(js, indent=2))
        return {"status": resp.status_code, "data": js}

    # ---------- flow ----------
    def run_demo(self):
        print("Starting Milk Ledger Demo")
        print("=" * 50)

        self.show_step("Preflight: health")
        health = self.call_api("GET", f"{self.base_url}/health", quiet=True)
        if health.get("status") != 200:
            print(f"\033[91mLedger API not reachable at {self.base_url}\033[0m")
            return

        self.show_step("Vendor: register")
        self.call_api(
            "POST",
            f"{self.auth_url}/register",
            data={"email": self.vendor_email, "password": self.vendor_pass, "name": "Demo Vendor"},
            expected_status=[201, 409],
        )

        self.show_step("Vendor: login")
        lr = self.call_api("POST", f"{self.auth_url}/login",
                           data={"email": self.vendor_email, "password": self.vendor_pass})
        if lr.get("data"):
            self.access_token = lr["data"].get("access_token")
            print(f"Access token: {self.mask_token(self.access_token)}")

        self.show_step("Products: create")
        milk = self.call_api("POST", f"{self.api_url}/products/", data={"name": "Cow Milk 1L", "price": "60.00"})
        curd = self.call_api("POST", f"{self.api_url}/products/", data={"name": "Curd 500g", "price": "35.00"})
        milk_id = (milk.get("data") or {}).get("id")
        curd_id = (curd.get("data") or {}).get("id")

        self.show_step("Customer: create")
        cust = self.call_api("POST", f"{self.api_url}/customers/",
                             data={"name": "Asha Patel", "phone": "9800000000", "address": "12 Dairy Lane"})
        customer_id = (cust.get("data") or {}).get("id")
        if not (customer_id and milk_id and curd_id):
            print("\033[93mSetup failed; stopping.\033[0m")
            return

        today = date.today()
        self.show_step("Orders: place two days of deliveries")
        for offset, status in ((1, "delivered"), (0, "pending")):
            self.call_api("POST", f"{self.api_url}/orders/", data={
                "customer_id": customer_id,
                "items": [{"product_id": milk_id, "quantity": 2}, {"product_id": curd_id, "quantity": 1}],
                "status": status,
                "order_date": (today - timedelta(days=offset)).isoformat(),
            })

        self.show_step("Payment: record")
        self.call_api("POST", f"{self.api_url}/customers/{customer_id}/payments",
                      data={"amount": "100.00", "payment_date": today.isoformat()})

        self.show_step("Dashboard: today")
        self.call_api("GET", f"{self.api_url}/dashboard")
        self.call_api("GET", f"{self.api_url}/dashboard/product-sales")

        self.show_step("Customer: lifetime ledger")
        self.call_api("GET", f"{self.api_url}/customers/{customer_id}/ledger")

        self.show_step("Statements: this month")
        self.call_api("GET", f"{self.api_url}/statements", params={"period": "month"})

        print("\n\033[92m=== DEMO COMPLETE ===\033[0m")


if __name__ == "__main__":
    DemoRunner().run_demo()
