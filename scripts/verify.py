"""
Order Verification Script

Pulls every order through the kitchen API and checks pricing integrity.
Run from project root: python scripts/verify.py --email staff@campus.edu --password ...

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import sys
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

import httpx
import pandas as pd

API_BASE_URL = "http://localhost:3000"
STUDENT_DISCOUNT_RATE = Decimal("0.20")
CENT = Decimal("0.01")


def expected_discount(original: Decimal) -> Decimal:
    return (original * STUDENT_DISCOUNT_RATE).quantize(CENT, rounding=ROUND_HALF_UP)


def load_orders(client: httpx.Client, token: str) -> pd.DataFrame:
    response = client.get(
        f"{API_BASE_URL}/api/orders",
        headers={"Authorization": f"Bearer {token}"},
    )
    response.raise_for_status()
    df = pd.DataFrame(response.json()["data"])
    for col in ("original_price", "discount_amount", "final_price"):
        if col in df.columns:
            df[col] = df[col].map(Decimal)
    return df


def verify_orders(email: str, password: str) -> bool:
    """Verify stored orders after a simulation."""

    print("=" * 60)
    print("🔍 ORDER VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🎯 Server: {API_BASE_URL}")
    print("=" * 60)

    with httpx.Client(timeout=30.0) as client:
        response = client.post(
            f"{API_BASE_URL}/api/auth/login",
            json={"email": email, "password": password},
        )
        if response.status_code != 200:
            print(f"\n❌ Login failed: {response.json().get('error')}")
            return False
        token = response.json()["data"]["token"]

        try:
            df = load_orders(client, token)
        except httpx.HTTPStatusError as e:
            print(f"\n❌ Could not list orders ({e.response.status_code}). Staff or admin account required.")
            return False

        summary = client.get(
            f"{API_BASE_URL}/api/statistics/summary",
            headers={"Authorization": f"Bearer {token}"},
        ).json()["data"]

    print(f"\n📊 STATISTICS:")
    print(f"   Total Orders: {len(df)}")
    if df.empty:
        print("\n⚠️ No orders yet. Run the simulation first: python scripts/simulate.py")
        return True

    ok = True

    # Check duplicates
    duplicates = df["id"].duplicated().sum()
    if duplicates > 0:
        print(f"\n⚠️ {duplicates} duplicate order IDs found!")
        ok = False
    else:
        print(f"✅ No duplicate order IDs")

    # final = original - discount
    mismatched = df[df["final_price"] != df["original_price"] - df["discount_amount"]]
    if len(mismatched) > 0:
        print(f"⚠️ {len(mismatched)} orders where final != original - discount")
        ok = False
    else:
        print(f"✅ final = original - discount on every order")

    # Discount is either none or the student rate
    discounted = df[df["discount_amount"] != 0]
    wrong_rate = discounted[
        discounted["discount_amount"] != discounted["original_price"].map(expected_discount)
    ]
    if len(wrong_rate) > 0:
        print(f"⚠️ {len(wrong_rate)} discounts differ from {STUDENT_DISCOUNT_RATE:.0%}")
        ok = False
    else:
        print(f"✅ {len(discounted)} discounted orders, all at {STUDENT_DISCOUNT_RATE:.0%}")

    # Revenue agrees with the dashboard
    total = df["final_price"].sum()
    dashboard_total = Decimal(summary["total_revenue"])
    print(f"\n💰 REVENUE:")
    print(f"   Total: ${total:.2f}")
    print(f"   Average: ${total / len(df):.2f}")
    print(f"   Dashboard: ${dashboard_total:.2f}")
    if total != dashboard_total or summary["total_orders"] != len(df):
        print("⚠️ Dashboard totals disagree with the order list")
        ok = False

    # Status breakdown
    print(f"\n📦 STATUS:")
    for status, count in df["status"].value_counts().items():
        print(f"   {status}: {count}")

    print(f"\n📋 RECENT ORDERS:")
    print("-" * 60)
    cols = ["id", "customer_name", "original_price", "discount_amount", "final_price", "status"]
    print(df[cols].head(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "❌ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Verification Script")
    parser.add_argument("--email", required=True, help="Staff or admin email")
    parser.add_argument("--password", required=True, help="Staff or admin password")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")
    sys.exit(0 if verify_orders(args.email, args.password) else 1)
