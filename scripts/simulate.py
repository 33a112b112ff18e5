"""
Lunch Rush Simulation Script

Registers a crowd of students and faculty, then fires concurrent orders at
a running server to exercise pricing and the kitchen notification flow.
Run from project root: python scripts/simulate.py

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from datetime import datetime
from typing import Any, Optional

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 50
TOTAL_CUSTOMERS = 10
PASSWORD = "lunch-rush-123"

FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Wilson", "Taylor"]


def generate_random_customer() -> dict[str, str]:
    """Generate a random student or faculty registration."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "email": f"{first}.{last}.{uuid.uuid4().hex[:6]}@campus.test".lower(),
        "password": PASSWORD,
        "role": random.choice(["student", "student", "faculty"]),
    }


def generate_random_items(menu: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Pick 1-4 dishes; repeats are separate line items."""
    return [
        {"id": dish["id"], "name": dish["name"], "price": float(dish["price"])}
        for dish in random.choices(menu, k=random.randint(1, 4))
    ]


# =============================================================================
# SETUP
# =============================================================================

async def sign_up(client: httpx.AsyncClient) -> Optional[dict[str, Any]]:
    """Register a customer and return {"token", "role"}."""
    customer = generate_random_customer()
    response = await client.post(f"{API_BASE_URL}/api/auth/register", json=customer)
    if response.status_code != 201:
        return None

    response = await client.post(
        f"{API_BASE_URL}/api/auth/login",
        json={"email": customer["email"], "password": PASSWORD},
    )
    if response.status_code != 200:
        return None
    data = response.json()["data"]
    return {"token": data["token"], "role": data["user"]["role"]}


async def fetch_menu(client: httpx.AsyncClient) -> list[dict[str, Any]]:
    response = await client.get(f"{API_BASE_URL}/api/menus")
    response.raise_for_status()
    return [d for d in response.json()["data"] if d["is_available"]]


# =============================================================================
# ORDERS
# =============================================================================

async def send_order(
    client: httpx.AsyncClient,
    order_num: int,
    customer: dict[str, Any],
    menu: list[dict[str, Any]],
) -> dict[str, Any]:
    """Submit one order as ``customer``."""
    items = generate_random_items(menu)
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json={"items": items},
            headers={"Authorization": f"Bearer {customer['token']}"},
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()["data"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["id"],
                "role": customer["role"],
                "total": float(data["final_price"]),
                "discount": float(data["discount_amount"]),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def complete_orders(
    client: httpx.AsyncClient,
    token: str,
    order_ids: list[int],
) -> int:
    """Mark orders completed as kitchen staff; returns how many succeeded."""
    headers = {"Authorization": f"Bearer {token}"}
    responses = await asyncio.gather(
        *(client.put(f"{API_BASE_URL}/api/orders/{order_id}/complete", headers=headers) for order_id in order_ids),
        return_exceptions=True,
    )
    return sum(1 for r in responses if isinstance(r, httpx.Response) and r.status_code == 200)


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    num_orders: int = TOTAL_ORDERS,
    num_customers: int = TOTAL_CUSTOMERS,
    staff_token: Optional[str] = None,
    complete_share: float = 0.5,
) -> dict[str, Any]:
    """
    Run the lunch rush.

    Args:
        num_orders: Number of orders to submit concurrently
        num_customers: Number of accounts sharing those orders
        staff_token: Kitchen token; when given, part of the orders get completed
        complete_share: Fraction of successful orders the kitchen completes
    """
    print("=" * 70)
    print("🍽️  LUNCH RUSH SIMULATION - HIGH CONCURRENCY TEST")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"👥 Customers: {num_customers}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        menu = await fetch_menu(client)
        if not menu:
            print("\n❌ No available dishes. Add menu items first.")
            return {"total": num_orders, "successful": 0, "failed": num_orders, "results": []}

        customers = [c for c in await asyncio.gather(*(sign_up(client) for _ in range(num_customers))) if c]
        if not customers:
            print("\n❌ Could not register any customers.")
            return {"total": num_orders, "successful": 0, "failed": num_orders, "results": []}

        print(f"\n🚀 Firing orders from {len(customers)} customers...\n")
        start_time = time.time()
        tasks = [
            send_order(client, i + 1, random.choice(customers), menu)
            for i in range(num_orders)
        ]
        results = await asyncio.gather(*tasks)

        completed = 0
        if staff_token:
            done = [r["order_id"] for r in results if r["success"]]
            picked = random.sample(done, int(len(done) * complete_share))
            print(f"👨‍🍳 Kitchen completing {len(picked)} orders...")
            completed = await complete_orders(client, staff_token, picked)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        student_orders = [r for r in successful if r["role"] == "student"]
        total_revenue = sum(r["total"] for r in successful)
        total_discount = sum(r["discount"] for r in successful)

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   🎓 Student Orders: {len(student_orders)}")
        print(f"   💰 Total Revenue: ${total_revenue:.2f}")
        print(f"   🏷️  Student Discounts: ${total_discount:.2f}")
        if staff_token:
            print(f"   👨‍🍳 Completed by Kitchen: {completed}")

    if failed:
        print(f"\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. Run: python scripts/verify.py --email <staff email> --password <password>")
    print(f"2. Open {API_BASE_URL}/docs and check /api/statistics/summary")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "completed": completed,
        "total_time": total_time,
        "results": results,
    }


async def staff_login(email: str, password: str) -> Optional[str]:
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{API_BASE_URL}/api/auth/login",
            json={"email": email, "password": password},
        )
    if response.status_code != 200:
        print(f"   ⚠️ Staff login failed: {response.text[:100]}")
        return None
    return response.json()["data"]["token"]


async def check_health() -> bool:
    """Pre-flight check before the rush."""
    async with httpx.AsyncClient() as client:
        print("\n1️⃣ Health Check...")
        try:
            response = await client.get(f"{API_BASE_URL}/api/health")
        except httpx.HTTPError as e:
            print(f"   ❌ Server unreachable: {e}")
            return False

        if response.status_code != 200:
            print(f"   ❌ Failed: {response.text}")
            return False

        data = response.json()
        print(f"   ✅ Status: {data.get('status')}")
        print(f"   Database: {data.get('database')}")
        print(f"   Assistant: {data.get('assistant')}")
        return data.get("database") == "healthy"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Lunch Rush Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--customers", type=int, default=TOTAL_CUSTOMERS, help="Number of customers")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--staff-email", help="Kitchen account that completes orders")
    parser.add_argument("--staff-password", help="Kitchen account password")
    parser.add_argument("--complete-share", type=float, default=0.5, help="Fraction of orders to complete")
    parser.add_argument("--skip-checks", action="store_true", help="Skip the health check")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if not args.skip_checks and not asyncio.run(check_health()):
        print("\n❌ Pre-flight check failed. Fix issues before running simulation.")
        sys.exit(1)

    staff_token = None
    if args.staff_email and args.staff_password:
        staff_token = asyncio.run(staff_login(args.staff_email, args.staff_password))

    asyncio.run(run_simulation(args.orders, args.customers, staff_token, args.complete_share))
