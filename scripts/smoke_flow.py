#!/usr/bin/env python3
"""Walk the register → city → attraction → logout flow against a running server"""
import sys
import uuid

import requests

BASE_URL = "http://localhost:3001"


def step(title):
    print("=" * 60)
    print(title)
    print("=" * 60)


def show(resp):
    print(f"Status: {resp.status_code}")
    print(f"Response: {resp.text}\n")


def run_flow(base_url: str = BASE_URL) -> bool:
    session = requests.Session()
    username = f"smoke-{uuid.uuid4().hex[:8]}@example.com"

    step("1. Checking auth status (not logged in)")
    resp = session.get(f"{base_url}/api/users/me")
    show(resp)

    step(f"2. Registering {username}")
    resp = session.post(f"{base_url}/api/users/register", json={
        "username": username,
        "password": "smoke-pass"
    })
    show(resp)
    if resp.status_code != 200:
        print("❌ Registration failed")
        return False

    step("3. Adding a city")
    resp = session.post(f"{base_url}/api/cities", json={
        "city": {"name": "Lisbon", "attractions": ["Belem Tower"], "restaurants": []}
    })
    show(resp)

    step("4. Adding an attraction and a restaurant")
    show(session.post(f"{base_url}/api/cities/Lisbon/attractions", json={"attraction": "Alfama"}))
    show(session.post(f"{base_url}/api/cities/Lisbon/restaurants", json={"restaurant": "Ramiro"}))

    step("5. Listing cities")
    resp = session.get(f"{base_url}/api/cities")
    show(resp)
    cities = resp.json() if resp.status_code == 200 else []
    ok = any(c.get("name") == "Lisbon" and "Alfama" in c.get("attractions", [])
             for c in cities)

    step("6. Deleting the city and logging out")
    show(session.delete(f"{base_url}/api/cities/Lisbon"))
    show(session.post(f"{base_url}/api/users/logout"))

    print("✅ Flow completed" if ok else "❌ City list did not contain the new data")
    return ok


if __name__ == "__main__":
    sys.exit(0 if run_flow(sys.argv[1] if len(sys.argv) > 1 else BASE_URL) else 1)
