#!/usr/bin/env python3
"""
Demo Data Seeding Script for PartyRoll.

Creates, through the HTTP API:
- A handful of members across two provinces, some approved
- A planned rally with RSVPs
- A membership card for each approved member
- An SMS to Lusaka members, sent

Usage:
    python scripts/seed_demo_data.py [--base-url URL] [--email EMAIL] [--password PASSWORD]

Requires:
    - API running at --base-url (default http://localhost:8000)
    - An admin account (see scripts/create_admin.py)
"""
import argparse
import asyncio
import sys
from datetime import date, timedelta

import httpx

DEMO_MEMBERS = [
    ("Chanda Mwila", "Lusaka", "Lusaka Central"),
    ("Mutale Banda", "Lusaka", "Kabwata"),
    ("Natasha Phiri", "Copperbelt", "Ndola"),
    ("Bwalya Tembo", "Copperbelt", "Kitwe"),
]


async def get_auth_token(client: httpx.AsyncClient, email: str, password: str) -> str:
    """Authenticate and return JWT token."""
    print("Authenticating...")
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    if response.status_code != 200:
        print(f"Auth failed: {response.text}")
        sys.exit(1)

    data = response.json()
    print(f"Authenticated as {data['user']['email']}")
    return data["token"]


async def register_members(client: httpx.AsyncClient) -> list[dict]:
    print("\nRegistering members...")
    members = []
    for index, (name, province, district) in enumerate(DEMO_MEMBERS, start=1):
        response = await client.post("/api/members", json={
            "full_name": name,
            "nrc_number": f"{100000 + index:06d}/10/1",
            "date_of_birth": (date.today() - timedelta(days=365 * (25 + index))).isoformat(),
            "gender": "Female" if index % 2 else "Male",
            "phone": f"+260977{index:06d}",
            "residential_address": f"Plot {index}, {district}",
            "province": province,
            "district": district,
            "constituency": district,
            "ward": f"Ward {index}",
            "branch": f"{district} Branch",
            "section": f"Section {index}",
        })
        if response.status_code == 201:
            member = response.json()
            members.append(member)
            print(f"  {member['membership_id']} {member['full_name']}")
        else:
            print(f"  Skipped {name}: {response.json().get('error')}")
    return members


async def seed(base_url: str, email: str, password: str) -> None:
    async with httpx.AsyncClient(base_url=base_url, timeout=30) as client:
        members = await register_members(client)
        token = await get_auth_token(client, email, password)
        client.headers["Authorization"] = f"Bearer {token}"

        approved_ids = [m["id"] for m in members[:3]]
        if approved_ids:
            response = await client.post("/api/members/bulk-approve", json={"member_ids": approved_ids})
            print(f"\n{response.json()['message']}")

        print("\nCreating event...")
        response = await client.post("/api/events", json={
            "event_name": "Lusaka Youth Rally",
            "event_type": "Rally",
            "event_date": (date.today() + timedelta(days=14)).isoformat(),
            "location": "Heroes Stadium, Lusaka",
            "province": "Lusaka",
            "organizer": "Lusaka Provincial Youth Wing",
            "expected_attendees": 500,
        })
        event = response.json()
        print(f"  {event['event_name']} on {event['event_date']}")

        for member_id in approved_ids:
            await client.post(f"/api/events/{event['id']}/rsvps", json={
                "member_id": member_id, "response": "Attending"
            })

        print("\nIssuing cards...")
        for member_id in approved_ids:
            response = await client.post("/api/membership-cards", json={"member_id": member_id})
            if response.status_code == 201:
                print(f"  {response.json()['qr_code']}")

        print("\nSending communication...")
        response = await client.post("/api/communications", json={
            "type": "SMS",
            "subject": "Youth Rally",
            "message": "Join us at Heroes Stadium for the Lusaka Youth Rally.",
            "recipient_filter": {"provinces": ["Lusaka"]},
        })
        communication = response.json()
        response = await client.patch(f"/api/communications/{communication['id']}", json={"action": "send"})
        print(f"  Sent to {response.json()['recipients_count']} members")

    print("\nDone.")


def main():
    parser = argparse.ArgumentParser(description="Seed PartyRoll with demo data")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--email", default="admin@upnd.zm", help="Admin e-mail")
    parser.add_argument("--password", default="upnd2024", help="Admin password")
    args = parser.parse_args()

    asyncio.run(seed(args.base_url, args.email, args.password))


if __name__ == "__main__":
    main()
