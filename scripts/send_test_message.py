"""
Posts a fake inbound WhatsApp message to a running server.

Run: python scripts/send_test_message.py "+15551230000" "Spent 250 on groceries"
"""
import asyncio
import sys

import httpx


async def send(phone: str, text: str, url: str = "http://localhost:8000/webhook/whatsapp"):
    """Simulate what Vonage sends to our webhook"""
    data = {"from": phone.lstrip("+"), "text": text, "channel": "whatsapp"}

    print(f"🧪 Testing webhook: {url}")
    print(f"📤 Sending data: {data}\n")

    async with httpx.AsyncClient() as client:
        response = await client.post(url, json=data, timeout=30.0)

    print(f"✅ Status: {response.status_code}")
    print(f"📥 Response: {response.text[:200]}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/send_test_message.py <phone> <text>")
        sys.exit(1)
    asyncio.run(send(sys.argv[1], sys.argv[2]))
