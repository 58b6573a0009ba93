"""Cron job: Store ranking check (every 30 min during store hours, BRT)

Schedule: */30 12-23 * * * (09:00-20:30 BRT)

Pulls the current month's store ranking and logs how many stores are
ahead of, on, or behind the expected pace.
"""
import requests
import os

API_URL = os.getenv("API_URL", "http://localhost:8000")
USER_ID = os.getenv("METAS_CRON_USER_ID", "0")

print(f"[Ranking Check] Calling {API_URL}/api/v1/metas/ranking")

response = requests.get(
    f"{API_URL}/api/v1/metas/ranking",
    params={"user_id": USER_ID},
    timeout=120
)

print(f"Status: {response.status_code}")
if response.ok:
    data = response.json()["data"]
    summary = data["summary"]
    print(f"Period: {data['period']} | Expected pace: {data['expected_pace_percent']}%")
    print(f"Attainment: {summary['attainment_percent']:.1f}% "
          f"(ahead {summary['stores_ahead']}, on track {summary['stores_on_track']}, "
          f"behind {summary['stores_behind']})")
else:
    print(f"Response: {response.text[:500]}")
