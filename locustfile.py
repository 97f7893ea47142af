from collections import Counter
from locust import HttpUser, task, between, events
import random
import os
import threading
import requests

MEALS = [None, "sat_breakfast", "sat_lunch", "sat_dinner", "sun_breakfast", "sun_lunch"]

TOKENS = []
successes = Counter()
successes_lock = threading.Lock()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    from dotenv import load_dotenv
    load_dotenv()

    base_url = os.getenv("LOCUST_HOST", environment.host)
    env_tokens = os.getenv("LOCUST_TOKENS")

    if env_tokens:
        TOKENS.extend(t.strip() for t in env_tokens.split(",") if t.strip())
        return

    print("Collecting badge tokens from the admin listing...")
    secret = os.getenv("ADMIN_API_SECRET")
    response = requests.get(
        f"{base_url}/api/v1/admin/applicants",
        params={"pageSize": 200},
        headers={"Authorization": f"Bearer {secret}"},
    )
    if response.status_code != 200:
        raise RuntimeError(f"Failed to list applicants: {response.status_code} {response.text}")

    # A handful of badges so many stations collide on the same one
    tokens = [item["qr_token"] for item in response.json()["items"] if item["qr_token"]]
    TOKENS.extend(tokens[:5])
    if not TOKENS:
        raise RuntimeError("No applicants with badge tokens; accept some applicants first")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    duplicates = {key: count for key, count in successes.items() if count > 1}
    if duplicates:
        print(f"AT-MOST-ONCE VIOLATED: {duplicates}")
        environment.process_exit_code = 1
    else:
        print(f"OK: {len(successes)} distinct (badge, meal) check-ins, none duplicated")


class ScannerStation(HttpUser):
    """One organizer's phone scanning badges at the door or a meal table."""
    wait_time = between(0.05, 0.2)

    @task
    def scan_badge(self):
        token = random.choice(TOKENS)
        meal_tag = random.choice(MEALS)

        body = {"token": token}
        if meal_tag:
            body["mealTag"] = meal_tag

        with self.client.post(
            "/api/v1/check-in",
            json=body,
            name=f"POST /api/v1/check-in [{meal_tag or 'main'}]",
            catch_response=True
        ) as response:
            if response.status_code == 200:
                with successes_lock:
                    successes[(token, meal_tag)] += 1
                response.success()
            elif response.status_code == 409:
                # Losing the race is the expected outcome for most scans
                response.success()
            else:
                response.failure(f"Unexpected {response.status_code}: {response.text}")
