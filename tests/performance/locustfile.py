"""
Load testing for the guidance gateway using Locust.

Run against a live instance, e.g.:

    locust -f tests/performance/locustfile.py --host http://localhost:8080

Thresholds mirror the search smoke budget: under 1% failures and a p95
below 500ms for search_guidance.
"""

import random

from locust import HttpUser, TaskSet, between, events, task

SEARCH_TERMS = [
    "charity guidance",
    "annual return",
    "trustee duties",
    "charitable purposes",
    "fundraising",
]

P95_BUDGET_MS = 500
FAILURE_RATE_BUDGET = 0.01


class GuidanceToolTasks(TaskSet):
    """Load tests for the tool endpoints."""

    headers = {"Content-Type": "application/json"}

    @task(5)
    def search_guidance(self):
        """Search smoke."""
        payload = {"query": random.choice(SEARCH_TERMS), "page": 1, "pageSize": 10}
        with self.client.post("/tools/search_guidance", json=payload, headers=self.headers,
                              catch_response=True) as response:
            if response.status_code == 200 and "results" in response.json():
                response.success()
            elif response.status_code == 503:
                response.failure("Upstream unavailable")
            else:
                response.failure(f"Unexpected status code: {response.status_code}")

    @task(1)
    def error_taxonomy(self):
        self.client.get("/tools/get_error_taxonomy")

    @task(1)
    def healthz(self):
        self.client.get("/healthz")


class GuidanceUser(HttpUser):
    """Simulated tool caller."""

    tasks = [GuidanceToolTasks]
    wait_time = between(0.3, 0.7)


@events.quitting.add_listener
def enforce_budgets(environment, **kwargs):
    """Fail the run when the search budget is exceeded."""
    stats = environment.stats.get("/tools/search_guidance", "POST")
    if stats.num_requests == 0:
        return
    if stats.fail_ratio > FAILURE_RATE_BUDGET:
        environment.process_exit_code = 1
    elif stats.get_response_time_percentile(0.95) > P95_BUDGET_MS:
        environment.process_exit_code = 1
