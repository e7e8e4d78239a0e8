"""
Daily NAV Refresh DAG

Refreshes the latest NAV and NAV history of every held scheme through the
backend API. Used instead of the backend's in-process scheduler
(NAV_SCHEDULER_ENABLED=false) when Airflow owns scheduling.

Schedule: Daily at 00:00 Asia/Kolkata
"""

import logging
import os
from datetime import timedelta

import pendulum
import requests
from airflow.sdk import dag, task
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv("/opt/airflow/backend/.env")

BACKEND_URL = os.getenv("BACKEND_URL", "http://host.docker.internal:8000")
# Bearer token carrying the service-account claim (issued by the auth service)
SERVICE_TOKEN = os.getenv("NAVFOLIO_SERVICE_TOKEN", "")

# A full cycle pauses 2s every 10 schemes, so allow for large scheme sets
REQUEST_TIMEOUT_SECONDS = 1800

default_args = {
    "owner": "navfolio",
    "depends_on_past": False,
    "email_on_failure": False,
    "email_on_retry": False,
    "retries": 2,
    "retry_delay": timedelta(minutes=5),
}


@dag(
    dag_id="daily_nav_refresh",
    default_args=default_args,
    description="Refresh mutual fund NAVs for every held scheme",
    schedule="0 0 * * *",
    start_date=pendulum.datetime(2026, 1, 1, tz="Asia/Kolkata"),
    catchup=False,
    max_active_runs=1,
    tags=["navfolio", "nav", "daily"],
)
def daily_nav_refresh():
    """DAG to run one full NAV ingestion cycle on the backend."""

    @task(task_id="run_nav_ingestion")
    def run_nav_ingestion() -> dict[str, int | str]:
        """
        Call the backend to run a full ingestion cycle.

        A 409 means a run is already in flight on the backend (for example a
        manual trigger); the task is marked skipped rather than retried.

        Returns:
            Result dict with status and counts
        """
        if not SERVICE_TOKEN:
            raise ValueError("NAVFOLIO_SERVICE_TOKEN not set. Configure it in airflow/.env")

        logger.info("Starting NAV ingestion via backend API")
        response = requests.post(
            f"{BACKEND_URL}/api/ingestion/nav/run",
            headers={"Authorization": f"Bearer {SERVICE_TOKEN}"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )

        if response.status_code == 409:
            logger.warning("NAV ingestion already running on the backend, skipping")
            return {"status": "skipped", "reason": "in_progress"}

        if response.status_code != 200:
            error_msg = response.text[:200]
            logger.error("NAV ingestion API error: %d - %s", response.status_code, error_msg)
            # Let Airflow retry
            response.raise_for_status()

        data = response.json()
        logger.info(
            "NAV ingestion complete: %d processed, %d successful, %d failed",
            data.get("processed", 0),
            data.get("succeeded", 0),
            data.get("failed", 0),
        )
        return {
            "status": "success",
            "processed": data.get("processed", 0),
            "succeeded": data.get("succeeded", 0),
            "failed": data.get("failed", 0),
        }

    run_nav_ingestion()


# Instantiate the DAG
dag_instance = daily_nav_refresh()
