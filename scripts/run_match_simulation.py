import logging
import os
import time

import pandas as pd

from dispatch.dispatcher import Dispatcher, MatchStatus
from notifications.notifier import Notifier
from rides.models import RIDE_REQUESTS_COLLECTION
from store.document_store import InMemoryDocumentStore
from store.seed import CsvSeedSource, StaticSeedSource, load_seed
from volunteers.policy import default_match_policy


class PrintingPushClient:
    """Stands in for FCM: prints every notification instead of sending it."""

    def __init__(self):
        self.sent = 0

    def send(self, token, title, body, data=None):
        self.sent += 1
        print(f"  [PUSH] to {token}: {title} | {body} | {data}")
        return f"sim-message-{self.sent}"


def build_source(base_dir):
    # CSVs from scripts/generate_mock_volunteers.py when present, demo data otherwise
    volunteers_csv = os.path.join(base_dir, "mock_volunteers.csv")
    rides_csv = os.path.join(base_dir, "mock_ride_requests.csv")
    if os.path.exists(volunteers_csv) and os.path.exists(rides_csv):
        print(f"Using '{volunteers_csv}' and '{rides_csv}'")
        return CsvSeedSource(volunteers_csv, rides_csv)

    print("No mock CSVs found, using the built-in demo volunteers.")
    return StaticSeedSource(ride_requests=[
        {
            "id": "ride-demo-1",
            "riderName": "Jane Doe",
            "pickupLocation": {"latitude": -17.8292, "longitude": 31.0522},
            "dropoffLocation": {"latitude": -17.7840, "longitude": 31.0530},
            "urgency": "EMERGENCY",
            "notes": "",
            "status": "PENDING",
        },
        {
            "id": "ride-demo-2",
            "riderName": "Tatenda",
            "pickupLocation": {"latitude": -17.8100, "longitude": 31.0400},
            "dropoffLocation": None,
            "urgency": "LOW",
            "notes": "Wheelchair",
            "status": "PENDING",
        },
        {
            "id": "ride-demo-3",
            "riderName": "Far Away",
            "pickupLocation": {"latitude": -18.9700, "longitude": 32.6700},
            "dropoffLocation": None,
            "urgency": "HIGH",
            "notes": "",
            "status": "PENDING",
        },
    ])


def run_simulation():
    # run from the repository root: python -m scripts.run_match_simulation
    print("=== STARTING RIDE MATCHING SIMULATION ===")
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING"))

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # 1. Load data into an in-memory store
    store = InMemoryDocumentStore()
    num_volunteers, num_rides = load_seed(store, build_source(base_dir))
    print(f"Loaded {num_rides} Ride Requests and {num_volunteers} Volunteers.\n")

    # 2. Configure system
    push_client = PrintingPushClient()
    dispatcher = Dispatcher(store, notifier=Notifier(store, push_client), policy=default_match_policy())

    # 3. Deliver one "created" event per pending ride, in creation order
    rides = store.query(RIDE_REQUESTS_COLLECTION, {"status": "PENDING"})
    start_time = time.time()
    results = []
    for ride in rides:
        outcome = dispatcher.handle_ride_request_created(ride.id, ride.data)
        results.append(outcome.to_dict())

        if outcome.status == MatchStatus.ASSIGNED:
            print(f"[SUCCESS] {ride.id} -> {outcome.volunteer_id} ({outcome.distance_km:.2f} km)")
        else:
            print(f"[{outcome.status.value.upper()}] {ride.id}")

    # 4. Report
    output_path = os.path.join(base_dir, "match_results.csv")
    df = pd.DataFrame(results, columns=["rideId", "status", "volunteerId", "distanceKm", "notified"])
    df.to_csv(output_path, index=False)

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Matched in {time.time() - start_time:.3f}s")
    print(df["status"].value_counts().to_string())
    print(f"Notifications sent: {push_client.sent}")
    print(f"Results written to '{output_path}'.")
    return df


if __name__ == "__main__":
    run_simulation()
