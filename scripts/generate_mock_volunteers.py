import pandas as pd
import numpy as np

MAKES = [
    ("Toyota", "Corolla"),
    ("Toyota", "Camry"),
    ("Honda", "Fit"),
    ("Nissan", "X-Trail"),
    ("Mazda", "Demio"),
]
COLORS = ["Silver", "White", "Blue", "Black", "Red"]
URGENCIES = ["EMERGENCY", "HIGH", "MEDIUM", "LOW"]


def generate_mock_volunteers(num_volunteers=100, output_file="mock_volunteers.csv"):
    """
    Generates volunteer drivers scattered around Harare, in the column layout
    store.seed.CsvSeedSource reads. Most are available and online, and each
    has a service radius between 3 and 25 km so some rides end up out of reach.
    """
    # Center around Harare, Zimbabwe
    CENTER_LAT = -17.824858
    CENTER_LON = 31.053028

    data = []
    for volunteer_index in range(num_volunteers):
        make, model = MAKES[np.random.randint(len(MAKES))]
        data.append({
            "volunteer_id": f"vol_{str(volunteer_index+1).zfill(4)}",
            "name": f"Volunteer {volunteer_index+1}",
            # roughly +/- 10km around the centre
            "lat": np.round(CENTER_LAT + np.random.uniform(-0.09, 0.09), 6),
            "lon": np.round(CENTER_LON + np.random.uniform(-0.09, 0.09), 6),
            "max_distance_km": np.round(np.random.uniform(3.0, 25.0), 1),
            "is_available": bool(np.random.random() < 0.8),
            "is_online": bool(np.random.random() < 0.9),
            "rating": np.round(np.random.uniform(3.5, 5.0), 1),
            "make": make,
            "model": model,
            "color": np.random.choice(COLORS),
            "license_plate": f"A{chr(65 + np.random.randint(26))}{chr(65 + np.random.randint(26))}-{np.random.randint(1000, 9999)}",
            # a few volunteers never registered a device
            "fcm_token": f"token-{volunteer_index+1}" if np.random.random() < 0.9 else None,
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_volunteers} volunteers and saved to '{output_file}'")

    available = df[df["is_available"] & df["is_online"]]
    print(f"  Available and online: {len(available)}")
    return df


def generate_mock_ride_requests(num_rides=30, output_file="mock_ride_requests.csv"):
    CENTER_LAT = -17.824858
    CENTER_LON = 31.053028

    data = []
    for ride_index in range(num_rides):
        pickup_lat = CENTER_LAT + np.random.uniform(-0.1, 0.1)
        pickup_lon = CENTER_LON + np.random.uniform(-0.1, 0.1)
        data.append({
            "ride_id": f"ride_{str(ride_index+1).zfill(5)}",
            "rider_id": f"rider_{np.random.randint(1000, 9999)}",
            "rider_name": f"Rider {ride_index+1}",
            "pickup_lat": np.round(pickup_lat, 6),
            "pickup_lon": np.round(pickup_lon, 6),
            "dropoff_lat": np.round(pickup_lat + np.random.uniform(-0.05, 0.05), 6),
            "dropoff_lon": np.round(pickup_lon + np.random.uniform(-0.05, 0.05), 6),
            "urgency": np.random.choice(URGENCIES, p=[0.1, 0.2, 0.4, 0.3]),
            "notes": "",
            "status": "PENDING",
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_rides} ride requests and saved to '{output_file}'")

    print("\nRequests by urgency:")
    for urgency, count in df["urgency"].value_counts().items():
        print(f"  {urgency}: {count}")
    return df


if __name__ == "__main__":
    generate_mock_volunteers(num_volunteers=100)
    generate_mock_ride_requests(num_rides=30)
