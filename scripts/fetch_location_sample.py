import argparse

from nearby.core.logging import configure_logging
from nearby.services.location_service import fetch_location

# Avenida da Liberdade, Lisbon
DEFAULT_LAT = 38.7223
DEFAULT_LON = -9.1393


def main() -> None:
    args = _parse_args()
    configure_logging()

    result = fetch_location(args.lat, args.lon, args.radius, admin_names=args.admin_name)
    if not result.ok:
        print("Query rejected:", result.error.value, result.detail)
        return

    _print_summary(result.value)


def _parse_args():
    parser = argparse.ArgumentParser(description="Aggregate external data for one location and print a summary.")
    parser.add_argument("--lat", type=float, default=DEFAULT_LAT)
    parser.add_argument("--lon", type=float, default=DEFAULT_LON)
    parser.add_argument("--radius", type=float, default=1000.0, help="Search radius in meters.")
    parser.add_argument(
        "--admin-name",
        action="append",
        help="Administrative name, fine to coarse with the district last (can be specified multiple times).",
    )
    return parser.parse_args()


def _print_summary(record) -> None:
    print(f"Location ({record.lat}, {record.lon}) radius={record.search_radius:g}m")
    print("Zone:", ", ".join(record.zone_names))
    print("Places:", len(record.places), "parking:", len(record.parking_spaces))
    print("Traffic:", record.traffic_level)
    for season in record.weather:
        print(
            f"- {season.season}: morning={season.morning.temperature}C/{season.morning.wind_speed}kmh, "
            f"afternoon={season.afternoon.temperature}C, night={season.night.temperature}C"
        )
    for crime in record.crimes:
        print(f"- crimes {crime.city}: {crime.crime_type}={crime.value}")
    print("Housing price:", record.housing_price)
    if record.gaps:
        print("Gaps:", ", ".join(f"{field}={kind.value}" for field, kind in record.gaps.items()))


if __name__ == "__main__":
    main()
