"""
Smoke-check a running FleetSync backend over REST.
Usage: python scripts/test/check_backend.py [--url http://localhost:5000] [--api-key KEY]
"""

import argparse
import requests

DEFAULT_URL = "http://localhost:5000"


def main():
    parser = argparse.ArgumentParser(description="Query a running FleetSync backend")
    parser.add_argument("--url", default=DEFAULT_URL)
    parser.add_argument("--api-key", default=None)
    parser.add_argument("--audit", type=int, default=10, help="Audit entries to show")
    args = parser.parse_args()

    base = f"{args.url.rstrip('/')}/api/v1"
    headers = {"X-API-Key": args.api_key} if args.api_key else {}

    try:
        health = requests.get(f"{base}/health", timeout=5).json()
    except requests.exceptions.ConnectionError:
        print(f"❌ Backend unreachable at {args.url}")
        return
    print(f"💚 {health['status']} | storage={health['storage']} | "
          f"vehicles={health['vehicles']} | connections={health['connections']}")

    groups = requests.get(f"{base}/groups", headers=headers, timeout=5).json()
    print(f"\n📦 {len(groups)} groups")
    for g in groups:
        print(f"   {g['type']:<13} {g['name']:<12} {g['availableCount']}/{g['totalCount']} available")

    operators = requests.get(f"{base}/operators", headers=headers, timeout=5).json()
    print(f"\n👷 Online: {', '.join(op['name'] for op in operators) or 'nobody'}")

    audit = requests.get(f"{base}/audit", params={"limit": args.audit}, headers=headers, timeout=5).json()
    print(f"\n📝 Last {len(audit)} changes")
    for e in audit:
        print(f"   {e['timestamp']} {e['userName']:<12} {e['vehicleName']:<8} "
              f"{e['action']:<15} {e['field']}: '{e['oldValue']}' → '{e['newValue']}'")


if __name__ == "__main__":
    main()
