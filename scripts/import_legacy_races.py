"""
This script imports races from the old single-table export.

- Reads a JSON file holding a list of flat race rows.
- Rebuilds one race event per event id. PREVIEW rows describe the event; the
  remaining rows are participants.
- Writes the events and race attempts to Firestore under their original ids,
  so running it twice is harmless.

Usage: python scripts/import_legacy_races.py rows.json TEAM_ID
Set MOCK_DB=1 to run against an in-memory database.
"""

import json
import os
import sys
from pathlib import Path

# Add the project root to the Python path to allow importing 'runbike'
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import firebase_admin  # noqa: E402
from firebase_admin import credentials, firestore  # noqa: E402
from mockfirestore import MockFirestore  # noqa: E402

from runbike.races.services import attempts_from_rows, build_event_map  # noqa: E402
from runbike.store import RecordStore  # noqa: E402
from runbike.store.codec import legacy_row_from_dict  # noqa: E402


def initialize_firebase():
    """Initializes the Firebase Admin SDK."""
    cred = None
    cred_path = project_root / "firebase_credentials.json"
    if cred_path.exists():
        cred = credentials.Certificate(str(cred_path))
    else:
        cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
        if cred_json:
            try:
                cred = credentials.Certificate(json.loads(cred_json))
            except (json.JSONDecodeError, ValueError) as e:
                print(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
                return False

    if not cred:
        print("Could not find Firebase credentials in file or environment variable.")
        return False

    if not firebase_admin._apps:
        firebase_admin.initialize_app(cred)
    return True


def import_races(rows_path, team_id):
    """Main import logic."""
    with open(rows_path, "r", encoding="utf-8") as f:
        rows = [legacy_row_from_dict(data) for data in json.load(f)]

    if os.environ.get("MOCK_DB"):
        db = MockFirestore()
    else:
        if not initialize_firebase():
            return
        db = firestore.client()

    events = build_event_map(rows)
    attempts = attempts_from_rows(rows, events)
    print(f"Found {len(events)} events and {len(attempts)} participants.")

    event_count, attempt_count = RecordStore.import_race_records(
        db, team_id, events.values(), attempts
    )
    print(f"Imported {event_count} events and {attempt_count} race attempts.")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    import_races(sys.argv[1], sys.argv[2])
