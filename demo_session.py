#!/usr/bin/env python3
"""
Session Demo: draft → save → edit → delete → export

Shows the full lifecycle of a survey record:
1. Load the persisted list (empty on first run)
2. Fill a draft and save it
3. Edit it, tap a tally, save in place
4. Export the list to encuestas.csv
5. Delete it with confirmation
"""

import tempfile
from pathlib import Path

from canvass.app import SurveyApp
from canvass.export import Exporter
from canvass.storage import JsonFileStore, SurveyRepository


def main():
    workdir = Path(tempfile.mkdtemp(prefix="canvass-demo-"))
    app = SurveyApp(
        SurveyRepository(JsonFileStore(workdir / "canvass.json")),
        exporter=Exporter(workdir, share=lambda path: print(f"   ✓ Shared {path}")),
        confirm=lambda title, message: True,
        notify=lambda title, message: print(f"   ✓ {title}: {message}"),
    )

    print("=" * 80)
    print("SESSION DEMO: draft → save → edit → export → delete")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load
    # =========================================================================
    print("\n1. LOADING...")
    app.load_all()
    print(f"   ✓ Surveys on record: {len(app)}")

    # =========================================================================
    # STEP 2: Create
    # =========================================================================
    print("\n2. SAVING A NEW SURVEY...")
    app.set_address("Calle 1")
    for field_name, taps in (("si", 2), ("ct", 1), ("interest", 3)):
        for _ in range(taps):
            app.increment(field_name)
    app.set_notes("ok, volver el lunes")
    app.save()
    print(f"   ✓ Surveys on record: {len(app)}")

    # =========================================================================
    # STEP 3: Edit
    # =========================================================================
    print("\n3. EDITING...")
    app.edit(0)
    print(f"   ✓ Mode: {app.mode.value}")
    app.increment("si")
    app.save()
    print(f"   ✓ SI is now {app.record_at(0).si}, mode: {app.mode.value}")

    # =========================================================================
    # STEP 4: Export
    # =========================================================================
    print("\n4. EXPORTING...")
    path = app.export()
    print("-" * 80)
    print(path.read_text(encoding="utf-8"))
    print("-" * 80)

    # =========================================================================
    # STEP 5: Delete
    # =========================================================================
    print("\n5. DELETING...")
    app.delete(0)
    print(f"   ✓ Surveys on record: {len(app)}")

    print("\n" + "=" * 80)
    print(f"SESSION COMPLETE! Files in {workdir}")
    print("=" * 80)


if __name__ == "__main__":
    main()
