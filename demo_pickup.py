"""
Waygraph: Pickup Lot Walkthrough
================================
Builds a small parking lot through editor gestures, finds the cheapest
route and the nearest cars ready for pickup, then saves and reloads the
lot from the snapshot directory.
"""

from waygraph.platform import (
    EditorSession,
    FileSnapshotStore,
    Settings,
    configure_logging,
)

# Lot layout as grid cells; cars ready for pickup are marked True
CELLS = {
    (0, 0): False,  # entrance
    (3, 0): True,
    (3, 4): False,
    (6, 4): True,
    (8, 1): True,
}
ROADS = [
    ((0, 0), (3, 0)),
    ((3, 0), (3, 4)),
    ((3, 4), (6, 4)),
    ((3, 0), (8, 1)),
    ((6, 4), (8, 1)),
]


def pixel(session, cell):
    """Centre pixel of a grid cell."""
    return tuple(c * session.grid_size + session.grid_size // 2 for c in cell)


def build_lot(session):
    """Place nodes, mark ready cars and draw roads the way a user would."""
    for cell, ready in CELLS.items():
        session.click(*pixel(session, cell))
        if ready:
            session.click(*pixel(session, cell))
            session.handle_key("k")

    for start, end in ROADS:
        session.click(*pixel(session, start))
        session.click(*pixel(session, end))
        result = session.handle_key("e")
        print(f"[Lot] road {result.details['start']} -> {result.details['end']} "
              f"weight={result.details['weight']}")


def main():
    settings = Settings.from_env()
    configure_logging(settings)

    session = EditorSession.from_settings(settings)
    build_lot(session)
    print(f"[Lot] {session.engine!r}")

    session.click(*pixel(session, (0, 0)))
    session.click(*pixel(session, (6, 4)))
    route = session.handle_key("p")
    print(f"[Route] {route.reason}: {session.cheapest_path} (cost {route.details['cost']})")

    session.click(*pixel(session, (0, 0)))
    nearest = session.handle_key("c")
    print(f"[Pickup] closest ready cars: {nearest.details['nodes']}")

    store = FileSnapshotStore(settings.storage_dir)
    session.save(store)
    print(f"[Storage] saved to {settings.storage_dir / (settings.snapshot_key + '.json')}")

    restored = EditorSession.from_settings(settings)
    restored.load(store)
    print(f"[Storage] reloaded {restored.engine!r}")


if __name__ == "__main__":
    main()
