from __future__ import annotations

from oxygen_launcher.main import main as core_main


def main(argv: list[str] | None = None) -> int:
    # Frozen bundles (the usual way Oxygen ships next to its apps) enter here.
    return core_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
