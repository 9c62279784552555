"""BubbleMap launcher.

Runs the dependency preflight before importing GTK-related modules, which
gives clearer error messages on machines missing the GTK stack.
"""

from __future__ import annotations


def main() -> int:
    from bubblemap.preflight import run_preflight_or_die

    run_preflight_or_die(check_deps=True)

    from bubblemap.app import main as app_main

    return int(app_main())


if __name__ == "__main__":
    raise SystemExit(main())
