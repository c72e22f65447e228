#!/usr/bin/env python3
"""Example demonstrating configuration resolution.

Shows the resolve-once, freeze-then-flow configuration: defaults, environment
variables, programmatic overrides and scoped configuration.
"""

import os

from potter_browser import config_scope, resolve_config


def main() -> None:
    print("=== Configuration Example ===\n")

    print("1. Defaults:")
    resolved = resolve_config()
    print(resolved.audit())
    print()

    print("2. Environment variables:")
    os.environ["POTTER_PAGE_SIZE"] = "50"
    try:
        resolved = resolve_config()
        print(f"   Page size: {resolved.page_size} ({resolved.origin['page_size']})")
    finally:
        del os.environ["POTTER_PAGE_SIZE"]
    print()

    print("3. Programmatic override:")
    resolved = resolve_config({"page_size": 5, "timeout": 10.0})
    frozen = resolved.to_frozen()
    print(f"   Page size: {frozen.page_size}")
    print(f"   Timeout: {frozen.timeout}s ({resolved.origin['timeout']})")
    print()

    print("4. Scoped configuration:")
    with config_scope(resolved.with_overrides(recommendation_page_size=3)):
        print(f"   Inside scope: {resolve_config().recommendation_page_size}")
    print(f"   Outside scope: {resolve_config().recommendation_page_size}")

    print("\n=== Configuration Example Complete ===")


if __name__ == "__main__":
    main()
