"""
Manual check for ccusage discovery.
Run this to see which strategy reaches the tool and what block it reports.

Expected behavior:
- Prints the strategy that worked and the active block, if any
- With --debug, also prints the environment report shown by "Debug Info"
"""

import sys
import os
import logging

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from packages.core.usage.debug_report import build_debug_report
from packages.core.usage.presentation import build_menu, format_cost
from packages.core.usage.cache import SessionCache
from packages.core.usage.prober import CommandProber

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)

def main():
    print("=" * 60)
    print("ccusage probe")
    print("=" * 60)

    prober = CommandProber()
    result = prober.probe()

    if not result.tool_available:
        print("ccusage could not be reached with any strategy")
    else:
        print(f"Reached via: {result.strategy.description}")
        if result.interval is None:
            print("No active block")
        else:
            block = result.interval
            print(f"Active block {block.id}: {format_cost(block.cost_usd)}")
            print(f"  {block.start_time} -> {block.end_time}")
            print(f"  models: {', '.join(block.models) or '-'}")

    cache = SessionCache()
    cache.replace(result.interval, result.tool_available)
    print("-" * 60)
    for section in build_menu(cache.snapshot()).sections:
        for item in section:
            marker = " " if item.enabled else "~"
            print(f"{marker} {item.label}")
        print("-" * 60)

    if "--debug" in sys.argv[1:]:
        print(build_debug_report(prober.extended_path))

    return 0 if result.tool_available else 1

if __name__ == "__main__":
    sys.exit(main())
