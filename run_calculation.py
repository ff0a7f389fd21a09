#!/usr/bin/env python
"""Calculate a bill from a JSON configuration and print the charges"""

import argparse
import sys

from charge_engine.loaders import ConfigurationError, load_configuration_file
from charge_engine.reporting import describe_rate_table, render_report, save_report
from charge_engine.utils.data_paths import get_file_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "config",
        nargs="?",
        default=get_file_path("samples", "water_bill.json"),
        help="Bill configuration JSON (engine or editor layout)",
    )
    parser.add_argument("--tables", action="store_true", help="Also print the rate tables")
    parser.add_argument("--csv", metavar="FILENAME", help="Export the result to data/output/FILENAME")
    args = parser.parse_args(argv)

    try:
        config = load_configuration_file(args.config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        return 1

    if args.tables:
        for table in config.rate_tables:
            print(f"\n📋 {table.name}")
            print(describe_rate_table(table).to_string(index=False))
        print()

    result = config.calculate()
    print(render_report(result))

    if args.csv:
        path = save_report(result, args.csv)
        print(f"\n💾 Saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
