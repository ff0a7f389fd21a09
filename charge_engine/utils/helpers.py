"""
helpers.py
-----------
🧰 Common utility functions for file handling and dataset shaping.

Purpose:
--------
Centralized helper methods used by the loaders, reports and scripts.
Includes:
- JSON read/write
- Default meter-charge dataset
- Dataset grouping for display

Dependencies:
-------------
- json
- charge_engine.utils.logger

Usage Example:
--------------
from charge_engine.utils.helpers import read_json
config = read_json("data/samples/water_bill.json")
"""

import os
import json
from typing import Dict, List

from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)


# ----------------------------------------------------------------------
# 1️⃣ JSON File Handlers
# ----------------------------------------------------------------------
def read_json(file_path: str):
    """
    Reads a JSON file and returns the decoded object.

    Errors are logged and re-raised so callers can decide how to degrade.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"📜 Loaded JSON file: {file_path}")
        return data
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"❌ Failed to read JSON {file_path}: {e}")
        raise


def save_json(data, file_path: str):
    """
    Saves a JSON-serializable object, creating the parent folder if needed.
    """
    folder = os.path.dirname(file_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)
    logger.info(f"💾 JSON saved successfully: {file_path}")


# ----------------------------------------------------------------------
# 2️⃣ Dataset Utilities
# ----------------------------------------------------------------------
def sample_dataset() -> List[Dict]:
    """
    Default dataset shipped with the bill editor: monthly meter charges
    by meter size.
    """
    return [
        {"group": "Meter Charge", "name": '1/2" or 13mm', "value": 1.50},
        {"group": "Meter Charge", "name": '3/4" or 20mm', "value": 2.00},
        {"group": "Meter Charge", "name": '1" or 25mm', "value": 3.00},
        {"group": "Meter Charge", "name": '1 1/4" or 40mm', "value": 4.00},
        {"group": "Meter Charge", "name": '2" or 50mm', "value": 6.00},
        {"group": "Meter Charge", "name": '3" or 75mm', "value": 10.00},
    ]


def group_dataset(dataset) -> Dict[str, list]:
    """
    Groups dataset entries by their group name, preserving first-seen order
    of groups and the original order of entries inside each group.
    """
    grouped: Dict[str, list] = {}
    for entry in dataset:
        group = entry["group"] if isinstance(entry, dict) else entry.group
        grouped.setdefault(group, []).append(entry)
    return grouped
