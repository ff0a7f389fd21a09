"""
data_paths.py
--------------
Centralized file-path management utility.

📍 Purpose:
This module standardizes where sample configurations and exported
reports are stored, so scripts import these paths instead of
hard-coding directories.

Example:
    from charge_engine.utils.data_paths import SAMPLES_DIR, get_file_path
"""

import os

# ---------------------------------------------------------------------
# 1️⃣  Define the root 'data' directory relative to the project
# ---------------------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))
DATA_DIR = os.path.join(BASE_DIR, "data")

# ---------------------------------------------------------------------
# 2️⃣  Sub-directories
# ---------------------------------------------------------------------
SAMPLES_DIR = os.path.join(DATA_DIR, "samples")  # Example bill configurations
OUTPUT_DIR = os.path.join(DATA_DIR, "output")    # Exported reports

FOLDERS = {
    "samples": SAMPLES_DIR,
    "output": OUTPUT_DIR,
}


# ---------------------------------------------------------------------
# 3️⃣  Helper function to build safe file paths
# ---------------------------------------------------------------------
def get_file_path(subdir: str, filename: str) -> str:
    """
    Returns a full path for a given filename inside one of the known sub-folders.
    Example: get_file_path("samples", "water_bill.json")
    """
    if subdir not in FOLDERS:
        raise ValueError(f"❌ Invalid subdir '{subdir}'. Must be one of: {list(FOLDERS.keys())}")

    return os.path.join(FOLDERS[subdir], filename)


def ensure_dir(subdir: str) -> str:
    """Create a known sub-folder if missing and return its path."""
    path = get_file_path(subdir, "")
    os.makedirs(path, exist_ok=True)
    return path


# ---------------------------------------------------------------------
# 4️⃣  Diagnostics (run this file directly to verify folder setup)
# ---------------------------------------------------------------------
if __name__ == "__main__":
    print("✅ Data path configuration loaded successfully!\n")
    print(f"Base Directory   : {BASE_DIR}")
    print(f"Data Directory   : {DATA_DIR}")
    print(f"Samples Folder   : {SAMPLES_DIR}")
    print(f"Output Folder    : {OUTPUT_DIR}")
