"""
Reset ConcursoFlow by deleting its database.
This removes every exam, subject, cycle and study session.
"""

import os
from BackEnd.core.paths import db_path

def reset_all_data():
    """Delete the database file so the next start creates a fresh one."""
    db_file = db_path()

    if not db_file.exists():
        print("No database found. Nothing to reset.")
        return

    print(f"Found database at: {db_file}")
    confirm = input("Delete all exams, cycles and sessions? This cannot be undone. (yes/no): ")
    if confirm.lower() not in ['yes', 'y']:
        print("Reset cancelled.")
        return
    try:
        os.remove(db_file)
    except OSError as e:
        print(f"✗ Error deleting database: {e}")
        return
    print("✓ Database deleted successfully!")
    print("\nNext time you open the app, a fresh database will be created.")

if __name__ == "__main__":
    print("=" * 50)
    print("ConcursoFlow - Reset All Data")
    print("=" * 50)
    reset_all_data()
