import sys
import requests

# ----------------------------
# CONFIG
# ----------------------------
TIMEOUT_SECONDS = 15


# ----------------------------
# Read an export from disk or the web
# ----------------------------
def fetch_export(source):
    if source.startswith(("http://", "https://")):
        print(f"Downloading progress from {source}...")
        response = requests.get(source, timeout=TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.text
    with open(source, "r", encoding="utf-8") as f:
        return f.read()


# ----------------------------
# Replace stored progress with the export
# ----------------------------
def import_export(text, store):
    if not store.import_data(text):
        print("Import failed: file is not a progress export.")
        return False
    print(f"Imported {len(store.completed_patterns)} completed patterns.")
    return True


# ----------------------------
# Main
# ----------------------------
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("usage: python importer.py <export.json | url>")
        return 2

    # Importing the app sets up the database and the store
    from app import app, progress

    text = fetch_export(argv[0])
    with app.app_context():
        ok = import_export(text, progress)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
