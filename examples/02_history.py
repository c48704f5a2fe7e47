"""
Read the local upload history
"""
from pinme import PinmeClient


def main():
    pinme = PinmeClient()
    
    records = pinme.history(limit=5)
    for record in records:
        kind = "dir " if record.is_directory else "file"
        print(f"[{record.human_date}] {kind} {record.display_name} -> {record.content_hash}")
    
    stats = pinme.history_stats(records)
    print(f"{stats.total_uploads} uploads, {stats.total_files} files, {stats.total_size} bytes")


if __name__ == "__main__":
    main()
