import csv
import os

def load_dotenv(path: str = ".env"):
    """Load KEY=VALUE lines from path into os.environ. Existing variables win."""
    if not os.path.exists(path):
        return
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export "):].strip()
            value = value.strip().strip('"').strip("'")
            os.environ.setdefault(key, value)

def load_topics(csv_path: str):
    """
    Reads joke topics from csv_path. Uses the first column whose name
    mentions 'topic' (or 'prompt', 'subject'), else the first column.
    Blank rows are skipped; duplicates are kept.
    """
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    topics = []
    with open(csv_path, mode='r', encoding='utf-8-sig') as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []
        # Search for keyword-matching column
        target_col = None
        keywords = ['topic', 'prompt', 'subject']
        for col in fieldnames:
            if any(kw in col.lower() for kw in keywords):
                target_col = col
                break

        # Default to first column if no match found
        if not target_col and fieldnames:
            target_col = fieldnames[0]

        for row in reader:
            content = row.get(target_col)
            if content and content.strip():
                topics.append(content.strip())

    return topics
