"""
Seed a small demo form into Redis so the actions endpoint can be tried without
the editor: GET /api/actions/demo. Idempotent; rerunning overwrites the form.
"""
import json
import os
import time
from redis import Redis

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
FORM_ID = os.getenv("DEMO_FORM_ID", "demo")
KEY = f"{os.getenv('FORM_KEY_PREFIX', 'form:')}{FORM_ID}"

DEMO_SCHEMA = {
    "nodes": [
        {"id": "start", "type": "start", "data": {"title": "Feedback", "description": "Two quick questions"}},
        {
            "id": "name",
            "type": "question",
            "data": {"questionText": "What is your name?", "questionType": "input", "validation": {"required": True}},
        },
        {
            "id": "rating",
            "type": "question",
            "data": {
                "questionText": "Would you recommend us?",
                "questionType": "choice",
                "options": [
                    {"id": "o1", "label": "Yes", "value": "yes"},
                    {"id": "o2", "label": "No", "value": "no"},
                ],
                "validation": {"required": True},
            },
        },
        {"id": "done", "type": "end", "data": {"label": "End", "message": "Thanks for the feedback!"}},
    ],
    "edges": [
        {"id": "e1", "source": "start", "target": "name"},
        {"id": "e2", "source": "name", "target": "rating"},
        {"id": "e3", "source": "rating", "target": "done"},
    ],
    "metadata": {"version": "1.0.0"},
}

def main():
    r = Redis.from_url(REDIS_URL, decode_responses=True)
    ids = [n["id"] for n in DEMO_SCHEMA["nodes"]]
    for e in DEMO_SCHEMA["edges"]:
        assert e["source"] in ids and e["target"] in ids, f"dangling edge: {e['id']}"
    now = int(time.time())
    record = {
        "id": FORM_ID,
        "title": "Demo Feedback Form",
        "description": "Seeded demo form",
        "creatorAddress": "demo",
        "schema": DEMO_SCHEMA,
        "isActive": True,
        "createdAtEpoch": now,
        "updatedAtEpoch": now,
    }
    r.set(KEY, json.dumps(record))
    print(f"OK: wrote {KEY} into {REDIS_URL}")

if __name__ == "__main__":
    main()
