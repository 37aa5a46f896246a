import json
import pytest
from unittest.mock import patch, MagicMock
from scripts.seed_demo_form import main, DEMO_SCHEMA, KEY
from formflow.core.navigator import entry_node, next_node
from formflow.core.schema import parse_schema

@patch("scripts.seed_demo_form.Redis")
def test_seed_demo_form(mock_redis_cls):
    mock_redis = MagicMock()
    mock_redis_cls.from_url.return_value = mock_redis

    main()

    assert mock_redis.set.called
    args, _ = mock_redis.set.call_args
    assert args[0] == KEY

    saved = json.loads(args[1])
    assert saved["schema"] == DEMO_SCHEMA
    assert saved["title"] == "Demo Feedback Form"

def test_demo_schema_walks_to_end():
    s = parse_schema(DEMO_SCHEMA)
    path = [entry_node(s).id]
    while True:
        nxt = next_node(s, path[-1])
        if nxt is None:
            break
        path.append(nxt.id)
    assert path == ["start", "name", "rating", "done"]
