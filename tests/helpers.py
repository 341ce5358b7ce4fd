import re
import json

SSE_EVENT_PATTERN = re.compile(r'event: (\w+)\ndata: ({.*?})\n\n')


def parse_sse_events(body):
    """Return (event_type, data) pairs in the order they appear in an SSE body."""
    events = []
    for match in SSE_EVENT_PATTERN.finditer(body):
        try:
            events.append((match.group(1), json.loads(match.group(2))))
        except json.JSONDecodeError:
            pass
    return events

def assert_sse_event(body, event_type, **expected_data):
    """
    Assert that an SSE event with the given type and expected data exists in the body.
    Checks all occurrences of the event type.
    """
    for found_type, data in parse_sse_events(body):
        if found_type != event_type:
            continue
        if all(key in data and data[key] == value for key, value in expected_data.items()):
            return

    assert False, f"No '{event_type}' event found with all expected data: {expected_data} in SSE body:\n{body}"

def collect_tokens(body):
    """Concatenate the content of every token event."""
    return "".join(data.get("content", "") for event_type, data in parse_sse_events(body) if event_type == "token")

def assert_stage_order(body, *stages):
    """Assert status stages appear in the given order."""
    seen = [data.get("stage") for event_type, data in parse_sse_events(body) if event_type == "status"]
    positions = [seen.index(stage) for stage in stages]
    assert positions == sorted(positions), f"Stages out of order: {seen}"
