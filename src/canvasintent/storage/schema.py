"""Field names of the JSON Canvas format."""

# Node "type" values mapped to their payload field
NODE_PAYLOAD_FIELDS = {
    "text": "text",
    "file": "file",
    "link": "url",
    "group": "label",
}

# Every node must carry these
NODE_REQUIRED_FIELDS = ("id", "x", "y", "width", "height")

# Every edge must carry these
EDGE_REQUIRED_FIELDS = ("id", "fromNode", "toNode")
