"""Shared fixtures for dialplan tests."""

import json

import pytest

SAMPLE_RULES = {
    "routes": [
        {
            "id": "toll-free",
            "organization_id": "org1",
            "direction": "inbound",
            "location": "ivr.example.com",
            "receiver_address": "1800XXXXXXX",
        },
        {
            "id": "dc-local",
            "organization_id": "org1",
            "direction": "inbound",
            "location": "pbx.example.com",
            "sender_address": "1202*",
            "receiver_address": "1202XXXXXXX",
        },
        {
            "id": "seven-digit",
            "organization_id": "org1",
            "direction": "outbound",
            "location": "gw1.example.com",
            "receiver_address": "NxxXXXX",
            "transform": "+1 (202) $$$-$$$$",
        },
        {
            "id": "catch-all",
            "organization_id": "org1",
            "direction": "inbound",
            "location": "voicemail.example.com",
            "receiver_address": "*",
        },
    ]
}


@pytest.fixture
def sample_rules():
    return json.loads(json.dumps(SAMPLE_RULES))


@pytest.fixture
def rules_file(tmp_path, sample_rules):
    path = tmp_path / "dialplan.json"
    path.write_text(json.dumps(sample_rules), encoding="utf-8")
    return path
