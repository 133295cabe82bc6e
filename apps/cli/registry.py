#!/usr/bin/env python3
"""blockprops CLI command registry."""

TOOLS = [
    {
        "module": "apps.cli.commands.analyze",
        "alias": "analyze",
        "desc": "Analyze shader pack block.properties against a block catalog",
        "usage": "blockprops analyze PACK [PACK ...] --catalog CATALOG.json [--scan-mode QUICK|DEEP] [--out-json PATH]",
        "type": "CLI",
    },
    {
        "module": "apps.cli.commands.doctor",
        "alias": "doctor",
        "desc": "Settings, catalog and directive environment health check",
        "usage": "blockprops doctor [--catalog PATH] [--config PATH]",
        "type": "CLI",
    },
    {
        "module": "devtools.serve_api",
        "alias": "web",
        "desc": "Start the analysis HTTP API (FastAPI + Uvicorn)",
        "usage": "blockprops web --catalog CATALOG.json [--host 127.0.0.1 --port 8000]",
        "type": "Dev",
    },
]


def get_tools():
    return TOOLS
