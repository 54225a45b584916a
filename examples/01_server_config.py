"""
Server Configuration Example
============================

This example reads a small server configuration into typed records.
It covers:

1. Structs read from properties or from children
2. Sequences of named nodes
3. Magic fields capturing the node name and its children
4. Enums selected by node name
5. Error paths pointing at the offending node

The document below corresponds to this KDL:

    title "edge"
    listeners {
        http port=80
        https port=443 {
            certificate "/etc/tls/edge.pem"
        }
    }
    routes {
        static path="/assets" root="/srv/www"
        proxy path="/api" upstream="http://127.0.0.1:9000"
        redirect path="/old" to="/new"
    }
"""

import logging

from kaydle import DeserializeError, Record, document, from_document, magics, node

# ============================================================================
# Step 1: Define the Target Records
# ============================================================================


class Listener(Record):
    """A listening socket, named by protocol."""

    protocol: str = magics.name()
    port: int
    tls: "Tls | None" = magics.children(default=None)


class Tls(Record):
    certificate: str


class Static(Record, tag="static"):
    path: str
    root: str


class Proxy(Record, tag="proxy"):
    path: str
    upstream: str


class Redirect(Record, tag="redirect"):
    path: str
    to: str


type Route = Static | Proxy | Redirect


class Config(Record):
    title: str
    listeners: list[Listener]
    routes: list[Route]


# ============================================================================
# Step 2: Build the Document
# ============================================================================


def build_document():
    return document(
        node("title", "edge"),
        node(
            "listeners",
            children=[
                node("http", props={"port": 80}),
                node(
                    "https",
                    props={"port": 443},
                    children=[node("certificate", "/etc/tls/edge.pem")],
                ),
            ],
        ),
        node(
            "routes",
            children=[
                node("static", props={"path": "/assets", "root": "/srv/www"}),
                node("proxy", props={"path": "/api", "upstream": "http://127.0.0.1:9000"}),
                node("redirect", props={"path": "/old", "to": "/new"}),
            ],
        ),
    )


# ============================================================================
# Examples
# ============================================================================


def example_valid_configuration():
    print("=" * 70)
    print("Valid configuration")
    print("=" * 70)

    config = from_document(build_document(), Config)
    print(f"title: {config.title}")
    for listener in config.listeners:
        print(f"  {listener.protocol}: {listener.port} tls={listener.tls}")
    for route in config.routes:
        print(f"  {type(route).__name__}: {route}")
    print()


def example_error_path():
    print("=" * 70)
    print("Invalid configuration")
    print("=" * 70)

    broken = document(
        node("title", "edge"),
        node("listeners", children=[node("http", props={"port": "eighty"})]),
        node("routes", children=[]),
    )
    try:
        from_document(broken, Config)
    except DeserializeError as err:
        print(f"error: {err}")
    print()


def main():
    logging.basicConfig(level=logging.INFO)
    example_valid_configuration()
    example_error_path()


if __name__ == "__main__":
    main()
