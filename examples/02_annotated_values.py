"""
Annotated Values Example
========================

This example shows values whose annotation carries meaning:

1. An annotation selecting a newtype variant: (ms)250 vs (s)1.5
2. An annotation captured next to its value
3. Properties kept in order, duplicates included

The document below corresponds to this KDL:

    timeouts connect=(ms)250 read=(s)1.5
    limits body=(bytes)1048576
    headers accept="text/html" accept="application/json" host="example.org"
"""

from dataclasses import dataclass

from kaydle import Record, document, from_document, magics, node, value

# ============================================================================
# Step 1: Define the Target Types
# ============================================================================


class Ms(Record, form="newtype"):
    amount: int


class S(Record, form="newtype"):
    amount: float


type Duration = Ms | S


@dataclass
class Sized:
    unit: str = magics.annotation()
    amount: int


class Timeouts(Record):
    connect: Duration
    read: Duration


class Headers(Record):
    pairs: list[tuple[str, str]] = magics.properties(default_factory=list)


class Limits(Record):
    body: Sized


class Settings(Record):
    timeouts: Timeouts
    limits: Limits
    headers: Headers


# ============================================================================
# Step 2: Build the Document
# ============================================================================


def build_document():
    return document(
        node("timeouts", props={"connect": value(250, "ms"), "read": value(1.5, "s")}),
        node("limits", props={"body": value(1048576, "bytes")}),
        node(
            "headers",
            props=[
                ("accept", "text/html"),
                ("accept", "application/json"),
                ("host", "example.org"),
            ],
        ),
    )


def main():
    settings = from_document(build_document(), Settings)
    print(f"connect: {settings.timeouts.connect}")
    print(f"read:    {settings.timeouts.read}")
    print(f"limit:   {settings.limits.body.amount} {settings.limits.body.unit}")
    for key, header in settings.headers.pairs:
        print(f"header:  {key}: {header}")


if __name__ == "__main__":
    main()
