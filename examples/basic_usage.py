"""
Basic attrlimit usage example.

This example demonstrates:
- Building a filter from configuration
- Filtering with a static policy and value constraints
- Filtering with a relying party metadata allow-list and alias table
- The conditional release rule
"""

import logging

from attrlimit import FilterConfig, FilterEngine, RequestContext
from attrlimit.aliases import DictAliasMapLoader
from attrlimit.metrics import FilterMetrics


OID2NAME = {
    "urn:oid:2.5.4.3": "cn",
    "urn:oid:0.9.2342.19200300.100.1.3": "mail",
}


def sample_attributes():
    return {
        "cn": ["Jane Doe"],
        "mail": ["jane@example.org"],
        "eduPersonAffiliation": ["member", "staff", "student"],
        "eduPersonTargetedID": ["abc123"],
        "idpEntityId": ["https://idp.example.org"],
    }


def basic_example():
    """Demonstrate basic attrlimit usage"""
    print("Basic attrlimit Example")
    print("=" * 30)

    # 1. Create configuration
    config = FilterConfig.from_dict({
        "policy": [
            "cn",
            "mail",
            {"eduPersonAffiliation": {"ignoreCase": True, 0: "Member", 1: "Staff"}},
        ],
        "conditional_release": {
            "relying_parties": ["https://sp.example.org"],
            "identity_sources": ["https://idp.example.org"],
            "attribute": "eduPersonTargetedID",
        },
    })

    # 2. Create filter engine
    metrics = FilterMetrics()
    engine = FilterEngine.from_config(
        config, loader=DictAliasMapLoader({"oid2name": OID2NAME}), metrics=metrics
    )
    print("✓ Created filter engine")

    # 3. Static policy only
    attributes = sample_attributes()
    engine.process(attributes, RequestContext(relying_party="https://other-sp.example.org"))
    print(f"✓ Static policy: {attributes}")

    # 4. Conditional release for a matching relying party
    attributes = sample_attributes()
    engine.process(attributes, RequestContext(relying_party="https://sp.example.org"))
    print(f"✓ Conditional release: {attributes}")

    # 5. Relying party metadata using OID attribute names
    attributes = sample_attributes()
    ctx = RequestContext(
        relying_party="https://other-sp.example.org",
        destination={"attributes": ["urn:oid:2.5.4.3"]},
    )
    engine.process(attributes, ctx)
    print(f"✓ Metadata policy: {attributes}")

    print(metrics.export().decode())


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    basic_example()
