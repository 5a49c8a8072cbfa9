import math
import sys
from collections.abc import Mapping
from typing import NamedTuple

from neo4j.exceptions import DriverError, Neo4jError
from neo4j.graph import Node, Path, Relationship

from schema_synth import PropertyIndex, count_types, index_properties

# --- INTROSPECTION QUERIES ---
NODE_COUNTS_QUERY = """
MATCH (n)
WITH labels(n) as labels
UNWIND labels as label
RETURN label, count(*) as count
ORDER BY count DESC
"""

NODE_PROPERTIES_QUERY = """
MATCH (n)
WITH labels(n) as labels, keys(n) as keys
UNWIND labels as label
UNWIND keys as key
RETURN label, collect(DISTINCT key) as properties
"""

REL_COUNTS_QUERY = """
MATCH ()-[r]->()
WITH type(r) as relType
RETURN relType, count(*) as count
ORDER BY count DESC
"""

REL_PROPERTIES_QUERY = """
MATCH ()-[r]->()
WITH type(r) as relType, keys(r) as keys
UNWIND keys as key
RETURN relType, collect(DISTINCT key) as properties
"""

STORE_ERRORS = (Neo4jError, DriverError)


class GraphStoreError(RuntimeError):
    """A store-side failure. The driver exception is kept as `cause`."""

    def __init__(self, message: str, cause: BaseException = None):
        super().__init__(message)
        self.cause = cause


class Introspection(NamedTuple):
    node_counts: list
    node_properties: PropertyIndex
    rel_counts: list
    rel_properties: PropertyIndex


def normalize_params(value):
    """
    Floors every float in a parameter tree to an int.
    Cypher treats integer and float values differently (LIMIT/SKIP only take
    integers), so numbers coming from JSON clients are sent as integers.
    Mappings and lists are walked recursively, everything else is left alone.
    """
    if isinstance(value, Mapping):
        return {key: normalize_params(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_params(item) for item in value]
    if isinstance(value, float) and math.isfinite(value):
        return math.floor(value)
    return value


def to_plain(value):
    """
    Converts a result value into plain data.
    Nodes keep their labels and element id, relationships their type and
    endpoints, paths become their node and relationship lists.
    """
    if isinstance(value, Node):
        return {
            "elementId": value.element_id,
            "labels": sorted(value.labels),
            "properties": {k: to_plain(v) for k, v in value.items()},
        }
    if isinstance(value, Relationship):
        start, end = value.start_node, value.end_node
        return {
            "elementId": value.element_id,
            "type": value.type,
            "startNodeElementId": start.element_id if start is not None else None,
            "endNodeElementId": end.element_id if end is not None else None,
            "properties": {k: to_plain(v) for k, v in value.items()},
        }
    if isinstance(value, Path):
        return {
            "nodes": [to_plain(node) for node in value.nodes],
            "relationships": [to_plain(rel) for rel in value.relationships],
        }
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


class GraphStore:
    def __init__(self, handle):
        self.handle = handle

    def verify_connectivity(self):
        try:
            self.handle.verify_connectivity()
        except STORE_ERRORS as e:
            print(f"❌ DB: Neo4j connection verification failed: {e}", file=sys.stderr)
            raise GraphStoreError(f"Neo4j connection failed: {e}", e) from e

    def introspect(self) -> Introspection:
        """Reads label/relationship counts and property keys in a single session."""
        try:
            with self.handle.session() as session:
                node_counts = count_types(session.run(NODE_COUNTS_QUERY), "label")
                node_properties = index_properties(session.run(NODE_PROPERTIES_QUERY), "label", node_counts)
                rel_counts = count_types(session.run(REL_COUNTS_QUERY), "relType")
                rel_properties = index_properties(session.run(REL_PROPERTIES_QUERY), "relType", rel_counts)
        except STORE_ERRORS as e:
            print(f"❌ Error fetching Neo4j schema: {e}", file=sys.stderr)
            raise GraphStoreError(f"Failed to fetch Neo4j schema: {e}", e) from e

        return Introspection(node_counts, node_properties, rel_counts, rel_properties)

    def run_query(self, query: str, params=None) -> list:
        params = normalize_params(params or {})
        print(f"⚙️  Executing Cypher: {query} with params: {params}", file=sys.stderr)
        try:
            with self.handle.session() as session:
                records = [
                    {key: to_plain(value) for key, value in record.items()}
                    for record in session.run(query, params)
                ]
        except STORE_ERRORS as e:
            print(f"❌ Error executing Cypher query: {query}: {e}", file=sys.stderr)
            raise GraphStoreError(f"Failed to execute Cypher query: {e}", e) from e

        print(f"✅ Cypher query executed. Records returned: {len(records)}", file=sys.stderr)
        return records
