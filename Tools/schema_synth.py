"""
Schema synthesis for get_graph_schema.

Merges what the graph reports about itself (labels, relationship types,
their counts and property keys) with the static domain taxonomy.
Without a domain the live schema is returned as-is. With one or more
domains the output is restricted to the taxonomy names of those domains,
and every declared name is present even if the graph has no instance of it
yet (count 0, no properties).
"""
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional

from domain_taxonomy import TAXONOMY, is_known_domain


class TypeCount(NamedTuple):
    type: str
    count: int


PropertyIndex = Dict[str, List[str]]


@dataclass
class SchemaDescriptor:
    node_types: List[TypeCount]
    node_properties: PropertyIndex
    relationship_types: List[TypeCount]
    relationship_properties: PropertyIndex
    domains: Optional[List[str]] = None

    def to_dict(self) -> dict:
        out = {}
        if self.domains is not None:
            out["domains"] = list(self.domains)
        out["nodeTypes"] = [tc._asdict() for tc in self.node_types]
        out["nodeProperties"] = {k: list(v) for k, v in self.node_properties.items()}
        out["relationshipTypes"] = [tc._asdict() for tc in self.relationship_types]
        out["relationshipProperties"] = {k: list(v) for k, v in self.relationship_properties.items()}
        return out


# --- INTROSPECTION NORMALIZATION ---

def count_types(rows, name_key: str) -> List[TypeCount]:
    """Turns (name, count) rows into TypeCounts, keeping the store's order."""
    return [TypeCount(row[name_key], int(row["count"])) for row in rows]


def index_properties(rows, name_key: str, type_counts: List[TypeCount]) -> PropertyIndex:
    """
    Builds a PropertyIndex from (name, properties) rows.

    Every counted type gets an entry, even types whose instances carry no
    properties at all (the property query yields no row for those).
    Rows for a type that was not counted are ignored so counts and
    properties always describe the same set of names.
    """
    index: PropertyIndex = {tc.type: [] for tc in type_counts}
    for row in rows:
        name = row[name_key]
        if name not in index:
            continue
        seen = index[name]
        for key in row["properties"] or []:
            if key not in seen:
                seen.append(key)
    return index


# --- SYNTHESIS ---

def requested_domains(domain) -> List[str]:
    """Normalizes the domain argument and drops unknown identifiers."""
    if domain is None:
        return []
    if isinstance(domain, str):
        domain = [domain]
    return [d for d in domain if is_known_domain(d)]


def _union(names_per_domain) -> List[str]:
    merged = {}
    for names in names_per_domain:
        for name in names:
            merged.setdefault(name, None)
    return list(merged)


def _scope_counts(live: List[TypeCount], names: List[str]) -> List[TypeCount]:
    wanted = set(names)
    scoped = [tc for tc in live if tc.type in wanted]
    present = {tc.type for tc in scoped}
    scoped.extend(TypeCount(name, 0) for name in names if name not in present)
    return scoped


def _scope_properties(live: PropertyIndex, names: List[str]) -> PropertyIndex:
    return {name: list(live.get(name, [])) for name in names}


def synthesize(node_counts, node_properties, rel_counts, rel_properties, domain=None) -> SchemaDescriptor:
    domains = requested_domains(domain)

    # Unknown or missing domains fall back to the full schema.
    if not domains:
        return SchemaDescriptor(
            node_types=list(node_counts),
            node_properties=dict(node_properties),
            relationship_types=list(rel_counts),
            relationship_properties=dict(rel_properties),
        )

    node_names = _union(TAXONOMY[d].node_types for d in domains)
    rel_names = _union(TAXONOMY[d].relationship_types for d in domains)

    return SchemaDescriptor(
        domains=domains,
        node_types=_scope_counts(node_counts, node_names),
        node_properties=_scope_properties(node_properties, node_names),
        relationship_types=_scope_counts(rel_counts, rel_names),
        relationship_properties=_scope_properties(rel_properties, rel_names),
    )
