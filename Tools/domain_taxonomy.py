from types import MappingProxyType
from typing import NamedTuple, Tuple


class DomainTypes(NamedTuple):
    node_types: Tuple[str, ...]
    relationship_types: Tuple[str, ...]


# Hand-maintained: which labels and relationship types belong to each domain,
# whether or not any instance exists in the graph yet.
TAXONOMY = MappingProxyType({
    "code": DomainTypes(
        node_types=(
            "Codebase", "Package", "Directory", "File", "Module", "Namespace", "Class",
            "Interface", "Enum", "TypeAlias", "Function", "Method", "Constructor",
            "Property", "Variable", "Parameter", "JsxElement", "JsxAttribute", "Test",
            "Component", "Dependency", "TypeDefinition", "ASTNodeInfo", "InterfaceProperty",
            "VueComponent", "ComponentTemplate", "ComponentScript", "ComponentStyle",
            "Prop", "Emit", "ReactiveState", "Composable", "SassVariable", "SassMixin", "SassModule",
        ),
        relationship_types=(
            "IMPORTS", "IMPORTS_FROM_PACKAGE", "IMPORTS_TYPES", "IMPORTS_TYPES_FROM_PACKAGE",
            "EXPORTS_LOCAL", "EXPORTS_DEFAULT", "REEXPORTS", "REEXPORTS_FROM_PACKAGE",
            "REEXPORTS_ALL", "EXTENDS", "INTERFACE_EXTENDS", "IMPLEMENTS", "CALLS",
            "CONTAINS", "HAS_METHOD", "HAS_PARAMETER", "HAS_PROPERTY", "REFERENCES_TYPE",
            "REFERENCES_VARIABLE", "DEPENDS_ON", "IS_DECORATED_BY", "TESTS", "RENDERS",
            "USES_HOOK", "AST_PARENT_CHILD", "DEFINES_VARIABLE", "DEFINES_FUNCTION",
            "DEFINES_INTERFACE", "DEFINES_CLASS", "DEFINES_TYPE_ALIAS", "DEFINES_ENUM",
            "DEFINES_NAMESPACE", "DEFINES_MODULE", "DEFINES_COMPONENT", "DEFINES_VUE_COMPONENT",
            "PROVIDES_PROPS", "LISTENS_TO", "USES_SLOT", "USES_COMPOSABLE", "IMPORTS_AUTO",
            "REGISTERS_AUTO", "IMPORTS_SASS", "USES_VARIABLE", "INCLUDES_MIXIN",
        ),
    ),
    "mind": DomainTypes(
        node_types=(
            "Hypothesis", "Reflection", "Insight", "Question", "Decision", "Pattern",
            "Task", "Subtask", "Agent", "Verification", "Result", "Orientation",
        ),
        relationship_types=(
            "SUGGESTS", "BASED_ON", "LEADS_TO", "ANSWERS", "CONTRADICTS", "REFINES",
            "IDENTIFIES", "EVOLVES_TO", "APPLIES_TO", "IMPLEMENTS_DECISION", "ADDRESSES",
            "RESOLVES", "APPLIES", "MODIFIES", "TASK_DEPENDS_ON", "TASK_BLOCKED_BY",
            "DECOMPOSES_TO", "EXECUTED_BY", "VERIFIED_BY",
        ),
    ),
    "crypto": DomainTypes(
        node_types=(
            "Layer0", "Layer1", "Layer2", "Layer3", "Token", "InteroperabilitySolution", "Organization",
            "Event", "Person", "DApp", "Protocol", "Validator", "GovernanceStructure",
            "RegulatoryApproach", "TechnicalArchitecture", "UserDemographic",
            # L2 extension
            "L2Sequencer", "L2Validator", "L2DApp", "L2Bridge", "L2SecurityIncident",
        ),
        relationship_types=(
            "BUILDS_ON", "CONNECTS", "ISSUES", "DEVELOPS", "SUPPORTS", "BRIDGES", "PARTNERS_WITH",
            "COMPETES_WITH", "FORKED_FROM", "INVESTED_IN", "GOVERNS", "INFLUENCED_BY",
            "PARTICIPATES_IN_GOVERNANCE", "CONTRIBUTES_REVENUE_TO", "HAS_REGULATORY_APPROACH",
            "HAS_TECHNICAL_ARCHITECTURE", "HAS_USER_DEMOGRAPHIC", "PROVIDES_TECHNOLOGY", "RELATES_TO",
            # L2 extension
            "SECURES", "L2_BRIDGES", "HOSTS", "AUDITS", "UPGRADES",
        ),
    ),
    "media": DomainTypes(
        node_types=(
            "Artist", "Album", "Song", "Tour", "Residency", "Award", "Media", "RecordLabel",
            "Event", "Organization", "Product", "Location", "Genre", "LyricSection",
            "Annotation", "Theme", "LinguisticDevice", "Source",
        ),
        relationship_types=(
            "BORN_IN", "HAS_FAMILY_RELATIONSHIP", "RELEASED", "CONTAINS", "HEADLINED",
            "SUPPORTED", "COLLABORATED_ON", "FEATURING", "WROTE", "PRODUCED",
            "SIGNED_WITH", "RELEASED_BY", "RECEIVED", "ACTED_IN", "VOICED_IN",
            "APPEARED_IN", "JUDGED", "HOSTED", "PERFORMED_AT", "INFLUENCED_BY",
            "HAS_GENRE", "ENDORSED", "LAUNCHED", "FOUNDED", "SUPPORTS",
            "AMBASSADOR_FOR", "HELD_IN", "MUSIC_VIDEO_FOR", "HAS_LYRICS",
            "IS_ANNOTATED_BY", "REFERENCES_SOURCE", "PROVIDED_BY_USER",
            "EXPLORES_THEME", "IDENTIFIES_THEME", "EMPLOYS_DEVICE", "IDENTIFIES_DEVICE",
        ),
    ),
})

KNOWN_DOMAINS = tuple(TAXONOMY)


def is_known_domain(name) -> bool:
    return isinstance(name, str) and name in TAXONOMY
