from mcp.server import Server
import mcp.types as types
from db_config import ConfigError, DriverHandle, Neo4jConfig
from domain_taxonomy import KNOWN_DOMAINS
from graph_store import GraphStore, GraphStoreError
from schema_synth import synthesize
import asyncio
import json
import sys

SERVER_NAME = "sage"
SERVER_VERSION = "1.0.0"


def _reply(payload: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=payload)],
        isError=is_error,
    )

def _failure(message: str) -> types.CallToolResult:
    return _reply(json.dumps({"success": False, "error": message}, ensure_ascii=False), is_error=True)

def _describe_domain(domain) -> str:
    if not domain:
        return ""
    if isinstance(domain, list):
        return f" for domains: {', '.join(map(str, domain))}"
    return f" for domain: {domain}"


# --- ROUTER OPERATIONS ---
def describe_schema(store: GraphStore, domain=None) -> types.CallToolResult:
    """
    Returns the graph schema as JSON text, optionally scoped to one or more domains.
    Any failure is reported as {"success": false, "error": ...} with isError set,
    instead of raised.
    """
    print(f"🔎 Tool 'get_graph_schema' called{_describe_domain(domain)}.", file=sys.stderr)
    try:
        live = store.introspect()
        schema = synthesize(live.node_counts, live.node_properties,
                            live.rel_counts, live.rel_properties, domain)
        payload = json.dumps(schema.to_dict(), ensure_ascii=False)
    except Exception as e:
        print(f"❌ Error executing 'get_graph_schema' tool: {e!r}", file=sys.stderr)
        return _failure(f"Error getting schema: {e}")

    print(f"✅ Retrieved Neo4j schema{_describe_domain(domain)}.", file=sys.stderr)
    return _reply(payload)

def run_query(store: GraphStore, query: str, params=None) -> types.CallToolResult:
    """Runs a Cypher query and returns the rows as JSON text."""
    print(f"🔎 Tool 'run_cypher_query' called with query: {query}", file=sys.stderr)
    try:
        records = store.run_query(query, params or {})
        # Temporal and spatial values have no JSON form; render them as strings.
        payload = json.dumps(records, indent=2, default=str, ensure_ascii=False)
    except Exception as e:
        print(f"❌ Error executing 'run_cypher_query' tool with query: {query}: {e!r}", file=sys.stderr)
        return _failure(f"Error running query: {e}")

    print(f"✅ Executed Cypher query: {query}", file=sys.stderr)
    return _reply(payload)


# --- TOOL DEFINITIONS ---
TOOLS = [
    types.Tool(
        name="get_graph_schema",
        description="Returns node labels, relationship types, their counts and property keys. "
                    "Optionally scoped to one or more domains; declared types missing from the graph are listed with count 0.",
        inputSchema={
            "type": "object",
            "properties": {
                "domain": {
                    "anyOf": [
                        {"type": "string"},
                        {"type": "array", "items": {"type": "string"}},
                    ],
                    "description": f"Optional domain to filter schema ({', '.join(KNOWN_DOMAINS)})",
                }
            },
        },
    ),
    types.Tool(
        name="run_cypher_query",
        description="Executes a Cypher query against the graph and returns the result rows as JSON.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The Cypher query string to execute."},
                "params": {"type": "object", "description": "Optional parameters object for the Cypher query."},
            },
            "required": ["query"],
        },
    ),
]

def _valid_domain_arg(domain) -> bool:
    if domain is None or isinstance(domain, str):
        return True
    return isinstance(domain, list) and all(isinstance(d, str) for d in domain)

async def dispatch(store: GraphStore, name: str, arguments: dict) -> types.CallToolResult:
    arguments = arguments or {}

    if name == "get_graph_schema":
        domain = arguments.get("domain")
        if not _valid_domain_arg(domain):
            return _failure("Error getting schema: domain must be a string or a list of strings")
        return describe_schema(store, domain)

    elif name == "run_cypher_query":
        query = arguments.get("query")
        params = arguments.get("params")
        if not isinstance(query, str) or not query.strip():
            return _failure("Error running query: query must be a non-empty string")
        if params is not None and not isinstance(params, dict):
            return _failure("Error running query: params must be an object")
        return run_query(store, query, params)

    return _failure(f"Error: Unknown tool {name}")


def create_server(store: GraphStore) -> Server:
    mcp = Server(SERVER_NAME, version=SERVER_VERSION)

    @mcp.list_tools()
    async def list_tools() -> list[types.Tool]:
        return TOOLS

    @mcp.call_tool()
    async def call_tool(name: str, arguments: dict) -> types.CallToolResult:
        return await dispatch(store, name, arguments)

    return mcp


# --- TRANSPORTS ---
async def run_stdio(mcp: Server):
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        print("🚀 Sage MCP Server connected via stdio and ready.", file=sys.stderr)
        await mcp.run(read_stream, write_stream, mcp.create_initialization_options())

def create_sse_app(mcp: Server, handle: DriverHandle):
    from mcp.server.sse import SseServerTransport
    from starlette.responses import Response

    sse = SseServerTransport("/messages")

    async def app(scope, receive, send):
        """Pure ASGI entrypoint for SSE support."""
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    handle.close()
                    await send({"type": "lifespan.shutdown.complete"})
                    return

        if scope["type"] == "http":
            path = scope["path"]
            if path == "/sse":
                async with sse.connect_sse(scope, receive, send) as (read_stream, write_stream):
                    await mcp.run(read_stream, write_stream, mcp.create_initialization_options())
                return
            if path.startswith("/messages"):
                await sse.handle_post_message(scope, receive, send)
                return
            response = Response("Not Found", status_code=404)
            await response(scope, receive, send)
            return

    return app


# --- SERVER ENTRYPOINT ---
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    print("🚀 Starting Sage MCP Server...", file=sys.stderr)

    try:
        config = Neo4jConfig.from_env()
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    handle = DriverHandle(config)
    store = GraphStore(handle)
    try:
        store.verify_connectivity()
    except GraphStoreError as e:
        print(f"❌ Failed to connect to Neo4j on startup. Exiting. {e}", file=sys.stderr)
        handle.close()
        sys.exit(1)

    mcp = create_server(store)
    try:
        if "--sse" in argv:
            import uvicorn

            print(f"🚀 Starting Sage MCP Server (SSE/ASGI) on port {config.port}...", file=sys.stderr)
            uvicorn.run(create_sse_app(mcp, handle), host=config.host, port=config.port, log_level="info")
        else:
            asyncio.run(run_stdio(mcp))
    except KeyboardInterrupt:
        pass
    finally:
        print("🛑 Shutting down Sage MCP Server...", file=sys.stderr)
        handle.close()


if __name__ == "__main__":
    main()
