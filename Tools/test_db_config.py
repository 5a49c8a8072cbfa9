from unittest.mock import MagicMock

import pytest

from db_config import DEFAULT_PORT, ConfigError, DriverHandle, Neo4jConfig

ENV = {"NEO4J_URI": "bolt://neo4j-db:7687", "NEO4J_USER": "neo4j", "NEO4J_PASSWORD": "password"}


def make_handle():
    factory = MagicMock()
    handle = DriverHandle(Neo4jConfig.from_env(ENV), driver_factory=factory)
    return handle, factory


def test_config_from_env():
    config = Neo4jConfig.from_env(dict(ENV, NEO4J_DATABASE="graph", SAGE_PORT="9000"))
    assert config.uri == "bolt://neo4j-db:7687"
    assert config.user == "neo4j"
    assert config.password == "password"
    assert config.database == "graph"
    assert config.port == 9000


def test_config_defaults():
    config = Neo4jConfig.from_env(ENV)
    assert config.database is None
    assert config.host == "0.0.0.0"
    assert config.port == DEFAULT_PORT


@pytest.mark.parametrize("missing", ["NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD"])
def test_missing_required_value_is_fatal(missing):
    env = {k: v for k, v in ENV.items() if k != missing}
    with pytest.raises(ConfigError, match=missing):
        Neo4jConfig.from_env(env)


def test_empty_required_value_counts_as_missing():
    with pytest.raises(ConfigError, match="NEO4J_PASSWORD"):
        Neo4jConfig.from_env(dict(ENV, NEO4J_PASSWORD=""))


def test_bad_port_is_config_error():
    with pytest.raises(ConfigError, match="SAGE_PORT"):
        Neo4jConfig.from_env(dict(ENV, SAGE_PORT="eighty"))


def test_driver_created_lazily_and_reused():
    handle, factory = make_handle()
    assert handle.closed
    factory.assert_not_called()

    first = handle.get_driver()
    second = handle.get_driver()

    assert first is second
    factory.assert_called_once_with("bolt://neo4j-db:7687", auth=("neo4j", "password"))
    assert not handle.closed


def test_session_uses_configured_database():
    factory = MagicMock()
    handle = DriverHandle(Neo4jConfig.from_env(dict(ENV, NEO4J_DATABASE="graph")), driver_factory=factory)

    handle.session()

    factory.return_value.session.assert_called_once_with(database="graph")


def test_close_twice_is_safe():
    handle, factory = make_handle()
    driver = handle.get_driver()

    handle.close()
    handle.close()

    driver.close.assert_called_once_with()
    assert handle.closed


def test_close_without_driver_is_noop():
    handle, factory = make_handle()
    handle.close()
    factory.assert_not_called()


def test_reopens_after_close():
    handle, factory = make_handle()
    handle.get_driver()
    handle.close()
    handle.get_driver()
    assert factory.call_count == 2
