import os
import sys
from dataclasses import dataclass
from typing import Optional

from neo4j import GraphDatabase

# --- CONFIG ---
REQUIRED_ENV = ("NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD")
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


class ConfigError(RuntimeError):
    """Raised when required Neo4j connection settings are missing."""


@dataclass(frozen=True)
class Neo4jConfig:
    uri: str
    user: str
    password: str
    database: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ=None):
        """
        Reads connection details from the environment.
        NEO4J_URI, NEO4J_USER and NEO4J_PASSWORD are required.
        """
        env = os.environ if environ is None else environ
        missing = [key for key in REQUIRED_ENV if not env.get(key)]
        if missing:
            raise ConfigError(
                f"Missing Neo4j connection details in environment variables ({', '.join(missing)})"
            )

        port = env.get("SAGE_PORT") or str(DEFAULT_PORT)
        try:
            port = int(port)
        except ValueError:
            raise ConfigError(f"SAGE_PORT must be an integer, got {port!r}")

        return cls(
            uri=env["NEO4J_URI"],
            user=env["NEO4J_USER"],
            password=env["NEO4J_PASSWORD"],
            database=env.get("NEO4J_DATABASE") or None,
            host=env.get("SAGE_HOST") or DEFAULT_HOST,
            port=port,
        )


class DriverHandle:
    """
    Owns the single Neo4j driver for the lifetime of the process.
    The driver is created lazily on first use and reused afterwards.
    Built once at startup and passed to whoever needs the store.
    """

    def __init__(self, config: Neo4jConfig, driver_factory=GraphDatabase.driver):
        self.config = config
        self._driver_factory = driver_factory
        self._driver = None

    @property
    def closed(self) -> bool:
        return self._driver is None

    def get_driver(self):
        if self._driver is None:
            self._driver = self._driver_factory(
                self.config.uri, auth=(self.config.user, self.config.password)
            )
        return self._driver

    def session(self):
        return self.get_driver().session(database=self.config.database)

    def verify_connectivity(self):
        self.get_driver().verify_connectivity()
        print(f"✅ DB: Connected to {self.config.uri}", file=sys.stderr)

    def close(self):
        # Safe to call repeatedly and before the driver was ever created.
        if self._driver is None:
            return
        driver, self._driver = self._driver, None
        driver.close()
        print("🔌 DB: Neo4j driver closed.", file=sys.stderr)
