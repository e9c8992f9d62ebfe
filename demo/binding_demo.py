"""
Binding configuration maps onto typed objects, with diagnostics.
"""

import logging
from dataclasses import dataclass, field

from izumi.binder import Binder, MapValueSource, resolve_dotted


@dataclass
class DatabaseConfig:
    host: str
    port: int = 5432
    user: str | None = None


class ServerConfig:
    workers: int
    debug: bool

    def __init__(self, name: str, host: str = "0.0.0.0"):
        self.name = name
        self.host = host
        self.workers = 1
        self.debug = False

    @classmethod
    def local(cls, name: str) -> "ServerConfig":
        return cls(name, "127.0.0.1")


@dataclass
class Limits:
    requests: int
    tags: list[str] = field(default_factory=list)


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    config = {
        "database": {"host": "db.internal", "port": 6543},
        "server": {"name": "api", "workers": 4, "debgu": True},
        "limits": {"requests": "many"},
    }
    binder = Binder()

    print("=== Dotted lookups ===")
    source = MapValueSource(config)
    print(f"database.port = {resolve_dotted('database.port', int, source)}")
    print(f"database.pool = {resolve_dotted('database.pool', int, source)}")

    print("\n=== Clean bind ===")
    database = binder.bind(DatabaseConfig, config["database"])
    print(database)

    print("\n=== Properties, defaults and unmatched entries ===")
    plan = binder.plan_at("server", ServerConfig, config)
    for line in plan.describe():
        print(f"  {line}")
    server = plan.execute()
    print(f"{server.name} on {server.host} with {server.workers} workers")

    print("\n=== Factory function ===")
    local = binder.bind(ServerConfig, {"name": "dev"}, using=ServerConfig.local)
    print(f"{local.name} on {local.host}")

    print("\n=== Errors block execution ===")
    limits_plan = binder.plan_at("limits", Limits, config)
    print(f"has_errors={limits_plan.has_errors} error_count={limits_plan.error_count}")
    for line in limits_plan.describe():
        print(f"  {line}")

    print("\n=== Cache ===")
    again = binder.plan_at("server", ServerConfig, config)
    print(f"same plan instance: {again is plan}")
    print(binder.cache.stats())


if __name__ == "__main__":
    main()
