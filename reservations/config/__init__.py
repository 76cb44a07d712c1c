"""
Reservations config: load from env.

Load from env: load_scheduling_config(), load_postgres_config().
"""
from reservations.config.postgres import PostgresConfig, load_postgres_config
from reservations.config.scheduling import SchedulingConfig, load_scheduling_config

__all__ = [
    "PostgresConfig",
    "load_postgres_config",
    "SchedulingConfig",
    "load_scheduling_config",
]
