from .envfile import EnvFileStep, load_env_file, write_env_file
from .sqlite import TestDatabaseStep, create_db_if_absent

__all__ = [
    "EnvFileStep",
    "TestDatabaseStep",
    "create_db_if_absent",
    "load_env_file",
    "write_env_file",
]
