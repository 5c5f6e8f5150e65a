"""MindsDB client: work with a MindsDB instance over its HTTP API.

This package provides:
- Session authentication for MindsDB Cloud and managed instances, with
  transparent reauthentication when the session expires
- Raw SQL execution with normalized results
- Typed clients for databases, projects, tables, views, models, jobs,
  ML engines, knowledge bases, agents, skills and callbacks
- Safe identifier and value escaping for building statements
"""

__version__ = "1.0.0"

from .config import settings
from .connection import Connection, connect
from .sql import QueryResult, ResultType, SqlExecutor, SqlRestApiClient
from .transport import HttpAuthenticator, HttpTransport
from .resources import (
    Agent,
    AgentCompletion,
    BatchQueryOptions,
    Callback,
    Database,
    FinetuneOptions,
    Job,
    KnowledgeBase,
    MLEngine,
    Model,
    ModelPrediction,
    Project,
    QueryOptions,
    Skill,
    Table,
    TrainingOptions,
    View,
)
from .utils import (
    AuthenticationError,
    ConfigurationError,
    MindsDbError,
    QueryError,
    escape_identifier,
    escape_value,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "settings",
    # Connection
    "Connection",
    "connect",
    # SQL
    "QueryResult",
    "ResultType",
    "SqlExecutor",
    "SqlRestApiClient",
    # Transport
    "HttpAuthenticator",
    "HttpTransport",
    # Resources
    "Agent",
    "AgentCompletion",
    "BatchQueryOptions",
    "Callback",
    "Database",
    "FinetuneOptions",
    "Job",
    "KnowledgeBase",
    "MLEngine",
    "Model",
    "ModelPrediction",
    "Project",
    "QueryOptions",
    "Skill",
    "Table",
    "TrainingOptions",
    "View",
    # Errors
    "AuthenticationError",
    "ConfigurationError",
    "MindsDbError",
    "QueryError",
    # Escaping
    "escape_identifier",
    "escape_value",
]
