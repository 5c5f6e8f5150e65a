"""Clients for MindsDB objects (databases, projects, tables, models, ...)."""

from .agents import Agent, AgentCompletion, AgentsClient
from .base import RestResourceClient, SqlResourceClient
from .callbacks import Callback, CallbacksClient
from .databases import Database, DatabasesClient
from .jobs import Job, JobsClient
from .knowledge_bases import KnowledgeBase, KnowledgeBasesClient
from .ml_engines import MLEngine, MLEnginesClient
from .models import (
    BatchQueryOptions,
    FinetuneOptions,
    Model,
    ModelPrediction,
    ModelsClient,
    QueryOptions,
    TrainingOptions,
)
from .projects import Project, ProjectsClient
from .skills import Skill, SkillsClient
from .tables import Table, TablesClient
from .views import View, ViewsClient

__all__ = [
    "RestResourceClient",
    "SqlResourceClient",
    # Agents
    "Agent",
    "AgentCompletion",
    "AgentsClient",
    # Callbacks
    "Callback",
    "CallbacksClient",
    # Databases
    "Database",
    "DatabasesClient",
    # Jobs
    "Job",
    "JobsClient",
    # Knowledge bases
    "KnowledgeBase",
    "KnowledgeBasesClient",
    # ML engines
    "MLEngine",
    "MLEnginesClient",
    # Models
    "BatchQueryOptions",
    "FinetuneOptions",
    "Model",
    "ModelPrediction",
    "ModelsClient",
    "QueryOptions",
    "TrainingOptions",
    # Projects
    "Project",
    "ProjectsClient",
    # Skills
    "Skill",
    "SkillsClient",
    # Tables
    "Table",
    "TablesClient",
    # Views
    "View",
    "ViewsClient",
]
