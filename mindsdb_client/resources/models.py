"""Models: training, prediction and lifecycle management."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .base import SqlResourceClient
from ..utils import QueryError, escape_identifier, escape_value, setup_logger

logger = setup_logger(__name__)

WhereConditions = Union[str, List[str]]


@dataclass
class TrainingOptions:
    """Options used when training or retraining a model."""

    integration: Optional[str] = None
    select: Optional[str] = None
    # Time series only
    group_by: Optional[str] = None
    order_by: Optional[str] = None
    window: Optional[int] = None
    horizon: Optional[int] = None
    using: Dict[str, Any] = field(default_factory=dict)


@dataclass
class FinetuneOptions:
    """Options used when finetuning a model on new data."""

    integration: str
    select: Optional[str] = None
    using: Dict[str, Any] = field(default_factory=dict)


@dataclass
class QueryOptions:
    """Options used when asking a model for a single prediction.

    ``where`` is a single condition or a list of conditions joined with AND,
    e.g. ``['sqft = 823', 'location = "good"']``.
    """

    where: WhereConditions = field(default_factory=list)


@dataclass
class BatchQueryOptions(QueryOptions):
    """Options used for batch predictions joined against a data source.

    Conditions on the source data use the ``t`` alias, e.g. ``t.sqft > 500``.
    """

    join: str = ""
    limit: Optional[int] = None


@dataclass
class ModelPrediction:
    """A prediction returned by a model."""

    value: Any
    explain: Any = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Model:
    """A MindsDB model."""

    name: str
    project: str
    target_column: str
    status: Optional[str] = None
    update_status: Optional[str] = None
    version: int = 1
    accuracy: Optional[float] = None
    tag: Optional[str] = None
    active: Optional[bool] = None
    client: Optional["ModelsClient"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_row(cls, row: Dict[str, Any], client: Optional["ModelsClient"] = None) -> "Model":
        """Build a model from a row of the <project>.models table."""
        return cls(
            name=row.get("name"),
            project=row.get("project"),
            target_column=row.get("predict"),
            status=row.get("status"),
            update_status=row.get("update_status"),
            version=row.get("version") or 1,
            accuracy=row.get("accuracy"),
            tag=row.get("tag"),
            active=row.get("active"),
            client=client,
        )

    async def describe(self) -> List[Dict[str, Any]]:
        """Describe the features of this model."""
        return await self.client.describe_model(self.name, self.project)

    async def query(self, options: Optional[QueryOptions] = None) -> ModelPrediction:
        """Get a single prediction. Use batch_query for many predictions."""
        return await self.client.query_model(
            self.name, self.version, self.target_column, self.project, options or QueryOptions()
        )

    async def batch_query(self, options: BatchQueryOptions) -> List[ModelPrediction]:
        """Get predictions by joining this model with a data source."""
        return await self.client.batch_query_model(
            self.name, self.version, self.target_column, self.project, options
        )

    async def retrain(self, options: Optional[TrainingOptions] = None) -> None:
        """Retrain this model, optionally on new data or parameters."""
        await self.client.retrain_model(self.name, self.target_column, self.project, options)

    async def finetune(self, options: FinetuneOptions) -> None:
        """Finetune this model on new data."""
        await self.client.finetune_model(self.name, self.project, options)

    async def delete(self) -> None:
        """Delete this model."""
        await self.client.delete_model(self.name, self.project)


def make_where_clause(where: WhereConditions) -> str:
    """Build a WHERE clause from one condition or a list of conditions."""
    if isinstance(where, str):
        return f"WHERE {where}" if where else ""
    if not where:
        return ""
    lines = [f"WHERE {where[0]}"]
    lines.extend(f"AND {condition}" for condition in where[1:])
    return "\n".join(lines)


def make_using_clause(using: Optional[Dict[str, Any]]) -> str:
    """Build a USING clause from model and training parameters.

    Parameter values may be primitives or structured values (dicts, lists),
    which are rendered as JSON.
    """
    if not using:
        return ""
    params = [
        f"{escape_identifier(name)} = {escape_value(value)}"
        for name, value in using.items()
    ]
    return "USING\n" + ",\n".join(params)


def make_training_clauses(target_column: str, options: TrainingOptions) -> List[str]:
    """Clauses shared by CREATE MODEL and RETRAIN, in statement order."""
    clauses = []
    if options.integration:
        clauses.append(f"FROM {escape_identifier(options.integration)}")
    if options.select:
        clauses.append(f"({options.select})")
    clauses.append(f"PREDICT {escape_identifier(target_column)}")
    if options.group_by:
        clauses.append(f"GROUP BY {escape_identifier(options.group_by)}")
    if options.order_by:
        clauses.append(f"ORDER BY {escape_identifier(options.order_by)}")
    if options.window and options.horizon:
        clauses.append(
            f"WINDOW {escape_value(options.window)}\nHORIZON {escape_value(options.horizon)}"
        )
    using = make_using_clause(options.using)
    if using:
        clauses.append(using)
    return clauses


class ModelsClient(SqlResourceClient):
    """Trains, queries and manages models."""

    def _model_id(self, name: str, project: str) -> str:
        return f"{escape_identifier(project)}.{escape_identifier(name)}"

    async def get_model(
        self,
        name: str,
        project: str,
        version: Optional[int] = None,
    ) -> Optional[Model]:
        """Get a model by name.

        Args:
            name: Name of the model
            project: Project the model belongs to
            version: Specific model version (latest active if None)

        Returns:
            Matching model, or None if it doesn't exist
        """
        table = "models_versions" if version is not None else "models"
        statement = (
            f"SELECT * FROM {escape_identifier(project)}.{table} "
            f"WHERE name = {escape_value(name)}"
        )
        if version is not None:
            statement += f" AND version = {escape_value(int(version))}"

        result = await self._execute(statement)
        if not result.rows:
            return None
        return Model.from_row(result.rows[0], self)

    async def list_models(self, project: str) -> List[Model]:
        """Get all models of a project."""
        result = await self._execute(f"SELECT * FROM {escape_identifier(project)}.models")
        return [Model.from_row(row, self) for row in result.rows]

    async def describe_model(self, name: str, project: str) -> List[Dict[str, Any]]:
        """Describe the features of a model.

        Returns:
            One row per feature (column, type, encoder, role); empty if the
            model has no description
        """
        result = await self._execute(f"DESCRIBE {self._model_id(name, project)}.features")
        return result.rows

    async def delete_model(self, name: str, project: str) -> None:
        """Delete a model."""
        await self._execute(f"DROP MODEL {self._model_id(name, project)}")
        logger.info(f"Deleted model: {project}.{name}")

    async def query_model(
        self,
        name: str,
        version: int,
        target_column: str,
        project: str,
        options: QueryOptions,
    ) -> ModelPrediction:
        """Get a single prediction from a model.

        Raises:
            QueryError: If the statement fails or no prediction is returned
        """
        lines = [f"SELECT * FROM {self._model_id(name, project)}.{int(version)}"]
        where = make_where_clause(options.where)
        if where:
            lines.append(where)

        result = await self._execute("\n".join(lines))
        if not result.rows:
            raise QueryError(f"Model {project}.{name} returned no prediction")

        # Result columns are lower-cased
        target = target_column.lower()
        row = result.rows[0]
        return ModelPrediction(
            value=row.get(target),
            explain=row.get(f"{target}_explain"),
            data=row,
        )

    async def batch_query_model(
        self,
        name: str,
        version: int,
        target_column: str,
        project: str,
        options: BatchQueryOptions,
    ) -> List[ModelPrediction]:
        """Get predictions by joining a model with a data source.

        Raises:
            ValueError: If no data source to join is given
            QueryError: If MindsDB rejects the statement
        """
        if not options.join:
            raise ValueError("A data source to join against is required for batch queries")

        lines = [
            f"SELECT m.{escape_identifier(target_column)} AS predicted, t.*, m.*",
            f"FROM {escape_identifier(options.join)} AS t",
            f"JOIN {self._model_id(name, project)}.{int(version)} AS m",
        ]
        where = make_where_clause(options.where)
        if where:
            lines.append(where)
        if options.limit:
            lines.append(f"LIMIT {escape_value(int(options.limit))}")

        result = await self._execute("\n".join(lines))
        target = target_column.lower()
        return [
            ModelPrediction(
                value=row.get("predicted"),
                explain=row.get(f"{target}_explain"),
                data=row,
            )
            for row in result.rows
        ]

    async def train_model(
        self,
        name: str,
        target_column: str,
        project: str,
        options: Optional[TrainingOptions] = None,
    ) -> Model:
        """Start training a new model.

        Args:
            name: Name of the model
            target_column: Column the model predicts
            project: Project the model will belong to
            options: Training data and parameters

        Returns:
            The model, in 'generating' status

        Raises:
            QueryError: If MindsDB rejects the statement
        """
        options = options or TrainingOptions()
        clauses = [f"CREATE MODEL {self._model_id(name, project)}"]
        clauses.extend(make_training_clauses(target_column, options))

        await self._execute("\n".join(clauses))
        logger.info(f"Started training model: {project}.{name}")
        return Model(
            name=name,
            project=project,
            target_column=target_column,
            status="generating",
            update_status="up_to_date",
            version=1,
            client=self,
        )

    async def retrain_model(
        self,
        name: str,
        target_column: str,
        project: str,
        options: Optional[TrainingOptions] = None,
    ) -> None:
        """Retrain a model, optionally with new data or parameters."""
        clauses = [f"RETRAIN {self._model_id(name, project)}"]
        if options is not None:
            clauses.extend(make_training_clauses(target_column, options))

        await self._execute("\n".join(clauses))
        logger.info(f"Started retraining model: {project}.{name}")

    async def finetune_model(self, name: str, project: str, options: FinetuneOptions) -> None:
        """Finetune a model on new data."""
        clauses = [
            f"FINETUNE {self._model_id(name, project)}",
            f"FROM {escape_identifier(options.integration)}",
        ]
        if options.select:
            clauses.append(f"({options.select})")
        using = make_using_clause(options.using)
        if using:
            clauses.append(using)

        await self._execute("\n".join(clauses))
        logger.info(f"Started finetuning model: {project}.{name}")
