"""Quick Start - MindsDB client

Connect to a MindsDB instance, run SQL and train a model.

Set MINDSDB_HOST (and MINDSDB_USER / MINDSDB_PASSWORD for MindsDB Cloud)
in your environment or a .env file before running.
"""

import asyncio
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mindsdb_client import MindsDbError, QueryOptions, TrainingOptions, connect


async def main():
    async with await connect() as connection:
        print(f"✓ Connected to {connection.host}\n")

        # Query 1: Raw SQL
        print("Query 1: SELECT 1")
        print("-" * 60)
        result = await connection.run_query("SELECT 1 AS answer")
        if result.is_error:
            print(f"✗ Error: {result.error_message}")
        else:
            print(f"✓ Rows: {result.rows}")

        print("\n" + "=" * 60 + "\n")

        # Query 2: Databases
        print("Query 2: List databases")
        print("-" * 60)
        for database in await connection.databases.list_databases():
            print(f"  - {database.name} ({database.type})")

        print("\n" + "=" * 60 + "\n")

        # Query 3: Train a model and ask for a prediction
        print("Query 3: Train and query a model")
        print("-" * 60)
        try:
            model = await connection.models.train_model(
                "home_rentals_model",
                "rental_price",
                "mindsdb",
                TrainingOptions(
                    integration="example_db",
                    select="SELECT * FROM demo_data.home_rentals",
                ),
            )
            print(f"✓ Training started: {model.project}.{model.name} ({model.status})")

            prediction = await model.query(
                QueryOptions(where=["sqft = 823", "location = 'good'"])
            )
            print(f"✓ Predicted rental price: {prediction.value}")
        except MindsDbError as e:
            print(f"✗ Error: {e.message}")


if __name__ == "__main__":
    asyncio.run(main())
