"""DynamoDB schema definitions and item builders for the migrations ledger."""

from typing import Any

from .models import MigrationEntry

# Table name
MIGRATIONS_LOG_TABLE = "MIGRATIONS_LOG_DB"

# Key attributes
FILE_NAME = "FILE_NAME"  # Partition key
APPLIED_AT = "APPLIED_AT"  # Sort key

# Provisioned throughput for the ledger table
READ_CAPACITY_UNITS = 5
WRITE_CAPACITY_UNITS = 5


def entry_key(entry: MigrationEntry) -> dict[str, Any]:
    """Build the primary key for a migration entry."""
    return {
        FILE_NAME: {"S": entry.file_name},
        APPLIED_AT: {"S": entry.applied_at},
    }


def entry_item(entry: MigrationEntry) -> dict[str, Any]:
    """Build the full DynamoDB item for a migration entry."""
    # The ledger stores nothing beyond the key
    return entry_key(entry)


def parse_item(item: dict[str, Any]) -> dict[str, str]:
    """
    De-marshal a ledger item into a flat record.

    ``{"FILE_NAME": {"S": "a.py"}, "APPLIED_AT": {"S": "1"}}`` becomes
    ``{"FILE_NAME": "a.py", "APPLIED_AT": "1"}``.
    """
    return {
        FILE_NAME: item.get(FILE_NAME, {}).get("S", ""),
        APPLIED_AT: item.get(APPLIED_AT, {}).get("S", ""),
    }


def get_table_definition(table_name: str = MIGRATIONS_LOG_TABLE) -> dict[str, Any]:
    """
    Get the DynamoDB table definition for CreateTable.

    Returns a dictionary suitable for boto3 create_table().
    """
    return {
        "TableName": table_name,
        "AttributeDefinitions": [
            {"AttributeName": FILE_NAME, "AttributeType": "S"},
            {"AttributeName": APPLIED_AT, "AttributeType": "S"},
        ],
        "KeySchema": [
            {"AttributeName": FILE_NAME, "KeyType": "HASH"},
            {"AttributeName": APPLIED_AT, "KeyType": "RANGE"},
        ],
        "ProvisionedThroughput": {
            "ReadCapacityUnits": READ_CAPACITY_UNITS,
            "WriteCapacityUnits": WRITE_CAPACITY_UNITS,
        },
    }
