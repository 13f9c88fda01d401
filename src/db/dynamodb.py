"""DynamoDB repository implementation for production."""

from __future__ import annotations

import os

import boto3
from botocore.exceptions import ClientError

from src.game.errors import VersionConflictError
from src.game.models import GameState


# Initialize DynamoDB resource at module level for Lambda warm starts
_dynamodb = None
_prefix = os.environ.get("DYNAMODB_TABLE_PREFIX", "Big2Scoreboard")


def _get_dynamodb():
    global _dynamodb
    if _dynamodb is None:
        _dynamodb = boto3.resource("dynamodb")
    return _dynamodb


class DynamoDBGameRepository:
    """One item per game, keyed by gameId.

    The whole record is written on every save; the version attribute
    guards against overwriting a newer copy.
    """

    def __init__(self, table_name: str | None = None) -> None:
        self._table_name = table_name or f"{_prefix}_Games"
        self._table = _get_dynamodb().Table(self._table_name)

    def get_game(self, game_id: str) -> GameState | None:
        response = self._table.get_item(
            Key={"gameId": game_id},
            ConsistentRead=True,
        )
        item = response.get("Item")
        if not item:
            return None
        return GameState.from_dict(item)

    def save_game(self, game: GameState) -> None:
        item = game.to_dict()
        item["version"] = game.version + 1
        try:
            self._table.put_item(
                Item=item,
                ConditionExpression=(
                    "attribute_not_exists(gameId) OR version = :v"
                ),
                ExpressionAttributeValues={":v": game.version},
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise VersionConflictError(game.game_id, game.version) from e
            raise

    def delete_game(self, game_id: str) -> None:
        self._table.delete_item(Key={"gameId": game_id})

    def list_games(self) -> list[GameState]:
        # Scan is acceptable for the handful of games one table holds
        items: list[dict] = []
        kwargs: dict = {}
        while True:
            response = self._table.scan(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        games = [GameState.from_dict(item) for item in items]
        games.sort(key=lambda g: g.created_at, reverse=True)
        return games
