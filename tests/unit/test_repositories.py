"""Tests for the game repositories."""

import pytest
from botocore.exceptions import ClientError

import src.db.dynamodb as dynamodb
from src.db.memory import InMemoryGameRepository
from src.game.errors import VersionConflictError

from tests.conftest import make_round, make_state


class FakeTable:
    """Stands in for a boto3 Table, honouring the version condition."""

    def __init__(self, page_size: int = 100) -> None:
        self.items: dict[str, dict] = {}
        self.page_size = page_size

    def get_item(self, Key, ConsistentRead=False):
        item = self.items.get(Key["gameId"])
        return {"Item": item} if item else {}

    def put_item(self, Item, ConditionExpression, ExpressionAttributeValues):
        existing = self.items.get(Item["gameId"])
        if existing and existing["version"] != ExpressionAttributeValues[":v"]:
            raise ClientError(
                {"Error": {"Code": "ConditionalCheckFailedException", "Message": "no"}},
                "PutItem",
            )
        self.items[Item["gameId"]] = Item

    def delete_item(self, Key):
        self.items.pop(Key["gameId"], None)

    def scan(self, ExclusiveStartKey=None):
        keys = sorted(self.items)
        start = keys.index(ExclusiveStartKey["gameId"]) + 1 if ExclusiveStartKey else 0
        page = keys[start:start + self.page_size]
        response = {"Items": [self.items[k] for k in page]}
        if start + self.page_size < len(keys):
            response["LastEvaluatedKey"] = {"gameId": page[-1]}
        return response


class FakeResource:
    def __init__(self, table: FakeTable) -> None:
        self.table = table
        self.names: list[str] = []

    def Table(self, name):
        self.names.append(name)
        return self.table


@pytest.fixture
def table(monkeypatch):
    table = FakeTable(page_size=2)
    resource = FakeResource(table)
    monkeypatch.setattr(dynamodb, "_dynamodb", resource)
    return table


def _game(game_id: str, created_at: int):
    game = make_state(["A", "B", "C", "D"], queue=["Q"],
                      rounds=[make_round(["A", "B", "C", "D"], [0, 3, 4, 5])])
    game.game_id = game_id
    game.created_at = created_at
    return game


class TestDynamoDBGameRepository:
    def test_default_table_name(self, table):
        repo = dynamodb.DynamoDBGameRepository()
        assert repo._table_name == "Big2Scoreboard_Games"

    def test_save_and_get(self, table):
        repo = dynamodb.DynamoDBGameRepository()
        repo.save_game(_game("g1", 1))
        loaded = repo.get_game("g1")
        assert loaded.rounds[0].points == [0, 3, 4, 5]
        assert loaded.version == 2

    def test_missing(self, table):
        assert dynamodb.DynamoDBGameRepository().get_game("nope") is None

    def test_stale_write_rejected(self, table):
        repo = dynamodb.DynamoDBGameRepository()
        repo.save_game(_game("g1", 1))
        stale = repo.get_game("g1")
        repo.save_game(repo.get_game("g1"))
        with pytest.raises(VersionConflictError):
            repo.save_game(stale)

    def test_list_pages_and_sorts(self, table):
        repo = dynamodb.DynamoDBGameRepository()
        for i in range(5):
            repo.save_game(_game(f"g{i}", i))
        assert [g.game_id for g in repo.list_games()] == ["g4", "g3", "g2", "g1", "g0"]

    def test_delete(self, table):
        repo = dynamodb.DynamoDBGameRepository()
        repo.save_game(_game("g1", 1))
        repo.delete_game("g1")
        assert repo.get_game("g1") is None


class TestInMemoryGameRepository:
    def test_returns_copies(self):
        repo = InMemoryGameRepository()
        repo.save_game(_game("g1", 1))
        loaded = repo.get_game("g1")
        loaded.active[0] = "Z"
        assert repo.get_game("g1").active[0] == "A"

    def test_version_conflict(self):
        repo = InMemoryGameRepository()
        repo.save_game(_game("g1", 1))
        stale = repo.get_game("g1")
        repo.save_game(repo.get_game("g1"))
        with pytest.raises(VersionConflictError):
            repo.save_game(stale)
