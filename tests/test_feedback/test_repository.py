"""Tests for FeedbackCollectionRepository SQL and parameter passing."""

import uuid

import asyncpg
import pytest

from feedback_hub.common.exceptions import ValidationError
from feedback_hub.feedback.repository import (
    KEY_CONSTRAINT,
    NAME_CONSTRAINT,
    FeedbackCollectionRepository,
)
from feedback_hub.feedback.schemas import EnumScale, NewCollectionData, NumericScale


@pytest.fixture
def repo(mock_database):
    """FeedbackCollectionRepository with a mock database."""
    return FeedbackCollectionRepository(mock_database)


def _unique_violation(constraint: str) -> asyncpg.UniqueViolationError:
    exc = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    exc.constraint_name = constraint
    return exc


class TestCreateTable:
    """Tests for FeedbackCollectionRepository.create_table()."""

    @pytest.mark.asyncio
    async def test_creates_table_with_unique_constraints(self, repo, mock_database):
        await repo.create_table()

        sql = mock_database.execute.call_args[0][0]
        assert "CREATE TABLE IF NOT EXISTS feedback_collections" in sql
        assert f"CONSTRAINT {NAME_CONSTRAINT} UNIQUE (name)" in sql
        assert f"CONSTRAINT {KEY_CONSTRAINT} UNIQUE (key)" in sql
        assert "uuid_generate_v4()" in sql


class TestFindConflicts:
    """Tests for FeedbackCollectionRepository.find_conflicts()."""

    @pytest.mark.asyncio
    async def test_single_query_matches_name_or_key(self, repo, mock_database):
        await repo.find_conflicts("CSAT", "csat")

        assert mock_database.fetch.await_count == 1
        args = mock_database.fetch.call_args[0]
        assert "(name = $1 OR key = $2)" in args[0]
        assert args[1:] == ("CSAT", "csat")

    @pytest.mark.asyncio
    async def test_returns_every_matching_row(self, repo, mock_database, numeric_row, enum_row):
        mock_database.fetch.return_value = [numeric_row, enum_row]

        result = await repo.find_conflicts("Customer Satisfaction", "support-sentiment")

        assert [c.key for c in result] == ["customer-satisfaction", "support-sentiment"]

    @pytest.mark.asyncio
    async def test_key_only(self, repo, mock_database):
        await repo.find_conflicts(None, "csat")

        args = mock_database.fetch.call_args[0]
        assert "(key = $1)" in args[0]
        assert "name =" not in args[0]
        assert args[1:] == ("csat",)

    @pytest.mark.asyncio
    async def test_exclude_id(self, repo, mock_database):
        row_id = uuid.uuid4()
        await repo.find_conflicts("CSAT", None, exclude_id=row_id)

        args = mock_database.fetch.call_args[0]
        assert "AND id <> $2" in args[0]
        assert args[1:] == ("CSAT", row_id)

    @pytest.mark.asyncio
    async def test_nothing_to_check_skips_query(self, repo, mock_database):
        assert await repo.find_conflicts(None, None) == []
        mock_database.fetch.assert_not_awaited()


class TestInsert:
    """Tests for FeedbackCollectionRepository.insert()."""

    @pytest.mark.asyncio
    async def test_insert_passes_all_fields(self, repo, mock_database, numeric_row):
        mock_database.fetchrow.return_value = numeric_row
        data = NewCollectionData(
            name="Customer Satisfaction",
            key="customer-satisfaction",
            scale=NumericScale(min=1, max=5),
            description="Post-purchase CSAT survey",
            metadata={"fields": {"orderId": "string"}},
        )

        result = await repo.insert(data, numeric_row["api_key"])

        args = mock_database.fetchrow.call_args[0]
        assert "INSERT INTO feedback_collections" in args[0]
        assert "RETURNING *" in args[0]
        assert args[1] == "Customer Satisfaction"
        assert args[2] == "customer-satisfaction"
        assert args[3] == "Post-purchase CSAT survey"
        assert args[4] == {"type": "numeric", "min": 1, "max": 5}
        assert args[5] == {"fields": {"orderId": "string"}}
        assert args[6] == numeric_row["api_key"]

        assert result.id == numeric_row["id"]
        assert result.scale == NumericScale(min=1, max=5)
        assert result.api_key == numeric_row["api_key"]

    @pytest.mark.asyncio
    async def test_enum_scale_stored_as_list(self, repo, mock_database, enum_row):
        mock_database.fetchrow.return_value = enum_row
        data = NewCollectionData(
            name="Support Sentiment",
            key="support-sentiment",
            scale=EnumScale(values=("negative", "neutral", "positive")),
        )

        result = await repo.insert(data, enum_row["api_key"])

        args = mock_database.fetchrow.call_args[0]
        assert args[4] == {"type": "enum", "values": ["negative", "neutral", "positive"]}
        assert args[3] is None
        assert args[5] is None
        assert result.scale == EnumScale(values=("negative", "neutral", "positive"))

    @pytest.mark.asyncio
    async def test_name_constraint_maps_to_field_error(self, repo, mock_database):
        mock_database.fetchrow.side_effect = _unique_violation(NAME_CONSTRAINT)
        data = NewCollectionData(name="CSAT", key="csat", scale=NumericScale(min=1, max=5))

        with pytest.raises(ValidationError) as exc_info:
            await repo.insert(data, "fx_00")

        assert exc_info.value.errors == {"name": 'Feedback collection name "CSAT" already taken'}

    @pytest.mark.asyncio
    async def test_key_constraint_maps_to_field_error(self, repo, mock_database):
        mock_database.fetchrow.side_effect = _unique_violation(KEY_CONSTRAINT)
        data = NewCollectionData(name="CSAT", key="csat", scale=NumericScale(min=1, max=5))

        with pytest.raises(ValidationError) as exc_info:
            await repo.insert(data, "fx_00")

        assert exc_info.value.errors == {"key": 'Feedback collection key "csat" already taken'}

    @pytest.mark.asyncio
    async def test_unknown_constraint_propagates(self, repo, mock_database):
        mock_database.fetchrow.side_effect = _unique_violation("some_other_constraint")
        data = NewCollectionData(name="CSAT", key="csat", scale=NumericScale(min=1, max=5))

        with pytest.raises(asyncpg.UniqueViolationError):
            await repo.insert(data, "fx_00")


class TestGetByKey:
    """Tests for FeedbackCollectionRepository.get_by_key()."""

    @pytest.mark.asyncio
    async def test_found(self, repo, mock_database, numeric_row):
        mock_database.fetchrow.return_value = numeric_row

        result = await repo.get_by_key("customer-satisfaction")

        args = mock_database.fetchrow.call_args[0]
        assert "WHERE key = $1" in args[0]
        assert args[1] == "customer-satisfaction"
        assert result.name == "Customer Satisfaction"

    @pytest.mark.asyncio
    async def test_not_found(self, repo, mock_database):
        mock_database.fetchrow.return_value = None
        assert await repo.get_by_key("missing") is None


class TestListCollections:
    """Tests for FeedbackCollectionRepository.list_collections()."""

    @pytest.mark.asyncio
    async def test_pagination_params(self, repo, mock_database, numeric_row):
        mock_database.fetchval.return_value = 7
        mock_database.fetch.return_value = [numeric_row]

        collections, total = await repo.list_collections(limit=10, offset=5)

        assert total == 7
        assert len(collections) == 1
        args = mock_database.fetch.call_args[0]
        assert "ORDER BY name" in args[0]
        assert "LIMIT $1 OFFSET $2" in args[0]
        assert args[1:] == (10, 5)

    @pytest.mark.asyncio
    async def test_search_filters_name_and_key(self, repo, mock_database):
        mock_database.fetchval.return_value = 0

        await repo.list_collections(search="csat", limit=20, offset=0)

        count_args = mock_database.fetchval.call_args[0]
        assert "name ILIKE $1 OR key ILIKE $1" in count_args[0]
        assert count_args[1] == "%csat%"

        args = mock_database.fetch.call_args[0]
        assert "LIMIT $2 OFFSET $3" in args[0]
        assert args[1:] == ("%csat%", 20, 0)

    @pytest.mark.asyncio
    async def test_null_count_becomes_zero(self, repo, mock_database):
        mock_database.fetchval.return_value = None
        _, total = await repo.list_collections()
        assert total == 0


class TestUpdate:
    """Tests for FeedbackCollectionRepository.update()."""

    @pytest.mark.asyncio
    async def test_updates_only_given_columns(self, repo, mock_database, numeric_row):
        mock_database.fetchrow.return_value = numeric_row
        row_id = numeric_row["id"]

        await repo.update(row_id, {"description": "New", "scale": NumericScale(min=0, max=10)})

        args = mock_database.fetchrow.call_args[0]
        sql = args[0]
        assert "description = $1" in sql
        assert "scale = $2" in sql
        assert "updated_at = NOW()" in sql
        assert "WHERE id = $3" in sql
        assert "api_key" not in sql
        assert args[1:] == ("New", {"type": "numeric", "min": 0, "max": 10}, row_id)

    @pytest.mark.asyncio
    async def test_rejects_unknown_columns(self, repo, mock_database):
        with pytest.raises(ValueError, match="api_key"):
            await repo.update(uuid.uuid4(), {"api_key": "fx_new"})
        mock_database.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_row_returns_none(self, repo, mock_database):
        mock_database.fetchrow.return_value = None
        assert await repo.update(uuid.uuid4(), {"name": "X"}) is None

    @pytest.mark.asyncio
    async def test_key_constraint_maps_to_field_error(self, repo, mock_database):
        mock_database.fetchrow.side_effect = _unique_violation(KEY_CONSTRAINT)

        with pytest.raises(ValidationError) as exc_info:
            await repo.update(uuid.uuid4(), {"key": "taken"})

        assert exc_info.value.errors == {"key": 'Feedback collection key "taken" already taken'}
