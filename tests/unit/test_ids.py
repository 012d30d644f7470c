"""Tests for integer id generation."""
import pytest
from unittest.mock import AsyncMock


@pytest.mark.asyncio
class TestGenerateUniqueId:
    """Tests for generate_unique_id function."""

    async def test_first_id(self):
        """Test the first id from a fresh sequence."""
        from clock_slayer.utils.ids import generate_unique_id

        collection = AsyncMock()
        counters = AsyncMock()
        counters.find_one_and_update.return_value = {"_id": "projects", "seq": 1}
        collection.find_one.return_value = None

        result = await generate_unique_id(collection, counters, "projects")

        assert result == 1
        call_args = counters.find_one_and_update.call_args
        assert call_args[0][0] == {"_id": "projects"}
        assert call_args[0][1] == {"$inc": {"seq": 1}}
        assert call_args[1]["upsert"] is True

    async def test_skips_caller_supplied_ids(self):
        """Test ids already taken by caller-supplied documents are skipped."""
        from clock_slayer.utils.ids import generate_unique_id

        collection = AsyncMock()
        counters = AsyncMock()
        counters.find_one_and_update.side_effect = [
            {"_id": "projects", "seq": 5},
            {"_id": "projects", "seq": 6},
            {"_id": "projects", "seq": 7},
        ]
        collection.find_one.side_effect = [
            {"_id": 5},  # taken
            {"_id": 6},  # taken
            None,
        ]

        result = await generate_unique_id(collection, counters, "projects")

        assert result == 7
        assert counters.find_one_and_update.call_count == 3
        collection.find_one.assert_called_with({"_id": 7})
