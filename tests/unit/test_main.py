# tests/unit/test_main.py
"""Tests for src.main: lifespan startup and the typer walkthrough command."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from src.main import app, lifespan
from src.mc_common.errors import InternalError

runner = CliRunner()


class TestLifespan:
    @pytest.mark.asyncio
    async def test_seeds_empty_catalogue(self, session_factory):
        engine = session_factory.kw["bind"]

        async with lifespan(engine, session_factory) as service:
            listing = await service.get_products()

        assert listing.count == 20
        assert listing.items[0].name == "Laptop"
        assert listing.items[0].price_display == "$999.99"

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_internal_error(self):
        engine = MagicMock()
        engine.connect.side_effect = OSError("connection refused")
        engine.dispose = AsyncMock()

        with pytest.raises(InternalError) as exc_info:
            async with lifespan(engine, MagicMock()):
                pass

        assert exc_info.value.code == 9002
        assert "connection refused" in exc_info.value.message
        engine.dispose.assert_awaited_once()


class TestWalkthroughCommand:
    def test_defaults(self):
        with patch("src.main.run", new=AsyncMock()) as run:
            result = runner.invoke(app, [])

        assert result.exit_code == 0
        run.assert_awaited_once_with(None, False)

    def test_add_and_clear(self):
        with patch("src.main.run", new=AsyncMock()) as run:
            result = runner.invoke(app, ["--add", "Laptop", "999.99", "--clear"])

        assert result.exit_code == 0
        run.assert_awaited_once_with(("Laptop", "999.99"), True)

    def test_app_error_exits_nonzero(self):
        failing = AsyncMock(side_effect=InternalError("Database unreachable: refused"))
        with patch("src.main.run", new=failing):
            result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Database unreachable" in result.output
