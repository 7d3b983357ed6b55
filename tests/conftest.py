"""
Pytest configuration and shared fixtures.

This module provides fixtures for:
- Sample assistant replies in the formats the parser supports
- FastAPI test client
"""

import os
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport

# Set testing environment before importing app modules
os.environ["TESTING"] = "true"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["API_ENABLED"] = "true"
os.environ["API_KEYS"] = "testkey:1"


# ─────────────────────────────────────────────────────────────────────────────
# Sample Replies
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def screenshot_reply():
    """Reply with headline, GMV bullets, warnings and inline menu calls."""
    return (
        "Headline:Your beef sales are over-concentrated in 3 items—so thefastest way to grow "
        "revenue this week is to protect the top sellers, fix menu leakage, and bundle for "
        "higher basket value.\n"
        "\n"
        "📊 Key numbers (Feb 1–2):\n"
        "\n"
        "• 🔥 Steak & Fries: 4 units = 22% of beef units • 2,600 EGP GMV (highest revenue driver)\n"
        "• 🔥 Roast Beef Sandwich: 4 units = 22% • 1,140 EGP GMV (same volume, much lower revenue per unit)\n"
        "• Steak Bordalise: 3 units = 17% • 2,250 EGP GMV (strong premium pull)\n"
        "• ⚠️ Mongolian Beef split: 2 units (920 EGP) + \"Monogolian Beef\" 1 unit (460 EGP) = "
        "3 units / 1,380 EGP but fragmented\n"
        "• ⚠️ This is only 2 days of data—small sample, so don't overreact, but act on obvious leaks.\n"
        "\n"
        "Menu-engineering calls (margin ~ assumptions):\n"
        "\n"
        "• Steak & Fries = ⭐ STAR (high demand + likely ~55% margin (estimated) if portioned right) "
        "→ protect & feature\n"
        "• Roast Beef Sandwich = 🐴 PLOWHORSE risk (high units, lower GMV/unit) → needs pricing review"
    )


@pytest.fixture
def sentence_kpi_reply():
    return (
        "28,382.95 EGP GMV from 17 successful orders\n"
        "1,669.59 EGP AOV\n"
        "94.1% payment approval rate\n"
        "2,076 EGP in tips"
    )


@pytest.fixture
def daily_brief_reply():
    """Reply that exercises every stage once."""
    return (
        "**HEADLINE:** Coffee carried the day while food lagged\n"
        "\n"
        "THE NUMBERS (vs last Monday):\n"
        "• GMV: 32,195 EGP ↑ +0.5%\n"
        "• Orders: 17 ↓ -29.2%\n"
        "• AOV: 1,894 EGP ↑ +42.0%\n"
        "\n"
        "ALERTS (vs 4-week avg):\n"
        "• Cappuccino: 3 qty vs 19.1 avg ↓ 84.3% → check stock\n"
        "• Iced Latte: 12 vs 5.0 avg ↑ 140%\n"
        "\n"
        "Top sellers:\n"
        "• Flat White: 6 units → 1,425 EGP GMV\n"
        "• Toffee Nut Latte: 4 units → 520 EGP GMV\n"
        "• Mocha: 3 units → 380 EGP GMV\n"
        "\n"
        "• ⭐ STAR: Flat White, Mocha\n"
        "• 🐕 DOG: Decaf Americano\n"
        "\n"
        "• 🔥 Flat White is now your best-selling coffee\n"
        "\n"
        "| Item | Units | GMV |\n"
        "|------|------:|----:|\n"
        "| Flat White | 6 | 1,425 |\n"
        "| Mocha | 3 | 380 |\n"
        "\n"
        "Here's what I'd do:\n"
        "1. Feature Flat White at the counter. Expected uplift: +EGP 220/day\n"
        "2. Drop Decaf Americano from the board"
    )


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI Test Client
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create FastAPI app for testing."""
    # Import here to ensure env vars are set first
    from app.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing API endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "testkey"}
