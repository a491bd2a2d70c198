"""API endpoint integration tests.

Tests the FastAPI endpoints for shift pay and withholding previews.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient


pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["engine_version"]

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestShiftCalculation:
    """Test POST /api/v1/shifts/calculate."""

    async def test_base_rate_shift(self, client: AsyncClient, weekday_shift_payload):
        response = await client.post("/api/v1/shifts/calculate", json=weekday_shift_payload)
        assert response.status_code == 200

        data = response.json()
        assert Decimal(data["shift"]["total_hours"]) == Decimal("7.5")
        assert data["breakdown"]["base_pay"] == "199.13"
        assert data["breakdown"]["total_pay"] == "199.13"
        assert data["penalties"] == []
        assert data["overtimes"] == []
        assert data["pay_guide_name"] == "Retail Award"
        assert data["shift"]["start_time"].endswith("+10:00")

    async def test_penalty_and_overtime_rows(self, client: AsyncClient, retail_guide_payload):
        payload = {
            "pay_guide": {**retail_guide_payload, "maximum_shift_hours": "8"},
            "penalty_time_frames": [
                {
                    "id": "sat",
                    "name": "Saturday",
                    "multiplier": "1.5",
                    "day_of_week": 6,
                }
            ],
            "overtime_time_frames": [
                {
                    "id": "ot",
                    "name": "Overtime",
                    "first_three_hours_mult": "1.75",
                    "after_three_hours_mult": "2.0",
                }
            ],
            "start_time": "2024-07-06T08:00:00",
            "end_time": "2024-07-06T18:00:00",
        }

        response = await client.post("/api/v1/shifts/calculate", json=payload)
        assert response.status_code == 200

        data = response.json()
        assert [p["time_frame_id"] for p in data["penalties"]] == ["sat"]
        assert Decimal(data["penalties"][0]["hours"]) == Decimal("8")
        assert Decimal(data["overtimes"][0]["hours"]) == Decimal("2")
        breakdown = {k: Decimal(v) for k, v in data["breakdown"].items()}
        assert (
            breakdown["base_pay"] + breakdown["penalty_pay"] + breakdown["overtime_pay"]
            == breakdown["total_pay"]
        )

    async def test_break_outside_shift(self, client: AsyncClient, weekday_shift_payload):
        weekday_shift_payload["break_periods"] = [
            {"start_time": "2024-07-03T17:00:00", "end_time": "2024-07-03T17:30:00"}
        ]

        response = await client.post("/api/v1/shifts/calculate", json=weekday_shift_payload)
        assert response.status_code == 422

        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["detail"] == "Break periods must be within shift duration"

    async def test_end_before_start(self, client: AsyncClient, weekday_shift_payload):
        weekday_shift_payload["end_time"] = "2024-07-03T08:00:00"
        weekday_shift_payload["break_periods"] = []

        response = await client.post("/api/v1/shifts/calculate", json=weekday_shift_payload)
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_unknown_timezone_rejected(self, client: AsyncClient, weekday_shift_payload):
        weekday_shift_payload["pay_guide"]["timezone"] = "Mars/Olympus_Mons"

        response = await client.post("/api/v1/shifts/calculate", json=weekday_shift_payload)
        assert response.status_code == 422

    async def test_bad_window_time_rejected(self, client: AsyncClient, weekday_shift_payload):
        weekday_shift_payload["penalty_time_frames"] = [
            {
                "id": "late",
                "name": "Late",
                "multiplier": "1.25",
                "start_time": "25:00",
                "end_time": "06:00",
            }
        ]

        response = await client.post("/api/v1/shifts/calculate", json=weekday_shift_payload)
        assert response.status_code == 422


class TestTaxCalculation:
    """Test POST /api/v1/tax/calculate."""

    async def test_default_tables(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "2024-W28",
                "gross_pay": "1000",
                "pay_period_type": "WEEKLY",
                "tax_year": "2024-25",
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert data["tax_scale"] == "scale2"
        assert data["breakdown"]["payg_withholding"] == "142.66"
        assert data["breakdown"]["medicare_levy"] == "20.00"
        assert Decimal(data["breakdown"]["net_pay"]) == Decimal("837.34")
        assert data["year_to_date"]["tax_year"] == "2024-25"
        assert Decimal(data["year_to_date"]["gross_income"]) == Decimal("1000")

    async def test_zero_gross(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "2024-F02",
                "gross_pay": "0",
                "pay_period_type": "FORTNIGHTLY",
                "tax_year": "2024-25",
            },
        )
        assert response.status_code == 200

        breakdown = response.json()["breakdown"]
        assert all(Decimal(value) == 0 for value in breakdown.values())

    async def test_year_to_date_carried_forward(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "2024-W29",
                "gross_pay": "1000",
                "pay_period_type": "WEEKLY",
                "tax_year": "2024-25",
                "tax_settings": {"medicare_exemption": "full"},
                "year_to_date": {
                    "tax_year": "2024-25",
                    "gross_income": "1000",
                    "payg_withholding": "142.66",
                    "total_withholdings": "142.66",
                },
            },
        )
        assert response.status_code == 200

        ytd = response.json()["year_to_date"]
        assert Decimal(ytd["gross_income"]) == Decimal("2000")
        assert Decimal(ytd["payg_withholding"]) == Decimal("285.32")
        assert Decimal(ytd["medicare_levy"]) == Decimal("0")

    async def test_supplied_tables(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "custom",
                "gross_pay": "1000",
                "pay_period_type": "WEEKLY",
                "tax_tables": {
                    "coefficients": [
                        {
                            "scale": "scale2",
                            "earnings_from": "0",
                            "earnings_to": None,
                            "coefficient_a": "0.1",
                            "coefficient_b": "0",
                        }
                    ],
                    "stsl_rates": [
                        {
                            "scale": "WITH_TFT_OR_FR",
                            "earnings_from": "0",
                            "earnings_to": None,
                            "coefficient_a": "0.01",
                            "coefficient_b": "0",
                        }
                    ],
                },
            },
        )
        assert response.status_code == 200

        breakdown = response.json()["breakdown"]
        assert breakdown["payg_withholding"] == "100.00"
        assert breakdown["stsl_amount"] == "10.01"

    async def test_missing_bracket(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "custom",
                "gross_pay": "1000",
                "pay_period_type": "WEEKLY",
                "tax_tables": {
                    "coefficients": [
                        {
                            "scale": "scale1",
                            "earnings_from": "0",
                            "coefficient_a": "0.1",
                            "coefficient_b": "0",
                        }
                    ]
                },
            },
        )
        assert response.status_code == 500

        data = response.json()
        assert data["code"] == "TAX_CONFIGURATION_ERROR"
        assert data["context"]["scale"] == "scale2"

    async def test_unknown_tax_year(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "old",
                "gross_pay": "1000",
                "pay_period_type": "WEEKLY",
                "tax_year": "1999-00",
            },
        )
        assert response.status_code == 500
        assert response.json()["code"] == "TAX_CONFIGURATION_ERROR"

    async def test_negative_gross_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax/calculate",
            json={
                "pay_period_id": "neg",
                "gross_pay": "-5",
                "pay_period_type": "WEEKLY",
            },
        )
        assert response.status_code == 422
