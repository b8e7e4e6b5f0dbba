"""Tests for AWS Lambda handler."""

import base64
import json
import uuid

from lambda_handler import lambda_handler


def post(path, payload):
    return lambda_handler({"httpMethod": "POST", "path": path, "body": json.dumps(payload)}, None)


def get(path, query=None):
    return lambda_handler({"httpMethod": "GET", "path": path, "queryStringParameters": query}, None)


def body_of(response):
    return json.loads(response["body"])


def distribution_payload(well_id, distribution_id):
    return {
        "id": distribution_id,
        "organization_id": "ORG-1",
        "well_id": well_id,
        "partner_id": "P1",
        "division_order_id": "DO-1",
        "production_month": "2024-03",
        "production_volumes": {"oil_volume": 1000, "gas_volume": 5000},
        "revenue_breakdown": {
            "total_revenue": 65000,
            "severance_tax": 3250,
            "net_revenue": 61750,
        },
    }


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        response = get("/health")

        assert response["statusCode"] == 200
        body = body_of(response)
        assert body["status"] == "healthy"
        assert "environment" in body

    def test_api_info(self):
        """GET /api returns API information."""
        response = get("/api")

        assert response["statusCode"] == 200
        body = body_of(response)
        assert body["status"] == "ok"
        assert body["runtime"] == "AWS Lambda"
        assert "division_order_check" in body["endpoints"]

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/distributions"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        response = get("/unknown")

        assert response["statusCode"] == 404
        assert body_of(response)["path"] == "/unknown"

    def test_wrong_method(self):
        response = get("/calculate_payment")
        assert response["statusCode"] == 404

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200


class TestCalculationRoutes:

    def test_calculate_payment(self):
        """POST /calculate_payment: $65,000 × 12.5% = $8,125.00"""
        response = post("/calculate_payment", {
            "lease": {"lease_id": "LEASE-001", "royalty_rate": 0.125},
            "production": {"oil_volume": 1000, "gas_volume": 5000, "oil_price": 50, "gas_price": 3},
        })

        assert response["statusCode"] == 200
        body = body_of(response)
        assert body["amount"] == 8125.0
        assert body["calculation_type"] == "ROYALTY_PAYMENT"

    def test_calculate_price(self):
        response = post("/calculate_price", {
            "market": {"oil_base_price": 75, "gas_base_price": 3},
            "volumes": {"oil": 100},
            "strategy_type": "STANDARD",
        })

        assert response["statusCode"] == 200
        assert body_of(response)["total_value"] == 7500.0

    def test_unknown_strategy(self):
        response = post("/calculate_price", {
            "market": {"oil_base_price": 75, "gas_base_price": 3},
            "strategy_type": "SPOT",
        })

        assert response["statusCode"] == 400
        body = body_of(response)
        assert body["code"] == "UNKNOWN_STRATEGY"
        assert body["status"] == "validation_failed"
        assert body["error"].startswith("Validation error: ")

    def test_empty_body(self):
        """POST with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate_payment", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        assert body_of(response)["error"] == "No input data provided"

    def test_invalid_json(self):
        """POST with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate_payment", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        assert body_of(response)["code"] == "INVALID_JSON"

    def test_base64_body(self):
        payload = {
            "lease": {"lease_id": "LEASE-001", "lease_bonus": 250, "acreage": 40},
            "production": {},
        }
        event = {
            "httpMethod": "POST",
            "path": "/calculate_payment",
            "body": base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii"),
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert body_of(response)["amount"] == 10000.0


class TestDistributionRoutes:

    def test_monthly_cycle(self):
        """Create for 2024-03, pay with CHK-001 on 2024-04-01, then recalculation is refused."""
        well_id = f"W-{uuid.uuid4().hex[:8]}"
        distribution_id = f"RD-{uuid.uuid4().hex[:8]}"

        registered = post("/division_orders", {
            "well_id": well_id,
            "partner_id": "P1",
            "decimal_interest": 1,
            "effective_date": "2024-01-01",
        })
        assert registered["statusCode"] == 200

        created = post("/distributions", distribution_payload(well_id, distribution_id))
        assert created["statusCode"] == 200
        assert body_of(created)["version"] == 0

        paid = post(f"/distributions/{distribution_id}/pay", {
            "check_number": "CHK-001",
            "payment_date": "2024-04-01",
            "payment_method": "check",
            "processed_by": "accountant-2",
        })
        assert paid["statusCode"] == 200
        assert body_of(paid)["is_paid"] is True
        assert body_of(paid)["version"] == 1

        refused = post(f"/distributions/{distribution_id}/recalculate", {
            "calculated_by": "accountant-1",
            "revenue_breakdown": {"total_revenue": 100, "net_revenue": 100},
        })
        assert refused["statusCode"] == 409
        assert body_of(refused)["code"] == "ALREADY_PAID"

        fetched = get(f"/distributions/{distribution_id}")
        assert fetched["statusCode"] == 200
        assert body_of(fetched)["payment_info"]["check_number"] == "CHK-001"

    def test_imbalanced_well_is_rejected(self):
        well_id = f"W-{uuid.uuid4().hex[:8]}"
        post("/division_orders", {
            "well_id": well_id,
            "partner_id": "P1",
            "decimal_interest": 0.5,
            "effective_date": "2024-01-01",
        })

        response = post("/distributions", distribution_payload(well_id, f"RD-{uuid.uuid4().hex[:8]}"))
        assert response["statusCode"] == 422
        assert body_of(response)["code"] == "DIVISION_ORDER_IMBALANCE"

        check = get(f"/wells/{well_id}/division_order_check", {"as_of": "2024-03-31"})
        assert check["statusCode"] == 200
        assert body_of(check)["sum"] == 0.5
        assert body_of(check)["valid"] is False

    def test_unknown_distribution(self):
        response = get("/distributions/does-not-exist")
        assert response["statusCode"] == 404
        assert body_of(response)["code"] == "DISTRIBUTION_NOT_FOUND"

    def test_bad_production_month(self):
        payload = distribution_payload("W-any", "RD-any")
        payload["production_month"] = "March 2024"
        response = post("/distributions", payload)

        assert response["statusCode"] == 400
        assert body_of(response)["status"] == "validation_failed"
