"""
AWS Lambda handler for the Revenue Distribution Engine API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import asyncio
import json
import logging
import os
import re

from revenue_engine import (
    DistributionService,
    DivisionOrder,
    InMemoryDistributionRepository,
    InMemoryDivisionOrderSource,
    RevenueEngine,
)
from revenue_engine.errors import RevenueEngineError, http_status_for

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Initialize engine and service (reused across warm invocations)
engine = RevenueEngine()
division_orders = InMemoryDivisionOrderSource()
service = DistributionService(InMemoryDistributionRepository(), division_orders=division_orders)

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}

DISTRIBUTION_PATH = re.compile(r"^/distributions/(?P<id>[^/]+)(?P<action>/recalculate|/pay)?$")
DIVISION_ORDER_CHECK_PATH = re.compile(r"^/wells/(?P<well_id>[^/]+)/division_order_check$")


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health, GET /api
    - POST /calculate_payment, POST /calculate_price
    - POST /distributions, GET /distributions/{id}
    - POST /distributions/{id}/recalculate, POST /distributions/{id}/pay
    - POST /division_orders
    - GET /wells/{well_id}/division_order_check
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    if path == "/health" and http_method == "GET":
        return handle_health()
    if path == "/api" and http_method == "GET":
        return handle_api_info()
    if path == "/calculate_payment" and http_method == "POST":
        return handle_with_body(event, engine.calculate_payment_from_dict, "Payment calculation")
    if path == "/calculate_price" and http_method == "POST":
        return handle_with_body(event, engine.calculate_price_from_dict, "Price calculation")
    if path == "/division_orders" and http_method == "POST":
        return handle_with_body(event, register_division_order, "Division order registration")
    if path == "/distributions" and http_method == "POST":
        return handle_with_body(
            event, lambda data: asyncio.run(service.create_from_dict(data)), "Distribution creation"
        )

    match = DISTRIBUTION_PATH.match(path)
    if match:
        distribution_id, action = match.group("id"), match.group("action")
        if action is None and http_method == "GET":
            return handle_call(lambda: asyncio.run(service.get_as_dict(distribution_id)), "Distribution lookup")
        if action == "/recalculate" and http_method == "POST":
            return handle_with_body(
                event,
                lambda data: asyncio.run(service.recalculate_from_dict(distribution_id, data)),
                f"Recalculation of {distribution_id}",
            )
        if action == "/pay" and http_method == "POST":
            return handle_with_body(
                event,
                lambda data: asyncio.run(service.pay_from_dict(distribution_id, data)),
                f"Payment of {distribution_id}",
            )

    match = DIVISION_ORDER_CHECK_PATH.match(path)
    if match and http_method == "GET":
        well_id = match.group("well_id")
        as_of = (event.get("queryStringParameters") or {}).get("as_of")
        return handle_call(
            lambda: asyncio.run(service.division_order_check_as_dict(well_id, as_of)),
            f"Division order check for {well_id}",
        )

    return respond(404, {"error": "Not found", "path": path})


def respond(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def handle_health():
    """Health check endpoint."""
    return respond(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return respond(
        200,
        {
            "status": "ok",
            "message": "Revenue Distribution Engine API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "calculate_payment": "/calculate_payment [POST]",
                "calculate_price": "/calculate_price [POST]",
                "distributions": "/distributions [POST], /distributions/{id} [GET]",
                "recalculate": "/distributions/{id}/recalculate [POST]",
                "pay": "/distributions/{id}/pay [POST]",
                "register_division_order": "/division_orders [POST]",
                "division_order_check": "/wells/{well_id}/division_order_check [GET]",
                "health": "/health [GET]",
            },
        },
    )


def register_division_order(data):
    order = DivisionOrder.from_dict(data)
    division_orders.add(order)
    return order.to_dict()


def parse_body(event):
    """Return the JSON body as a dict, or None when empty."""
    body = event.get("body", "")
    if isinstance(body, str):
        if not body:
            return None
        # Handle base64 encoded body (API Gateway)
        if event.get("isBase64Encoded"):
            import base64

            body = base64.b64decode(body).decode("utf-8")
        return json.loads(body)
    return body


def handle_with_body(event, action, description):
    try:
        input_data = parse_body(event)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return respond(400, {"error": f"Invalid JSON: {str(e)}", "code": "INVALID_JSON", "status": "failed"})

    if not input_data:
        return respond(400, {"error": "No input data provided", "code": "INVALID_INPUT", "status": "failed"})

    return handle_call(lambda: action(input_data), description)


def handle_call(action, description):
    """Run an engine call and map errors onto API Gateway responses."""
    try:
        result = action()
        logger.info(f"{description} succeeded")
        return respond(200, result)

    except (RevenueEngineError, ValueError, KeyError, TypeError) as e:
        status = http_status_for(e)
        logger.error(f"{description} rejected ({status}): {str(e)}")
        return respond(
            status,
            {
                "error": f"Validation error: {str(e)}" if status == 400 else str(e),
                "code": getattr(e, "code", "INVALID_INPUT"),
                "status": "validation_failed" if status == 400 else "rejected",
            },
        )

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return respond(
            500,
            {"error": "An unexpected error occurred during processing", "code": "INTERNAL_ERROR", "status": "failed"},
        )
