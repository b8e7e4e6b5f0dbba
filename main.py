from flask import Flask, request, jsonify
from flask_cors import CORS
from revenue_engine import (
    DistributionService,
    DivisionOrder,
    InMemoryDistributionRepository,
    InMemoryDivisionOrderSource,
    RevenueEngine,
)
from revenue_engine.errors import RevenueEngineError, http_status_for
import asyncio
import os
import logging

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes
CORS(app)

# Calculation engine and distribution service (in-memory persistence)
engine = RevenueEngine()
repository = InMemoryDistributionRepository()
division_orders = InMemoryDivisionOrderSource()
service = DistributionService(repository, division_orders=division_orders)


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Revenue Distribution Engine API",
        "version": "1.0",
        "endpoints": {
            "calculate_payment": "/calculate_payment [POST]",
            "calculate_price": "/calculate_price [POST]",
            "create_distribution": "/distributions [POST]",
            "get_distribution": "/distributions/<id> [GET]",
            "recalculate": "/distributions/<id>/recalculate [POST]",
            "pay": "/distributions/<id>/pay [POST]",
            "register_division_order": "/division_orders [POST]",
            "division_order_check": "/wells/<well_id>/division_order_check [GET]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


def _json_body():
    input_data = request.get_json(force=True, silent=True)
    if not input_data:
        raise ValueError("No input data provided")
    return input_data


def _handle(action, description):
    """Run an engine call and map errors onto HTTP responses."""
    try:
        result = action()
        return jsonify(result), 200

    except (RevenueEngineError, ValueError, KeyError, TypeError) as e:
        status = http_status_for(e)
        logger.warning(f"{description} rejected ({status}): {str(e)}")
        return jsonify({
            "error": str(e),
            "code": getattr(e, "code", "INVALID_INPUT"),
            "status": "validation_failed" if status == 400 else "rejected"
        }), status

    except Exception as e:
        # Unexpected errors
        logger.error(f"{description} error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "code": "INTERNAL_ERROR",
            "status": "failed"
        }), 500


@app.route("/calculate_payment", methods=["POST"])
def calculate_payment():
    """Calculate an owner payment from lease and production facts"""
    return _handle(lambda: engine.calculate_payment_from_dict(_json_body()), "Payment calculation")


@app.route("/calculate_price", methods=["POST"])
def calculate_price():
    """Price production from market, quality and location signals"""
    return _handle(lambda: engine.calculate_price_from_dict(_json_body()), "Price calculation")


@app.route("/distributions", methods=["POST"])
def create_distribution():
    """Create a revenue distribution"""
    return _handle(lambda: asyncio.run(service.create_from_dict(_json_body())), "Distribution creation")


@app.route("/distributions/<distribution_id>", methods=["GET"])
def get_distribution(distribution_id):
    return _handle(lambda: asyncio.run(service.get_as_dict(distribution_id)), "Distribution lookup")


@app.route("/distributions/<distribution_id>/recalculate", methods=["POST"])
def recalculate_distribution(distribution_id):
    """Recalculate an unpaid distribution"""
    return _handle(
        lambda: asyncio.run(service.recalculate_from_dict(distribution_id, _json_body())),
        f"Recalculation of {distribution_id}"
    )


@app.route("/distributions/<distribution_id>/pay", methods=["POST"])
def pay_distribution(distribution_id):
    """Mark a distribution paid"""
    return _handle(
        lambda: asyncio.run(service.pay_from_dict(distribution_id, _json_body())),
        f"Payment of {distribution_id}"
    )


def _register_division_order(data):
    order = DivisionOrder.from_dict(data)
    division_orders.add(order)
    logger.info(f"Registered division order {order.id} for well {order.well_id}")
    return order.to_dict()


@app.route("/division_orders", methods=["POST"])
def register_division_order():
    """Register a division order with the in-memory source"""
    return _handle(lambda: _register_division_order(_json_body()), "Division order registration")


@app.route("/wells/<well_id>/division_order_check", methods=["GET"])
def division_order_check(well_id):
    """Check that a well's active decimal interests sum to 1"""
    return _handle(
        lambda: asyncio.run(service.division_order_check_as_dict(well_id, request.args.get("as_of"))),
        f"Division order check for {well_id}"
    )


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
