#!/usr/bin/env python3
"""
Print the signature the checkout widget would return for an order/payment pair.
Handy for hitting /verify-payment by hand (e.g. with PAYMENTS_PROVIDER=mock).
"""
import sys
import json
import argparse
from pathlib import Path

# add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from checkout_api.core.config import settings
from checkout_api.core.signature import generate_payment_signature


def build_body(order_id: str, payment_id: str, secret: str) -> dict:
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": generate_payment_signature(order_id, payment_id, secret),
    }


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a verify-payment request body")
    parser.add_argument("order_id", help="gateway order id, e.g. order_abc")
    parser.add_argument("payment_id", help="gateway payment id, e.g. pay_xyz")
    parser.add_argument(
        "--secret",
        default=None,
        help="key secret to sign with (defaults to RAZORPAY_KEY_SECRET from env/.env)",
    )
    args = parser.parse_args(argv)

    secret = args.secret or settings.RAZORPAY_KEY_SECRET
    if not secret:
        print("No secret: pass --secret or set RAZORPAY_KEY_SECRET", file=sys.stderr)
        return 1

    print(json.dumps(build_body(args.order_id, args.payment_id, secret), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
