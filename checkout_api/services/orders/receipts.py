import random
import string
import time
from typing import Callable

ReceiptGenerator = Callable[[], str]

ALNUM = string.ascii_lowercase + string.digits
# razorpay rejects receipts longer than this
MAX_RECEIPT_LENGTH = 40


def time_receipt(prefix: str = "order_rcpt") -> str:
    # millisecond timestamp plus random suffix so two requests in the same ms don't collide
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(ALNUM, k=6))
    return f"{prefix}_{millis}_{suffix}"[-MAX_RECEIPT_LENGTH:]


def receipt_generator(prefix: str = "order_rcpt") -> ReceiptGenerator:
    return lambda: time_receipt(prefix)
