"""
Test data generators for JSON reading benchmarks.

Every document is object-rooted and sticks to the subset jread accepts:
unsigned integers, strings, booleans, null, arrays and objects.
- Different sizes (small/large)
- Different shapes (wide arrays/deep nesting)
- Multi-byte UTF-8 content to exercise the codepoint decoder
"""

import json
import random
import string
from typing import Any

# Constants for random data generation
_INT_TYPE = 1
_STRING_TYPE = 2
_BOOL_TYPE = 3
_NULL_TYPE = 4

_NON_ASCII_ALPHABET = "éßøλжш値語🎉🚀"


def generate_test_data(data_type: str) -> str:
    """Generates JSON test data based on specified type."""
    generators = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_structure": _generate_nested_structure,
        "unicode_heavy": _generate_unicode_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def _generate_small_object() -> str:
    """Generates a small JSON object (< 1KB) with basic key-value pairs."""
    data = {
        "id": 12345,
        "name": "Alice Johnson",
        "email": "alice@example.com",
        "active": True,
        "balance": 123456,
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _generate_large_object() -> str:
    """Generates a large JSON object (> 10KB) with many fields."""
    data = {
        "user_id": random.randint(1000000, 9999999),
        "profile": {
            "first_name": _random_string(10),
            "last_name": _random_string(12),
            "email": f"{_random_string(8)}@{_random_string(6)}.com",
            "address": {
                "street": f"{random.randint(1, 9999)} {_random_string(8)} St",
                "city": _random_string(12),
                "zip": random.randint(10000, 99999),
                "country": "US",
            },
            "notifications": {
                "email": random.choice([True, False]),
                "sms": random.choice([True, False]),
                "push": random.choice([True, False]),
            },
        },
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount_cents": random.randint(100, 100000),
                "currency": random.choice(["USD", "EUR", "GBP", "JPY"]),
                "description": f"Payment for {_random_string(20)}",
                "status": random.choice(["completed", "pending", "failed"]),
                "refund": None,
            }
            for i in range(50)
        ],
        "activity_log": [
            {
                "epoch": random.randint(1700000000, 1800000000),
                "action": random.choice(
                    ["login", "logout", "purchase", "view", "update"]
                ),
                "user_agent": f"Mozilla/5.0 ({_random_string(20)})",
            }
            for _ in range(30)
        ],
    }
    return json.dumps(data)


def _generate_mixed_array() -> str:
    """Generates an object wrapping a large array of mixed data types."""
    array: list[Any] = []

    for i in range(200):
        choice = random.randint(1, 5)
        if choice == _INT_TYPE:
            array.append(random.randint(0, 1000000))
        elif choice == _STRING_TYPE:
            array.append(_random_string(random.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(random.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        else:
            array.append({"index": i, "value": _random_string(10)})

    return json.dumps({"items": array})


def _generate_nested_structure() -> str:
    """Generates deeply nested JSON structure."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "level": depth,
            "data": _random_string(15),
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
            "nested": create_nested_dict(depth - 1),
        }

    return json.dumps(create_nested_dict(6))


def _generate_unicode_heavy() -> str:
    """Generates JSON dominated by multi-byte UTF-8 strings."""
    data = {
        f"ключ_{i}": "".join(random.choices(_NON_ASCII_ALPHABET, k=40))
        for i in range(100)
    }
    return json.dumps(data, ensure_ascii=False)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
