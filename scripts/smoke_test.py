#!/usr/bin/env python3
"""
Smoke test script for deployment verification.

Validates a running deployment by checking key endpoints.  With
``--api-key`` it also creates a uniquely named use case, reads it back and
confirms that a second create with the same name is rejected.

Usage:
    python scripts/smoke_test.py                          # Default: localhost:3001
    python scripts/smoke_test.py --base-url http://staging:3001
    python scripts/smoke_test.py --api-key "$APP_API_KEY"
    python scripts/smoke_test.py --timeout 10
"""

import argparse
import json
import sys
import time
import urllib.error
import urllib.request
import uuid


def check_endpoint(base_url: str, path: str, expected_status: int,
                   timeout: int = 5, validate_fn=None, method: str = "GET",
                   payload: dict | None = None,
                   headers: dict | None = None) -> tuple[bool, str, dict | None]:
    """Check a single endpoint and return (success, message, json_body).

    Args:
        base_url: Base URL of the running service.
        path: Endpoint path (e.g., "/health").
        expected_status: Expected HTTP status code.
        timeout: Request timeout in seconds.
        validate_fn: Optional callable(json_body) -> bool for content checks.
        method: HTTP method.
        payload: JSON body to send (POST only).
        headers: Extra request headers.

    Returns:
        (passed, message, parsed_body) tuple; parsed_body is None for
        non-JSON responses.
    """
    url = f"{base_url.rstrip('/')}{path}"
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req_headers = {"Content-Type": "application/json"} if data else {}
    req_headers.update(headers or {})
    try:
        req = urllib.request.Request(url, data=data, headers=req_headers, method=method)
        response = urllib.request.urlopen(req, timeout=timeout)
        status = response.status
        raw = response.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as e:
        status = e.code
        raw = e.read().decode("utf-8", errors="replace")
    except urllib.error.URLError as e:
        return False, f"Connection failed: {e.reason}", None
    except Exception as e:
        return False, f"Error: {e}", None

    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        body = None

    if status != expected_status:
        return False, f"Expected {expected_status}, got {status}", body
    if validate_fn and not validate_fn(body):
        return False, "Response validation failed", body
    return True, f"{status} OK", body


def validate_health(body) -> bool:
    return isinstance(body, dict) and body.get("status") == "healthy"


def validate_list(body) -> bool:
    """Validate the list envelope and its pagination block."""
    if not isinstance(body, dict) or not isinstance(body.get("data"), list):
        return False
    pagination = body.get("pagination") or {}
    return {"page", "limit", "total", "totalPages", "hasNext", "hasPrev"} <= set(pagination)


def validate_filters(body) -> bool:
    return isinstance(body, dict) and {"industries", "valueChainSteps", "departments"} <= set(body)


def validate_error_code(code: str):
    def _check(body) -> bool:
        return isinstance(body, dict) and body.get("success") is False and body.get("code") == code
    return _check


def run_smoke_tests(base_url: str, timeout: int = 5,
                    api_key: str | None = None) -> tuple[int, int, float]:
    """Run all smoke tests and return (passed, total, elapsed_seconds).

    Args:
        base_url: Base URL of the running service.
        timeout: Request timeout per check in seconds.
        api_key: Shared secret; enables the create/read/duplicate checks.

    Returns:
        (passed_count, total_count, elapsed_seconds) tuple.
    """
    start = time.monotonic()

    checks = [
        # (name, path, expected_status, validate_fn)
        ("Homepage (GET /)", "/", 200, None),
        ("Explore page (GET /explore)", "/explore", 200, None),
        ("Health check (GET /health)", "/health", 200, validate_health),
        ("List (GET /api/use-cases?limit=5)", "/api/use-cases?limit=5", 200, validate_list),
        ("Filters (GET /api/use-cases/filters)", "/api/use-cases/filters", 200, validate_filters),
        ("Bad id (GET /api/use-cases/abc)", "/api/use-cases/abc", 400,
         validate_error_code("VALIDATION_ERROR")),
        ("Bad limit (GET /api/use-cases?limit=0)", "/api/use-cases?limit=0", 400,
         validate_error_code("VALIDATION_ERROR")),
        ("Unknown route (GET /api/nope)", "/api/nope", 404, validate_error_code("NOT_FOUND")),
    ]

    passed = 0
    total = len(checks)

    print(f"\nSmoke Testing: {base_url}")
    print("=" * 60)

    def report(name: str, success: bool, message: str) -> None:
        nonlocal passed
        icon = "[PASS]" if success else "[FAIL]"
        print(f"  {icon} {name}: {message}")
        if success:
            passed += 1

    for name, path, expected_status, validate_fn in checks:
        success, message, _ = check_endpoint(base_url, path, expected_status,
                                             timeout=timeout, validate_fn=validate_fn)
        report(name, success, message)

    if api_key:
        total += 3
        payload = {
            "useCase": f"Smoke Test {uuid.uuid4().hex[:8]}",
            "conceptDescription": "Created by scripts/smoke_test.py",
        }
        auth = {"X-API-Key": api_key}
        success, message, body = check_endpoint(
            base_url, "/api/use-cases", 201, timeout=timeout, method="POST",
            payload=payload, headers=auth,
        )
        report("Create (POST /api/use-cases)", success, message)

        new_id = (body or {}).get("data", {}).get("id") if success else None
        if new_id is not None:
            success, message, _ = check_endpoint(
                base_url, f"/api/use-cases/{new_id}", 200, timeout=timeout,
            )
        else:
            success, message = False, "skipped (create failed)"
        report("Read back (GET /api/use-cases/{id})", success, message)

        payload["useCase"] = payload["useCase"].upper()
        success, message, _ = check_endpoint(
            base_url, "/api/use-cases", 409, timeout=timeout, method="POST",
            payload=payload, headers=auth,
            validate_fn=validate_error_code("DUPLICATE_ENTRY"),
        )
        report("Duplicate (POST /api/use-cases, same name)", success, message)

    elapsed = time.monotonic() - start

    print("=" * 60)
    print(f"  Result: {passed}/{total} checks passed ({elapsed:.1f}s)")
    if passed == total:
        print("  Status: ALL PASSED")
    else:
        print(f"  Status: {total - passed} FAILED")
    print("=" * 60)

    return passed, total, elapsed


def main():
    parser = argparse.ArgumentParser(
        description="Smoke test a running Use Case Library deployment")
    parser.add_argument(
        "--base-url",
        default="http://localhost:3001",
        help="Base URL of the running service (default: http://localhost:3001)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=5,
        help="Timeout per request in seconds (default: 5)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Shared secret; enables the create/read/duplicate checks",
    )
    args = parser.parse_args()

    passed, total, elapsed = run_smoke_tests(args.base_url, timeout=args.timeout,
                                             api_key=args.api_key)
    sys.exit(0 if passed == total else 1)


if __name__ == "__main__":
    main()
