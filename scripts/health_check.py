#!/usr/bin/env python3
"""
Post-Deployment Health Check Script

Validates that a deployed CrowdChain backend is reachable and that its
database answers.

Usage:
    python scripts/health_check.py --url <DEPLOYMENT_URL> --environment <staging|production>

Checks Performed:
    1. Root endpoint (/) returns 200 and reports application statistics
    2. Health endpoint (/api/health) returns 200 and the database is connected
    3. Listing endpoint (/api/creator-applications) returns 200

Exit Codes:
    0: All health checks passed
    1: One or more health checks failed
"""

import argparse
import sys
import time
import requests
from typing import Dict, Tuple


def check_endpoint(url: str, endpoint: str, timeout: int = 10, expected_status: int = 200) -> Tuple[bool, str]:
    """
    Checks if an endpoint returns the expected HTTP status code.

    Returns:
        Tuple[bool, str]: (success, message)
    """
    full_url = f"{url.rstrip('/')}{endpoint}"

    try:
        response = requests.get(full_url, timeout=timeout, allow_redirects=True)

        if response.status_code == expected_status:
            return True, f"✓ {endpoint} returned {response.status_code}"
        else:
            return False, f"✗ {endpoint} returned {response.status_code} (expected {expected_status})"

    except requests.exceptions.Timeout:
        return False, f"✗ {endpoint} timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, f"✗ {endpoint} connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ {endpoint} error: {str(e)}"


def check_root_endpoint(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """
    Checks that / answers and includes consistent application statistics.
    """
    full_url = f"{url.rstrip('/')}/"

    try:
        response = requests.get(full_url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return False, f"✗ / error: {str(e)}"

    if response.status_code != 200:
        return False, f"✗ / returned {response.status_code}"

    try:
        data = response.json()
    except ValueError:
        return False, "✗ / returned invalid JSON"

    stats = data.get('applicationStats')
    if not stats:
        return False, f"✗ / reports database: {data.get('database', 'unknown')}"

    by_status = stats.get('pending', 0) + stats.get('approved', 0) + stats.get('rejected', 0)
    if by_status != stats.get('total'):
        return False, f"✗ / statistics inconsistent: {stats}"

    return True, f"✓ / returned 200, {stats.get('total')} applications"


def check_health_endpoint(url: str, timeout: int = 10) -> Tuple[bool, str]:
    """
    Checks the /api/health endpoint and verifies database connectivity.
    """
    full_url = f"{url.rstrip('/')}/api/health"

    try:
        response = requests.get(full_url, timeout=timeout)

        if response.status_code != 200:
            return False, f"✗ /api/health returned {response.status_code}"

        try:
            data = response.json()
        except ValueError:
            return False, "✗ /api/health returned invalid JSON"

        db_status = data.get('database', {}).get('status', 'unknown')

        if db_status == 'connected':
            return True, "✓ /api/health returned 200, database connected"
        else:
            return False, f"✗ /api/health database status: {db_status}"

    except requests.exceptions.Timeout:
        return False, f"✗ /api/health timed out after {timeout} seconds"
    except requests.exceptions.ConnectionError:
        return False, "✗ /api/health connection failed"
    except requests.exceptions.RequestException as e:
        return False, f"✗ /api/health error: {str(e)}"


def run_health_checks(url: str, environment: str) -> Dict[str, Tuple[bool, str]]:
    print(f"\n{'='*60}")
    print(f"Post-Deployment Health Checks - {environment.upper()}")
    print(f"{'='*60}\n")
    print(f"Target URL: {url}\n")

    results = {}

    print("Check 1: Root endpoint (/)...")
    results["root"] = check_root_endpoint(url, timeout=15)
    print(f"  {results['root'][1]}\n")

    print("Check 2: API health check with database (/api/health)...")
    results["api_health"] = check_health_endpoint(url, timeout=15)
    print(f"  {results['api_health'][1]}\n")

    print("Check 3: Listing endpoint (/api/creator-applications)...")
    results["api_endpoint"] = check_endpoint(url, "/api/creator-applications", timeout=15)
    print(f"  {results['api_endpoint'][1]}\n")

    return results


def print_summary(results: Dict[str, Tuple[bool, str]], environment: str) -> bool:
    """
    Prints a summary of health check results.

    Returns:
        bool: True if all checks passed, False otherwise
    """
    print(f"{'='*60}")
    print(f"Health Check Summary - {environment.upper()}")
    print(f"{'='*60}\n")

    passed = sum(1 for success, _ in results.values() if success)
    total = len(results)

    for check_name, (success, _) in results.items():
        status = "PASS" if success else "FAIL"
        symbol = "✓" if success else "✗"
        print(f"{symbol} {check_name}: {status}")

    print(f"\nTotal: {passed}/{total} checks passed\n")

    if passed == total:
        print("✓ All health checks passed. Deployment is healthy.\n")
        return True
    else:
        print(f"✗ {total - passed} health check(s) failed. Investigate issues above.\n")
        return False


def main():
    parser = argparse.ArgumentParser(description="Run post-deployment health checks")
    parser.add_argument("--url", required=True, help="Deployment URL to check")
    parser.add_argument(
        "--environment",
        required=True,
        choices=["staging", "production"],
        help="Deployment environment"
    )
    parser.add_argument(
        "--retry",
        type=int,
        default=3,
        help="Number of attempts if checks fail (default: 3)"
    )
    parser.add_argument(
        "--retry-delay",
        type=int,
        default=10,
        help="Delay in seconds between attempts (default: 10)"
    )

    args = parser.parse_args()

    for attempt in range(1, args.retry + 1):
        if attempt > 1:
            print(f"\n{'='*60}")
            print(f"Retry attempt {attempt}/{args.retry}")
            print(f"{'='*60}")
            time.sleep(args.retry_delay)

        results = run_health_checks(args.url, args.environment)

        if print_summary(results, args.environment):
            sys.exit(0)

    print(f"{'='*60}", file=sys.stderr)
    print(f"✗ HEALTH CHECKS FAILED AFTER {args.retry} ATTEMPTS", file=sys.stderr)
    print(f"{'='*60}\n", file=sys.stderr)

    sys.exit(1)


if __name__ == "__main__":
    main()
