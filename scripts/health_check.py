#!/usr/bin/env python3
"""
SakuraDevClass Backend - Health Check Script

Probes a running server and the local configuration:
- Configuration loads and validates
- Uploads directory is usable
- /api/health answers with status OK
- /api index answers with a version
- JSON output for monitoring systems

@.architecture
Incoming: Command line, monitoring systems --- {CLI args, health check requests}
Processing: check_configuration(), check_storage(), check_api() --- {3 jobs: config_validation, storage_checking, api_probing}
Outgoing: stdout, running server (HTTP GET) --- {JSON or human-readable health report, exit code}
"""

import json
import os
import sys
import time
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Terminal Colors
# =============================================================================

class Colors:
    """ANSI color codes."""
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    CYAN = '\033[0;36m'
    WHITE = '\033[1;37m'
    RESET = '\033[0m'


# =============================================================================
# Health Check Results
# =============================================================================

class HealthStatus(str, Enum):
    """Health check status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthCheck:
    """Health check result."""

    def __init__(self, name: str, component: str):
        self.name = name
        self.component = component
        self.status = HealthStatus.HEALTHY
        self.message: Optional[str] = None
        self.details: Dict[str, Any] = {}
        self.duration_ms: Optional[float] = None

    def set_healthy(self, message: str = "OK", **details) -> None:
        self.status = HealthStatus.HEALTHY
        self.message = message
        self.details.update(details)

    def set_degraded(self, message: str, **details) -> None:
        self.status = HealthStatus.DEGRADED
        self.message = message
        self.details.update(details)

    def set_unhealthy(self, message: str, **details) -> None:
        self.status = HealthStatus.UNHEALTHY
        self.message = message
        self.details.update(details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "component": self.component,
            "status": self.status.value,
            "message": self.message,
            "details": self.details,
            "duration_ms": self.duration_ms,
        }


class HealthCheckRunner:
    """Collects check results and derives the overall status."""

    def __init__(self):
        self.checks: List[HealthCheck] = []

    def add_check(self, check: HealthCheck) -> None:
        self.checks.append(check)

    def get_overall_status(self) -> HealthStatus:
        if any(c.status == HealthStatus.UNHEALTHY for c in self.checks):
            return HealthStatus.UNHEALTHY
        if any(c.status == HealthStatus.DEGRADED for c in self.checks):
            return HealthStatus.DEGRADED
        return HealthStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.get_overall_status().value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": [c.to_dict() for c in self.checks],
            "summary": {
                "total": len(self.checks),
                "healthy": sum(1 for c in self.checks if c.status == HealthStatus.HEALTHY),
                "degraded": sum(1 for c in self.checks if c.status == HealthStatus.DEGRADED),
                "unhealthy": sum(1 for c in self.checks if c.status == HealthStatus.UNHEALTHY),
            },
        }


# =============================================================================
# Health Check Functions
# =============================================================================

def check_configuration(runner: HealthCheckRunner) -> None:
    """Settings load from the environment and validate."""
    check = HealthCheck("settings", "configuration")
    start_time = time.time()

    try:
        from config.settings import reload_settings

        settings = reload_settings()
        check.set_healthy(
            "Configuration valid",
            environment=settings.environment,
            port=settings.security.bind_port,
            frontend_url=settings.security.frontend_url,
        )
    except (ValueError, ImportError) as e:
        check.set_unhealthy(f"Invalid configuration: {e}")

    check.duration_ms = round((time.time() - start_time) * 1000, 2)
    runner.add_check(check)


def check_storage(runner: HealthCheckRunner, uploads_dir: Optional[Path] = None) -> None:
    """The uploads directory exists and is readable."""
    check = HealthCheck("uploads", "storage")
    path = uploads_dir or Path(os.getenv("UPLOADS_DIR", "uploads"))

    if not path.exists():
        check.set_degraded("Uploads directory missing (created on startup)", path=str(path))
    elif not path.is_dir():
        check.set_unhealthy("Uploads path is not a directory", path=str(path))
    elif not os.access(path, os.R_OK):
        check.set_unhealthy("Uploads directory not readable", path=str(path))
    else:
        check.set_healthy("Uploads directory available", path=str(path))

    runner.add_check(check)


def check_api(
    runner: HealthCheckRunner,
    base_url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = 3.0,
) -> None:
    """Probe /api/health and /api on a running server."""
    own_client = client is None
    client = client or httpx.Client(timeout=timeout)

    try:
        for name, path in (("health", "/api/health"), ("index", "/api")):
            check = HealthCheck(name, "api")
            start_time = time.time()
            try:
                response = client.get(f"{base_url}{path}")
                check.duration_ms = round((time.time() - start_time) * 1000, 2)

                if response.status_code != 200:
                    check.set_unhealthy(f"HTTP {response.status_code}", url=str(response.url))
                elif name == "health" and response.json().get("status") != "OK":
                    check.set_unhealthy("Unexpected health status", body=response.json())
                elif name == "index" and not response.json().get("version"):
                    check.set_degraded("Index response without version")
                else:
                    body = response.json()
                    check.set_healthy(
                        "Responding",
                        **({"environment": body["environment"]} if "environment" in body else {}),
                        **({"version": body["version"]} if "version" in body else {}),
                    )
            except (httpx.HTTPError, ValueError) as e:
                check.set_unhealthy(f"Request failed: {e}")

            runner.add_check(check)
    finally:
        if own_client:
            client.close()


# =============================================================================
# Output Formatters
# =============================================================================

def print_human_readable(runner: HealthCheckRunner) -> None:
    print()
    print(f"{Colors.CYAN}{'='*70}{Colors.RESET}")
    print(f"{Colors.CYAN}SAKURADEVCLASS BACKEND HEALTH CHECK{Colors.RESET}")
    print(f"{Colors.CYAN}{'='*70}{Colors.RESET}")
    print()

    icons = {
        HealthStatus.HEALTHY: f"{Colors.GREEN}✓{Colors.RESET}",
        HealthStatus.DEGRADED: f"{Colors.YELLOW}⚠{Colors.RESET}",
        HealthStatus.UNHEALTHY: f"{Colors.RED}✗{Colors.RESET}",
    }

    overall = runner.get_overall_status()
    print(f"Overall Status: {icons[overall]} {overall.value.upper()}")
    print()

    for check in runner.checks:
        duration = f"({check.duration_ms}ms)" if check.duration_ms else ""
        print(f"  {icons[check.status]} {check.component}/{check.name}: {check.message} {duration}")
        if check.status != HealthStatus.HEALTHY:
            for key, value in check.details.items():
                print(f"        {key}: {value}")
    print()


def print_json_output(runner: HealthCheckRunner) -> None:
    print(json.dumps(runner.to_dict(), indent=2))


# =============================================================================
# Main Health Check Runner
# =============================================================================

def run_health_check(
    base_url: str,
    json_output: bool = False,
    quick: bool = False,
    client: Optional[httpx.Client] = None,
) -> bool:
    """
    Run health check.

    Args:
        base_url: Server to check, e.g. http://localhost:5000
        json_output: Output as JSON instead of human-readable
        quick: Skip the HTTP checks
        client: HTTP client to use (one is created when omitted)

    Returns:
        bool: True unless a check is unhealthy
    """
    runner = HealthCheckRunner()

    check_configuration(runner)
    check_storage(runner)

    if not quick:
        check_api(runner, base_url.rstrip("/"), client=client)

    if json_output:
        print_json_output(runner)
    else:
        print_human_readable(runner)

    return runner.get_overall_status() != HealthStatus.UNHEALTHY


# =============================================================================
# CLI Interface
# =============================================================================

def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="SakuraDevClass Backend Health Check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Probe the local server on $PORT (default 5000)
  python scripts/health_check.py

  # Probe another host, JSON output for monitoring systems
  python scripts/health_check.py --url http://api.example.com --json

  # Only check local configuration
  python scripts/health_check.py --quick
        """
    )
    parser.add_argument(
        '--url',
        default=f"http://localhost:{os.getenv('PORT', '5000')}",
        help='Base URL of the running server'
    )
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('--quick', action='store_true', help='Skip HTTP checks')

    args = parser.parse_args()

    healthy = run_health_check(args.url, json_output=args.json, quick=args.quick)
    sys.exit(0 if healthy else 1)


if __name__ == "__main__":
    main()
