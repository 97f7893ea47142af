import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Common dependencies for test sessions
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "ADMIN_API_SECRET",
    "EVENT_SLUG",
    "MEAL_TAGS",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "hackdesk/", "tests/")
    session.run("black", "hackdesk/", "tests/")
    session.run("flake8", "hackdesk/", "tests/")
    session.run("mypy", "hackdesk/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (coordinator, store adapter, core helpers).
    Pass positional args to target specific tests.
    Usage:
      nox -s unit             # runs all tests under tests/unit
      nox -s unit -- tests/unit/test_services/test_checkin.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
        "--cov=hackdesk",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through the FastAPI TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_checkins.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )


@nox.session(name="load")
def load(session):
    """
    Hammer one badge from many simulated scanner stations.
    Usage:
      LOCUST_HOST=http://localhost:8000 LOCUST_TOKENS=tok1,tok2 nox -s load
    """
    _set_env(session)
    session.install("-e", ".[load]")
    session.run(
        "locust",
        "-f", "locustfile.py",
        "--headless",
        "--users", "50",
        "--spawn-rate", "50",
        "--run-time", "30s",
        "--host", os.environ.get("LOCUST_HOST", "http://localhost:8000"),
    )
